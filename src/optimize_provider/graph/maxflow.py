"""Maximum flow by FIFO push-relabel with global relabeling and the gap heuristic.

Runs in O(V^2 E). After termination the source side of a minimum cut is read
off the residual graph and its capacity must equal the flow value.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from typing import List, Optional

from ..deadline import Deadline
from ..errors import InternalSolverError
from .network import ResidualNetwork


@dataclass
class MaxFlowOutcome:
    flow_value: int
    edge_flows: List[int]
    source_side: List[bool]
    cut_capacity: int
    discharges: int
    global_relabels: int


def push_relabel(
    network: ResidualNetwork,
    source: int,
    sink: int,
    deadline: Optional[Deadline] = None,
    *,
    global_relabel_frequency: float = 1.0,
) -> MaxFlowOutcome:
    deadline = deadline or Deadline.unlimited()
    n = network.num_nodes
    head = network.head
    residual = network.residual
    adj = network.adj

    height = [0] * n
    excess = [0] * n
    current = [0] * n
    count = [0] * (2 * n + 2)
    in_queue = [False] * n
    active: deque = deque()

    def enqueue(v: int) -> None:
        if v != source and v != sink and not in_queue[v] and excess[v] > 0:
            in_queue[v] = True
            active.append(v)

    def global_relabel() -> None:
        unlabelled = 2 * n
        labels = [unlabelled] * n
        labels[sink] = 0
        labels[source] = n
        for root in (sink, source):
            queue = deque([root])
            while queue:
                v = queue.popleft()
                for arc in adj[v]:
                    u = head[arc]
                    if labels[u] == unlabelled and residual[arc ^ 1] > 0:
                        labels[u] = labels[v] + 1
                        queue.append(u)
        for h in range(len(count)):
            count[h] = 0
        for v in range(n):
            height[v] = labels[v]
            count[labels[v]] += 1
            current[v] = 0

    def relabel(u: int) -> None:
        old = height[u]
        lowest = 2 * n
        for arc in adj[u]:
            if residual[arc] > 0 and height[head[arc]] < lowest:
                lowest = height[head[arc]]
        new = min(lowest + 1, 2 * n)
        count[old] -= 1
        height[u] = new
        count[new] += 1
        current[u] = 0
        if count[old] == 0 and 0 < old < n:
            # Gap: nothing above ``old`` (and below n) can still reach the sink.
            for w in range(n):
                if old < height[w] < n:
                    count[height[w]] -= 1
                    height[w] = n + 1
                    count[n + 1] += 1
                    current[w] = 0

    for arc in adj[source]:
        cap = residual[arc]
        if cap > 0:
            network.push(arc, cap)
            excess[head[arc]] += cap
            excess[source] -= cap

    global_relabel()
    for v in range(n):
        enqueue(v)

    relabel_threshold = max(1, int(global_relabel_frequency * n))
    relabels_since_global = 0
    discharges = 0
    global_relabels = 1

    while active:
        deadline.tick()
        u = active.popleft()
        in_queue[u] = False
        discharges += 1

        while excess[u] > 0:
            if current[u] == len(adj[u]):
                relabel(u)
                relabels_since_global += 1
                continue
            arc = adj[u][current[u]]
            v = head[arc]
            if residual[arc] > 0 and height[u] == height[v] + 1:
                delta = excess[u] if excess[u] < residual[arc] else residual[arc]
                network.push(arc, delta)
                excess[u] -= delta
                excess[v] += delta
                enqueue(v)
            else:
                current[u] += 1

        if relabels_since_global >= relabel_threshold:
            global_relabel()
            global_relabels += 1
            relabels_since_global = 0

    for v in range(n):
        if v != source and v != sink and excess[v] != 0:
            raise InternalSolverError(f"push-relabel left excess {excess[v]} on node {v}")

    source_side = network.reachable_from(source)
    if source_side[sink]:
        raise InternalSolverError("sink still reachable in the residual graph")

    edge_flows: List[int] = []
    cut_capacity = 0
    for k in range(network.num_arcs):
        arc = 2 * k
        edge_flows.append(network.flow(arc))
        if source_side[network.tail(arc)] and not source_side[head[arc]]:
            cut_capacity += network.capacity[arc]

    flow_value = excess[sink]
    if cut_capacity != flow_value:
        raise InternalSolverError(
            f"max-flow/min-cut mismatch: flow {flow_value} vs cut {cut_capacity}"
        )

    return MaxFlowOutcome(
        flow_value=flow_value,
        edge_flows=edge_flows,
        source_side=source_side,
        cut_capacity=cut_capacity,
        discharges=discharges,
        global_relabels=global_relabels,
    )
