"""Minimum-cost flow by successive shortest augmenting paths with node potentials.

Negative-cost arcs are saturated up front and the resulting imbalances are
routed from a super source to a super sink, so every residual arc starts with a
non-negative reduced cost and each augmentation is a Dijkstra run.
"""

from __future__ import annotations

import heapq
from collections import deque
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from ..deadline import Deadline
from ..errors import InfeasibleError, InternalSolverError, UnboundedError
from .network import ResidualNetwork

Arc = Tuple[int, int, Optional[int], int]


@dataclass
class MinCostFlowOutcome:
    flow_value: int
    total_cost: int
    edge_flows: List[int]
    augmentations: int


def min_cost_flow(
    num_nodes: int,
    arcs: Sequence[Arc],
    *,
    source: Optional[int] = None,
    sink: Optional[int] = None,
    flow_value: Optional[int] = None,
    supplies: Optional[Sequence[int]] = None,
    deadline: Optional[Deadline] = None,
) -> MinCostFlowOutcome:
    """Solve a min-cost flow instance.

    Args:
        num_nodes: Nodes are ``0 .. num_nodes - 1``.
        arcs: ``(tail, head, capacity, cost)``; ``capacity=None`` is uncapacitated.
        source, sink: Endpoints of a single-commodity request. With
            ``flow_value=None`` the maximum flow is sent at minimum cost.
        supplies: Per-node supply (positive) or demand (negative); replaces
            ``source``/``sink`` when given.
        deadline: Checked once per augmentation.

    Raises:
        InfeasibleError: the requested value or the supplies cannot be routed.
        UnboundedError: an uncapacitated negative-cost cycle exists, or an
            uncapacitated source-sink path makes the maximum flow infinite.
    """
    deadline = deadline or Deadline.unlimited()
    maximise = supplies is None and flow_value is None

    if maximise and _uncapacitated_path(num_nodes, arcs, source, sink):
        raise UnboundedError("maximum flow is unbounded: an uncapacitated source-sink path exists")

    finite_total = sum(cap for _, _, cap, _ in arcs if cap is not None)
    demand_total = (flow_value or 0) + sum(s for s in (supplies or ()) if s > 0)
    big = finite_total + demand_total + 1

    net = ResidualNetwork(num_nodes)
    balance = [0] * num_nodes
    for tail, head, cap, cost in arcs:
        arc = net.add_edge(tail, head, big if cap is None else cap, cost)
        if cost < 0 and net.residual[arc] > 0:
            amount = net.residual[arc]
            net.push(arc, amount)
            balance[head] += amount
            balance[tail] -= amount

    if supplies is not None:
        for v, s in enumerate(supplies):
            balance[v] += s
    elif flow_value is not None:
        balance[source] += flow_value
        balance[sink] -= flow_value

    super_source = net.add_node()
    super_sink = net.add_node()
    required = 0
    for v in range(num_nodes):
        if balance[v] > 0:
            net.add_edge(super_source, v, balance[v], 0)
            required += balance[v]
        elif balance[v] < 0:
            net.add_edge(v, super_sink, -balance[v], 0)

    potential = [0] * net.num_nodes
    shipped, augmentations = _augment(net, super_source, super_sink, potential, required, deadline)
    if shipped < required:
        if supplies is not None:
            raise InfeasibleError(f"only {shipped} of {required} units of supply could be routed")
        raise InfeasibleError(
            f"requested flow of {flow_value} cannot be routed from source to sink"
        )

    if maximise:
        _, extra = _augment(net, source, sink, potential, None, deadline)
        augmentations += extra

    if _has_negative_uncapacitated_cycle(num_nodes, arcs):
        raise UnboundedError("an uncapacitated negative-cost cycle makes the cost unbounded")

    edge_flows = [net.flow(2 * k) for k in range(len(arcs))]
    total_cost = sum(f * arc[3] for f, arc in zip(edge_flows, arcs))
    if supplies is not None:
        delivered = sum(s for s in supplies if s > 0)
    else:
        delivered = 0
        for f, (tail, head, _, _) in zip(edge_flows, arcs):
            if tail == source:
                delivered += f
            if head == source:
                delivered -= f

    return MinCostFlowOutcome(
        flow_value=delivered,
        total_cost=total_cost,
        edge_flows=edge_flows,
        augmentations=augmentations,
    )


def _augment(
    net: ResidualNetwork,
    s: int,
    t: int,
    potential: List[int],
    limit: Optional[int],
    deadline: Deadline,
) -> Tuple[int, int]:
    shipped = 0
    augmentations = 0
    n = net.num_nodes
    head, residual, cost, adj = net.head, net.residual, net.cost, net.adj

    while limit is None or shipped < limit:
        deadline.check()
        dist: List[Optional[int]] = [None] * n
        parent = [-1] * n
        done = [False] * n
        dist[s] = 0
        heap = [(0, s)]
        while heap:
            d, u = heapq.heappop(heap)
            if done[u]:
                continue
            done[u] = True
            for arc in adj[u]:
                if residual[arc] <= 0:
                    continue
                v = head[arc]
                reduced = cost[arc] + potential[u] - potential[v]
                if reduced < 0:
                    raise InternalSolverError(f"negative reduced cost {reduced} on arc {arc}")
                candidate = d + reduced
                if dist[v] is None or candidate < dist[v]:
                    dist[v] = candidate
                    parent[v] = arc
                    heapq.heappush(heap, (candidate, v))

        if dist[t] is None:
            break

        furthest = max(d for d in dist if d is not None)
        for v in range(n):
            potential[v] += dist[v] if dist[v] is not None else furthest

        bottleneck = None if limit is None else limit - shipped
        v = t
        while v != s:
            arc = parent[v]
            if bottleneck is None or residual[arc] < bottleneck:
                bottleneck = residual[arc]
            v = head[arc ^ 1]
        v = t
        while v != s:
            arc = parent[v]
            net.push(arc, bottleneck)
            v = head[arc ^ 1]
        shipped += bottleneck
        augmentations += 1

    return shipped, augmentations


def _uncapacitated_path(num_nodes: int, arcs: Sequence[Arc], source: int, sink: int) -> bool:
    adj: List[List[int]] = [[] for _ in range(num_nodes)]
    for tail, head, cap, _ in arcs:
        if cap is None:
            adj[tail].append(head)
    seen = [False] * num_nodes
    seen[source] = True
    queue = deque([source])
    while queue:
        u = queue.popleft()
        if u == sink:
            return True
        for v in adj[u]:
            if not seen[v]:
                seen[v] = True
                queue.append(v)
    return False


def _has_negative_uncapacitated_cycle(num_nodes: int, arcs: Sequence[Arc]) -> bool:
    free = [(tail, head, cost) for tail, head, cap, cost in arcs if cap is None]
    if not free:
        return False
    dist = [0] * num_nodes
    for _ in range(num_nodes):
        changed = False
        for tail, head, cost in free:
            if dist[tail] + cost < dist[head]:
                dist[head] = dist[tail] + cost
                changed = True
        if not changed:
            return False
    return True
