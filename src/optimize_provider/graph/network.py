from __future__ import annotations

from collections import deque
from typing import List


class ResidualNetwork:
    """Arc-list residual graph shared by the flow algorithms.

    Every arc added with :meth:`add_edge` gets two slots: the forward arc at an
    even index ``2k`` and its reverse at ``2k + 1``, so ``e ^ 1`` is always the
    partner of ``e``.
    """

    def __init__(self, num_nodes: int) -> None:
        self.num_nodes = num_nodes
        self.adj: List[List[int]] = [[] for _ in range(num_nodes)]
        self.head: List[int] = []
        self.residual: List[int] = []
        self.cost: List[int] = []
        self.capacity: List[int] = []

    @property
    def num_arcs(self) -> int:
        return len(self.head) // 2

    def add_node(self) -> int:
        self.adj.append([])
        self.num_nodes += 1
        return self.num_nodes - 1

    def add_edge(self, tail: int, head: int, capacity: int, cost: int = 0) -> int:
        forward = len(self.head)
        self.head.append(head)
        self.residual.append(capacity)
        self.cost.append(cost)
        self.capacity.append(capacity)
        self.adj[tail].append(forward)

        self.head.append(tail)
        self.residual.append(0)
        self.cost.append(-cost)
        self.capacity.append(0)
        self.adj[head].append(forward + 1)
        return forward

    def tail(self, arc: int) -> int:
        return self.head[arc ^ 1]

    def push(self, arc: int, amount: int) -> None:
        self.residual[arc] -= amount
        self.residual[arc ^ 1] += amount

    def flow(self, arc: int) -> int:
        """Flow on a forward arc."""
        return self.capacity[arc] - self.residual[arc]

    def reachable_from(self, source: int) -> List[bool]:
        seen = [False] * self.num_nodes
        seen[source] = True
        queue = deque([source])
        while queue:
            u = queue.popleft()
            for arc in self.adj[u]:
                v = self.head[arc]
                if self.residual[arc] > 0 and not seen[v]:
                    seen[v] = True
                    queue.append(v)
        return seen
