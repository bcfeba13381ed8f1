"""Single-source shortest paths with a binary heap, O((V + E) log V)."""

from __future__ import annotations

import heapq
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from ..deadline import Deadline
from ..errors import InvalidInputError

Adjacency = Sequence[Sequence[Tuple[int, float]]]


@dataclass
class ShortestPathTree:
    distances: List[Optional[float]]
    predecessors: List[int]
    settled: int

    def path_to(self, target: int) -> Optional[List[int]]:
        if self.distances[target] is None:
            return None
        path = [target]
        while self.predecessors[path[-1]] != -1:
            path.append(self.predecessors[path[-1]])
        path.reverse()
        return path


def dijkstra(adjacency: Adjacency, source: int, deadline: Optional[Deadline] = None) -> ShortestPathTree:
    """Label every node reachable from ``source``.

    Heap ties are broken on node index and predecessors only change on a
    strict improvement, so the tree is a function of the input order.
    """
    deadline = deadline or Deadline.unlimited()
    n = len(adjacency)
    dist: List[Optional[float]] = [None] * n
    pred = [-1] * n
    done = [False] * n
    dist[source] = 0
    heap: List[Tuple[float, int]] = [(0, source)]
    settled = 0

    while heap:
        deadline.tick()
        d, u = heapq.heappop(heap)
        if done[u]:
            continue
        done[u] = True
        settled += 1
        for v, weight in adjacency[u]:
            if weight < 0:
                raise InvalidInputError("Dijkstra requires non-negative edge weights")
            candidate = d + weight
            current = dist[v]
            if current is None or candidate < current:
                dist[v] = candidate
                pred[v] = u
                heapq.heappush(heap, (candidate, v))

    return ShortestPathTree(distances=dist, predecessors=pred, settled=settled)
