"""Hungarian method (Kuhn-Munkres) with dual potentials, O(n^3).

Rows are inserted one at a time in index order and each is matched along a
shortest augmenting path; among equally short paths the lowest column index
wins. That fixes which optimum is returned when several exist.
"""

from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

from ..deadline import Deadline


def solve_hungarian(
    cost: Sequence[Sequence[float]], deadline: Optional[Deadline] = None
) -> Tuple[List[int], int]:
    """Return ``(row_to_col, iterations)`` for a square cost matrix."""
    deadline = deadline or Deadline.unlimited()
    n = len(cost)
    inf = float("inf")

    # Index 0 is a virtual column/row used to start each augmenting search.
    u = [0] * (n + 1)
    v = [0] * (n + 1)
    p = [0] * (n + 1)
    way = [0] * (n + 1)
    iterations = 0

    for i in range(1, n + 1):
        deadline.check()
        p[0] = i
        j0 = 0
        minv = [inf] * (n + 1)
        used = [False] * (n + 1)
        while True:
            iterations += 1
            used[j0] = True
            i0 = p[j0]
            row = cost[i0 - 1]
            ui0 = u[i0]
            delta = inf
            j1 = 0
            for j in range(1, n + 1):
                if used[j]:
                    continue
                cur = row[j - 1] - ui0 - v[j]
                if cur < minv[j]:
                    minv[j] = cur
                    way[j] = j0
                if minv[j] < delta:
                    delta = minv[j]
                    j1 = j
            for j in range(n + 1):
                if used[j]:
                    u[p[j]] += delta
                    v[j] -= delta
                else:
                    minv[j] -= delta
            j0 = j1
            if p[j0] == 0:
                break
        while j0:
            j1 = way[j0]
            p[j0] = p[j1]
            j0 = j1

    row_to_col = [0] * n
    for j in range(1, n + 1):
        row_to_col[p[j] - 1] = j - 1
    return row_to_col, iterations
