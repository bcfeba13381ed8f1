"""Pick one optimal matching among equal-cost alternatives, independent of the solver.

Given any optimal ``row_to_col``, dual potentials are recovered by shortest
paths over the alternating graph. Every optimal matching is a perfect matching
on the tight (zero reduced cost) edges, so choosing rows in index order and, for
each, the lowest tight column that still leaves a perfect matching yields the
lexicographically smallest optimal assignment.
"""

from __future__ import annotations

from collections import deque
from typing import List, Optional, Sequence

from ..deadline import Deadline
from ..errors import InternalSolverError


def canonical_matching(
    cost: Sequence[Sequence[float]],
    row_to_col: Sequence[int],
    *,
    tolerance: float = 0.0,
    deadline: Optional[Deadline] = None,
) -> List[int]:
    deadline = deadline or Deadline.unlimited()
    n = len(cost)
    match = list(row_to_col)
    owner = [0] * n
    for i, j in enumerate(match):
        owner[j] = i

    row_pot, col_pot = _potentials(cost, owner, tolerance, deadline)
    slack = tolerance * (2 * n + 1)
    tight = [
        [j for j in range(n) if cost[i][j] + row_pot[i] - col_pot[j] <= slack] for i in range(n)
    ]

    fixed = [False] * n
    for i in range(n):
        deadline.check()
        for j in tight[i]:
            if fixed[j]:
                continue
            if match[i] == j or _reroute(i, j, tight, match, owner, fixed):
                break
        fixed[match[i]] = True
    return match


def _potentials(cost, owner: List[int], tolerance: float, deadline: Deadline):
    """Dual potentials certifying ``match``, by label-correcting shortest paths.

    Columns are the nodes; column ``k`` reaches column ``j`` through its owner
    row at cost ``cost[i][j] - cost[i][k]``. A distance that keeps improving
    means a cheaper alternating cycle, so ``match`` was not optimal.
    """
    n = len(cost)
    row_pot = [0] * n
    col_pot = [min(cost[i][j] for i in range(n)) for j in range(n)]
    updates = [0] * n
    queue = deque(range(n))
    queued = [True] * n
    while queue:
        deadline.tick()
        k = queue.popleft()
        queued[k] = False
        i = owner[k]
        reach = col_pot[k] - cost[i][k]
        if not reach < row_pot[i] - tolerance:
            continue
        row_pot[i] = reach
        row = cost[i]
        for j in range(n):
            candidate = reach + row[j]
            if candidate < col_pot[j] - tolerance:
                col_pot[j] = candidate
                updates[j] += 1
                if updates[j] > n:
                    raise InternalSolverError(
                        "assignment is not optimal: a cheaper alternating cycle exists"
                    )
                if not queued[j]:
                    queued[j] = True
                    queue.append(j)
    return row_pot, col_pot


def _reroute(
    i: int,
    j: int,
    tight: List[List[int]],
    match: List[int],
    owner: List[int],
    fixed: List[bool],
) -> bool:
    """Give column ``j`` to row ``i`` if the displaced row can reach ``match[i]`` on tight edges."""
    start = owner[j]
    target = match[i]
    parent = {}
    queue = deque([start])
    while queue:
        row = queue.popleft()
        for col in tight[row]:
            if fixed[col] or col == j or col in parent:
                continue
            parent[col] = row
            if col == target:
                match[i] = j
                owner[j] = i
                while True:
                    row = parent[col]
                    previous = match[row]
                    match[row] = col
                    owner[col] = row
                    if row == start:
                        return True
                    col = previous
            queue.append(owner[col])
    return False
