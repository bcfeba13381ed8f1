"""Forward auction with epsilon scaling for integer cost matrices.

Benefits are ``-cost * (n + 1)`` so that the final phase at ``epsilon = 1``
is exactly optimal: an epsilon-complementary-slackness assignment is within
``n * epsilon`` of the optimum, which is less than one scaled cost unit.
"""

from __future__ import annotations

from collections import deque
from typing import List, Optional, Sequence, Tuple

from ..deadline import Deadline
from ..errors import InternalSolverError

SCALING_FACTOR = 4


def solve_auction(
    cost: Sequence[Sequence[int]], deadline: Optional[Deadline] = None
) -> Tuple[List[int], int]:
    """Return ``(row_to_col, bids)`` for a square integer cost matrix."""
    deadline = deadline or Deadline.unlimited()
    n = len(cost)
    if n == 1:
        return [0], 1

    scale = n + 1
    benefit = [[-c * scale for c in row] for row in cost]
    spread = max(max(row) for row in benefit) - min(min(row) for row in benefit)
    epsilon = max(1, spread // 2)
    prices = [0] * n
    bids = 0

    while True:
        owner = [-1] * n
        assigned = [-1] * n
        unassigned = deque(range(n))
        while unassigned:
            deadline.tick()
            i = unassigned.popleft()
            bids += 1
            row = benefit[i]
            best_j = -1
            best = second = None
            for j in range(n):
                value = row[j] - prices[j]
                if best is None or value > best:
                    second = best
                    best = value
                    best_j = j
                elif second is None or value > second:
                    second = value
            prices[best_j] += best - second + epsilon
            previous = owner[best_j]
            owner[best_j] = i
            assigned[i] = best_j
            if previous >= 0:
                assigned[previous] = -1
                unassigned.append(previous)
        if epsilon == 1:
            break
        epsilon = max(1, epsilon // SCALING_FACTOR)

    if sorted(assigned) != list(range(n)):
        raise InternalSolverError("auction terminated without a perfect matching")
    return assigned, bids
