"""Linear assignment: Hungarian for general matrices, auction for large integer ones."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple, Union

from ..deadline import Deadline
from ..errors import InfeasibleError
from .auction import solve_auction
from .canonical import canonical_matching
from .hungarian import solve_hungarian

Number = Union[int, float]


@dataclass
class AssignmentOutcome:
    pairs: List[Tuple[int, int]]
    total_cost: Number
    algorithm: str
    iterations: int


def solve_assignment(
    costs: Sequence[Sequence[Number]],
    *,
    auction_threshold: int = 64,
    tolerance: float = 1e-9,
    deadline: Optional[Deadline] = None,
) -> AssignmentOutcome:
    """Minimum-cost one-to-one pairing of rows (agents) to columns (tasks).

    Rectangular matrices are padded to square with zero-cost dummy entries;
    pairs that land on a dummy are dropped, so ``min(n, m)`` pairs come back.
    Among equal-cost optima the lexicographically smallest row-to-column
    matching is returned, whichever algorithm ran. ``tolerance`` is relative to
    the largest cost and only applies to real-valued matrices.
    """
    n = len(costs)
    m = len(costs[0]) if n else 0
    if n == 0 or m == 0:
        raise InfeasibleError(f"assignment needs at least one agent and one task (got {n}x{m})")

    size = max(n, m)
    integral = all(isinstance(c, int) or c.is_integer() for row in costs for c in row)
    if integral and size >= auction_threshold:
        padded = _pad([[int(c) for c in row] for row in costs], size)
        row_to_col, iterations = solve_auction(padded, deadline)
        algorithm = "auction"
    else:
        padded = _pad([list(row) for row in costs], size)
        row_to_col, iterations = solve_hungarian(padded, deadline)
        algorithm = "hungarian"

    if integral:
        scaled = 0.0
    else:
        scaled = tolerance * max(1.0, max(abs(c) for row in padded for c in row))
    row_to_col = canonical_matching(padded, row_to_col, tolerance=scaled, deadline=deadline)

    pairs = [(i, j) for i, j in enumerate(row_to_col) if i < n and j < m]
    total = sum(costs[i][j] for i, j in pairs)
    return AssignmentOutcome(pairs=pairs, total_cost=total, algorithm=algorithm, iterations=iterations)


def _pad(matrix: List[List[Number]], size: int) -> List[List[Number]]:
    for row in matrix:
        row.extend([0] * (size - len(row)))
    while len(matrix) < size:
        matrix.append([0] * size)
    return matrix


__all__ = ["AssignmentOutcome", "solve_assignment", "solve_auction", "solve_hungarian"]
