"""0/1 knapsack solved by dynamic programming over residual capacity."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence

import numpy as np

from ..deadline import Deadline
from ..errors import InternalSolverError

# dp row (int64) plus one byte of take/skip decision per candidate item.
DP_BYTES_PER_CELL = 1
DP_BYTES_PER_CAPACITY_UNIT = 8


@dataclass
class KnapsackOutcome:
    selected: List[int]
    total_weight: int
    total_value: int
    cells: int


def dp_table_bytes(weights: Sequence[int], capacity: int) -> int:
    """Memory the DP would allocate; 0 when no item fits."""
    candidates = sum(1 for w in weights if w <= capacity)
    if candidates == 0:
        return 0
    width = capacity + 1
    return width * (candidates * DP_BYTES_PER_CELL + DP_BYTES_PER_CAPACITY_UNIT)


def solve_knapsack(
    weights: Sequence[int],
    values: Sequence[int],
    capacity: int,
    deadline: Optional[Deadline] = None,
) -> KnapsackOutcome:
    deadline = deadline or Deadline.unlimited()
    candidates = [i for i, w in enumerate(weights) if w <= capacity]
    if not candidates:
        return KnapsackOutcome(selected=[], total_weight=0, total_value=0, cells=0)

    width = capacity + 1
    best = np.zeros(width, dtype=np.int64)
    keep = np.zeros((len(candidates), width), dtype=bool)

    for row, item in enumerate(candidates):
        deadline.check()
        w, v = weights[item], values[item]
        if v == 0:
            continue
        # Right-hand side is evaluated before assignment, so each item is used once.
        taken = best[: width - w] + v
        better = taken > best[w:]
        keep[row, w:] = better
        best[w:] = np.where(better, taken, best[w:])

    selected: List[int] = []
    remaining = capacity
    for row in range(len(candidates) - 1, -1, -1):
        if keep[row, remaining]:
            item = candidates[row]
            selected.append(item)
            remaining -= weights[item]
    selected.reverse()

    total_value = sum(values[i] for i in selected)
    if total_value != int(best[capacity]):
        raise InternalSolverError(
            f"knapsack backtrack value {total_value} differs from table value {int(best[capacity])}"
        )
    return KnapsackOutcome(
        selected=selected,
        total_weight=sum(weights[i] for i in selected),
        total_value=total_value,
        cells=len(candidates) * width,
    )
