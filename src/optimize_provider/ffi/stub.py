from __future__ import annotations

from ..deadline import Deadline
from ..errors import UnsupportedCapabilityError
from ..schemas import Solution


class UnavailableProvider:
    """Stands in for the external-solver gateway when it is not built in."""

    family = "constraint"

    def __init__(self, reason: str) -> None:
        self.reason = reason

    def solve(self, problem, deadline: Deadline, capability: str) -> Solution:
        raise UnsupportedCapabilityError(f"{capability} is unavailable: {self.reason}")
