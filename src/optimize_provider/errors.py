from __future__ import annotations

from typing import Literal, Optional

ErrorKind = Literal[
    "invalid_input",
    "infeasible",
    "unbounded",
    "timed_out",
    "unsupported_capability",
    "internal_solver_error",
]


class OptimizationError(Exception):
    """Base class for failures raised inside providers.

    The dispatcher turns these into ``Solution`` values; they never leave
    ``Dispatcher.solve``.
    """

    kind: ErrorKind = "internal_solver_error"

    def __init__(self, message: str, *, capability: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.capability = capability


class InvalidInputError(OptimizationError):
    kind: ErrorKind = "invalid_input"


class InfeasibleError(OptimizationError):
    kind: ErrorKind = "infeasible"


class UnboundedError(OptimizationError):
    kind: ErrorKind = "unbounded"


class SolverTimeout(OptimizationError):
    kind: ErrorKind = "timed_out"

    def __init__(
        self,
        message: str,
        *,
        elapsed_seconds: float = 0.0,
        cancelled: bool = False,
        capability: Optional[str] = None,
    ) -> None:
        super().__init__(message, capability=capability)
        self.elapsed_seconds = elapsed_seconds
        self.cancelled = cancelled


class UnsupportedCapabilityError(OptimizationError):
    kind: ErrorKind = "unsupported_capability"


class InternalSolverError(OptimizationError):
    kind: ErrorKind = "internal_solver_error"


def dimension_mismatch(what: str, expected: int, got: int) -> InvalidInputError:
    return InvalidInputError(f"dimension mismatch in {what}: expected {expected}, got {got}")
