"""Wall-clock deadline, iteration budget and cooperative cancellation.

Solvers call :meth:`Deadline.check` at iteration boundaries; nothing is
interrupted preemptively.
"""

from __future__ import annotations

import threading
import time
from typing import Optional

from .errors import SolverTimeout


class Deadline:
    def __init__(
        self,
        time_limit_seconds: Optional[float] = None,
        cancel_event: Optional[threading.Event] = None,
        *,
        check_interval: int = 1,
        iteration_limit: Optional[int] = None,
    ) -> None:
        self._start = time.monotonic()
        self.time_limit_seconds = time_limit_seconds
        self._expires_at = None if time_limit_seconds is None else self._start + time_limit_seconds
        self._cancel_event = cancel_event
        self._check_interval = max(1, check_interval)
        self._ticks = 0
        self.iteration_limit = iteration_limit
        self.iterations = 0

    @classmethod
    def unlimited(cls) -> "Deadline":
        return cls(None)

    def elapsed(self) -> float:
        return time.monotonic() - self._start

    def remaining(self) -> Optional[float]:
        if self._expires_at is None:
            return None
        return max(0.0, self._expires_at - time.monotonic())

    def check(self) -> None:
        """Count one iteration; raise :class:`SolverTimeout` if cancelled or past a limit."""
        self._count()
        self._check_clock()

    def tick(self) -> None:
        """Cheap per-iteration hook; only every ``check_interval``-th call checks the clock."""
        self._count()
        self._ticks += 1
        if self._ticks >= self._check_interval:
            self._ticks = 0
            self._check_clock()

    def _count(self) -> None:
        self.iterations += 1
        if self.iteration_limit is not None and self.iterations > self.iteration_limit:
            raise SolverTimeout(
                f"iteration limit of {self.iteration_limit} reached",
                elapsed_seconds=self.elapsed(),
            )

    def _check_clock(self) -> None:
        if self._cancel_event is not None and self._cancel_event.is_set():
            raise SolverTimeout("solve cancelled", elapsed_seconds=self.elapsed(), cancelled=True)
        if self._expires_at is not None and time.monotonic() >= self._expires_at:
            raise SolverTimeout(
                f"deadline of {self.time_limit_seconds}s elapsed",
                elapsed_seconds=self.elapsed(),
            )
