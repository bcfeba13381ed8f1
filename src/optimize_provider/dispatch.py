"""Single entry point: resolve a capability, validate, solve, map failures to statuses."""

from __future__ import annotations

import logging
import threading
from typing import Any, List, Optional, Union

from pydantic import BaseModel, ValidationError

from .capabilities import capability_for
from .config import ProviderConfig, SolveOptions
from .deadline import Deadline
from .errors import (
    InternalSolverError,
    InvalidInputError,
    OptimizationError,
    UnsupportedCapabilityError,
)
from .registry import CapabilityRegistry, build_registry
from .schemas import PROBLEM_ADAPTER, Solution
from .validation import validate_problem

logger = logging.getLogger(__name__)


class Dispatcher:
    """Routes problems to registered providers.

    Every public ``solve*`` method returns a :class:`Solution`; solver
    failures, bad input and unknown capabilities come back as non-optimal
    statuses instead of exceptions. A dispatcher holds no per-call state, so
    one instance can serve many threads.
    """

    def __init__(
        self,
        registry: Optional[CapabilityRegistry] = None,
        config: Optional[ProviderConfig] = None,
    ) -> None:
        self.config = config or ProviderConfig()
        self.registry = registry if registry is not None else build_registry(self.config)

    def list_capabilities(self) -> List[dict]:
        return self.registry.describe()

    def solve(
        self,
        problem: BaseModel,
        options: Optional[SolveOptions] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> Solution:
        """Solve ``problem`` with the provider registered for its family."""
        try:
            capability = capability_for(getattr(problem, "kind", None))
        except KeyError:
            return self._fail(
                "unknown",
                None,
                InvalidInputError(f"not a recognised problem: {type(problem).__name__}"),
            )
        return self._run(capability, problem, options, cancel_event)

    def solve_capability(
        self,
        capability: str,
        problem: BaseModel,
        options: Optional[SolveOptions] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> Solution:
        """Solve ``problem`` with the provider registered under ``capability``."""
        return self._run(capability, problem, options, cancel_event)

    def solve_request(
        self,
        request: Union[str, bytes, dict, Any],
        capability: Optional[str] = None,
        options: Optional[SolveOptions] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> Solution:
        """Parse a raw (JSON text or dict) problem and solve it."""
        try:
            if isinstance(request, (str, bytes)):
                problem = PROBLEM_ADAPTER.validate_json(request)
            else:
                problem = PROBLEM_ADAPTER.validate_python(request)
        except ValidationError as exc:
            label = capability or _guess_capability(request)
            first = exc.errors()[0]
            location = ".".join(str(part) for part in first["loc"])
            return self._fail(
                label, None, InvalidInputError(f"malformed problem at '{location}': {first['msg']}")
            )
        if capability is None:
            return self.solve(problem, options, cancel_event)
        return self.solve_capability(capability, problem, options, cancel_event)

    def _run(
        self,
        capability: str,
        problem: BaseModel,
        options: Optional[SolveOptions],
        cancel_event: Optional[threading.Event],
    ) -> Solution:
        entry = self.registry.lookup(capability)
        if entry is None:
            return self._fail(
                capability,
                None,
                UnsupportedCapabilityError(f"no provider registered for '{capability}'"),
            )
        if not entry.enabled:
            return self._fail(
                capability,
                entry.family,
                UnsupportedCapabilityError(f"{capability} is disabled: {entry.reason}"),
            )
        family = getattr(problem, "kind", None)
        if family != entry.family:
            return self._fail(
                capability,
                entry.family,
                InvalidInputError(f"{capability} solves '{entry.family}' problems, got '{family}'"),
            )

        time_limit = self.config.default_time_limit_seconds
        if options is not None and options.time_limit_seconds is not None:
            time_limit = options.time_limit_seconds
        iteration_limit = self.config.iteration_limit
        if options is not None and options.iteration_limit is not None:
            iteration_limit = options.iteration_limit
        deadline = Deadline(
            time_limit,
            cancel_event,
            check_interval=self.config.checkpoint_interval,
            iteration_limit=iteration_limit,
        )

        logger.debug("validating %s request", capability)
        try:
            validate_problem(problem, self.config)
            logger.debug("solving %s with %s", capability, type(entry.provider).__name__)
            solution = entry.provider.solve(problem, deadline, capability)
        except OptimizationError as exc:
            return self._fail(capability, entry.family, exc, deadline)
        except Exception as exc:
            logger.exception("%s provider raised unexpectedly", capability)
            return self._fail(
                capability,
                entry.family,
                InternalSolverError(f"{type(exc).__name__}: {exc}"),
                deadline,
            )

        logger.info(
            "%s solved: status=%s objective=%s in %.3fs",
            capability,
            solution.status,
            solution.objective_value,
            deadline.elapsed(),
        )
        return solution

    def _fail(
        self,
        capability: str,
        family: Optional[str],
        exc: OptimizationError,
        deadline: Optional[Deadline] = None,
    ) -> Solution:
        solution = Solution.from_error(capability, family, exc)
        elapsed = f" after {deadline.elapsed():.3f}s" if deadline is not None else ""
        logger.info("%s finished %s%s: %s", capability, solution.status, elapsed, exc.message)
        return solution


def _guess_capability(request: Any) -> str:
    kind = request.get("kind") if isinstance(request, dict) else None
    if not isinstance(kind, str):
        return "unknown"
    try:
        return capability_for(kind)
    except KeyError:
        return "unknown"
