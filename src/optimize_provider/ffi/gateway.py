"""Bridge from ``constraint`` problems to an external solver library."""

from __future__ import annotations

import importlib
import importlib.util
import logging
from types import ModuleType
from typing import Dict

from ..deadline import Deadline
from ..errors import UnsupportedCapabilityError
from ..schemas import ConstraintProblem, ConstraintResult, Solution, SolveStats
from .model import LinearPayload, parse_payload

logger = logging.getLogger(__name__)

# Backend name -> distribution that must be importable for it to work.
BACKEND_DISTRIBUTIONS: Dict[str, str] = {
    "ortools": "ortools",
    "highs": "scipy",
}


def backend_available(backend: str) -> bool:
    distribution = BACKEND_DISTRIBUTIONS.get(backend)
    return distribution is not None and importlib.util.find_spec(distribution) is not None


def load_backend(backend: str) -> ModuleType:
    if backend not in BACKEND_DISTRIBUTIONS:
        raise UnsupportedCapabilityError(f"unknown FFI backend '{backend}'")
    return importlib.import_module(f"{__package__}.{backend}_backend")


class ConstraintGateway:
    family = "constraint"

    def __init__(self, backend: str = "ortools") -> None:
        self.backend = backend
        self._module = load_backend(backend)

    def solve(self, problem: ConstraintProblem, deadline: Deadline, capability: str) -> Solution:
        payload = parse_payload(problem.payload)
        deadline.check()
        time_limit = deadline.remaining()

        if isinstance(payload, LinearPayload):
            logger.debug("forwarding linear model '%s' to %s", payload.model.name, self.backend)
            outcome = self._module.solve_linear(payload.model, time_limit)
        else:
            logger.debug(
                "forwarding %d-node routing model to %s", len(payload.distance_matrix), self.backend
            )
            outcome = self._module.solve_routing(payload, time_limit)

        return Solution.optimal(
            capability,
            self.family,
            ConstraintResult(
                backend=self.backend,
                model_type=payload.model_type,
                values=outcome.values,
                routes=outcome.routes,
            ),
            objective_value=outcome.objective_value,
            stats=SolveStats(algorithm=self.backend, iterations=outcome.iterations),
            message=outcome.message,
        )
