"""SciPy HiGHS adapter for linear and mixed-integer models."""

from __future__ import annotations

from typing import List, Optional, Tuple

import numpy as np
from scipy.optimize import linprog

from ..errors import (
    InfeasibleError,
    InternalSolverError,
    SolverTimeout,
    UnboundedError,
    UnsupportedCapabilityError,
)
from .model import BackendResult, LinearModel, RoutingPayload


def solve_linear(model: LinearModel, time_limit: Optional[float]) -> BackendResult:
    c = _build_objective(model)
    A_ub, b_ub, A_eq, b_eq = _build_constraint_matrices(model)
    bounds = [(var.lb, var.ub) for var in model.variables]
    integrality = np.array([1 if var.is_integer else 0 for var in model.variables])

    options = {}
    if time_limit is not None:
        options["time_limit"] = float(time_limit)

    sense_factor = 1.0 if model.sense == "min" else -1.0
    res = linprog(
        c * sense_factor,
        A_ub=A_ub if A_ub.size else None,
        b_ub=b_ub if b_ub.size else None,
        A_eq=A_eq if A_eq.size else None,
        b_eq=b_eq if b_eq.size else None,
        bounds=bounds,
        method="highs",
        integrality=integrality if integrality.any() else None,
        options=options,
    )

    if res.status == 1:
        raise SolverTimeout(f"HiGHS hit its iteration or time limit: {res.message}")
    if res.status == 2:
        raise InfeasibleError(f"model '{model.name}' is infeasible")
    if res.status == 3:
        raise UnboundedError(f"model '{model.name}' is unbounded")
    if not res.success:
        raise InternalSolverError(f"HiGHS failed: {res.message}")

    return BackendResult(
        objective_value=float(res.fun * sense_factor + model.objective.constant),
        values={var.name: float(value) for var, value in zip(model.variables, res.x)},
        iterations=int(getattr(res, "nit", 0) or 0),
        message=res.message or "",
    )


def solve_routing(payload: RoutingPayload, time_limit: Optional[float]) -> BackendResult:
    raise UnsupportedCapabilityError("routing models need the ortools backend")


def _build_objective(model: LinearModel) -> np.ndarray:
    c = np.zeros(len(model.variables))
    name_to_idx = {var.name: idx for idx, var in enumerate(model.variables)}
    for term in model.objective.terms:
        c[name_to_idx[term.var]] += term.coef
    return c


def _build_constraint_matrices(
    model: LinearModel,
) -> Tuple[np.ndarray, np.ndarray, np.ndarray, np.ndarray]:
    n = len(model.variables)
    A_ub: List[List[float]] = []
    b_ub: List[float] = []
    A_eq: List[List[float]] = []
    b_eq: List[float] = []
    name_to_idx = {var.name: idx for idx, var in enumerate(model.variables)}

    for cons in model.constraints:
        row = [0.0] * n
        for term in cons.lhs.terms:
            row[name_to_idx[term.var]] += term.coef
        rhs = cons.rhs - cons.lhs.constant

        if cons.cmp == "<=":
            A_ub.append(row)
            b_ub.append(rhs)
        elif cons.cmp == ">=":
            A_ub.append([-value for value in row])
            b_ub.append(-rhs)
        else:
            A_eq.append(row)
            b_eq.append(rhs)

    return (
        np.array(A_ub, dtype=float) if A_ub else np.empty((0, n)),
        np.array(b_ub, dtype=float) if b_ub else np.empty(0),
        np.array(A_eq, dtype=float) if A_eq else np.empty((0, n)),
        np.array(b_eq, dtype=float) if b_eq else np.empty(0),
    )
