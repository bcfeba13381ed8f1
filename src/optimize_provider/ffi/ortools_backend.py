"""OR-Tools adapter: ``pywraplp`` for linear/integer models, ``pywrapcp`` for routing."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from ortools.constraint_solver import pywrapcp, routing_enums_pb2
from ortools.linear_solver import pywraplp

from ..errors import InfeasibleError, InternalSolverError, SolverTimeout, UnboundedError
from .model import BackendResult, LinearModel, RoutingPayload

logger = logging.getLogger(__name__)


# First available engine wins.
_MIP_ENGINES = ("SCIP", "CBC")
_LP_ENGINES = ("GLOP",)


def _create_solver(model: LinearModel):
    for engine in _MIP_ENGINES if model.has_integers else _LP_ENGINES:
        solver = pywraplp.Solver.CreateSolver(engine)
        if solver is not None:
            logger.debug("using OR-Tools %s engine", engine)
            return solver
    raise InternalSolverError("failed to create an OR-Tools linear solver")


def solve_linear(model: LinearModel, time_limit: Optional[float]) -> BackendResult:
    solver = _create_solver(model)
    if time_limit is not None:
        solver.SetTimeLimit(int(time_limit * 1000))

    variables: Dict[str, Any] = {}
    for var in model.variables:
        lb = var.lb if var.lb is not None else -solver.infinity()
        ub = var.ub if var.ub is not None else solver.infinity()
        if var.is_integer:
            variables[var.name] = solver.IntVar(lb, ub, var.name)
        else:
            variables[var.name] = solver.NumVar(lb, ub, var.name)

    for cons in model.constraints:
        lhs = solver.Sum(term.coef * variables[term.var] for term in cons.lhs.terms) + cons.lhs.constant
        if cons.cmp == "<=":
            solver.Add(lhs <= cons.rhs, cons.name)
        elif cons.cmp == ">=":
            solver.Add(lhs >= cons.rhs, cons.name)
        else:
            solver.Add(lhs == cons.rhs, cons.name)

    objective = solver.Sum(term.coef * variables[term.var] for term in model.objective.terms)
    if model.sense == "max":
        solver.Maximize(objective)
    else:
        solver.Minimize(objective)

    status = solver.Solve()
    if status == pywraplp.Solver.INFEASIBLE:
        raise InfeasibleError(f"model '{model.name}' is infeasible")
    if status == pywraplp.Solver.UNBOUNDED:
        raise UnboundedError(f"model '{model.name}' is unbounded")
    if status in (pywraplp.Solver.FEASIBLE, pywraplp.Solver.NOT_SOLVED):
        raise SolverTimeout(
            f"OR-Tools stopped before proving optimality for '{model.name}'",
            elapsed_seconds=solver.wall_time() / 1000.0,
        )
    if status != pywraplp.Solver.OPTIMAL:
        raise InternalSolverError(f"OR-Tools returned abnormal status {status}")

    return BackendResult(
        objective_value=solver.Objective().Value() + model.objective.constant,
        values={name: var.solution_value() for name, var in variables.items()},
        iterations=solver.iterations(),
        message="Solved via OR-Tools",
    )


def solve_routing(payload: RoutingPayload, time_limit: Optional[float]) -> BackendResult:
    matrix = payload.distance_matrix
    manager = pywrapcp.RoutingIndexManager(len(matrix), payload.num_vehicles, payload.depot)
    routing = pywrapcp.RoutingModel(manager)

    def distance_callback(from_index: int, to_index: int) -> int:
        return matrix[manager.IndexToNode(from_index)][manager.IndexToNode(to_index)]

    transit = routing.RegisterTransitCallback(distance_callback)
    routing.SetArcCostEvaluatorOfAllVehicles(transit)

    params = pywrapcp.DefaultRoutingSearchParameters()
    params.first_solution_strategy = routing_enums_pb2.FirstSolutionStrategy.PATH_CHEAPEST_ARC
    if time_limit is not None:
        # Guided local search only stops on a limit, so it is enabled only with one.
        params.local_search_metaheuristic = (
            routing_enums_pb2.LocalSearchMetaheuristic.GUIDED_LOCAL_SEARCH
        )
        params.time_limit.FromMilliseconds(max(1, int(time_limit * 1000)))

    solution = routing.SolveWithParameters(params)
    if solution is None:
        if time_limit is not None:
            raise SolverTimeout("routing search found no solution within the time limit")
        raise InfeasibleError("routing model has no feasible solution")

    routes: List[List[int]] = []
    for vehicle in range(payload.num_vehicles):
        index = routing.Start(vehicle)
        route = []
        while not routing.IsEnd(index):
            route.append(manager.IndexToNode(index))
            index = solution.Value(routing.NextVar(index))
        route.append(manager.IndexToNode(index))
        routes.append(route)

    return BackendResult(
        objective_value=float(solution.ObjectiveValue()),
        routes=routes,
        message="best routes found by OR-Tools local search",
    )
