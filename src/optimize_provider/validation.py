"""Structural checks run by the dispatcher before any solver sees a problem."""

from __future__ import annotations

import math
from typing import Dict, Iterable, Optional, Sequence, Set

from .config import ProviderConfig
from .errors import InvalidInputError, dimension_mismatch
from .knapsack import dp_table_bytes
from .schemas import (
    AssignmentProblem,
    ConstraintProblem,
    KnapsackProblem,
    MaxFlowProblem,
    MinCostFlowProblem,
    NodeId,
    ShortestPathProblem,
)

INT64_MAX = 2**63 - 1


def validate_problem(problem, config: Optional[ProviderConfig] = None) -> None:
    """Raise :class:`InvalidInputError` if ``problem`` is structurally unsound."""
    config = config or ProviderConfig()
    if isinstance(problem, AssignmentProblem):
        _validate_assignment(problem)
    elif isinstance(problem, KnapsackProblem):
        _validate_knapsack(problem, config)
    elif isinstance(problem, ShortestPathProblem):
        _validate_shortest_path(problem)
    elif isinstance(problem, MaxFlowProblem):
        _validate_max_flow(problem)
    elif isinstance(problem, MinCostFlowProblem):
        _validate_min_cost_flow(problem)
    elif isinstance(problem, ConstraintProblem):
        # Payloads belong to the external backend; only the gateway parses them.
        return
    else:
        raise InvalidInputError(f"unrecognised problem type {type(problem).__name__}")


def index_nodes(nodes: Sequence[NodeId]) -> Dict[NodeId, int]:
    index: Dict[NodeId, int] = {}
    for position, node in enumerate(nodes):
        if node in index:
            raise InvalidInputError(f"duplicate node id {node!r}")
        index[node] = position
    return index


def _require_node(index: Dict[NodeId, int], node: NodeId, role: str) -> None:
    if node not in index:
        raise InvalidInputError(f"{role} {node!r} is not a declared node")


def _check_edges(index: Dict[NodeId, int], edges: Iterable) -> None:
    for position, edge in enumerate(edges):
        if edge.tail not in index or edge.head not in index:
            raise InvalidInputError(
                f"edge {position} ({edge.tail!r} -> {edge.head!r}) references an undeclared node"
            )


def _validate_assignment(problem: AssignmentProblem) -> None:
    costs = problem.costs
    n = len(costs)
    m = len(costs[0]) if n else 0
    for i, row in enumerate(costs):
        if len(row) != m:
            raise dimension_mismatch(f"cost matrix row {i}", m, len(row))
        for j, c in enumerate(row):
            try:
                finite = math.isfinite(c)
            except OverflowError:
                raise InvalidInputError(f"cost[{i}][{j}] is out of range") from None
            if not finite:
                raise InvalidInputError(f"cost[{i}][{j}] is not finite")
            if c < 0:
                raise InvalidInputError(f"cost[{i}][{j}] is negative ({c})")
    if problem.agent_labels is not None and len(problem.agent_labels) != n:
        raise dimension_mismatch("agent_labels", n, len(problem.agent_labels))
    if problem.task_labels is not None and len(problem.task_labels) != m:
        raise dimension_mismatch("task_labels", m, len(problem.task_labels))


def _validate_knapsack(problem: KnapsackProblem, config: ProviderConfig) -> None:
    weights, values = problem.weights, problem.values
    if len(weights) != len(values):
        raise dimension_mismatch("knapsack values", len(weights), len(values))
    if problem.capacity < 0:
        raise InvalidInputError(f"capacity must be non-negative (got {problem.capacity})")
    for i, (w, v) in enumerate(zip(weights, values)):
        if w < 0 or v < 0:
            raise InvalidInputError(f"item {i} has a negative weight or value")
    if sum(values) > INT64_MAX:
        raise InvalidInputError("total item value overflows a 64-bit accumulator")

    needed = dp_table_bytes(weights, problem.capacity)
    if needed > config.knapsack_memory_budget_bytes:
        raise InvalidInputError(
            f"capacity {problem.capacity} needs a {needed}-byte DP table, "
            f"over the {config.knapsack_memory_budget_bytes}-byte budget"
        )


def _validate_shortest_path(problem: ShortestPathProblem) -> None:
    index = index_nodes(problem.nodes)
    _require_node(index, problem.source, "source")
    if problem.target is not None:
        _require_node(index, problem.target, "target")
    _check_edges(index, problem.edges)
    for position, edge in enumerate(problem.edges):
        try:
            finite = math.isfinite(edge.weight)
        except OverflowError:
            raise InvalidInputError(f"edge {position} weight is out of range") from None
        if not finite:
            raise InvalidInputError(f"edge {position} has a non-finite weight")
        if edge.weight < 0:
            raise InvalidInputError(
                f"edge {position} ({edge.tail!r} -> {edge.head!r}) has negative weight {edge.weight}"
            )


def _validate_max_flow(problem: MaxFlowProblem) -> None:
    index = index_nodes(problem.nodes)
    _require_node(index, problem.source, "source")
    _require_node(index, problem.sink, "sink")
    if problem.source == problem.sink:
        raise InvalidInputError("source and sink must differ")
    _check_edges(index, problem.edges)
    for position, edge in enumerate(problem.edges):
        if edge.capacity < 0:
            raise InvalidInputError(f"edge {position} has negative capacity {edge.capacity}")


def _validate_min_cost_flow(problem: MinCostFlowProblem) -> None:
    index = index_nodes(problem.nodes)
    _check_edges(index, problem.edges)
    for position, edge in enumerate(problem.edges):
        if edge.capacity is not None and edge.capacity < 0:
            raise InvalidInputError(f"edge {position} has negative capacity {edge.capacity}")

    if problem.supplies is not None:
        if problem.source is not None or problem.sink is not None or problem.flow_value is not None:
            raise InvalidInputError("give either supplies or source/sink, not both")
        seen: Set[NodeId] = set()
        for entry in problem.supplies:
            _require_node(index, entry.node, "supply node")
            if entry.node in seen:
                raise InvalidInputError(f"node {entry.node!r} has more than one supply entry")
            seen.add(entry.node)
        total = sum(entry.supply for entry in problem.supplies)
        if total != 0:
            raise InvalidInputError(f"supplies must sum to zero (got {total})")
        return

    if problem.source is None or problem.sink is None:
        raise InvalidInputError("min-cost flow needs source and sink, or supplies")
    _require_node(index, problem.source, "source")
    _require_node(index, problem.sink, "sink")
    if problem.source == problem.sink:
        raise InvalidInputError("source and sink must differ")
    if problem.flow_value is not None and problem.flow_value < 0:
        raise InvalidInputError(f"flow_value must be non-negative (got {problem.flow_value})")
