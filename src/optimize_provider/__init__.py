"""Typed dispatch layer over native combinatorial and network-flow solvers."""

import logging

from .capabilities import (
    ASSIGNMENT,
    CONSTRAINT,
    KNAPSACK,
    MAX_FLOW,
    MIN_COST_FLOW,
    SHORTEST_PATH,
)
from .config import ProviderConfig, SolveOptions
from .dispatch import Dispatcher
from .errors import (
    InfeasibleError,
    InternalSolverError,
    InvalidInputError,
    OptimizationError,
    SolverTimeout,
    UnboundedError,
    UnsupportedCapabilityError,
)
from .registry import CapabilityEntry, CapabilityRegistry, build_registry
from .schemas import (
    AssignmentProblem,
    CapacityEdge,
    ConstraintProblem,
    CostEdge,
    KnapsackProblem,
    MaxFlowProblem,
    MinCostFlowProblem,
    NodeSupply,
    ShortestPathProblem,
    Solution,
    WeightedEdge,
)

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "0.1.0"

__all__ = [
    "ASSIGNMENT",
    "AssignmentProblem",
    "CONSTRAINT",
    "CapabilityEntry",
    "CapabilityRegistry",
    "CapacityEdge",
    "ConstraintProblem",
    "CostEdge",
    "Dispatcher",
    "InfeasibleError",
    "InternalSolverError",
    "InvalidInputError",
    "KNAPSACK",
    "KnapsackProblem",
    "MAX_FLOW",
    "MIN_COST_FLOW",
    "MaxFlowProblem",
    "MinCostFlowProblem",
    "NodeSupply",
    "OptimizationError",
    "ProviderConfig",
    "SHORTEST_PATH",
    "ShortestPathProblem",
    "Solution",
    "SolveOptions",
    "SolverTimeout",
    "UnboundedError",
    "UnsupportedCapabilityError",
    "WeightedEdge",
    "build_registry",
]
