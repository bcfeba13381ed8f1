from __future__ import annotations

from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

from .errors import ErrorKind, OptimizationError

NodeId = Union[int, str]
Number = Union[int, float]
Status = Literal["optimal", "infeasible", "unbounded", "timed_out", "error"]


# --------------------------------------------------------------------------
# Problems
# --------------------------------------------------------------------------


class AssignmentProblem(BaseModel):
    kind: Literal["assignment"] = "assignment"
    costs: List[List[Number]]
    agent_labels: Optional[List[str]] = None
    task_labels: Optional[List[str]] = None


class KnapsackProblem(BaseModel):
    kind: Literal["knapsack"] = "knapsack"
    weights: List[int]
    values: List[int]
    capacity: int


class WeightedEdge(BaseModel):
    tail: NodeId
    head: NodeId
    weight: Number


class ShortestPathProblem(BaseModel):
    kind: Literal["shortest_path"] = "shortest_path"
    nodes: List[NodeId]
    edges: List[WeightedEdge]
    source: NodeId
    target: Optional[NodeId] = None
    directed: bool = True


class CapacityEdge(BaseModel):
    tail: NodeId
    head: NodeId
    capacity: int


class MaxFlowProblem(BaseModel):
    kind: Literal["max_flow"] = "max_flow"
    nodes: List[NodeId]
    edges: List[CapacityEdge]
    source: NodeId
    sink: NodeId


class CostEdge(BaseModel):
    tail: NodeId
    head: NodeId
    capacity: Optional[int]
    cost: int = 0


class NodeSupply(BaseModel):
    node: NodeId
    supply: int


class MinCostFlowProblem(BaseModel):
    """Either ``source``/``sink`` (optionally with ``flow_value``) or ``supplies``."""

    kind: Literal["min_cost_flow"] = "min_cost_flow"
    nodes: List[NodeId]
    edges: List[CostEdge]
    source: Optional[NodeId] = None
    sink: Optional[NodeId] = None
    flow_value: Optional[int] = None
    supplies: Optional[List[NodeSupply]] = None


class ConstraintProblem(BaseModel):
    """Opaque payload handed to the external-solver gateway untouched."""

    kind: Literal["constraint"] = "constraint"
    payload: Dict[str, Any]


Problem = Annotated[
    Union[
        AssignmentProblem,
        KnapsackProblem,
        ShortestPathProblem,
        MaxFlowProblem,
        MinCostFlowProblem,
        ConstraintProblem,
    ],
    Field(discriminator="kind"),
]

PROBLEM_ADAPTER: TypeAdapter = TypeAdapter(Problem)


# --------------------------------------------------------------------------
# Results
# --------------------------------------------------------------------------


class AssignedPair(BaseModel):
    agent: int
    task: int
    cost: Number
    agent_label: Optional[str] = None
    task_label: Optional[str] = None


class AssignmentResult(BaseModel):
    kind: Literal["assignment"] = "assignment"
    pairs: List[AssignedPair]


class KnapsackResult(BaseModel):
    kind: Literal["knapsack"] = "knapsack"
    selected: List[int]
    total_weight: int
    total_value: int


class ShortestPathResult(BaseModel):
    kind: Literal["shortest_path"] = "shortest_path"
    distances: Dict[NodeId, Number]
    predecessors: Dict[NodeId, NodeId]
    path: Optional[List[NodeId]] = None
    target_distance: Optional[Number] = None


class EdgeFlow(BaseModel):
    index: int
    tail: NodeId
    head: NodeId
    flow: int


class MaxFlowResult(BaseModel):
    kind: Literal["max_flow"] = "max_flow"
    flow_value: int
    edge_flows: List[EdgeFlow]
    cut_source_side: List[NodeId]
    cut_capacity: int


class MinCostFlowResult(BaseModel):
    kind: Literal["min_cost_flow"] = "min_cost_flow"
    flow_value: int
    total_cost: int
    edge_flows: List[EdgeFlow]


class ConstraintResult(BaseModel):
    model_config = ConfigDict(protected_namespaces=())

    kind: Literal["constraint"] = "constraint"
    backend: str
    model_type: str
    values: Dict[str, float] = Field(default_factory=dict)
    routes: Optional[List[List[int]]] = None


SolveResult = Annotated[
    Union[
        AssignmentResult,
        KnapsackResult,
        ShortestPathResult,
        MaxFlowResult,
        MinCostFlowResult,
        ConstraintResult,
    ],
    Field(discriminator="kind"),
]


class SolveError(BaseModel):
    kind: ErrorKind
    capability: str
    family: Optional[str] = None
    message: str


class SolveStats(BaseModel):
    algorithm: str = ""
    iterations: int = 0


_STATUS_BY_ERROR: Dict[str, Status] = {
    "invalid_input": "error",
    "infeasible": "infeasible",
    "unbounded": "unbounded",
    "timed_out": "timed_out",
    "unsupported_capability": "error",
    "internal_solver_error": "error",
}


class Solution(BaseModel):
    capability: str
    family: Optional[str] = None
    status: Status
    objective_value: Optional[float] = None
    result: Optional[SolveResult] = None
    error: Optional[SolveError] = None
    stats: SolveStats = Field(default_factory=SolveStats)
    message: str = ""

    @classmethod
    def optimal(
        cls,
        capability: str,
        family: str,
        result: Any,
        objective_value: Optional[float],
        stats: Optional[SolveStats] = None,
        message: str = "",
    ) -> "Solution":
        return cls(
            capability=capability,
            family=family,
            status="optimal",
            objective_value=objective_value,
            result=result,
            stats=stats or SolveStats(),
            message=message,
        )

    @classmethod
    def from_error(
        cls,
        capability: str,
        family: Optional[str],
        exc: OptimizationError,
        stats: Optional[SolveStats] = None,
    ) -> "Solution":
        return cls(
            capability=capability,
            family=family,
            status=_STATUS_BY_ERROR[exc.kind],
            error=SolveError(kind=exc.kind, capability=capability, family=family, message=exc.message),
            stats=stats or SolveStats(),
            message=exc.message,
        )
