from __future__ import annotations

from dataclasses import dataclass, field
from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError, model_validator

from ..errors import InvalidInputError

Sense = Literal["min", "max"]
Cmp = Literal["<=", ">=", "=="]


class Variable(BaseModel):
    name: str
    lb: float | None = None
    ub: float | None = None
    is_integer: bool = False


class LinearTerm(BaseModel):
    var: str
    coef: float


class LinearExpr(BaseModel):
    terms: List[LinearTerm] = Field(default_factory=list)
    constant: float = 0.0


class LinearConstraint(BaseModel):
    name: str
    lhs: LinearExpr
    cmp: Cmp
    rhs: float


class LinearModel(BaseModel):
    name: str = "problem"
    sense: Sense
    objective: LinearExpr
    variables: List[Variable]
    constraints: List[LinearConstraint] = Field(default_factory=list)

    @model_validator(mode="after")
    def _check_references(self) -> "LinearModel":
        names = [var.name for var in self.variables]
        declared = set(names)
        if len(declared) != len(names):
            raise ValueError("variable names must be unique")
        for var in self.variables:
            if var.lb is not None and var.ub is not None and var.lb > var.ub:
                raise ValueError(f"variable {var.name} has inconsistent bounds {var.lb}>{var.ub}")
        for term in self.objective.terms:
            if term.var not in declared:
                raise ValueError(f"objective references unknown variable '{term.var}'")
        for cons in self.constraints:
            for term in cons.lhs.terms:
                if term.var not in declared:
                    raise ValueError(
                        f"constraint '{cons.name}' references unknown variable '{term.var}'"
                    )
        return self

    @property
    def has_integers(self) -> bool:
        return any(var.is_integer for var in self.variables)


class LinearPayload(BaseModel):
    model_config = ConfigDict(protected_namespaces=())

    model_type: Literal["linear"] = "linear"
    model: LinearModel


class RoutingPayload(BaseModel):
    """Vehicle routing over a square distance matrix; every route starts and ends at ``depot``."""

    model_config = ConfigDict(protected_namespaces=())

    model_type: Literal["routing"] = "routing"
    distance_matrix: List[List[int]]
    num_vehicles: int = Field(default=1, ge=1)
    depot: int = 0

    @model_validator(mode="after")
    def _check_matrix(self) -> "RoutingPayload":
        n = len(self.distance_matrix)
        if n == 0:
            raise ValueError("distance_matrix must not be empty")
        for i, row in enumerate(self.distance_matrix):
            if len(row) != n:
                raise ValueError(f"distance_matrix row {i} has {len(row)} entries, expected {n}")
            if any(d < 0 for d in row):
                raise ValueError(f"distance_matrix row {i} has a negative distance")
        if not 0 <= self.depot < n:
            raise ValueError(f"depot {self.depot} is outside 0..{n - 1}")
        return self


FfiPayload = Annotated[Union[LinearPayload, RoutingPayload], Field(discriminator="model_type")]

_PAYLOAD_ADAPTER: TypeAdapter = TypeAdapter(FfiPayload)


def parse_payload(payload: Dict[str, Any]) -> Union[LinearPayload, RoutingPayload]:
    try:
        return _PAYLOAD_ADAPTER.validate_python(payload)
    except ValidationError as exc:
        raise InvalidInputError(f"malformed constraint payload: {exc.errors()[0]['msg']}") from exc


@dataclass
class BackendResult:
    objective_value: float
    values: Dict[str, float] = field(default_factory=dict)
    routes: Optional[List[List[int]]] = None
    iterations: int = 0
    message: str = ""
