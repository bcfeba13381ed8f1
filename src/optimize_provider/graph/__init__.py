"""Shortest paths and network flows."""

from .dijkstra import ShortestPathTree, dijkstra
from .maxflow import MaxFlowOutcome, push_relabel
from .mincostflow import MinCostFlowOutcome, min_cost_flow
from .network import ResidualNetwork

__all__ = [
    "MaxFlowOutcome",
    "MinCostFlowOutcome",
    "ResidualNetwork",
    "ShortestPathTree",
    "dijkstra",
    "min_cost_flow",
    "push_relabel",
]
