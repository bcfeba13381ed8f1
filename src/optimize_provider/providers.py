"""Native providers: translate a validated problem into solver calls and back."""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Protocol, Tuple

from .assignment import solve_assignment
from .deadline import Deadline
from .errors import InfeasibleError
from .graph import ResidualNetwork, dijkstra, min_cost_flow, push_relabel
from .knapsack import solve_knapsack
from .schemas import (
    AssignedPair,
    AssignmentProblem,
    AssignmentResult,
    EdgeFlow,
    KnapsackProblem,
    KnapsackResult,
    MaxFlowProblem,
    MaxFlowResult,
    MinCostFlowProblem,
    MinCostFlowResult,
    NodeId,
    ShortestPathProblem,
    ShortestPathResult,
    Solution,
    SolveStats,
)

logger = logging.getLogger(__name__)


class Provider(Protocol):
    """Anything that maps a validated problem of one family to a :class:`Solution`.

    Failures are raised as :class:`~optimize_provider.errors.OptimizationError`;
    the dispatcher turns them into non-optimal solutions.
    """

    family: str

    def solve(self, problem, deadline: Deadline, capability: str) -> Solution:
        ...


def _node_index(nodes: List[NodeId]) -> Dict[NodeId, int]:
    return {node: i for i, node in enumerate(nodes)}


class AssignmentProvider:
    family = "assignment"

    def __init__(self, auction_threshold: int = 64, tolerance: float = 1e-9) -> None:
        self.auction_threshold = auction_threshold
        self.tolerance = tolerance

    def solve(self, problem: AssignmentProblem, deadline: Deadline, capability: str) -> Solution:
        outcome = solve_assignment(
            problem.costs,
            auction_threshold=self.auction_threshold,
            tolerance=self.tolerance,
            deadline=deadline,
        )
        agents, tasks = problem.agent_labels, problem.task_labels
        pairs = [
            AssignedPair(
                agent=i,
                task=j,
                cost=problem.costs[i][j],
                agent_label=agents[i] if agents else None,
                task_label=tasks[j] if tasks else None,
            )
            for i, j in outcome.pairs
        ]
        return Solution.optimal(
            capability,
            self.family,
            AssignmentResult(pairs=pairs),
            objective_value=float(outcome.total_cost),
            stats=SolveStats(algorithm=outcome.algorithm, iterations=outcome.iterations),
        )


class KnapsackProvider:
    family = "knapsack"

    def solve(self, problem: KnapsackProblem, deadline: Deadline, capability: str) -> Solution:
        outcome = solve_knapsack(problem.weights, problem.values, problem.capacity, deadline)
        return Solution.optimal(
            capability,
            self.family,
            KnapsackResult(
                selected=outcome.selected,
                total_weight=outcome.total_weight,
                total_value=outcome.total_value,
            ),
            objective_value=float(outcome.total_value),
            stats=SolveStats(algorithm="dynamic_programming", iterations=outcome.cells),
        )


class ShortestPathProvider:
    family = "shortest_path"

    def solve(self, problem: ShortestPathProblem, deadline: Deadline, capability: str) -> Solution:
        index = _node_index(problem.nodes)
        adjacency: List[List[Tuple[int, float]]] = [[] for _ in problem.nodes]
        for edge in problem.edges:
            u, v = index[edge.tail], index[edge.head]
            adjacency[u].append((v, edge.weight))
            if not problem.directed:
                adjacency[v].append((u, edge.weight))

        tree = dijkstra(adjacency, index[problem.source], deadline)
        nodes = problem.nodes
        distances = {nodes[i]: d for i, d in enumerate(tree.distances) if d is not None}
        predecessors = {
            nodes[i]: nodes[p] for i, p in enumerate(tree.predecessors) if p != -1
        }

        path: Optional[List[NodeId]] = None
        target_distance = None
        if problem.target is not None:
            target = index[problem.target]
            route = tree.path_to(target)
            if route is None:
                raise InfeasibleError(
                    f"target {problem.target!r} is unreachable from {problem.source!r}"
                )
            path = [nodes[i] for i in route]
            target_distance = tree.distances[target]
            objective = target_distance
        else:
            objective = max(distances.values())

        return Solution.optimal(
            capability,
            self.family,
            ShortestPathResult(
                distances=distances,
                predecessors=predecessors,
                path=path,
                target_distance=target_distance,
            ),
            objective_value=float(objective),
            stats=SolveStats(algorithm="dijkstra", iterations=tree.settled),
        )


class MaxFlowProvider:
    family = "max_flow"

    def __init__(self, global_relabel_frequency: float = 1.0) -> None:
        self.global_relabel_frequency = global_relabel_frequency

    def solve(self, problem: MaxFlowProblem, deadline: Deadline, capability: str) -> Solution:
        index = _node_index(problem.nodes)
        network = ResidualNetwork(len(problem.nodes))
        for edge in problem.edges:
            network.add_edge(index[edge.tail], index[edge.head], edge.capacity)

        outcome = push_relabel(
            network,
            index[problem.source],
            index[problem.sink],
            deadline,
            global_relabel_frequency=self.global_relabel_frequency,
        )
        edge_flows = [
            EdgeFlow(index=k, tail=edge.tail, head=edge.head, flow=flow)
            for k, (edge, flow) in enumerate(zip(problem.edges, outcome.edge_flows))
        ]
        source_side = [node for node, inside in zip(problem.nodes, outcome.source_side) if inside]
        logger.debug(
            "push-relabel: %d discharges, %d global relabels",
            outcome.discharges,
            outcome.global_relabels,
        )
        return Solution.optimal(
            capability,
            self.family,
            MaxFlowResult(
                flow_value=outcome.flow_value,
                edge_flows=edge_flows,
                cut_source_side=source_side,
                cut_capacity=outcome.cut_capacity,
            ),
            objective_value=float(outcome.flow_value),
            stats=SolveStats(algorithm="push_relabel", iterations=outcome.discharges),
        )


class MinCostFlowProvider:
    family = "min_cost_flow"

    def solve(self, problem: MinCostFlowProblem, deadline: Deadline, capability: str) -> Solution:
        index = _node_index(problem.nodes)
        arcs = [
            (index[edge.tail], index[edge.head], edge.capacity, edge.cost) for edge in problem.edges
        ]
        supplies: Optional[List[int]] = None
        source = sink = None
        if problem.supplies is not None:
            supplies = [0] * len(problem.nodes)
            for entry in problem.supplies:
                supplies[index[entry.node]] = entry.supply
        else:
            source, sink = index[problem.source], index[problem.sink]

        outcome = min_cost_flow(
            len(problem.nodes),
            arcs,
            source=source,
            sink=sink,
            flow_value=problem.flow_value,
            supplies=supplies,
            deadline=deadline,
        )
        edge_flows = [
            EdgeFlow(index=k, tail=edge.tail, head=edge.head, flow=flow)
            for k, (edge, flow) in enumerate(zip(problem.edges, outcome.edge_flows))
        ]
        return Solution.optimal(
            capability,
            self.family,
            MinCostFlowResult(
                flow_value=outcome.flow_value,
                total_cost=outcome.total_cost,
                edge_flows=edge_flows,
            ),
            objective_value=float(outcome.total_cost),
            stats=SolveStats(
                algorithm="successive_shortest_paths", iterations=outcome.augmentations
            ),
        )
