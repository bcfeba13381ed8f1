import threading

import pytest

from optimize_provider import CostEdge, Dispatcher, MinCostFlowProblem, NodeSupply
from optimize_provider.graph import min_cost_flow


def make_network(flow_value=None) -> MinCostFlowProblem:
    return MinCostFlowProblem(
        nodes=["s", "a", "b", "t"],
        edges=[
            CostEdge(tail="s", head="a", capacity=2, cost=1),
            CostEdge(tail="s", head="b", capacity=2, cost=3),
            CostEdge(tail="a", head="t", capacity=1, cost=1),
            CostEdge(tail="a", head="b", capacity=1, cost=1),
            CostEdge(tail="b", head="t", capacity=3, cost=1),
        ],
        source="s",
        sink="t",
        flow_value=flow_value,
    )


def edge_flows(solution):
    return [f.flow for f in solution.result.edge_flows]


def test_fixed_flow_value():
    solution = Dispatcher().solve(make_network(flow_value=3))

    assert solution.status == "optimal"
    assert solution.result.flow_value == 3
    # s-a-t (2), s-a-b-t (3), then s-b-t (4)
    assert solution.result.total_cost == 9
    assert solution.objective_value == pytest.approx(9.0)
    assert edge_flows(solution) == [2, 1, 1, 1, 2]


def test_maximum_flow_at_minimum_cost():
    solution = Dispatcher().solve(make_network())
    assert solution.result.flow_value == 4
    assert solution.result.total_cost == 13


def test_zero_flow_value():
    solution = Dispatcher().solve(make_network(flow_value=0))
    assert solution.status == "optimal"
    assert solution.result.total_cost == 0
    assert edge_flows(solution) == [0, 0, 0, 0, 0]


def test_requested_value_above_max_flow_is_infeasible():
    solution = Dispatcher().solve(make_network(flow_value=5))
    assert solution.status == "infeasible"
    assert solution.error.kind == "infeasible"
    assert solution.error.family == "min_cost_flow"


def test_negative_costs_on_capacitated_edges():
    problem = MinCostFlowProblem(
        nodes=["s", "a", "t"],
        edges=[
            CostEdge(tail="s", head="a", capacity=2, cost=-2),
            CostEdge(tail="a", head="t", capacity=2, cost=1),
            CostEdge(tail="s", head="t", capacity=2, cost=0),
        ],
        source="s",
        sink="t",
        flow_value=2,
    )
    solution = Dispatcher().solve(problem)
    assert solution.result.total_cost == -2
    assert edge_flows(solution) == [2, 2, 0]


def test_uncapacitated_path_makes_maximum_flow_unbounded():
    problem = MinCostFlowProblem(
        nodes=["s", "t"],
        edges=[CostEdge(tail="s", head="t", capacity=None, cost=1)],
        source="s",
        sink="t",
    )
    solution = Dispatcher().solve(problem)
    assert solution.status == "unbounded"
    assert solution.error.kind == "unbounded"


def test_uncapacitated_edge_with_fixed_value_is_fine():
    problem = MinCostFlowProblem(
        nodes=["s", "t"],
        edges=[CostEdge(tail="s", head="t", capacity=None, cost=2)],
        source="s",
        sink="t",
        flow_value=6,
    )
    solution = Dispatcher().solve(problem)
    assert solution.status == "optimal"
    assert solution.result.total_cost == 12


def test_negative_uncapacitated_cycle_is_unbounded():
    problem = MinCostFlowProblem(
        nodes=["s", "t", "a", "b"],
        edges=[
            CostEdge(tail="s", head="t", capacity=1, cost=1),
            CostEdge(tail="a", head="b", capacity=None, cost=-1),
            CostEdge(tail="b", head="a", capacity=None, cost=0),
        ],
        source="s",
        sink="t",
        flow_value=1,
    )
    solution = Dispatcher().solve(problem)
    assert solution.status == "unbounded"


def test_supplies_mode():
    problem = MinCostFlowProblem(
        nodes=[1, 2, 3, 4],
        edges=[
            CostEdge(tail=1, head=2, capacity=4, cost=1),
            CostEdge(tail=2, head=3, capacity=4, cost=1),
            CostEdge(tail=1, head=3, capacity=2, cost=3),
            CostEdge(tail=4, head=3, capacity=5, cost=2),
        ],
        supplies=[
            NodeSupply(node=1, supply=4),
            NodeSupply(node=4, supply=1),
            NodeSupply(node=3, supply=-5),
        ],
    )
    solution = Dispatcher().solve(problem)
    assert solution.status == "optimal"
    assert solution.result.flow_value == 5
    assert solution.result.total_cost == 8 + 2
    assert edge_flows(solution) == [4, 4, 0, 1]


def test_unroutable_supplies_are_infeasible():
    problem = MinCostFlowProblem(
        nodes=[1, 2],
        edges=[CostEdge(tail=2, head=1, capacity=3, cost=1)],
        supplies=[NodeSupply(node=1, supply=2), NodeSupply(node=2, supply=-2)],
    )
    assert Dispatcher().solve(problem).status == "infeasible"


def test_supplies_must_balance():
    problem = MinCostFlowProblem(
        nodes=[1, 2],
        edges=[],
        supplies=[NodeSupply(node=1, supply=2), NodeSupply(node=2, supply=-1)],
    )
    solution = Dispatcher().solve(problem)
    assert solution.error.kind == "invalid_input"
    assert "sum to zero" in solution.message


def test_mixing_supplies_with_source_is_invalid():
    problem = make_network(flow_value=1)
    problem.supplies = [NodeSupply(node="s", supply=0)]
    assert Dispatcher().solve(problem).error.kind == "invalid_input"


def test_cancelled_solve_reports_timed_out():
    cancel = threading.Event()
    cancel.set()
    solution = Dispatcher().solve(make_network(flow_value=3), cancel_event=cancel)
    assert solution.status == "timed_out"
    assert solution.error.kind == "timed_out"
    assert "cancelled" in solution.message


def test_direct_call_with_indices():
    arcs = [(0, 1, 5, 2), (1, 2, 5, 2), (0, 2, 3, 5)]
    outcome = min_cost_flow(3, arcs, source=0, sink=2, flow_value=6)
    assert outcome.flow_value == 6
    assert outcome.edge_flows == [5, 5, 1]
    assert outcome.total_cost == 25
