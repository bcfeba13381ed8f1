import itertools
import random

import pytest

from optimize_provider import AssignmentProblem, Dispatcher, ProviderConfig
from optimize_provider.assignment import solve_assignment, solve_auction, solve_hungarian
from optimize_provider.assignment.canonical import canonical_matching
from optimize_provider.errors import InfeasibleError, InternalSolverError


def make_matrix(rng: random.Random, n: int, m: int, high: int = 20):
    return [[rng.randint(0, high) for _ in range(m)] for _ in range(n)]


def brute_force(costs):
    n, m = len(costs), len(costs[0])
    if n <= m:
        return min(sum(costs[i][p[i]] for i in range(n)) for p in itertools.permutations(range(m), n))
    return min(sum(costs[p[j]][j] for j in range(m)) for p in itertools.permutations(range(n), m))


def assert_valid_pairing(pairs, n, m):
    agents = [i for i, _ in pairs]
    tasks = [j for _, j in pairs]
    assert len(set(agents)) == len(agents)
    assert len(set(tasks)) == len(tasks)
    assert all(0 <= i < n for i in agents)
    assert all(0 <= j < m for j in tasks)
    assert len(pairs) == min(n, m)


def test_three_by_three_example():
    costs = [[4, 2, 8], [4, 3, 7], [3, 1, 6]]
    solution = Dispatcher().solve(AssignmentProblem(costs=costs))

    assert solution.status == "optimal"
    # Every permutation of this matrix costs 12, 13 or 14.
    assert solution.objective_value == pytest.approx(12.0)
    assert solution.stats.algorithm == "hungarian"
    pairs = [(p.agent, p.task) for p in solution.result.pairs]
    assert_valid_pairing(pairs, 3, 3)
    assert sum(p.cost for p in solution.result.pairs) == 12


@pytest.mark.parametrize("n", range(1, 9))
def test_hungarian_matches_brute_force(n):
    rng = random.Random(1000 + n)
    for _ in range(3 if n < 8 else 1):
        costs = make_matrix(rng, n, n)
        outcome = solve_assignment(costs)
        assert_valid_pairing(outcome.pairs, n, n)
        assert outcome.total_cost == brute_force(costs)


def test_real_valued_costs():
    costs = [[1.5, 0.25], [0.75, 2.0]]
    outcome = solve_assignment(costs)
    assert outcome.total_cost == pytest.approx(1.0)
    assert outcome.pairs == [(0, 1), (1, 0)]


@pytest.mark.parametrize("shape", [(2, 3), (3, 2), (1, 4), (5, 2)])
def test_rectangular_matrices_return_min_side_pairs(shape):
    n, m = shape
    rng = random.Random(n * 10 + m)
    costs = make_matrix(rng, n, m)
    outcome = solve_assignment(costs)
    assert_valid_pairing(outcome.pairs, n, m)
    assert outcome.total_cost == brute_force(costs)


def test_empty_matrix_is_infeasible():
    with pytest.raises(InfeasibleError):
        solve_assignment([])
    with pytest.raises(InfeasibleError):
        solve_assignment([[], []])


def test_empty_matrix_through_dispatcher():
    solution = Dispatcher().solve(AssignmentProblem(costs=[]))
    assert solution.status == "infeasible"
    assert solution.error.kind == "infeasible"
    assert solution.error.family == "assignment"


@pytest.mark.parametrize("n", [2, 3, 5, 7])
def test_auction_matches_brute_force(n):
    rng = random.Random(n)
    for _ in range(3):
        costs = make_matrix(rng, n, n, high=50)
        row_to_col, _ = solve_auction(costs)
        assert sorted(row_to_col) == list(range(n))
        assert sum(costs[i][j] for i, j in enumerate(row_to_col)) == brute_force(costs)


def test_auction_agrees_with_hungarian_on_larger_matrices():
    rng = random.Random(7)
    for n in (12, 30):
        costs = make_matrix(rng, n, n, high=1000)
        row_to_col, _ = solve_auction(costs)
        hungarian, _ = solve_hungarian(costs)
        auction_total = sum(costs[i][j] for i, j in enumerate(row_to_col))
        hungarian_total = sum(costs[i][j] for i, j in enumerate(hungarian))
        assert auction_total == hungarian_total


def test_threshold_selects_auction_for_integer_matrices():
    costs = make_matrix(random.Random(3), 6, 6)
    dispatcher = Dispatcher(config=ProviderConfig(assignment_auction_threshold=4))
    solution = dispatcher.solve(AssignmentProblem(costs=costs))
    assert solution.stats.algorithm == "auction"
    assert solution.objective_value == brute_force(costs)


def test_float_matrices_always_use_hungarian():
    costs = [[0.5, 1.0, 2.0], [1.0, 0.5, 2.0], [2.0, 1.0, 0.5]]
    dispatcher = Dispatcher(config=ProviderConfig(assignment_auction_threshold=1))
    solution = dispatcher.solve(AssignmentProblem(costs=costs))
    assert solution.stats.algorithm == "hungarian"
    assert solution.objective_value == pytest.approx(1.5)


def test_ties_resolve_identically_on_repeat():
    costs = [[1, 1, 1], [1, 1, 1], [1, 1, 1]]
    dispatcher = Dispatcher()
    first = dispatcher.solve(AssignmentProblem(costs=costs))
    second = dispatcher.solve(AssignmentProblem(costs=costs))
    assert first == second
    assert [(p.agent, p.task) for p in first.result.pairs] == [(0, 0), (1, 1), (2, 2)]


def test_labels_are_echoed_on_pairs():
    problem = AssignmentProblem(
        costs=[[9, 1], [1, 9]],
        agent_labels=["ann", "bob"],
        task_labels=["build", "test"],
    )
    solution = Dispatcher().solve(problem)
    labelled = {(p.agent_label, p.task_label) for p in solution.result.pairs}
    assert labelled == {("ann", "test"), ("bob", "build")}


def first_optimal_permutation(costs):
    n = len(costs)
    best = None
    for perm in itertools.permutations(range(n)):
        total = sum(costs[i][perm[i]] for i in range(n))
        if best is None or total < best[0]:
            best = (total, perm)
    return [(i, j) for i, j in enumerate(best[1])]


def test_tied_matrices_resolve_the_same_under_either_algorithm():
    rng = random.Random(42)
    hungarian = Dispatcher(config=ProviderConfig(assignment_auction_threshold=64))
    auction = Dispatcher(config=ProviderConfig(assignment_auction_threshold=2))
    for _ in range(50):
        costs = make_matrix(rng, 6, 6, high=1)
        slow = hungarian.solve(AssignmentProblem(costs=costs))
        fast = auction.solve(AssignmentProblem(costs=costs))
        assert slow.stats.algorithm == "hungarian"
        assert fast.stats.algorithm == "auction"
        assert fast.result.pairs == slow.result.pairs
        assert fast.objective_value == slow.objective_value


@pytest.mark.parametrize("threshold", [1, 64])
def test_ties_pick_the_lexicographically_first_optimum(threshold):
    rng = random.Random(11)
    for n in (2, 3, 4, 5, 6):
        for _ in range(6):
            costs = make_matrix(rng, n, n, high=3)
            outcome = solve_assignment(costs, auction_threshold=threshold)
            assert outcome.pairs == first_optimal_permutation(costs)


def test_rectangular_ties_agree_across_algorithms():
    rng = random.Random(5)
    for shape in [(3, 6), (6, 3), (4, 7)]:
        costs = make_matrix(rng, *shape, high=2)
        assert (
            solve_assignment(costs, auction_threshold=1).pairs
            == solve_assignment(costs, auction_threshold=64).pairs
        )


def test_near_equal_real_costs_count_as_ties():
    costs = [[0.1 + 0.2, 0.3], [0.3, 0.3]]
    outcome = solve_assignment(costs)
    assert outcome.pairs == [(0, 0), (1, 1)]
    assert solve_assignment(costs, tolerance=0.0).pairs == [(0, 1), (1, 0)]


def test_non_optimal_matching_is_reported():
    with pytest.raises(InternalSolverError):
        canonical_matching([[0, 5], [5, 0]], [1, 0])
