import itertools
import random

import pytest

from optimize_provider import Dispatcher, KnapsackProblem, ProviderConfig
from optimize_provider.knapsack import dp_table_bytes, solve_knapsack


def make_items(rng: random.Random, n: int):
    weights = [rng.randint(0, 15) for _ in range(n)]
    values = [rng.randint(0, 30) for _ in range(n)]
    return weights, values


def brute_force(weights, values, capacity):
    best = 0
    for mask in itertools.product((0, 1), repeat=len(weights)):
        weight = sum(w for w, take in zip(weights, mask) if take)
        if weight <= capacity:
            best = max(best, sum(v for v, take in zip(values, mask) if take))
    return best


def test_small_example():
    problem = KnapsackProblem(weights=[2, 3, 4], values=[3, 4, 5], capacity=5)
    solution = Dispatcher().solve(problem)

    assert solution.status == "optimal"
    assert solution.objective_value == pytest.approx(7.0)
    assert solution.result.selected == [0, 1]
    assert solution.result.total_weight == 5
    assert solution.result.total_value == 7


@pytest.mark.parametrize("seed", range(8))
def test_matches_brute_force(seed):
    rng = random.Random(seed)
    n = rng.randint(1, 14)
    weights, values = make_items(rng, n)
    capacity = rng.randint(0, 40)

    outcome = solve_knapsack(weights, values, capacity)

    assert outcome.total_weight <= capacity
    assert outcome.total_weight == sum(weights[i] for i in outcome.selected)
    assert outcome.total_value == brute_force(weights, values, capacity)
    assert outcome.selected == sorted(set(outcome.selected))


def test_twenty_items():
    rng = random.Random(20)
    weights = [rng.randint(1, 9) for _ in range(20)]
    values = [rng.randint(1, 9) for _ in range(20)]
    # Brute force over 2^20 subsets is too slow here; compare with a plain dict DP instead.
    best = {0: 0}
    for w, v in zip(weights, values):
        for used, value in list(best.items()):
            if used + w <= 30 and best.get(used + w, -1) < value + v:
                best[used + w] = value + v
    outcome = solve_knapsack(weights, values, 30)
    assert outcome.total_value == max(best.values())


def test_zero_capacity_selects_nothing():
    outcome = solve_knapsack([1, 2], [5, 6], 0)
    assert outcome.selected == []
    assert outcome.total_value == 0


def test_zero_capacity_still_takes_weightless_items():
    outcome = solve_knapsack([0, 1], [5, 3], 0)
    assert outcome.selected == [0]
    assert outcome.total_value == 5


def test_no_items():
    solution = Dispatcher().solve(KnapsackProblem(weights=[], values=[], capacity=10))
    assert solution.status == "optimal"
    assert solution.result.selected == []
    assert solution.objective_value == 0


def test_items_heavier_than_capacity_are_ignored():
    outcome = solve_knapsack([50, 2], [1000, 1], 10)
    assert outcome.selected == [1]
    assert outcome.cells == 11


def test_table_size_counts_only_fitting_items():
    assert dp_table_bytes([50, 60], 10) == 0
    assert dp_table_bytes([1, 2, 50], 10) == 11 * (2 + 8)


def test_capacity_over_memory_budget_is_invalid_input():
    config = ProviderConfig(knapsack_memory_budget_bytes=1_000)
    problem = KnapsackProblem(weights=[1], values=[1], capacity=10_000)
    solution = Dispatcher(config=config).solve(problem)

    assert solution.status == "error"
    assert solution.error.kind == "invalid_input"
    assert "budget" in solution.message


def test_huge_capacity_with_no_fitting_item_is_fine():
    config = ProviderConfig(knapsack_memory_budget_bytes=1_000)
    problem = KnapsackProblem(weights=[10**12], values=[5], capacity=10**11)
    solution = Dispatcher(config=config).solve(problem)
    assert solution.status == "optimal"
    assert solution.result.selected == []


def test_mismatched_lengths_are_invalid_input():
    solution = Dispatcher().solve(KnapsackProblem(weights=[1, 2], values=[1], capacity=3))
    assert solution.error.kind == "invalid_input"
    assert "dimension mismatch" in solution.message


def test_negative_weight_is_invalid_input():
    solution = Dispatcher().solve(KnapsackProblem(weights=[-1], values=[1], capacity=3))
    assert solution.error.kind == "invalid_input"
