from __future__ import annotations

from typing import Dict

ASSIGNMENT = "optimize.assignment"
KNAPSACK = "optimize.knapsack"
SHORTEST_PATH = "optimize.shortest_path"
MAX_FLOW = "optimize.max_flow"
MIN_COST_FLOW = "optimize.min_cost_flow"
CONSTRAINT = "optimize.constraint"

FAMILY_CAPABILITIES: Dict[str, str] = {
    "assignment": ASSIGNMENT,
    "knapsack": KNAPSACK,
    "shortest_path": SHORTEST_PATH,
    "max_flow": MAX_FLOW,
    "min_cost_flow": MIN_COST_FLOW,
    "constraint": CONSTRAINT,
}


def capability_for(family: str) -> str:
    try:
        return FAMILY_CAPABILITIES[family]
    except KeyError:
        raise KeyError(f"unknown problem family '{family}'") from None
