import pytest

pytest.importorskip("mcp")

from optimize_provider import server  # noqa: E402


def test_solve_problem_tool_returns_json_ready_dict():
    result = server.solve_problem(
        {"kind": "knapsack", "weights": [2, 3, 4], "values": [3, 4, 5], "capacity": 5}
    )
    assert result["status"] == "optimal"
    assert result["capability"] == "optimize.knapsack"
    assert result["objective_value"] == pytest.approx(7.0)
    assert result["result"]["selected"] == [0, 1]


def test_solve_capability_tool_reports_unknown_capability():
    result = server.solve_capability(
        "optimize.unknown", {"kind": "knapsack", "weights": [], "values": [], "capacity": 0}
    )
    assert result["status"] == "error"
    assert result["error"]["kind"] == "unsupported_capability"


def test_list_capabilities_tool():
    listing = server.list_capabilities()
    assert {item["identifier"] for item in listing} >= {
        "optimize.assignment",
        "optimize.constraint",
    }


def test_dispatcher_is_built_once_at_import():
    assert server.dispatcher.registry["optimize.knapsack"].enabled
    assert server.list_capabilities() == server.dispatcher.list_capabilities()
