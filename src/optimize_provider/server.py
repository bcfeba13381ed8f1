from __future__ import annotations

import logging
import os

from mcp.server.fastmcp import FastMCP
from mcp.server.transport_security import TransportSecuritySettings

from .config import ProviderConfig, SolveOptions
from .dispatch import Dispatcher

app = FastMCP("Optimization Provider")
dispatcher = Dispatcher(config=ProviderConfig.from_env())


@app.tool()
def solve_problem(problem: dict, options: SolveOptions | None = None) -> dict:
    """Solve an assignment, knapsack, shortest-path, flow or constraint problem.

    The problem is a JSON object whose ``kind`` field selects the family; the
    capability registered for that family handles it. The result always carries
    a ``status`` (optimal, infeasible, unbounded, timed_out or error).
    """
    return dispatcher.solve_request(problem, options=options).model_dump(mode="json")


@app.tool()
def solve_capability(capability: str, problem: dict, options: SolveOptions | None = None) -> dict:
    """Solve a problem with an explicitly named capability such as ``optimize.max_flow``."""
    solution = dispatcher.solve_request(problem, capability=capability, options=options)
    return solution.model_dump(mode="json")


@app.tool()
def list_capabilities() -> list[dict]:
    """List registered capabilities and whether each is enabled in this deployment."""
    return dispatcher.list_capabilities()


if __name__ == "__main__":
    import sys

    logging.basicConfig(
        level=os.environ.get("LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    # stdio for desktop clients, streamable HTTP otherwise
    transport = os.environ.get("MCP_TRANSPORT", "stdio")

    if transport == "stdio" or "--stdio" in sys.argv:
        app.run(transport="stdio")
    else:
        port = int(os.environ.get("PORT", "8081"))
        app.settings.host = "0.0.0.0"
        app.settings.port = port
        app.settings.streamable_http_path = "/mcp"
        app.settings.transport_security = TransportSecuritySettings(
            enable_dns_rebinding_protection=False,
            allowed_hosts=["*"],
            allowed_origins=["*"],
        )
        app.run(transport="streamable-http")
