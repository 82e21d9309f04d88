"""calcsteps — MCP server for step-by-step calculus.

Run:   python -m calcsteps.server
Test:  mcp dev calcsteps/server.py
"""

import logging

from mcp.server.fastmcp import FastMCP

from calcsteps.core import LOG_LEVEL
from calcsteps.tools.algebra import equation_tool
from calcsteps.tools.calculus import calculus_tool
from calcsteps.tools.graph import graph_tool

mcp = FastMCP(
    name="calcsteps",
    instructions=(
        "Step-by-step calculus tools. calculus_tool differentiates, integrates "
        "(pattern rules) and evaluates limits with a narrated trail; equation_tool "
        "solves simple linear equations; graph_tool returns plot data and "
        "critical points. Show the returned steps to the user as they are."
    ),
)

# Register the 3 tools
mcp.tool()(calculus_tool)
mcp.tool()(equation_tool)
mcp.tool()(graph_tool)


def main():
    logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    mcp.run()


if __name__ == "__main__":
    main()
