"""MCP server for seeyou-cup.

Registers all tools and runs via stdio transport.
"""

import json

from mcp.server.fastmcp import FastMCP

from .state import state
from .tools.document import register_document_tools
from .tools.browse import register_browse_tools
from .tools.tasks import register_task_tools
from .tools.export import register_export_tools
from .tools.status import register_status_tools

mcp = FastMCP(
    "seeyou-cup",
    instructions="Read, inspect and write SeeYou CUP waypoint and task files",
)

# Register all tool groups
register_document_tools(mcp)
register_browse_tools(mcp)
register_task_tools(mcp)
register_export_tools(mcp)
register_status_tools(mcp)


@mcp.resource("state://session")
def session_state() -> str:
    """Current session summary as JSON."""
    return json.dumps(state.summary(), indent=2)


def main():
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
