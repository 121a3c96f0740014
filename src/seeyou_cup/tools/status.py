"""Status tool: get_status."""

import json
from mcp.server.fastmcp import FastMCP
from mcp.types import ToolAnnotations

from ..state import state


def register_status_tools(mcp: FastMCP):

    @mcp.tool(annotations=ToolAnnotations(readOnlyHint=True))
    def get_status() -> str:
        """Return a summary of the current session.

        Shows whether a document is loaded, where it came from, how many
        waypoints and tasks it holds, and the current export settings.
        """
        return json.dumps(state.summary(), indent=2)
