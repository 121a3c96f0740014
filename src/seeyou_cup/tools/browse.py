"""Read-only document tools: list_waypoints, find_waypoints, list_tasks."""

import json

from mcp.server.fastmcp import FastMCP
from mcp.types import ToolAnnotations

from ..state import state
from ..models import Task
from ._prereqs import require_state


def _task_summary(index: int, task: Task) -> dict:
    return {
        "index": index,
        "name": task.name,
        "route": task.waypoint_names,
        "zones": {
            i: tp.observation_zone.model_dump(exclude_none=True)
            for i, tp in enumerate(task.turnpoints)
            if tp.observation_zone is not None
        },
        "starts": task.starts,
        "options": task.options.model_dump(exclude_none=True) if task.options else None,
    }


def register_browse_tools(mcp: FastMCP):

    @mcp.tool(annotations=ToolAnnotations(readOnlyHint=True))
    def list_waypoints(offset: int = 0, limit: int = 50) -> str:
        """List waypoints of the current document as JSON, in file order.

        **Requires:** a loaded document.

        Args:
            offset: Index of the first waypoint to return.
            limit: Maximum number of waypoints to return (default 50).
        """
        try:
            require_state(state, document=True)
        except ValueError as e:
            return f"Error: {e}"

        waypoints = state.document.waypoints
        page = waypoints[max(offset, 0):max(offset, 0) + max(limit, 0)]
        return json.dumps({
            "total": len(waypoints),
            "offset": offset,
            "waypoints": [wp.model_dump(exclude_none=True) for wp in page],
        }, indent=2)

    @mcp.tool(annotations=ToolAnnotations(readOnlyHint=True))
    def find_waypoints(query: str) -> str:
        """Find waypoints whose title or code contains ``query`` (case-insensitive).

        Args:
            query: Text to look for.
        """
        try:
            require_state(state, document=True)
        except ValueError as e:
            return f"Error: {e}"

        needle = query.strip().lower()
        matches = [
            wp.model_dump(exclude_none=True)
            for wp in state.document.waypoints
            if needle in wp.title.lower() or needle in wp.code.lower()
        ]
        if not matches:
            return f"No waypoints match {query!r}."
        return json.dumps(matches, indent=2)

    @mcp.tool(annotations=ToolAnnotations(readOnlyHint=True))
    def list_tasks() -> str:
        """List tasks of the current document with route, zones, starts and options."""
        try:
            require_state(state, document=True)
        except ValueError as e:
            return f"Error: {e}"

        return json.dumps(
            [_task_summary(i, t) for i, t in enumerate(state.document.tasks)],
            indent=2,
        )
