"""Task editing tools: apply_default_zones."""

import logging

from mcp.server.fastmcp import FastMCP
from mcp.types import ToolAnnotations

from ..state import state
from ._prereqs import require_state

logger = logging.getLogger(__name__)


def register_task_tools(mcp: FastMCP):

    @mcp.tool(annotations=ToolAnnotations(readOnlyHint=False, destructiveHint=False))
    def apply_default_zones(task_index: int | None = None) -> str:
        """Give turnpoints without an observation zone the conventional default.

        Takeoff gets a 1 km zone facing the next point, interior turnpoints a
        2 km 45° sector, landing a 1 km zone facing the previous point.
        Existing zones are left alone.

        **Requires:** a loaded document with at least one task.

        Args:
            task_index: Task to update (0-based). Default: every task.
        """
        try:
            require_state(state, tasks=True)
        except ValueError as e:
            return f"Error: {e}"

        tasks = list(state.document.tasks)
        if task_index is None:
            indices = range(len(tasks))
        elif 0 <= task_index < len(tasks):
            indices = [task_index]
        else:
            return f"Error: task_index {task_index} out of range (document has {len(tasks)} task(s))."

        for i in indices:
            tasks[i] = tasks[i].with_default_observation_zones()
        state.document = state.document.model_copy(update={"tasks": tuple(tasks)})

        logger.info("Applied default observation zones to %d task(s)", len(indices))
        return f"Default observation zones applied to {len(indices)} task(s)."
