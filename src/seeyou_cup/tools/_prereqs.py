"""Prerequisite checking helpers for MCP tools."""


def require_state(state, *, document: bool = False, tasks: bool = False) -> None:
    """Raise ValueError with a descriptive message if required state is not set.

    Usage in a tool:
        try:
            require_state(state, document=True)
        except ValueError as e:
            return f"Error: {e}"
    """
    if (document or tasks) and state.document is None:
        raise ValueError(
            "Load a document first with load_cup_file, load_cup_text or load_gpx_file."
        )
    if tasks and not state.document.tasks:
        raise ValueError("The loaded document has no tasks.")
