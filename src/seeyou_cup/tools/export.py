"""Export tools: render_cup, export_cup, export_gpx, set_export_settings."""

import logging
import os
from pathlib import Path
from typing import Literal

from mcp.server.fastmcp import FastMCP
from mcp.types import ToolAnnotations
from pydantic import ValidationError

from ..state import state
from ..models import Document
from ..core.writer import serialize_document
from ..core.gpx import document_to_gpx
from ._prereqs import require_state

logger = logging.getLogger(__name__)


def _validate_output_path(output_path: str) -> None:
    """Raise ValueError if output_path resolves outside the user's home directory."""
    resolved = Path(output_path).resolve()
    home = Path.home().resolve()
    try:
        resolved.relative_to(home)
    except ValueError:
        raise ValueError(
            f"Output path {output_path!r} is outside the home directory. "
            "Use a path within your home directory."
        )


def _export_document() -> Document:
    """The current document, with default zones filled in when configured."""
    doc = state.document
    if state.export.default_zones:
        doc = doc.with_default_observation_zones()
    return doc


def _write_text(output_path: str, text: str) -> None:
    os.makedirs(os.path.dirname(output_path) or ".", exist_ok=True)
    # newline="" keeps the line endings the serializer chose
    with open(output_path, "w", encoding="utf-8", newline="") as f:
        f.write(text)


def register_export_tools(mcp: FastMCP):

    @mcp.tool(annotations=ToolAnnotations(readOnlyHint=False, destructiveHint=False))
    def set_export_settings(
        newline: Literal["lf", "crlf"] | None = None,
        default_zones: bool | None = None,
    ) -> str:
        """Change how documents are exported.

        Args:
            newline: Line endings for CUP output, 'crlf' (default) or 'lf'.
            default_zones: Fill missing observation zones with defaults on export.
        """
        try:
            if newline is not None:
                state.export.newline = newline
            if default_zones is not None:
                state.export.default_zones = default_zones
        except ValidationError as e:
            return f"Error: {e}"
        return f"Export settings: {state.export.model_dump()}"

    @mcp.tool(annotations=ToolAnnotations(readOnlyHint=True))
    def render_cup() -> str:
        """Return the current document rendered as CUP text.

        **Requires:** a loaded document.
        """
        try:
            require_state(state, document=True)
        except ValueError as e:
            return f"Error: {e}"
        return serialize_document(_export_document(), newline=state.export.newline)

    @mcp.tool(annotations=ToolAnnotations(readOnlyHint=False, destructiveHint=True))
    def export_cup(output_path: str) -> str:
        """Write the current document as a SeeYou .cup file (UTF-8).

        Args:
            output_path: Where to save the .cup file (absolute path)
        """
        try:
            require_state(state, document=True)
            _validate_output_path(output_path)
        except ValueError as e:
            return f"Error: {e}"

        doc = _export_document()
        _write_text(output_path, serialize_document(doc, newline=state.export.newline))
        logger.info("CUP exported to %s", output_path)
        return (
            f"CUP exported to {output_path} "
            f"({len(doc.waypoints)} waypoint(s), {len(doc.tasks)} task(s))"
        )

    @mcp.tool(annotations=ToolAnnotations(readOnlyHint=False, destructiveHint=True))
    def export_gpx(output_path: str) -> str:
        """Write the current document as GPX: waypoints plus one route per task.

        Args:
            output_path: Where to save the .gpx file (absolute path)
        """
        try:
            require_state(state, document=True)
            _validate_output_path(output_path)
        except ValueError as e:
            return f"Error: {e}"

        doc = state.document
        _write_text(output_path, document_to_gpx(doc))
        logger.info("GPX exported to %s", output_path)
        return (
            f"GPX exported to {output_path} "
            f"({len(doc.waypoints)} waypoint(s), {len(doc.tasks)} route(s))"
        )
