"""Document loading tools: load_cup_file, load_cup_text, load_gpx_file."""

import logging
from pathlib import Path

from gpxpy.gpx import GPXException
from mcp.server.fastmcp import FastMCP
from mcp.types import ToolAnnotations

from ..state import state
from ..errors import CupParseError
from ..models import Document
from ..core.parser import parse_document
from ..core.gpx import gpx_to_document
from ..reader import read_cup_file

logger = logging.getLogger(__name__)


def _read_text(file_path: str) -> str:
    path = Path(file_path)
    if not path.exists():
        raise ValueError(f"File not found at {file_path}")
    try:
        return path.read_text(encoding="utf-8")
    except UnicodeDecodeError:
        raise ValueError(f"{file_path} is not UTF-8 text; re-export it as UTF-8.")


def _set_document(document: Document, source: str) -> str:
    state.document = document
    state.source = source
    logger.info(
        "Loaded %d waypoint(s), %d task(s) from %s",
        len(document.waypoints), len(document.tasks), source,
    )
    return (
        f"Loaded {len(document.waypoints)} waypoint(s) and "
        f"{len(document.tasks)} task(s) from {source}."
    )


def register_document_tools(mcp: FastMCP):

    @mcp.tool(annotations=ToolAnnotations(readOnlyHint=False, destructiveHint=False))
    def load_cup_file(file_path: str, strict: bool = True) -> str:
        """Load a SeeYou .cup or .cupx waypoint/task file as the current document.

        UTF-8, UTF-16 and Windows-1252 files are detected automatically.
        Replaces any document already loaded.
        **Next:** list_waypoints, list_tasks, or export_cup / export_gpx.

        Args:
            file_path: Absolute path to a .cup file or a .cupx archive.
            strict: Refuse files whose encoding cannot be detected (default).
                With False they are read as UTF-8, replacing bad bytes.
        """
        try:
            result = read_cup_file(file_path, strict=strict)
            document = parse_document(result.text)
        except ValueError as e:
            return f"Error: {e}"
        message = _set_document(document, file_path)
        if result.encoding != "utf-8":
            message += f" Decoded as {result.encoding}."
        if result.pictures:
            message += f" Archive holds {len(result.pictures)} picture(s)."
        return message

    @mcp.tool(annotations=ToolAnnotations(readOnlyHint=False, destructiveHint=False))
    def load_cup_text(text: str) -> str:
        """Parse CUP text passed inline and make it the current document.

        Args:
            text: Full CUP file contents, header row included.
        """
        try:
            document = parse_document(text)
        except CupParseError as e:
            return f"Error: {e}"
        return _set_document(document, "<inline text>")

    @mcp.tool(annotations=ToolAnnotations(readOnlyHint=False, destructiveHint=False))
    def load_gpx_file(file_path: str) -> str:
        """Load a GPX file, turning its waypoints into CUP waypoints and routes into tasks.

        Args:
            file_path: Absolute path to a .gpx file.
        """
        try:
            text = _read_text(file_path)
            document = gpx_to_document(text)
        except (ValueError, GPXException) as e:
            return f"Error: {e}"
        return _set_document(document, file_path)
