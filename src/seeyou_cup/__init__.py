"""Read and write SeeYou CUP waypoint and task files."""

from seeyou_cup.core.parser import parse_document
from seeyou_cup.core.writer import serialize_document

__all__ = ["parse_document", "serialize_document"]
