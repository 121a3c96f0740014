"""Errors raised while reading and parsing a CUP document.

Only the four CupParseError conditions abort a parse. Every other
malformation is skipped line by line.
"""

from typing import Optional


class CupParseError(ValueError):
    """Base class for terminal parse failures."""

    def __init__(self, message: str, line_number: Optional[int] = None):
        self.line_number = line_number
        if line_number is not None:
            message = f"line {line_number}: {message}"
        super().__init__(message)


class HeaderMissingError(CupParseError):
    def __init__(self, line_number: Optional[int] = None):
        super().__init__("CUP header row is missing", line_number)


class InvalidCoordinateError(CupParseError):
    def __init__(self, value: str, line_number: Optional[int] = None):
        self.value = value
        super().__init__(f"invalid latitude/longitude {value!r}", line_number)


class TaskContextMissingError(CupParseError):
    def __init__(self, record: str, line_number: Optional[int] = None):
        self.record = record
        super().__init__(f"{record} record appears before any task", line_number)


class ObsZoneIndexOutOfRangeError(CupParseError):
    def __init__(self, index: int, turnpoint_count: int, line_number: Optional[int] = None):
        self.index = index
        self.turnpoint_count = turnpoint_count
        super().__init__(
            f"ObsZone index {index} out of range for task with {turnpoint_count} turnpoint(s)",
            line_number,
        )


class CupReadError(ValueError):
    """A .cup or .cupx file could not be turned into text."""
