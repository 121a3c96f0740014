"""Scalar field codecs: lengths, distances, booleans, integers and angles.

Values are stored metric. Readers return ``None`` for anything they cannot
make sense of so a bad optional field never aborts a parse.
"""

import math
from typing import Optional

FT_TO_M = 0.3048

# Longest suffix first so "nm" is not mistaken for "m".
_LENGTH_UNITS = (
    ("km", 1000.0),
    ("nm", 1852.0),
    ("ml", 1609.344),
    ("ft", FT_TO_M),
    ("m", 1.0),
)


def _to_float(text: str) -> Optional[float]:
    try:
        value = float(text.strip())
    except ValueError:
        return None
    return value if math.isfinite(value) else None


def parse_length(token: Optional[str]) -> Optional[float]:
    """Parse an elevation or length such as ``123m``, ``400ft`` or ``123`` to meters."""
    if token is None:
        return None
    text = token.strip()
    if not text:
        return None
    lowered = text.lower()
    for suffix, factor in _LENGTH_UNITS:
        if lowered.endswith(suffix):
            value = _to_float(text[: -len(suffix)])
            return None if value is None else value * factor
    return _to_float(text)


def format_length(meters: Optional[float]) -> str:
    if meters is None:
        return ""
    return f"{round(meters)}m"


def parse_distance_km(token: Optional[str]) -> Optional[float]:
    """Parse a task distance. ``km`` marks kilometers; other lengths are converted."""
    if token is None:
        return None
    text = token.strip()
    if text.lower().endswith("km"):
        return _to_float(text[:-2])
    meters = parse_length(text)
    return None if meters is None else meters / 1000.0


def format_distance_km(km: Optional[float]) -> str:
    if km is None:
        return ""
    # Precision is chosen on the rounded value so re-rendering is stable.
    for digits, limit in ((3, 10), (2, 100)):
        if abs(round(km, digits)) < limit:
            return f"{km:.{digits}f}km"
    return f"{km:.1f}km"


def parse_bool(token: Optional[str]) -> Optional[bool]:
    if token is None:
        return None
    text = token.strip().lower()
    if text in ("1", "true"):
        return True
    if text in ("0", "false"):
        return False
    return None


def format_bool(value: Optional[bool]) -> str:
    if value is None:
        return ""
    return "1" if value else "0"


def parse_int(token: Optional[str]) -> Optional[int]:
    if token is None:
        return None
    try:
        return int(token.strip())
    except ValueError:
        return None


def parse_angle(token: Optional[str]) -> Optional[float]:
    if token is None:
        return None
    return _to_float(token)


def format_angle(degrees: Optional[float]) -> str:
    if degrees is None:
        return ""
    return str(round(degrees))
