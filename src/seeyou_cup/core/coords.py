"""CUP coordinate codec: decimal degrees <-> DDMM.mmmH / DDDMM.mmmH."""

import math

from ..errors import InvalidCoordinateError

# thousandths of a minute per degree
_STEPS_PER_DEGREE = 60_000


def _parse(raw: str, width: int, positive: str, negative: str, limit: float) -> float:
    token = raw.strip()
    if len(token) < width + 3:
        raise InvalidCoordinateError(raw)

    hemisphere = token[-1].upper()
    if hemisphere not in (positive, negative):
        raise InvalidCoordinateError(raw)

    body = token[:-1]
    degrees_str = body[:width]
    minutes_str = body[width:].replace(",", ".")
    if not degrees_str.isdigit():
        raise InvalidCoordinateError(raw)
    try:
        minutes = float(minutes_str)
    except ValueError:
        raise InvalidCoordinateError(raw) from None
    if not math.isfinite(minutes) or not 0 <= minutes < 60:
        raise InvalidCoordinateError(raw)

    value = int(degrees_str) + minutes / 60.0
    if value > limit:
        raise InvalidCoordinateError(raw)
    return -value if hemisphere == negative else value


def parse_latitude(raw: str) -> float:
    """Parse ``DDMM.mmm[N|S]``, e.g. ``5216.500N`` -> 52.275."""
    return _parse(raw, 2, "N", "S", 90.0)


def parse_longitude(raw: str) -> float:
    """Parse ``DDDMM.mmm[E|W]``, e.g. ``00541.300E`` -> 5.688."""
    return _parse(raw, 3, "E", "W", 180.0)


def _format(value: float, width: int, positive: str, negative: str) -> str:
    hemisphere = positive if value >= 0 else negative
    steps = round(abs(value) * _STEPS_PER_DEGREE)
    degrees, remainder = divmod(steps, _STEPS_PER_DEGREE)
    minutes = remainder / 1000.0
    return f"{degrees:0{width}d}{minutes:06.3f}{hemisphere}"


def format_latitude(lat: float) -> str:
    return _format(lat, 2, "N", "S")


def format_longitude(lon: float) -> str:
    return _format(lon, 3, "E", "W")
