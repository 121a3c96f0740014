"""CUP document serializer.

Output is the inverse of :func:`seeyou_cup.core.parser.parse_document`:
parsing the rendered text gives back an equal document, up to whole meters
and thousandths of a minute.
"""

import logging
from typing import Literal

from ..models import Document, ObservationZone, Task, TaskOptions, Waypoint
from .coords import format_latitude, format_longitude
from .parser import OBSZONE_PREFIX, OPTIONS_PREFIX, STARTS_PREFIX, TASK_SEPARATOR
from .tokenizer import quote_field, quote_if_needed
from .units import (
    format_angle,
    format_bool,
    format_distance_km,
    format_length,
)

logger = logging.getLogger(__name__)

HEADER = "name,code,country,lat,lon,elev,style,rwdir,rwlen,freq,desc"

NEWLINES = {"lf": "\n", "crlf": "\r\n"}


def _plain(value: str) -> str:
    return str(value)


# (CUP key, TaskOptions field, formatter) in output order
_OPTION_FIELDS = (
    ("NoStart", "no_start", _plain),
    ("TaskTime", "task_time", _plain),
    ("WpDis", "wp_dis", format_bool),
    ("NearDis", "near_distance_km", format_distance_km),
    ("NearAlt", "near_altitude_meters", format_length),
    ("MinDis", "min_dis", format_bool),
    ("RandomOrder", "random_order", format_bool),
    ("MaxPts", "max_points", _plain),
    ("BeforePts", "before_points", _plain),
    ("AfterPts", "after_points", _plain),
    ("Bonus", "bonus", _plain),
)

_ZONE_FIELDS = (
    ("R1", "r1_meters", format_length),
    ("A1", "a1_degrees", format_angle),
    ("R2", "r2_meters", format_length),
    ("A2", "a2_degrees", format_angle),
    ("Line", "is_line", format_bool),
)


def serialize_document(document: Document, newline: Literal["lf", "crlf"] = "crlf") -> str:
    """Render ``document`` as CUP text, every line terminated by ``newline``."""
    eol = NEWLINES[newline]
    lines = [HEADER]
    lines.extend(format_waypoint(wp) for wp in document.waypoints)

    if document.tasks:
        lines.append(TASK_SEPARATOR)
        for task in document.tasks:
            lines.extend(format_task(task))

    logger.debug(
        "Serialized %d waypoint(s), %d task(s)", len(document.waypoints), len(document.tasks)
    )
    return eol.join(lines) + eol


def format_waypoint(wp: Waypoint) -> str:
    cols = [
        quote_field(wp.title),
        quote_field(wp.code),
        quote_if_needed(wp.country or ""),
        format_latitude(wp.latitude),
        format_longitude(wp.longitude),
        format_length(wp.elevation_meters),
        quote_if_needed(wp.style or ""),
        "" if wp.runway_direction is None else str(wp.runway_direction),
        format_length(wp.runway_length_meters),
        quote_if_needed(wp.frequency or ""),
        quote_if_needed(wp.description or ""),
    ]
    return ",".join(cols)


def format_task(task: Task) -> list[str]:
    """Render the main record and its sub-records for one task."""
    names = task.waypoint_names
    takeoff = names[0] if names else ""
    interior = names[1:-1]
    landing = names[-1] if len(names) >= 2 else ""

    cols = [quote_field(task.name), quote_field(takeoff)]
    cols.extend(quote_field(n) for n in interior)
    cols.append(quote_field(landing))
    main = ",".join(cols)
    # A task literally named "Task" would be read as the explicit prefix.
    if task.name.lower() == "task":
        main = "Task," + main
    lines = [main]

    if task.options is not None and not task.options.is_empty:
        lines.append(format_options(task.options))

    for index, tp in enumerate(task.turnpoints):
        if tp.observation_zone is not None:
            lines.append(format_obs_zone(index, tp.observation_zone))

    if task.starts:
        lines.append(STARTS_PREFIX + ",".join(_format_start(s) for s in task.starts))
    return lines


def format_options(options: TaskOptions) -> str:
    pairs = [
        f"{key}={fmt(getattr(options, field))}"
        for key, field, fmt in _OPTION_FIELDS
        if getattr(options, field) is not None
    ]
    return OPTIONS_PREFIX + ",".join(pairs)


def format_obs_zone(index: int, zone: ObservationZone) -> str:
    cols = [f"{OBSZONE_PREFIX}{index}", f"Style={int(zone.style)}"]
    cols.extend(
        f"{key}={fmt(getattr(zone, field))}"
        for key, field, fmt in _ZONE_FIELDS
        if getattr(zone, field) is not None
    )
    return ",".join(cols)


def _format_start(name: str) -> str:
    if not name or "," in name or '"' in name:
        return quote_field(name)
    return name
