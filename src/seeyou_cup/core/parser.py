"""CUP document parser.

The file has two sections. Waypoint rows come first, after a mandatory header
row. The literal separator line switches permanently to the task section,
where each task line may be followed by ``Options,``, ``ObsZone=`` and
``STARTS=`` records that refine the task declared just before them.
"""

import logging
from typing import Optional

from ..errors import (
    HeaderMissingError,
    InvalidCoordinateError,
    ObsZoneIndexOutOfRangeError,
    TaskContextMissingError,
)
from ..models import Document, ObservationZone, Task, TaskOptions, Turnpoint, Waypoint
from .coords import parse_latitude, parse_longitude
from .tokenizer import split_csv_line
from .units import (
    parse_angle,
    parse_bool,
    parse_distance_km,
    parse_int,
    parse_length,
)

logger = logging.getLogger(__name__)

TASK_SEPARATOR = "-----Related Tasks-----"
UNNAMED_TASK = "Unnamed Task"

OPTIONS_PREFIX = "Options,"
OBSZONE_PREFIX = "ObsZone="
STARTS_PREFIX = "STARTS="

MIN_WAYPOINT_FIELDS = 6

# Options keys (lowercased) -> (TaskOptions field, codec)
_OPTION_KEYS = {
    "nostart": ("no_start", str.strip),
    "tasktime": ("task_time", str.strip),
    "wpdis": ("wp_dis", parse_bool),
    "neardis": ("near_distance_km", parse_distance_km),
    "nearalt": ("near_altitude_meters", parse_length),
    "mindis": ("min_dis", parse_bool),
    "randomorder": ("random_order", parse_bool),
    "maxpts": ("max_points", parse_int),
    "beforepts": ("before_points", parse_int),
    "afterpts": ("after_points", parse_int),
    "bonus": ("bonus", parse_int),
}

_ZONE_KEYS = {
    "r1": ("r1_meters", parse_length),
    "a1": ("a1_degrees", parse_angle),
    "r2": ("r2_meters", parse_length),
    "a2": ("a2_degrees", parse_angle),
    "line": ("is_line", parse_bool),
}


def parse_document(text: str) -> Document:
    """Parse decoded CUP text into a :class:`Document`.

    Raises one of the :mod:`seeyou_cup.errors` types for a missing header,
    a malformed coordinate, a task sub-record with no task before it, or an
    ObsZone index outside the task's route. Anything else that does not
    parse is skipped.
    """
    if text.startswith("\ufeff"):
        text = text[1:]
    lines = text.replace("\r\n", "\n").replace("\r", "\n").split("\n")

    waypoints: list[Waypoint] = []
    tasks: list[Task] = []
    in_tasks = False
    header_seen = False

    for line_number, raw in enumerate(lines, start=1):
        line = raw.strip()
        if not line:
            continue
        if line == TASK_SEPARATOR:
            in_tasks = True
            continue

        if in_tasks:
            _parse_task_line(tasks, line, line_number)
            continue

        if line.startswith("*"):
            continue
        if not header_seen:
            header_seen = True
            continue
        waypoint = _parse_waypoint_row(line, line_number)
        if waypoint is not None:
            waypoints.append(waypoint)

    if not header_seen:
        raise HeaderMissingError()

    logger.debug("Parsed %d waypoint(s), %d task(s)", len(waypoints), len(tasks))
    return Document(waypoints=waypoints, tasks=tasks)


def _field(cols: list[str], index: int) -> str:
    return cols[index] if index < len(cols) else ""


def _parse_waypoint_row(line: str, line_number: int) -> Optional[Waypoint]:
    cols = split_csv_line(line)
    if len(cols) < MIN_WAYPOINT_FIELDS:
        logger.debug("line %d: skipping waypoint row with %d field(s)", line_number, len(cols))
        return None

    lat_str, lon_str = cols[3], cols[4]
    if not lat_str or not lon_str:
        logger.debug("line %d: skipping waypoint row without coordinates", line_number)
        return None
    try:
        latitude = parse_latitude(lat_str)
        longitude = parse_longitude(lon_str)
    except InvalidCoordinateError as e:
        raise InvalidCoordinateError(e.value, line_number) from None

    runway_direction = parse_int(_field(cols, 7))
    if runway_direction is not None and not 0 <= runway_direction <= 359:
        logger.debug("line %d: ignoring runway direction %d", line_number, runway_direction)
        runway_direction = None

    runway_length = parse_length(_field(cols, 8))
    if runway_length is not None and runway_length < 0:
        runway_length = None

    return Waypoint(
        title=cols[0],
        code=cols[1],
        country=cols[2],
        latitude=latitude,
        longitude=longitude,
        elevation_meters=parse_length(cols[5]),
        style=_field(cols, 6),
        runway_direction=runway_direction,
        runway_length_meters=runway_length,
        frequency=_field(cols, 9),
        description=_field(cols, 10),
    )


def _parse_task_line(tasks: list[Task], line: str, line_number: int) -> None:
    if line.startswith(OPTIONS_PREFIX):
        _apply_options(tasks, line[len(OPTIONS_PREFIX):], line_number)
    elif line.startswith(OBSZONE_PREFIX):
        _apply_obs_zone(tasks, line, line_number)
    elif line.startswith(STARTS_PREFIX):
        _apply_starts(tasks, line[len(STARTS_PREFIX):], line_number)
    else:
        task = _parse_task_record(line)
        if task is None:
            logger.debug("line %d: ignoring unrecognised task line", line_number)
        else:
            tasks.append(task)


def _parse_task_record(line: str) -> Optional[Task]:
    """Parse a task main record, or return None if the line does not look like one.

    Accepted forms are ``Task,Name,TP1,...`` and ``Name,TP1,...``. Empty
    route columns (an empty takeoff or landing) are dropped.
    """
    cols = split_csv_line(line)
    if len(cols) < 2:
        return None

    if cols[0].lower() == "task":
        name, route = _field(cols, 1), cols[2:]
    else:
        name, route = cols[0], cols[1:]

    return Task(
        name=name or UNNAMED_TASK,
        turnpoints=[Turnpoint(waypoint_name=n) for n in route if n],
    )


def _current_task_index(tasks: list[Task], record: str, line_number: int) -> int:
    if not tasks:
        raise TaskContextMissingError(record, line_number)
    return len(tasks) - 1


def _key_values(parts: list[str]):
    for part in parts:
        key, sep, value = part.partition("=")
        if sep:
            yield key.strip().lower(), value.strip()


def _apply_options(tasks: list[Task], remainder: str, line_number: int) -> None:
    index = _current_task_index(tasks, "Options", line_number)

    values = {}
    for key, value in _key_values(remainder.split(",")):
        if key not in _OPTION_KEYS:
            logger.debug("line %d: ignoring unknown option %r", line_number, key)
            continue
        field, codec = _OPTION_KEYS[key]
        parsed = codec(value)
        if parsed is not None and parsed != "":
            values[field] = parsed

    if not values:
        return
    options = TaskOptions(**values)
    task = tasks[index]
    if task.options is not None:
        options = task.options.merged(options)
    tasks[index] = task.model_copy(update={"options": options})


def _apply_obs_zone(tasks: list[Task], line: str, line_number: int) -> None:
    task_index = _current_task_index(tasks, "ObsZone", line_number)

    parts = line.split(",")
    zone_index = parse_int(parts[0][len(OBSZONE_PREFIX):])
    if zone_index is None:
        logger.debug("line %d: ignoring ObsZone without a numeric index", line_number)
        return

    values = {}
    for key, value in _key_values(parts[1:]):
        if key == "style":
            style = parse_int(value)
            if style is not None:
                values["style"] = style
        elif key in _ZONE_KEYS:
            field, codec = _ZONE_KEYS[key]
            parsed = codec(value)
            if parsed is not None:
                values[field] = parsed
    for field in ("r1_meters", "r2_meters"):
        if values.get(field, 0) < 0:
            del values[field]

    try:
        tasks[task_index] = tasks[task_index].with_observation_zone(
            zone_index, ObservationZone(**values)
        )
    except ObsZoneIndexOutOfRangeError as e:
        raise ObsZoneIndexOutOfRangeError(e.index, e.turnpoint_count, line_number) from None


def _apply_starts(tasks: list[Task], remainder: str, line_number: int) -> None:
    index = _current_task_index(tasks, "STARTS", line_number)
    starts = split_csv_line(remainder) if remainder.strip() else []
    tasks[index] = tasks[index].model_copy(update={"starts": tuple(starts)})
