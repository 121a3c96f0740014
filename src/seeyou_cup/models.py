"""Pydantic domain models for CUP waypoints and tasks."""

from enum import IntEnum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from seeyou_cup.errors import ObsZoneIndexOutOfRangeError


def _clean_text(value):
    if not isinstance(value, str):
        return value
    return " ".join(value.splitlines()).strip()


def _replace(model, **changes):
    """Copy of a frozen model with ``changes`` applied and validated."""
    return type(model)(**{**dict(model), **changes})


class ZoneStyle(IntEnum):
    FIXED = 0
    SYMMETRIC = 1
    TO_NEXT = 2
    TO_PREVIOUS = 3
    TO_START = 4


class Waypoint(BaseModel):
    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    title: str
    code: str = ""
    country: Optional[str] = None
    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)
    elevation_meters: Optional[float] = None
    style: Optional[str] = None
    runway_direction: Optional[int] = Field(default=None, ge=0, le=359)
    runway_length_meters: Optional[float] = Field(default=None, ge=0)
    frequency: Optional[str] = None
    description: Optional[str] = None

    @field_validator("title", "code", mode="before")
    @classmethod
    def normalize_name(cls, v):
        return _clean_text(v)

    @field_validator("country", "style", "frequency", "description", mode="before")
    @classmethod
    def normalize_optional_text(cls, v):
        v = _clean_text(v)
        return v or None


class ObservationZone(BaseModel):
    """Acceptance region around one turnpoint occurrence.

    Radii are meters, angles are degrees. ``style`` is the producer's
    orientation code, see :class:`ZoneStyle`.
    """
    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    style: int = 0
    r1_meters: Optional[float] = Field(default=None, ge=0)
    a1_degrees: Optional[float] = None
    r2_meters: Optional[float] = Field(default=None, ge=0)
    a2_degrees: Optional[float] = None
    is_line: Optional[bool] = None


class Turnpoint(BaseModel):
    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    waypoint_name: str = Field(min_length=1)
    observation_zone: Optional[ObservationZone] = None

    @field_validator("waypoint_name", mode="before")
    @classmethod
    def normalize_name(cls, v):
        return _clean_text(v)


class TaskOptions(BaseModel):
    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    no_start: Optional[str] = None
    task_time: Optional[str] = None
    wp_dis: Optional[bool] = None
    near_distance_km: Optional[float] = None
    near_altitude_meters: Optional[float] = None
    min_dis: Optional[bool] = None
    random_order: Optional[bool] = None
    max_points: Optional[int] = None
    before_points: Optional[int] = None
    after_points: Optional[int] = None
    bonus: Optional[int] = None

    @field_validator("no_start", "task_time", mode="before")
    @classmethod
    def normalize_time(cls, v):
        v = _clean_text(v)
        if isinstance(v, str) and "," in v:
            raise ValueError("time values cannot contain a comma")
        return v or None

    @property
    def is_empty(self) -> bool:
        return not self.model_dump(exclude_none=True)

    def merged(self, newer: "TaskOptions") -> "TaskOptions":
        """Overlay the fields ``newer`` actually carries onto this bag."""
        return _replace(self, **newer.model_dump(exclude_none=True))


DEFAULT_TAKEOFF_ZONE = ObservationZone(style=ZoneStyle.TO_NEXT, r1_meters=1000, a1_degrees=180)
DEFAULT_TURNPOINT_ZONE = ObservationZone(style=ZoneStyle.SYMMETRIC, r1_meters=2000, a1_degrees=45)
DEFAULT_LANDING_ZONE = ObservationZone(style=ZoneStyle.TO_PREVIOUS, r1_meters=1000, a1_degrees=180)


class Task(BaseModel):
    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    name: str = Field(min_length=1)
    turnpoints: tuple[Turnpoint, ...] = ()
    starts: tuple[str, ...] = ()
    options: Optional[TaskOptions] = None

    @field_validator("name", mode="before")
    @classmethod
    def normalize_name(cls, v):
        return _clean_text(v)

    @field_validator("starts", mode="before")
    @classmethod
    def normalize_starts(cls, v):
        if isinstance(v, (list, tuple)):
            return tuple(_clean_text(s) for s in v)
        return v

    @property
    def waypoint_names(self) -> list[str]:
        return [tp.waypoint_name for tp in self.turnpoints]

    @property
    def takeoff(self) -> Optional[Turnpoint]:
        return self.turnpoints[0] if self.turnpoints else None

    @property
    def landing(self) -> Optional[Turnpoint]:
        return self.turnpoints[-1] if len(self.turnpoints) >= 2 else None

    def with_observation_zone(self, index: int, zone: ObservationZone) -> "Task":
        """Return a copy with ``zone`` attached at ``index``, replacing any existing zone."""
        if not 0 <= index < len(self.turnpoints):
            raise ObsZoneIndexOutOfRangeError(index, len(self.turnpoints))
        turnpoints = list(self.turnpoints)
        turnpoints[index] = _replace(turnpoints[index], observation_zone=zone)
        return _replace(self, turnpoints=tuple(turnpoints))

    def with_default_observation_zones(self) -> "Task":
        """Return a copy where turnpoints without a zone get the conventional default.

        Takeoff points towards the next point, interior points get a
        symmetric 45° sector and landing points back to the previous one.
        Zones that are already set are kept.
        """
        last = len(self.turnpoints) - 1
        turnpoints = []
        for i, tp in enumerate(self.turnpoints):
            if tp.observation_zone is None:
                if i == 0:
                    zone = DEFAULT_TAKEOFF_ZONE
                elif i == last:
                    zone = DEFAULT_LANDING_ZONE
                else:
                    zone = DEFAULT_TURNPOINT_ZONE
                tp = _replace(tp, observation_zone=zone)
            turnpoints.append(tp)
        return _replace(self, turnpoints=tuple(turnpoints))


class Document(BaseModel):
    """A parsed CUP file: waypoints and tasks in file order."""
    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    waypoints: tuple[Waypoint, ...] = ()
    tasks: tuple[Task, ...] = ()

    def find_waypoints(self, title: str) -> list[Waypoint]:
        return [wp for wp in self.waypoints if wp.title == title]

    def with_default_observation_zones(self) -> "Document":
        return _replace(
            self, tasks=tuple(t.with_default_observation_zones() for t in self.tasks)
        )
