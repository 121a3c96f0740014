"""GPX interchange: CUP documents to and from GPX waypoints and routes."""

import logging

import gpxpy
import gpxpy.gpx

from ..models import Document, Task, Turnpoint, Waypoint

logger = logging.getLogger(__name__)


def document_to_gpx(document: Document, name: str | None = None) -> str:
    """Render waypoints as GPX waypoints and each task as a GPX route.

    Route points are looked up by waypoint title; the first waypoint with a
    matching title wins and names with no match are left out of the route.
    """
    gpx = gpxpy.gpx.GPX()
    gpx.name = name
    gpx.creator = "seeyou-cup"

    for wp in document.waypoints:
        gpx.waypoints.append(gpxpy.gpx.GPXWaypoint(
            latitude=wp.latitude,
            longitude=wp.longitude,
            elevation=wp.elevation_meters,
            name=wp.title,
            description=wp.description,
            comment=wp.code or None,
            type=wp.style,
        ))

    by_title: dict[str, Waypoint] = {}
    for wp in document.waypoints:
        by_title.setdefault(wp.title, wp)

    for task in document.tasks:
        route = gpxpy.gpx.GPXRoute(name=task.name)
        for tp in task.turnpoints:
            wp = by_title.get(tp.waypoint_name)
            if wp is None:
                logger.warning(
                    "Task %r: no waypoint titled %r, leaving it out of the route",
                    task.name, tp.waypoint_name,
                )
                continue
            route.points.append(gpxpy.gpx.GPXRoutePoint(
                latitude=wp.latitude,
                longitude=wp.longitude,
                elevation=wp.elevation_meters,
                name=wp.title,
            ))
        gpx.routes.append(route)

    return gpx.to_xml()


def gpx_to_document(text: str) -> Document:
    """Build a document from GPX text.

    Waypoints keep their name, elevation, description and comment (as the
    code). Each route becomes a task whose turnpoints reference route point
    names; route points without a name are skipped.
    """
    gpx = gpxpy.parse(text)

    waypoints = []
    for wp in gpx.waypoints:
        waypoints.append(Waypoint(
            title=wp.name or "",
            code=wp.comment or "",
            latitude=wp.latitude,
            longitude=wp.longitude,
            elevation_meters=wp.elevation,
            style=wp.type,
            description=wp.description,
        ))

    tasks = []
    for i, route in enumerate(gpx.routes, start=1):
        turnpoints = [
            Turnpoint(waypoint_name=p.name)
            for p in route.points
            if p.name and p.name.strip()
        ]
        name = (route.name or "").strip() or f"Route {i}"
        tasks.append(Task(name=name, turnpoints=turnpoints))

    return Document(waypoints=waypoints, tasks=tasks)
