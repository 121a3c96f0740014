"""Tests for GPX interchange."""
import logging

import gpxpy
import pytest

from seeyou_cup.core.gpx import document_to_gpx, gpx_to_document
from seeyou_cup.models import Document, Task, Turnpoint, Waypoint


def _document() -> Document:
    return Document(
        waypoints=[
            Waypoint(title="Terlet", code="EHTL", latitude=52.0572, longitude=5.9244,
                     elevation_meters=83, style="1", description="Glider field"),
            Waypoint(title="Ithwiesen", code="EDVT", latitude=51.9511167, longitude=9.66195,
                     elevation_meters=372),
        ],
        tasks=[Task(name="Retour", turnpoints=[
            Turnpoint(waypoint_name="Terlet"),
            Turnpoint(waypoint_name="Ithwiesen"),
            Turnpoint(waypoint_name="Terlet"),
        ])],
    )


def test_export_waypoints_and_routes():
    gpx = gpxpy.parse(document_to_gpx(_document()))
    assert [w.name for w in gpx.waypoints] == ["Terlet", "Ithwiesen"]
    terlet = gpx.waypoints[0]
    assert terlet.latitude == pytest.approx(52.0572)
    assert terlet.elevation == pytest.approx(83.0)
    assert terlet.description == "Glider field"
    assert terlet.comment == "EHTL"

    assert len(gpx.routes) == 1
    route = gpx.routes[0]
    assert route.name == "Retour"
    assert [p.name for p in route.points] == ["Terlet", "Ithwiesen", "Terlet"]


def test_unresolved_route_names_are_skipped_and_logged(caplog):
    doc = Document(
        waypoints=[Waypoint(title="A", latitude=1.0, longitude=1.0)],
        tasks=[Task(name="T", turnpoints=[
            Turnpoint(waypoint_name="A"), Turnpoint(waypoint_name="???"),
        ])],
    )
    with caplog.at_level(logging.WARNING, logger="seeyou_cup.core.gpx"):
        gpx = gpxpy.parse(document_to_gpx(doc))
    assert [p.name for p in gpx.routes[0].points] == ["A"]
    assert any(r.levelno == logging.WARNING and "???" in r.getMessage() for r in caplog.records)


def test_import_back_from_gpx():
    doc = gpx_to_document(document_to_gpx(_document()))
    assert [wp.title for wp in doc.waypoints] == ["Terlet", "Ithwiesen"]
    assert doc.waypoints[0].code == "EHTL"
    assert doc.waypoints[0].style == "1"
    assert doc.waypoints[0].elevation_meters == pytest.approx(83.0)
    assert doc.waypoints[1].description is None
    assert doc.tasks[0].name == "Retour"
    assert doc.tasks[0].waypoint_names == ["Terlet", "Ithwiesen", "Terlet"]


def test_import_unnamed_route():
    text = """<?xml version="1.0" encoding="UTF-8"?>
<gpx version="1.1" creator="test" xmlns="http://www.topografix.com/GPX/1/1">
  <wpt lat="47.6" lon="-122.3"><name>Summit</name></wpt>
  <rte>
    <rtept lat="47.6" lon="-122.3"><name>Summit</name></rtept>
    <rtept lat="47.7" lon="-122.2"></rtept>
  </rte>
</gpx>"""
    doc = gpx_to_document(text)
    assert doc.waypoints[0].title == "Summit"
    assert doc.waypoints[0].elevation_meters is None
    assert doc.tasks[0].name == "Route 1"
    assert doc.tasks[0].waypoint_names == ["Summit"]
