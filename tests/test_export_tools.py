"""Tests for export tools."""
import gpxpy
import pytest
from pathlib import Path
from unittest.mock import MagicMock

from seeyou_cup.core.parser import parse_document
from seeyou_cup.state import state, ExportSettings

CUP_TEXT = (
    "name,code,country,lat,lon,elev,style,rwdir,rwlen,freq,desc\n"
    '"Terlet","EHTL",NL,5203.432N,00555.464E,83m,1,,,,\n'
    '"Ithwiesen","EDVT",DE,5157.067N,00939.717E,372m,1,,,,\n'
    "-----Related Tasks-----\n"
    '"Retour","Terlet","Ithwiesen","Terlet"\n'
)


def _get_export_tools():
    from seeyou_cup.tools.export import register_export_tools
    tools = {}
    mock_mcp = MagicMock()
    def capture(**kwargs):
        def decorator(fn):
            tools[fn.__name__] = fn
            return fn
        return decorator
    mock_mcp.tool = capture
    register_export_tools(mock_mcp)
    return tools


@pytest.fixture(autouse=True)
def _reset_state(monkeypatch, tmp_path):
    monkeypatch.setattr(Path, "home", lambda: tmp_path)
    state.document = parse_document(CUP_TEXT)
    state.source = "<inline text>"
    state.export = ExportSettings()
    yield
    state.document = None
    state.source = None


def test_render_requires_document():
    state.document = None
    assert _get_export_tools()["render_cup"]().startswith("Error:")


def test_render_cup_uses_crlf_by_default():
    text = _get_export_tools()["render_cup"]()
    assert text.startswith("name,code,country,lat,lon,elev,style,rwdir,rwlen,freq,desc\r\n")
    assert "-----Related Tasks-----\r\n" in text
    assert text.endswith("\r\n")


def test_set_export_settings_switches_newline():
    tools = _get_export_tools()
    result = tools["set_export_settings"](newline="lf")
    assert "'newline': 'lf'" in result
    text = tools["render_cup"]()
    assert "\r\n" not in text
    assert text.endswith("\n")


def test_set_export_settings_rejects_unknown_newline():
    result = _get_export_tools()["set_export_settings"](newline="cr")
    assert result.startswith("Error:")
    assert state.export.newline == "crlf"


def test_render_with_default_zones_leaves_state_untouched():
    tools = _get_export_tools()
    tools["set_export_settings"](default_zones=True)
    text = tools["render_cup"]()
    assert "ObsZone=0,Style=2,R1=1000m,A1=180" in text
    assert "ObsZone=1,Style=1,R1=2000m,A1=45" in text
    assert "ObsZone=2,Style=3,R1=1000m,A1=180" in text
    assert state.document.tasks[0].turnpoints[0].observation_zone is None


def test_export_cup_writes_file(tmp_path):
    out = tmp_path / "out" / "task.cup"
    result = _get_export_tools()["export_cup"](output_path=str(out))
    assert "CUP exported" in result
    data = out.read_bytes()
    assert b"\r\n" in data
    reparsed = parse_document(data.decode("utf-8"))
    assert reparsed == state.document


def test_export_cup_rejects_path_outside_home(tmp_path):
    outside = tmp_path.parent / "elsewhere.cup"
    result = _get_export_tools()["export_cup"](output_path=str(outside))
    assert result.startswith("Error:")
    assert "outside the home directory" in result
    assert not outside.exists()


def test_export_gpx_writes_file(tmp_path):
    out = tmp_path / "task.gpx"
    result = _get_export_tools()["export_gpx"](output_path=str(out))
    assert "GPX exported" in result
    gpx = gpxpy.parse(out.read_text(encoding="utf-8"))
    assert len(gpx.waypoints) == 2
    assert gpx.routes[0].name == "Retour"
