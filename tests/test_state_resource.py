"""Tests for state://session MCP resource."""
import json


def test_state_resource_registered():
    from seeyou_cup.server import mcp

    resources = {str(r.uri): r for r in mcp._resource_manager._resources.values()}
    assert "state://session" in resources, (
        f"state://session not registered. Registered: {list(resources.keys())}"
    )


def test_state_resource_content_matches_summary():
    """Resource content should return valid JSON with expected keys."""
    from seeyou_cup.server import mcp
    from seeyou_cup.state import state

    resources = {str(r.uri): r for r in mcp._resource_manager._resources.values()}
    resource = resources.get("state://session")
    assert resource is not None

    result = resource.fn()
    parsed = json.loads(result)
    expected = state.summary()
    assert parsed.keys() == expected.keys()


def test_summary_reports_loaded_document():
    from seeyou_cup.state import SessionState
    from seeyou_cup.models import Document, Task

    s = SessionState(document=Document(tasks=[Task(name="T")]), source="x.cup")
    summary = s.summary()
    assert summary["document"]["loaded"] is True
    assert summary["document"]["tasks"] == 1
    assert summary["document"]["task_names"] == ["T"]
    assert summary["export"]["newline"] == "crlf"


def test_summary_without_document():
    from seeyou_cup.state import SessionState
    assert SessionState().summary()["document"] == {"loaded": False}
