"""Session state for the seeyou-cup MCP server.

Holds the document currently loaded, where it came from, and the settings
used when exporting it.
"""

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from seeyou_cup.models import Document


class ExportSettings(BaseModel):
    model_config = ConfigDict(validate_assignment=True)

    newline: Literal["lf", "crlf"] = "crlf"
    default_zones: bool = False


class SessionState(BaseModel):
    document: Optional[Document] = None
    source: Optional[str] = None
    export: ExportSettings = Field(default_factory=ExportSettings)

    def summary(self) -> dict:
        doc = self.document
        return {
            "document": {
                "loaded": True,
                "source": self.source,
                "waypoints": len(doc.waypoints),
                "tasks": len(doc.tasks),
                "task_names": [t.name for t in doc.tasks],
            } if doc is not None else {"loaded": False},
            "export": self.export.model_dump(),
        }


# One session per MCP server process
state = SessionState()
