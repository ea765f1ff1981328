"""API models for AsanaChat."""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any

from pydantic import BaseModel


def parse_timestamp(value: str | None) -> datetime | None:
    """Parse an Asana ISO-8601 timestamp (e.g. 2024-01-01T12:00:00.000Z)."""
    if not value:
        return None
    return datetime.fromisoformat(value)


def parse_date(value: str | None) -> date | None:
    """Parse an Asana calendar date (YYYY-MM-DD)."""
    if not value:
        return None
    return date.fromisoformat(value)


@dataclass
class Assignee:
    """Asana user a task is assigned to."""

    id: str
    name: str


@dataclass
class Workspace:
    """Asana workspace."""

    id: str
    name: str = ""

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "Workspace":
        return cls(id=data["gid"], name=data.get("name") or "")


@dataclass
class Project:
    """Asana project."""

    id: str
    name: str

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "Project":
        return cls(id=data["gid"], name=data.get("name") or "")


@dataclass
class Task:
    """Request-scoped copy of an Asana task."""

    id: str  # Asana gid
    name: str
    completed: bool = False
    due_on: date | None = None  # No time component
    notes: str | None = None
    assignee: Assignee | None = None
    created_at: datetime | None = None
    modified_at: datetime | None = None
    completed_at: datetime | None = None
    tags: list[str] = field(default_factory=list)

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "Task":
        """Build a Task from an Asana task record."""
        assignee_data = data.get("assignee")
        assignee = None
        if assignee_data:
            assignee = Assignee(id=assignee_data.get("gid", ""), name=assignee_data.get("name", ""))

        return cls(
            id=data["gid"],
            name=data.get("name") or "",
            completed=bool(data.get("completed")),
            due_on=parse_date(data.get("due_on")),
            notes=data.get("notes") or None,
            assignee=assignee,
            created_at=parse_timestamp(data.get("created_at")),
            modified_at=parse_timestamp(data.get("modified_at")),
            completed_at=parse_timestamp(data.get("completed_at")),
            tags=[tag["name"] for tag in data.get("tags") or [] if tag.get("name")],
        )


class ChatRequest(BaseModel):
    """Request model for a chat message."""

    message: str
    user_id: str = "anonymous"


class ChatResponse(BaseModel):
    """API response model for a chat reply."""

    reply: str


class CallbackResponse(BaseModel):
    """API response model for a completed OAuth callback."""

    status: str
    user_id: str
