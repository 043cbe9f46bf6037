# src/taskmind/tasks/task_models.py

from __future__ import annotations

import uuid
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any


def utc_now_iso() -> str:
    """Current instant as an ISO-8601 UTC string with millisecond precision."""
    return datetime.now(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def new_task_id() -> str:
    return str(uuid.uuid4())


@dataclass(slots=True)
class Task:
    """
    One entry of the flat task collection.

    Notes:
    - parent_id is None for root tasks; subtasks point at a root task id.
    - ai_generated is set only for tasks produced by the breakdown flow.
    - estimated_minutes is accepted from persisted/incoming data but never filled in.
    """

    id: str
    title: str
    completed: bool
    created_at: str

    parent_id: str | None = None
    ai_generated: bool | None = None
    estimated_minutes: float | None = None

    @property
    def is_root(self) -> bool:
        return not self.parent_id

    def to_dict(self) -> dict[str, Any]:
        # camelCase keys: the persisted/HTTP shape.
        out: dict[str, Any] = {
            "id": self.id,
            "title": self.title,
            "completed": self.completed,
            "createdAt": self.created_at,
        }
        if self.parent_id:
            out["parentId"] = self.parent_id
        if self.ai_generated is not None:
            out["aiGenerated"] = self.ai_generated
        if self.estimated_minutes is not None:
            out["estimatedMinutes"] = self.estimated_minutes
        return out

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Task:
        """
        Lenient decoder for persisted or incoming task dicts.

        Missing ids get a fresh one, missing timestamps get "now".
        """
        raw_id = data.get("id")
        raw_parent = data.get("parentId")
        raw_ai = data.get("aiGenerated")
        raw_minutes = data.get("estimatedMinutes")

        minutes: float | None
        try:
            minutes = float(raw_minutes) if raw_minutes is not None else None
        except (TypeError, ValueError):
            minutes = None

        return cls(
            id=str(raw_id) if raw_id else new_task_id(),
            title=str(data.get("title") or "").strip(),
            completed=bool(data.get("completed", False)),
            created_at=str(data.get("createdAt") or utc_now_iso()),
            parent_id=str(raw_parent) if raw_parent else None,
            ai_generated=bool(raw_ai) if raw_ai is not None else None,
            estimated_minutes=minutes,
        )


@dataclass(slots=True)
class Plan:
    """The day plan: opaque model text plus the moment it was stored."""

    text: str
    saved_at: str

    def to_dict(self) -> dict[str, Any]:
        return {"text": self.text, "savedAt": self.saved_at}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Plan | None:
        text = data.get("text")
        if not isinstance(text, str):
            return None
        return cls(text=text, saved_at=str(data.get("savedAt") or ""))
