from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Optional
from uuid import uuid4

from ..core.enums import EntryStatus


@dataclass(frozen=True)
class Task:
    id: str
    name: str
    hour: Any = None
    color: Optional[str] = None

    @classmethod
    def from_payload(cls, raw: Any) -> "Task":
        """Accepts the shapes clients have historically sent (``name`` or ``task``, ``id`` or ``_id``)."""

        if isinstance(raw, str):
            return cls(id=uuid4().hex, name=raw)
        raw = raw or {}
        return cls(
            id=str(raw.get("id") or raw.get("_id") or uuid4().hex),
            name=raw.get("name") or raw.get("task") or "",
            hour=raw.get("hour"),
            color=raw.get("color"),
        )

    def to_dict(self) -> dict:
        return {"id": self.id, "name": self.name, "hour": self.hour, "color": self.color}


@dataclass(frozen=True)
class TimeEntry:
    """Domain entity: one day's logged minutes for one owner.

    ``supervisor_id`` is the owner's supervisor at submission time and is the
    only user allowed to decide the entry.
    """

    entry_id: int
    user_id: int
    work_date: date
    minutes: int
    project: str
    status: EntryStatus
    supervisor_id: Optional[int]
    tasks: tuple[Task, ...] = field(default_factory=tuple)
    approved_at: Optional[datetime] = None
    approved_by: Optional[int] = None
    rejection_reason: Optional[str] = None
    created_at: Optional[datetime] = None
    owner_name: Optional[str] = None
    owner_email: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "id": self.entry_id,
            "userId": self.user_id,
            "user": {"id": self.user_id, "name": self.owner_name, "email": self.owner_email},
            "date": self.work_date.strftime("%Y-%m-%d"),
            "minutes": self.minutes,
            "tasks": [t.to_dict() for t in self.tasks],
            "project": self.project,
            "status": self.status.value,
            "supervisorId": self.supervisor_id,
            "approvedAt": self.approved_at.isoformat() if self.approved_at else None,
            "approvedBy": self.approved_by,
            "rejectionReason": self.rejection_reason,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }


@dataclass(frozen=True)
class NewTimeEntry:
    work_date: Any
    minutes: Any
    tasks: Any = None
    project: Optional[str] = None
