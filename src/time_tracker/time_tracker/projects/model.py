from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional


@dataclass(frozen=True)
class ProjectTask:
    name: str
    hour: Any = 0
    color: str = "#000000"

    def to_dict(self) -> dict:
        return {"name": self.name, "hour": self.hour, "color": self.color}


@dataclass(frozen=True)
class Project:
    """A personal goal. Never shared across the team hierarchy."""

    project_id: int
    user_id: int
    name: str
    description: str = ""
    tasks: tuple[ProjectTask, ...] = field(default_factory=tuple)
    created_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "id": self.project_id,
            "userId": self.user_id,
            "name": self.name,
            "description": self.description,
            "tasks": [t.to_dict() for t in self.tasks],
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }
