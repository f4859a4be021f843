from __future__ import annotations

from typing import Any, Sequence

from ..common.validators import require_max_length, require_non_empty
from ..core.constants import DEFAULT_TASK_COLOR, MAX_PROJECT_NAME_LENGTH
from ..core.exceptions import NotFoundError, ValidationError
from .model import Project, ProjectTask
from .repository import ProjectRepository


def normalize_project_tasks(raw: Any) -> tuple[ProjectTask, ...]:
    if not isinstance(raw, (list, tuple)):
        return ()
    out = []
    for t in raw:
        if isinstance(t, str):
            name, hour, color = t.strip(), 0, DEFAULT_TASK_COLOR
        elif isinstance(t, dict):
            name = str(t.get("name") or "").strip()
            hour = t.get("hour") or 0
            color = t.get("color") or DEFAULT_TASK_COLOR
        else:
            continue
        if name:
            out.append(ProjectTask(name=name, hour=hour, color=color))
    return tuple(out)


class ProjectService:
    """Personal goals and their task lists, always scoped to the owner."""

    def __init__(self, projects: ProjectRepository):
        self._projects = projects

    def create(self, *, owner_id: int, name: str, description: str = "", tasks: Any = None) -> Project:
        name = require_max_length(require_non_empty(name, "Project name"), "Project name", MAX_PROJECT_NAME_LENGTH)
        if description is not None and not isinstance(description, str):
            raise ValidationError("Description must be a string")
        project_id = self._projects.create_project(
            user_id=int(owner_id),
            name=name,
            description=(description or "").strip(),
            tasks=normalize_project_tasks(tasks),
        )
        return self._projects.get_for_owner(project_id=project_id, user_id=int(owner_id))

    def list_for_owner(self, *, owner_id: int) -> Sequence[Project]:
        return self._projects.list_for_owner(int(owner_id))

    def _get_owned(self, owner_id: int, project_id: int) -> Project:
        project = self._projects.get_for_owner(project_id=int(project_id), user_id=int(owner_id))
        if not project:
            raise NotFoundError("Project not found")
        return project

    def list_tasks(self, *, owner_id: int, project_id: int) -> Sequence[ProjectTask]:
        return self._get_owned(owner_id, project_id).tasks

    def add_task(self, *, owner_id: int, project_id: int, name: str) -> Sequence[ProjectTask]:
        name = name.strip() if isinstance(name, str) else ""
        if not name:
            raise ValidationError("Task name required")

        project = self._get_owned(owner_id, project_id)
        if not self._projects.append_task(project_id=project.project_id, user_id=project.user_id, task=ProjectTask(name=name)):
            raise NotFoundError("Project not found")
        return self._get_owned(owner_id, project_id).tasks
