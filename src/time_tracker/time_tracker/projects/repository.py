from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Project, ProjectTask


class ProjectRepository(Protocol):
    def create_project(self, *, user_id: int, name: str, description: str, tasks: Sequence[ProjectTask]) -> int:
        raise NotImplementedError

    def get_for_owner(self, *, project_id: int, user_id: int) -> Optional[Project]:
        raise NotImplementedError

    def list_for_owner(self, user_id: int) -> Sequence[Project]:
        """Newest first."""

        raise NotImplementedError

    def append_task(self, *, project_id: int, user_id: int, task: ProjectTask) -> bool:
        """Atomically push one task onto the owner's project."""

        raise NotImplementedError
