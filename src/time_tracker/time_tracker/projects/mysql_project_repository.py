from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, dump_json, fetchall, fetchone, load_json_list
from .model import Project, ProjectTask
from .repository import ProjectRepository


def _to_project(r: dict) -> Project:
    return Project(
        project_id=int(r["project_id"]),
        user_id=int(r["user_id"]),
        name=r["name"],
        description=r.get("description") or "",
        tasks=tuple(
            ProjectTask(name=t.get("name", ""), hour=t.get("hour", 0), color=t.get("color") or "#000000")
            for t in load_json_list(r.get("tasks"))
        ),
        created_at=r.get("created_at"),
    )


class MySQLProjectRepository(ProjectRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create_project(self, *, user_id: int, name: str, description: str, tasks: Sequence[ProjectTask]) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO projects(user_id, name, description, tasks) VALUES(%s,%s,%s,%s)",
                (int(user_id), name, description, dump_json([t.to_dict() for t in tasks])),
            )
            return int(cur.lastrowid)

    def get_for_owner(self, *, project_id: int, user_id: int) -> Optional[Project]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT project_id, user_id, name, description, tasks, created_at
                FROM projects
                WHERE project_id=%s AND user_id=%s
                """,
                (int(project_id), int(user_id)),
            )
            r = fetchone(cur)
            return _to_project(r) if r else None

    def list_for_owner(self, user_id: int) -> Sequence[Project]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT project_id, user_id, name, description, tasks, created_at
                FROM projects
                WHERE user_id=%s
                ORDER BY created_at DESC, project_id DESC
                """,
                (int(user_id),),
            )
            return [_to_project(r) for r in fetchall(cur)]

    def append_task(self, *, project_id: int, user_id: int, task: ProjectTask) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE projects
                SET tasks = JSON_ARRAY_APPEND(COALESCE(tasks, JSON_ARRAY()), '$', CAST(%s AS JSON))
                WHERE project_id=%s AND user_id=%s
                """,
                (dump_json(task.to_dict()), int(project_id), int(user_id)),
            )
            return cur.rowcount > 0
