from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Sequence

from ..core.enums import EntryStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, dump_json, fetchall, fetchone, load_json_list
from .model import Task, TimeEntry
from .repository import TimeEntryRepository

_SELECT = """
    SELECT e.entry_id, e.user_id, e.work_date, e.minutes, e.tasks, e.project,
           e.status, e.supervisor_id, e.approved_at, e.approved_by,
           e.rejection_reason, e.created_at,
           u.name AS owner_name, u.email AS owner_email
    FROM time_entries e
    LEFT JOIN users u ON u.user_id = e.user_id
"""


def _to_entry(r: dict) -> TimeEntry:
    return TimeEntry(
        entry_id=int(r["entry_id"]),
        user_id=int(r["user_id"]),
        work_date=r["work_date"],
        minutes=int(r["minutes"]),
        tasks=tuple(Task.from_payload(t) for t in load_json_list(r.get("tasks"))),
        project=r.get("project") or "",
        status=EntryStatus(r["status"]),
        supervisor_id=int(r["supervisor_id"]) if r.get("supervisor_id") is not None else None,
        approved_at=r.get("approved_at"),
        approved_by=int(r["approved_by"]) if r.get("approved_by") is not None else None,
        rejection_reason=r.get("rejection_reason"),
        created_at=r.get("created_at"),
        owner_name=r.get("owner_name"),
        owner_email=r.get("owner_email"),
    )


class MySQLTimeEntryRepository(TimeEntryRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create_entry(
        self,
        *,
        user_id: int,
        work_date: date,
        minutes: int,
        tasks: Sequence[Task],
        project: str,
        supervisor_id: Optional[int],
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO time_entries(user_id, work_date, minutes, tasks, project, status, supervisor_id)
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(user_id),
                    work_date,
                    int(minutes),
                    dump_json([t.to_dict() for t in tasks]),
                    project,
                    EntryStatus.PENDING.value,
                    int(supervisor_id) if supervisor_id is not None else None,
                ),
            )
            return int(cur.lastrowid)

    def get_by_id(self, entry_id: int) -> Optional[TimeEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE e.entry_id=%s", (int(entry_id),))
            r = fetchone(cur)
            return _to_entry(r) if r else None

    def list_by_owner(self, user_id: int) -> Sequence[TimeEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE e.user_id=%s ORDER BY e.work_date DESC, e.entry_id DESC", (int(user_id),))
            return [_to_entry(r) for r in fetchall(cur)]

    def list_by_supervisor(
        self,
        supervisor_id: int,
        *,
        employee_id: Optional[int] = None,
        status: Optional[EntryStatus] = None,
    ) -> Sequence[TimeEntry]:
        clauses = ["e.supervisor_id=%s"]
        params: list[object] = [int(supervisor_id)]

        if employee_id is not None:
            clauses.append("e.user_id=%s")
            params.append(int(employee_id))
        if status is not None:
            clauses.append("e.status=%s")
            params.append(status.value)

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT + f" WHERE {where} ORDER BY e.work_date DESC, e.entry_id DESC",
                tuple(params),
            )
            return [_to_entry(r) for r in fetchall(cur)]

    def list_all(self) -> Sequence[TimeEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " ORDER BY e.work_date DESC, e.entry_id DESC")
            return [_to_entry(r) for r in fetchall(cur)]

    def decide(
        self,
        *,
        entry_id: int,
        expected_supervisor_id: int,
        status: EntryStatus,
        decided_by: int,
        approved_at: Optional[datetime] = None,
        rejection_reason: Optional[str] = None,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE time_entries
                SET status=%s, approved_by=%s, approved_at=%s, rejection_reason=%s
                WHERE entry_id=%s AND supervisor_id=%s AND status=%s
                """,
                (
                    status.value,
                    int(decided_by),
                    approved_at,
                    rejection_reason,
                    int(entry_id),
                    int(expected_supervisor_id),
                    EntryStatus.PENDING.value,
                ),
            )
            return cur.rowcount > 0

    def reassign_pending(self, *, from_supervisor_id: int, to_supervisor_id: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE time_entries SET supervisor_id=%s WHERE supervisor_id=%s AND status=%s",
                (int(to_supervisor_id), int(from_supervisor_id), EntryStatus.PENDING.value),
            )
            return int(cur.rowcount or 0)
