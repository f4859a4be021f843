from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import User
from .repository import UserRepository
from .roles import parse_role

_COLUMNS = "user_id, name, email, password_hash, role, supervisor_id, last_login_at, created_at"


def _to_user(row: dict) -> User:
    return User(
        user_id=int(row["user_id"]),
        name=row["name"],
        email=row["email"],
        password_hash=row["password_hash"],
        role=parse_role(row["role"]),
        supervisor_id=int(row["supervisor_id"]) if row.get("supervisor_id") is not None else None,
        last_login_at=row.get("last_login_at"),
        created_at=row.get("created_at"),
    )


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, user_id: int) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM users WHERE user_id=%s", (int(user_id),))
            row = fetchone(cur)
            return _to_user(row) if row else None

    def get_by_email(self, email: str) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM users WHERE email=%s", (email.strip().lower(),))
            row = fetchone(cur)
            return _to_user(row) if row else None

    def create_user(self, *, name: str, email: str, password_hash: str, role: Role) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO users(name, email, password_hash, role, supervisor_id)
                VALUES(%s,%s,%s,%s,NULL)
                """,
                (name, email, password_hash, role.value),
            )
            return int(cur.lastrowid)

    def touch_last_login(self, user_id: int, *, at: datetime) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE users SET last_login_at=%s WHERE user_id=%s", (at, int(user_id)))
            return cur.rowcount > 0

    def assign_supervisor(self, *, employee_id: int, supervisor_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE users
                SET supervisor_id=%s
                WHERE user_id=%s AND role=%s AND supervisor_id IS NULL
                """,
                (int(supervisor_id), int(employee_id), Role.EMPLOYEE.value),
            )
            return cur.rowcount > 0

    def clear_supervisor(self, *, employee_id: int, expected_supervisor_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE users SET supervisor_id=NULL WHERE user_id=%s AND supervisor_id=%s",
                (int(employee_id), int(expected_supervisor_id)),
            )
            return cur.rowcount > 0

    def list_by_supervisor(self, supervisor_id: int) -> Sequence[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM users WHERE supervisor_id=%s ORDER BY name ASC",
                (int(supervisor_id),),
            )
            return [_to_user(r) for r in fetchall(cur)]

    def list_by_role(self, role: Role) -> Sequence[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM users WHERE role=%s ORDER BY name ASC", (role.value,))
            return [_to_user(r) for r in fetchall(cur)]

    def delete_supervisor(self, supervisor_id: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE users SET supervisor_id=NULL WHERE supervisor_id=%s", (int(supervisor_id),))
            unassigned = int(cur.rowcount or 0)
            cur.execute(
                "DELETE FROM users WHERE user_id=%s AND role=%s",
                (int(supervisor_id), Role.SUPERVISOR.value),
            )
            return unassigned
