"""Schema and account bootstrap used by ``scripts/`` and by AUTO_INIT_DB."""

from __future__ import annotations

import logging
import re
from contextlib import closing
from pathlib import Path
from typing import Iterator, Union

from werkzeug.security import generate_password_hash

from ..core.enums import Role
from ..core.exceptions import ConflictError
from .connection import DatabaseConnection, DBConfig

logger = logging.getLogger(__name__)

# Quoted literals first so a ';' inside them never splits a statement.
_SQL_TOKEN = re.compile(r"""'(?:\\.|[^'\\])*'|"(?:\\.|[^"\\])*"|;|[^'";]+|['"]""", re.S)


def _strip_create_db_and_use(sql: str) -> str:
    # The target database comes from DB_CONFIG, not from the script.
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    return re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)


def _strip_line_comments(sql: str) -> str:
    return re.sub(r"(?m)^\s*--.*$", "", sql)


def iter_sql_statements(sql: str) -> Iterator[str]:
    current: list[str] = []
    for token in _SQL_TOKEN.findall(sql):
        if token != ";":
            current.append(token)
            continue
        stmt = "".join(current).strip()
        current = []
        if stmt:
            yield stmt

    tail = "".join(current).strip()
    if tail:
        yield tail


def ensure_database_exists(db_config: dict) -> None:
    target = DBConfig.from_dict(db_config)
    with closing(DatabaseConnection(target).connect(with_database=False)) as conn:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{target.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
        )
        conn.commit()


def apply_schema(db_config: dict, *, schema_path: Union[str, Path]) -> None:
    target = DBConfig.from_dict(db_config)
    ensure_database_exists(db_config)

    script = _strip_line_comments(_strip_create_db_and_use(Path(schema_path).read_text(encoding="utf-8")))
    with closing(DatabaseConnection(target).connect()) as conn:
        cur = conn.cursor()
        for stmt in iter_sql_statements(script):
            cur.execute(stmt)
        conn.commit()
    logger.info("schema applied to %s", target.describe())


def _upsert_user(cur, *, name: str, email: str, password: str, role: Role) -> int:
    """Insert the account, or reset name, password and role of an existing one.

    Only employees keep a supervisor. A supervisor who still has a team cannot
    be moved to another role here; release the team first.
    """
    password_hash = generate_password_hash(password)
    cur.execute("SELECT user_id, role FROM users WHERE email=%s", (email,))
    row = cur.fetchone()
    if not row:
        cur.execute(
            "INSERT INTO users (name, email, password_hash, role) VALUES (%s, %s, %s, %s)",
            (name, email, password_hash, role.value),
        )
        return int(cur.lastrowid)

    user_id = int(row["user_id"])
    if row["role"] == Role.SUPERVISOR.value and role is not Role.SUPERVISOR:
        cur.execute("SELECT COUNT(*) AS team_size FROM users WHERE supervisor_id=%s", (user_id,))
        team_size = int(cur.fetchone()["team_size"])
        if team_size:
            raise ConflictError(f"{email} still supervises {team_size} employee(s); unassign them first")

    if role is Role.EMPLOYEE:
        cur.execute(
            "UPDATE users SET name=%s, password_hash=%s, role=%s WHERE user_id=%s",
            (name, password_hash, role.value, user_id),
        )
    else:
        cur.execute(
            "UPDATE users SET name=%s, password_hash=%s, role=%s, supervisor_id=NULL WHERE user_id=%s",
            (name, password_hash, role.value, user_id),
        )
    return user_id


def ensure_superadmin(db_config: dict, *, name: str, email: str, password: str) -> int:
    """Create (or reset) the superadmin account. Superadmins only come from here."""

    target = DBConfig.from_dict(db_config)
    with closing(DatabaseConnection(target).connect()) as conn:
        cur = conn.cursor(dictionary=True)
        user_id = _upsert_user(cur, name=name, email=email.strip().lower(), password=password, role=Role.SUPERADMIN)
        conn.commit()
    logger.info("superadmin ready (user_id=%s)", user_id)
    return user_id


def ensure_demo_users(db_config: dict) -> None:
    """Superadmin, supervisor Bob and employee Alice (on Bob's team)."""

    target = DBConfig.from_dict(db_config)
    with closing(DatabaseConnection(target).connect()) as conn:
        cur = conn.cursor(dictionary=True)
        _upsert_user(cur, name="Super Admin", email="admin@example.com", password="Admin#12345678", role=Role.SUPERADMIN)
        bob_id = _upsert_user(cur, name="Bob Supervisor", email="bob@example.com", password="bob12345", role=Role.SUPERVISOR)
        alice_id = _upsert_user(cur, name="Alice Employee", email="alice@example.com", password="alice123", role=Role.EMPLOYEE)
        cur.execute(
            "UPDATE users SET supervisor_id=%s WHERE user_id=%s AND supervisor_id IS NULL",
            (bob_id, alice_id),
        )
        conn.commit()


def list_tables(db_config: dict) -> list[str]:
    with closing(DatabaseConnection(DBConfig.from_dict(db_config)).connect()) as conn:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
