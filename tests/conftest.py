"""In-memory repositories standing in for MySQL.

The conditional writes mirror the ``WHERE`` clauses of the MySQL
repositories, so the services see the same "0 rows updated" answers.
"""

from __future__ import annotations

import threading
from dataclasses import replace
from datetime import datetime
from typing import Optional

import pytest
from werkzeug.security import generate_password_hash

from src.time_tracker.time_tracker.authorization.gateway import AuthorizationGateway
from src.time_tracker.time_tracker.container import wire_services
from src.time_tracker.time_tracker.core.enums import EntryStatus, Role
from src.time_tracker.time_tracker.projects.model import Project
from src.time_tracker.time_tracker.time_entries.model import TimeEntry
from src.time_tracker.time_tracker.users.model import User

FAST_HASH = "pbkdf2:sha256:1000"


class InMemoryUsers:
    def __init__(self):
        self._next_id = 1
        self.by_id: dict[int, User] = {}

    def add(
        self,
        name: str,
        email: str,
        role,
        *,
        supervisor_id: Optional[int] = None,
        password: str = "secret123",
    ) -> User:
        user = User(
            user_id=self._next_id,
            name=name,
            email=email.lower(),
            password_hash=generate_password_hash(password, method=FAST_HASH),
            role=role,
            supervisor_id=supervisor_id,
        )
        self.by_id[user.user_id] = user
        self._next_id += 1
        return user

    def get_by_id(self, user_id: int) -> Optional[User]:
        return self.by_id.get(int(user_id))

    def get_by_email(self, email: str) -> Optional[User]:
        return next((u for u in self.by_id.values() if u.email == email), None)

    def create_user(self, *, name, email, password_hash, role) -> int:
        user = User(user_id=self._next_id, name=name, email=email, password_hash=password_hash, role=role)
        self.by_id[user.user_id] = user
        self._next_id += 1
        return user.user_id

    def touch_last_login(self, user_id, *, at: datetime) -> bool:
        user = self.by_id.get(int(user_id))
        if not user:
            return False
        self.by_id[user.user_id] = replace(user, last_login_at=at)
        return True

    def assign_supervisor(self, *, employee_id, supervisor_id) -> bool:
        user = self.by_id.get(int(employee_id))
        if not user or user.role is not Role.EMPLOYEE or user.supervisor_id is not None:
            return False
        self.by_id[user.user_id] = replace(user, supervisor_id=int(supervisor_id))
        return True

    def clear_supervisor(self, *, employee_id, expected_supervisor_id) -> bool:
        user = self.by_id.get(int(employee_id))
        if not user or user.supervisor_id != int(expected_supervisor_id):
            return False
        self.by_id[user.user_id] = replace(user, supervisor_id=None)
        return True

    def list_by_supervisor(self, supervisor_id):
        return sorted((u for u in self.by_id.values() if u.supervisor_id == int(supervisor_id)), key=lambda u: u.name)

    def list_by_role(self, role):
        return sorted((u for u in self.by_id.values() if u.role is role), key=lambda u: u.name)

    def delete_supervisor(self, supervisor_id) -> int:
        sid = int(supervisor_id)
        team = [u for u in self.by_id.values() if u.supervisor_id == sid]
        for u in team:
            self.by_id[u.user_id] = replace(u, supervisor_id=None)
        self.by_id.pop(sid, None)
        return len(team)


class InMemoryTimeEntries:
    def __init__(self, users: InMemoryUsers):
        self._users = users
        self._next_id = 1
        self._lock = threading.Lock()
        self.rows: dict[int, TimeEntry] = {}

    def _with_owner(self, entry: TimeEntry) -> TimeEntry:
        owner = self._users.get_by_id(entry.user_id)
        if not owner:
            return entry
        return replace(entry, owner_name=owner.name, owner_email=owner.email)

    def _sorted(self, rows):
        ordered = sorted(rows, key=lambda e: (e.work_date, e.entry_id), reverse=True)
        return [self._with_owner(e) for e in ordered]

    def create_entry(self, *, user_id, work_date, minutes, tasks, project, supervisor_id) -> int:
        with self._lock:
            entry = TimeEntry(
                entry_id=self._next_id,
                user_id=int(user_id),
                work_date=work_date,
                minutes=minutes,
                project=project,
                status=EntryStatus.PENDING,
                supervisor_id=supervisor_id,
                tasks=tuple(tasks),
                created_at=datetime(2024, 3, 1, 9, 0, 0),
            )
            self.rows[entry.entry_id] = entry
            self._next_id += 1
            return entry.entry_id

    def get_by_id(self, entry_id):
        entry = self.rows.get(int(entry_id))
        return self._with_owner(entry) if entry else None

    def list_by_owner(self, user_id):
        return self._sorted(e for e in self.rows.values() if e.user_id == int(user_id))

    def list_by_supervisor(self, supervisor_id, *, employee_id=None, status=None):
        return self._sorted(
            e
            for e in self.rows.values()
            if e.supervisor_id == int(supervisor_id)
            and (employee_id is None or e.user_id == int(employee_id))
            and (status is None or e.status is status)
        )

    def list_all(self):
        return self._sorted(self.rows.values())

    def decide(self, *, entry_id, expected_supervisor_id, status, decided_by, approved_at=None, rejection_reason=None):
        with self._lock:
            entry = self.rows.get(int(entry_id))
            if (
                not entry
                or entry.status is not EntryStatus.PENDING
                or entry.supervisor_id != int(expected_supervisor_id)
            ):
                return False
            self.rows[entry.entry_id] = replace(
                entry,
                status=status,
                approved_by=decided_by,
                approved_at=approved_at,
                rejection_reason=rejection_reason,
            )
            return True

    def reassign_pending(self, *, from_supervisor_id, to_supervisor_id) -> int:
        with self._lock:
            moved = 0
            for e in list(self.rows.values()):
                if e.supervisor_id == int(from_supervisor_id) and e.status is EntryStatus.PENDING:
                    self.rows[e.entry_id] = replace(e, supervisor_id=int(to_supervisor_id))
                    moved += 1
            return moved


class InMemoryProjects:
    def __init__(self):
        self._next_id = 1
        self.rows: dict[int, Project] = {}

    def create_project(self, *, user_id, name, description, tasks) -> int:
        project = Project(
            project_id=self._next_id,
            user_id=int(user_id),
            name=name,
            description=description,
            tasks=tuple(tasks),
            created_at=datetime(2024, 3, 1, 9, 0, self._next_id % 60),
        )
        self.rows[project.project_id] = project
        self._next_id += 1
        return project.project_id

    def get_for_owner(self, *, project_id, user_id):
        p = self.rows.get(int(project_id))
        return p if p and p.user_id == int(user_id) else None

    def list_for_owner(self, user_id):
        mine = [p for p in self.rows.values() if p.user_id == int(user_id)]
        return sorted(mine, key=lambda p: (p.created_at, p.project_id), reverse=True)

    def append_task(self, *, project_id, user_id, task) -> bool:
        p = self.get_for_owner(project_id=project_id, user_id=user_id)
        if not p:
            return False
        self.rows[p.project_id] = replace(p, tasks=p.tasks + (task,))
        return True


@pytest.fixture
def users_repo():
    return InMemoryUsers()


@pytest.fixture
def entries_repo(users_repo):
    return InMemoryTimeEntries(users_repo)


@pytest.fixture
def projects_repo():
    return InMemoryProjects()


@pytest.fixture
def gateway(users_repo):
    return AuthorizationGateway(users_repo)


@pytest.fixture
def container(users_repo, entries_repo, projects_repo):
    return wire_services(users_repo=users_repo, entries_repo=entries_repo, projects_repo=projects_repo)


@pytest.fixture
def org(users_repo):
    """A small organization: one superadmin, two supervisors, three employees.

    alice -> bob, dave -> bob, carol -> erin.
    """

    admin = users_repo.add("Admin", "admin@example.com", Role.SUPERADMIN)
    bob = users_repo.add("Bob", "bob@example.com", Role.SUPERVISOR)
    erin = users_repo.add("Erin", "erin@example.com", Role.SUPERVISOR)
    alice = users_repo.add("Alice", "alice@example.com", Role.EMPLOYEE, supervisor_id=bob.user_id)
    dave = users_repo.add("Dave", "dave@example.com", Role.EMPLOYEE, supervisor_id=bob.user_id)
    carol = users_repo.add("Carol", "carol@example.com", Role.EMPLOYEE, supervisor_id=erin.user_id)
    frank = users_repo.add("Frank", "frank@example.com", Role.EMPLOYEE)
    return {
        "admin": admin,
        "bob": bob,
        "erin": erin,
        "alice": alice,
        "dave": dave,
        "carol": carol,
        "frank": frank,
    }


@pytest.fixture
def fresh(users_repo):
    """Re-read a user so tests see the current stored state."""

    def _fresh(user: User) -> User:
        return users_repo.get_by_id(user.user_id)

    return _fresh
