from __future__ import annotations

import logging
from typing import Optional, Sequence

from ..authorization.gateway import Action, AuthorizationGateway
from ..common.datetime_utils import coerce_work_date
from ..common.validators import require_max_length, require_positive_minutes
from ..core.constants import DEFAULT_PROJECT_NAME, MAX_PROJECT_NAME_LENGTH
from ..core.enums import EntryStatus, Role
from ..core.exceptions import NotFoundError, ValidationError
from ..users.model import User
from ..users.repository import UserRepository
from ..users.roles import is_role
from ..users.service import load_supervisor
from .model import NewTimeEntry, Task, TimeEntry
from .repository import TimeEntryRepository

logger = logging.getLogger(__name__)


def _normalize_tasks(raw) -> tuple[Task, ...]:
    if raw is None:
        return ()
    if not isinstance(raw, (list, tuple)) or not all(isinstance(t, (str, dict)) for t in raw):
        raise ValidationError("Tasks must be a list of task objects")
    return tuple(Task.from_payload(t) for t in raw)


class TimeEntryService:
    """Create and query time entries.

    The plain operations (``create``, ``list_by_*``) do no authorization; the
    requester-aware wrappers below them are what the HTTP layer calls.
    """

    def __init__(self, entries: TimeEntryRepository, users: UserRepository, gateway: AuthorizationGateway):
        self._entries = entries
        self._users = users
        self._gateway = gateway

    def create(self, owner_id: int, data: NewTimeEntry) -> TimeEntry:
        minutes = require_positive_minutes(data.minutes)
        work_date = coerce_work_date(data.work_date)
        project = data.project.strip() if isinstance(data.project, str) else ""
        project = require_max_length(project or DEFAULT_PROJECT_NAME, "Project", MAX_PROJECT_NAME_LENGTH)
        tasks = _normalize_tasks(data.tasks)

        owner = self._users.get_by_id(int(owner_id))
        if not owner:
            raise NotFoundError("User not found")

        # Snapshot: the approver pool is whoever supervises the owner right now.
        supervisor_id = owner.supervisor_id
        if supervisor_id is None:
            logger.warning("time entry submitted by user_id=%s without an assigned supervisor", owner.user_id)

        entry_id = self._entries.create_entry(
            user_id=owner.user_id,
            work_date=work_date,
            minutes=minutes,
            tasks=tasks,
            project=project,
            supervisor_id=supervisor_id,
        )
        logger.info(
            "time entry %s created for user_id=%s (%s min, supervisor_id=%s)",
            entry_id,
            owner.user_id,
            minutes,
            supervisor_id,
        )
        return self._entries.get_by_id(entry_id)

    def list_by_owner(self, owner_id: int) -> Sequence[TimeEntry]:
        return self._entries.list_by_owner(int(owner_id))

    def list_by_supervisor(self, supervisor_id: int, *, employee_id: Optional[int] = None) -> Sequence[TimeEntry]:
        return self._entries.list_by_supervisor(int(supervisor_id), employee_id=employee_id)

    def list_pending_by_supervisor(self, supervisor_id: int) -> Sequence[TimeEntry]:
        return self._entries.list_by_supervisor(int(supervisor_id), status=EntryStatus.PENDING)

    def list_all(self) -> Sequence[TimeEntry]:
        return self._entries.list_all()

    # -------- requester-aware operations --------
    def submit(self, *, requester: User, data: NewTimeEntry) -> TimeEntry:
        self._gateway.require(requester, Action.SUBMIT_ENTRY)
        return self.create(requester.user_id, data)

    def list_mine(self, *, requester: User) -> Sequence[TimeEntry]:
        self._gateway.require(requester, Action.VIEW_OWN_ENTRIES)
        return self.list_by_owner(requester.user_id)

    def resolve_team_scope(self, requester: User, supervisor_id: Optional[int]) -> int:
        """Which supervisor's entries the requester may read.

        Supervisors always read their own team. Superadmins must name a
        supervisor explicitly.
        """

        self._gateway.require(requester, Action.VIEW_TEAM_ENTRIES)
        if is_role(requester, Role.SUPERADMIN):
            if supervisor_id is None:
                raise ValidationError("supervisorId is required")
            return load_supervisor(self._users, supervisor_id).user_id

        target = requester.user_id if supervisor_id is None else int(supervisor_id)
        self._gateway.require_team_reach(requester, target)
        return target

    def list_team(
        self,
        *,
        requester: User,
        supervisor_id: Optional[int] = None,
        employee_id: Optional[int] = None,
    ) -> Sequence[TimeEntry]:
        target = self.resolve_team_scope(requester, supervisor_id)
        return self.list_by_supervisor(target, employee_id=employee_id)

    def list_pending(self, *, requester: User, supervisor_id: Optional[int] = None) -> Sequence[TimeEntry]:
        target = self.resolve_team_scope(requester, supervisor_id)
        return self.list_pending_by_supervisor(target)
