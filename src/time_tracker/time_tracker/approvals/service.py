from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Optional

from ..authorization.gateway import Action, AuthorizationGateway
from ..common.datetime_utils import now_utc
from ..common.validators import require_max_length
from ..core.constants import DEFAULT_REJECTION_REASON, MAX_REJECTION_REASON_LENGTH
from ..core.enums import EntryStatus
from ..core.exceptions import AuthorizationError, ConflictError, NotFoundError
from ..time_entries.model import TimeEntry
from ..time_entries.repository import TimeEntryRepository
from ..users.model import User
from ..users.repository import UserRepository
from ..users.service import load_supervisor

logger = logging.getLogger(__name__)


class ApprovalService:
    """State machine for time entries: PENDING -> APPROVED | REJECTED.

    Both terminal states are final. Only the supervisor snapshotted on the
    entry may decide it, and the write is conditional on the entry still being
    PENDING, so of two racing decisions exactly one wins.
    """

    def __init__(
        self,
        entries: TimeEntryRepository,
        users: UserRepository,
        gateway: AuthorizationGateway,
        *,
        clock: Callable[[], datetime] = now_utc,
    ):
        self._entries = entries
        self._users = users
        self._gateway = gateway
        self._clock = clock

    def _load_decidable(self, requester: User, entry_id: int, *, verb: str) -> TimeEntry:
        self._gateway.require(requester, Action.DECIDE_ENTRY)

        entry = self._entries.get_by_id(int(entry_id))
        if not entry:
            raise NotFoundError("Time entry not found.")
        if entry.supervisor_id != requester.user_id:
            raise AuthorizationError(f"You can only {verb} entries from your team.")
        if entry.status is not EntryStatus.PENDING:
            raise ConflictError(f"Time entry is already {entry.status.value}.")
        return entry

    def _transition(
        self,
        requester: User,
        entry: TimeEntry,
        status: EntryStatus,
        *,
        approved_at: Optional[datetime] = None,
        rejection_reason: Optional[str] = None,
    ) -> TimeEntry:
        ok = self._entries.decide(
            entry_id=entry.entry_id,
            expected_supervisor_id=requester.user_id,
            status=status,
            decided_by=requester.user_id,
            approved_at=approved_at,
            rejection_reason=rejection_reason,
        )
        if not ok:
            # Lost a race: another decision (or a reassignment) landed first.
            current = self._entries.get_by_id(entry.entry_id)
            state = current.status.value if current else "gone"
            raise ConflictError(f"Time entry is already {state}.")

        logger.info("time entry %s %s by supervisor user_id=%s", entry.entry_id, status.value, requester.user_id)
        return self._entries.get_by_id(entry.entry_id)

    def approve(self, *, requester: User, entry_id: int) -> TimeEntry:
        entry = self._load_decidable(requester, entry_id, verb="approve")
        return self._transition(requester, entry, EntryStatus.APPROVED, approved_at=self._clock())

    def reject(self, *, requester: User, entry_id: int, reason: Optional[str] = None) -> TimeEntry:
        entry = self._load_decidable(requester, entry_id, verb="reject")
        reason = reason.strip() if isinstance(reason, str) else ""
        require_max_length(reason, "Reason", MAX_REJECTION_REASON_LENGTH)
        return self._transition(
            requester,
            entry,
            EntryStatus.REJECTED,
            rejection_reason=reason or DEFAULT_REJECTION_REASON,
        )

    def reassign_pending_entries(self, *, requester: User, from_supervisor_id: int, to_supervisor_id: int) -> int:
        """Move still-pending entries to another supervisor.

        ``from_supervisor_id`` may belong to a deleted supervisor; that is the
        usual reason to call this. Decided entries keep their snapshot.
        """

        self._gateway.require(requester, Action.REASSIGN_ENTRIES)
        target = load_supervisor(self._users, to_supervisor_id)
        if int(from_supervisor_id) == target.user_id:
            return 0

        moved = self._entries.reassign_pending(
            from_supervisor_id=int(from_supervisor_id),
            to_supervisor_id=target.user_id,
        )
        logger.info(
            "%s pending entries moved from supervisor_id=%s to supervisor_id=%s by user_id=%s",
            moved,
            from_supervisor_id,
            target.user_id,
            requester.user_id,
        )
        return moved
