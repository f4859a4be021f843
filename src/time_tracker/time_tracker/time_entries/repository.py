from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import EntryStatus
from .model import Task, TimeEntry


class TimeEntryRepository(Protocol):
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
        """Insert a new entry. Status is always PENDING."""

        raise NotImplementedError

    def get_by_id(self, entry_id: int) -> Optional[TimeEntry]:
        raise NotImplementedError

    def list_by_owner(self, user_id: int) -> Sequence[TimeEntry]:
        raise NotImplementedError

    def list_by_supervisor(
        self,
        supervisor_id: int,
        *,
        employee_id: Optional[int] = None,
        status: Optional[EntryStatus] = None,
    ) -> Sequence[TimeEntry]:
        """Entries whose snapshotted supervisor matches, newest work date first."""

        raise NotImplementedError

    def list_all(self) -> Sequence[TimeEntry]:
        raise NotImplementedError

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
        """Atomic transition out of PENDING.

        Applies only while the entry is still PENDING and still snapshotted to
        ``expected_supervisor_id``. Returns False when nothing was updated.
        """

        raise NotImplementedError

    def reassign_pending(self, *, from_supervisor_id: int, to_supervisor_id: int) -> int:
        raise NotImplementedError
