from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Closed set of roles used for authorization."""

    EMPLOYEE = "employee"
    SUPERVISOR = "supervisor"
    SUPERADMIN = "superadmin"


class EntryStatus(str, Enum):
    """Approval state of a time entry. APPROVED and REJECTED are terminal."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"

    @property
    def is_terminal(self) -> bool:
        return self is not EntryStatus.PENDING
