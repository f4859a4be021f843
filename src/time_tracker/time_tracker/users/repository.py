from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import Role
from .model import User


class UserRepository(Protocol):
    """Repository interface for User.

    Note (DIP): services depend on this interface, not on a concrete DB.
    """

    def get_by_id(self, user_id: int) -> Optional[User]:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[User]:
        raise NotImplementedError

    def create_user(self, *, name: str, email: str, password_hash: str, role: Role) -> int:
        raise NotImplementedError

    def touch_last_login(self, user_id: int, *, at: datetime) -> bool:
        raise NotImplementedError

    def assign_supervisor(self, *, employee_id: int, supervisor_id: int) -> bool:
        """Set supervisor_id only if the user is an employee and currently unassigned."""

        raise NotImplementedError

    def clear_supervisor(self, *, employee_id: int, expected_supervisor_id: int) -> bool:
        """Set supervisor_id to NULL only if it still equals ``expected_supervisor_id``."""

        raise NotImplementedError

    def list_by_supervisor(self, supervisor_id: int) -> Sequence[User]:
        """Team members ordered by name."""

        raise NotImplementedError

    def list_by_role(self, role: Role) -> Sequence[User]:
        raise NotImplementedError

    def delete_supervisor(self, supervisor_id: int) -> int:
        """Unassign the whole team, then delete the supervisor, in one transaction.

        Returns the number of employees unassigned.
        """

        raise NotImplementedError
