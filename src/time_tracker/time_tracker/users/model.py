from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class User:
    """Domain entity: User.

    Note: plain data object (no DB access code). ``role`` is None when the
    stored value is not one of the known roles, which grants nothing.
    """

    user_id: int
    name: str
    email: str
    password_hash: str
    role: Optional[Role]
    supervisor_id: Optional[int] = None
    last_login_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    def public_view(self) -> dict:
        return {
            "id": self.user_id,
            "name": self.name,
            "email": self.email,
            "role": self.role.value if self.role else None,
            "supervisorId": self.supervisor_id,
        }
