"""Capability checks run before every operation.

The session only carries an identity hint ``{user_id, role}``. ``resolve``
re-reads the persisted user so a role change since login is honoured, and
``require`` / ``require_team_reach`` map (role, action, owner) to allow/deny.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ..core.enums import Role
from ..core.exceptions import AuthenticationError, AuthorizationError
from ..users.model import User
from ..users.repository import UserRepository
from ..users.roles import parse_role, role_of

logger = logging.getLogger(__name__)


class Action(str, Enum):
    SUBMIT_ENTRY = "submit_entry"
    VIEW_OWN_ENTRIES = "view_own_entries"
    VIEW_TEAM_ENTRIES = "view_team_entries"
    DECIDE_ENTRY = "decide_entry"
    MANAGE_TEAM = "manage_team"
    VIEW_DIRECTORY = "view_directory"
    CREATE_SUPERVISOR = "create_supervisor"
    DELETE_SUPERVISOR = "delete_supervisor"
    VIEW_SUPERVISORS = "view_supervisors"
    REASSIGN_ENTRIES = "reassign_entries"
    VIEW_ORG_REPORTS = "view_org_reports"
    MANAGE_OWN_PROJECTS = "manage_own_projects"


# Superadmins own no time entries and do not approve them.
CAPABILITIES: dict[Role, frozenset[Action]] = {
    Role.EMPLOYEE: frozenset(
        {
            Action.SUBMIT_ENTRY,
            Action.VIEW_OWN_ENTRIES,
            Action.MANAGE_OWN_PROJECTS,
        }
    ),
    Role.SUPERVISOR: frozenset(
        {
            Action.SUBMIT_ENTRY,
            Action.VIEW_OWN_ENTRIES,
            Action.VIEW_TEAM_ENTRIES,
            Action.DECIDE_ENTRY,
            Action.MANAGE_TEAM,
            Action.VIEW_DIRECTORY,
            Action.MANAGE_OWN_PROJECTS,
        }
    ),
    Role.SUPERADMIN: frozenset(
        {
            Action.VIEW_TEAM_ENTRIES,
            Action.MANAGE_TEAM,
            Action.VIEW_DIRECTORY,
            Action.CREATE_SUPERVISOR,
            Action.DELETE_SUPERVISOR,
            Action.VIEW_SUPERVISORS,
            Action.REASSIGN_ENTRIES,
            Action.VIEW_ORG_REPORTS,
            Action.MANAGE_OWN_PROJECTS,
        }
    ),
}

_DENIED_MESSAGES = {
    Action.SUBMIT_ENTRY: "Only employees and supervisors can log time",
    Action.VIEW_OWN_ENTRIES: "Only employees and supervisors have time entries",
    Action.VIEW_TEAM_ENTRIES: "Only supervisors or superadmins can access team entries",
    Action.DECIDE_ENTRY: "Access denied. Supervisor role required.",
    Action.MANAGE_TEAM: "Access denied. Insufficient permissions.",
    Action.VIEW_DIRECTORY: "Only supervisors or superadmins can access employee information",
    Action.CREATE_SUPERVISOR: "Access denied. Superadmin role required.",
    Action.DELETE_SUPERVISOR: "Forbidden. Only superadmins can delete supervisors.",
    Action.VIEW_SUPERVISORS: "Forbidden. Only superadmins can view supervisors.",
    Action.REASSIGN_ENTRIES: "Forbidden. Only superadmins can reassign entries.",
    Action.VIEW_ORG_REPORTS: "Forbidden. Only superadmins can view organization reports.",
}


def can(role: Optional[Role], action: Action) -> bool:
    if role is None:
        return False
    return action in CAPABILITIES.get(role, frozenset())


@dataclass(frozen=True)
class SessionIdentity:
    """What the signed session carries: an identity hint, not an authorization source."""

    user_id: int
    role: Optional[Role]

    @classmethod
    def from_session(cls, data: dict) -> Optional["SessionIdentity"]:
        user_id = data.get("user_id")
        if user_id is None:
            return None
        return cls(user_id=int(user_id), role=parse_role(data.get("role")))


class AuthorizationGateway:
    def __init__(self, users: UserRepository):
        self._users = users

    def resolve(self, identity: SessionIdentity) -> User:
        user = self._users.get_by_id(identity.user_id)
        if not user:
            raise AuthenticationError("Session is no longer valid")
        if identity.role is not user.role:
            logger.info(
                "role changed since login for user_id=%s (%s -> %s)",
                user.user_id,
                identity.role.value if identity.role else None,
                user.role.value if user.role else None,
            )
        return user

    @staticmethod
    def require(user: User, action: Action) -> None:
        if not can(role_of(user), action):
            logger.warning("denied %s for user_id=%s role=%s", action.value, user.user_id, role_of(user))
            raise AuthorizationError(_DENIED_MESSAGES.get(action, "Access denied"))

    @staticmethod
    def has_team_reach(user: User, supervisor_id: Optional[int]) -> bool:
        role = role_of(user)
        if role is Role.SUPERADMIN:
            return True
        if role is Role.SUPERVISOR:
            return supervisor_id is not None and int(supervisor_id) == user.user_id
        return False

    def require_team_reach(self, user: User, supervisor_id: Optional[int]) -> None:
        if not self.has_team_reach(user, supervisor_id):
            raise AuthorizationError("You can only access your own team")
