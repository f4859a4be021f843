from __future__ import annotations

import logging
from typing import Optional, Sequence

from ..authorization.gateway import Action, AuthorizationGateway
from ..common.validators import normalize_email
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, ConflictError, NotFoundError, ValidationError
from ..users.model import User
from ..users.repository import UserRepository
from ..users.roles import is_role, role_of
from ..users.service import load_supervisor

logger = logging.getLogger(__name__)


class TeamService:
    """Owns the employee -> supervisor edge.

    Existing time entries keep the supervisor snapshotted at submission time;
    nothing here re-scopes them.
    """

    def __init__(self, users: UserRepository, gateway: AuthorizationGateway):
        self._users = users
        self._gateway = gateway

    def _resolve_target_supervisor(self, requester: User, target_supervisor_id: Optional[int]) -> int:
        role = role_of(requester)
        if role is Role.SUPERADMIN:
            if target_supervisor_id is None:
                return requester.user_id
            supervisor = load_supervisor(
                self._users,
                target_supervisor_id,
                not_supervisor_message="Specified user is not a supervisor.",
            )
            return supervisor.user_id
        if role is Role.SUPERVISOR:
            # Supervisors can only grow their own team.
            return requester.user_id
        raise AuthorizationError("Access denied. Insufficient permissions.")

    def assign_employee(
        self,
        *,
        requester: User,
        employee_email: str,
        target_supervisor_id: Optional[int] = None,
    ) -> User:
        self._gateway.require(requester, Action.MANAGE_TEAM)
        if not employee_email or not str(employee_email).strip():
            raise ValidationError("Employee email is required.")

        supervisor_id = self._resolve_target_supervisor(requester, target_supervisor_id)

        employee = self._users.get_by_email(normalize_email(employee_email))
        if not employee:
            raise NotFoundError("Employee not found. Make sure they have registered an account.")
        if not is_role(employee, Role.EMPLOYEE):
            raise ValidationError("User is not an employee.")
        if employee.supervisor_id is not None:
            raise ConflictError("Employee already has a supervisor.")

        if not self._users.assign_supervisor(employee_id=employee.user_id, supervisor_id=supervisor_id):
            # Someone else assigned the employee between our read and write.
            raise ConflictError("Employee already has a supervisor.")

        logger.info(
            "employee user_id=%s assigned to supervisor user_id=%s by user_id=%s",
            employee.user_id,
            supervisor_id,
            requester.user_id,
        )
        return self._users.get_by_id(employee.user_id)

    def unassign_employee(self, *, requester: User, employee_id: int) -> User:
        self._gateway.require(requester, Action.MANAGE_TEAM)

        employee = self._users.get_by_id(int(employee_id))
        if not employee:
            raise NotFoundError("Employee not found.")

        current = employee.supervisor_id
        if is_role(requester, Role.SUPERVISOR) and current != requester.user_id:
            raise AuthorizationError("Employee is not in your team.")

        if current is None:
            return employee

        if not self._users.clear_supervisor(employee_id=employee.user_id, expected_supervisor_id=current):
            raise ConflictError("Team membership changed, please retry.")

        logger.info(
            "employee user_id=%s removed from supervisor user_id=%s by user_id=%s",
            employee.user_id,
            current,
            requester.user_id,
        )
        return self._users.get_by_id(employee.user_id)

    def delete_supervisor(self, *, requester: User, supervisor_id: int) -> int:
        self._gateway.require(requester, Action.DELETE_SUPERVISOR)

        supervisor = load_supervisor(self._users, supervisor_id)

        unassigned = self._users.delete_supervisor(supervisor.user_id)
        logger.info(
            "supervisor user_id=%s deleted by user_id=%s (%s employees unassigned)",
            supervisor.user_id,
            requester.user_id,
            unassigned,
        )
        return unassigned

    def list_team(self, supervisor_id: int) -> Sequence[User]:
        return self._users.list_by_supervisor(int(supervisor_id))

    def list_team_for(self, *, requester: User, supervisor_id: Optional[int] = None) -> Sequence[User]:
        self._gateway.require(requester, Action.MANAGE_TEAM)
        target = requester.user_id if supervisor_id is None else int(supervisor_id)
        self._gateway.require_team_reach(requester, target)

        if target != requester.user_id:
            load_supervisor(self._users, target)
        return self.list_team(target)
