from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional, Sequence

from werkzeug.security import check_password_hash, generate_password_hash

from ..authorization.gateway import Action, AuthorizationGateway
from ..common.datetime_utils import now_utc
from ..common.validators import normalize_email, require_max_length, require_min_length, require_non_empty
from ..core.constants import MAX_NAME_LENGTH, MIN_PASSWORD_LENGTH
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, ConflictError, NotFoundError, ValidationError
from .model import User
from .repository import UserRepository
from .roles import is_role

logger = logging.getLogger(__name__)


def load_supervisor(
    users: UserRepository,
    supervisor_id: Optional[int],
    *,
    not_supervisor_message: str = "User is not a supervisor.",
) -> User:
    supervisor = users.get_by_id(int(supervisor_id)) if supervisor_id is not None else None
    if not supervisor:
        raise NotFoundError("Supervisor not found.")
    if not is_role(supervisor, Role.SUPERVISOR):
        raise ValidationError(not_supervisor_message)
    return supervisor


@dataclass(frozen=True)
class SessionUser:
    """What we store into the Flask session after login (plus login metadata)."""

    user_id: int
    name: str
    email: str
    role: Role
    is_first_login: bool


class AuthService:
    """Use cases: register and authenticate (login)."""

    def __init__(self, users: UserRepository, *, clock: Callable[[], datetime] = now_utc):
        self._users = users
        self._clock = clock

    def register(self, *, name: str, email: str, password: str) -> User:
        """Self-registration. The role is always employee, whatever the caller sends."""

        if not name or not email or not password:
            raise ValidationError("All fields are required")
        name = require_max_length(require_non_empty(name, "Name"), "Name", MAX_NAME_LENGTH)
        email = normalize_email(email)
        require_min_length(password, "Password", MIN_PASSWORD_LENGTH)

        if self._users.get_by_email(email):
            raise ConflictError("Email already registered")

        user_id = self._users.create_user(
            name=name,
            email=email,
            password_hash=generate_password_hash(password),
            role=Role.EMPLOYEE,
        )
        logger.info("registered employee user_id=%s", user_id)
        return self._users.get_by_id(user_id)

    def authenticate(self, email: str, password: str) -> SessionUser:
        if not isinstance(email, str) or not isinstance(password, str):
            raise AuthenticationError("Invalid email or password")
        email = email.strip().lower()
        user = self._users.get_by_email(email) if email else None
        if not user or user.role is None:
            raise AuthenticationError("Invalid email or password")

        try:
            ok = check_password_hash(user.password_hash, password)
        except ValueError:
            # e.g. placeholder or corrupted hashes
            ok = False

        if not ok:
            raise AuthenticationError("Invalid email or password")

        is_first_login = user.last_login_at is None
        self._users.touch_last_login(user.user_id, at=self._clock())

        return SessionUser(
            user_id=user.user_id,
            name=user.name,
            email=user.email,
            role=user.role,
            is_first_login=is_first_login,
        )


class UserService:
    """Use cases: supervisor accounts and directory reads."""

    def __init__(self, users: UserRepository, gateway: AuthorizationGateway):
        self._users = users
        self._gateway = gateway

    def create_supervisor(self, *, requester: User, name: str, email: str, password: str) -> User:
        self._gateway.require(requester, Action.CREATE_SUPERVISOR)

        if not name or not email or not password:
            raise ValidationError("Name, email and password are required")
        name = require_max_length(require_non_empty(name, "Name"), "Name", MAX_NAME_LENGTH)
        email = normalize_email(email)
        require_min_length(password, "Password", MIN_PASSWORD_LENGTH)

        if self._users.get_by_email(email):
            raise ConflictError("User with this email already exists")

        user_id = self._users.create_user(
            name=name,
            email=email,
            password_hash=generate_password_hash(password),
            role=Role.SUPERVISOR,
        )
        logger.info("superadmin user_id=%s created supervisor user_id=%s", requester.user_id, user_id)
        return self._users.get_by_id(user_id)

    def list_supervisors(self, *, requester: User) -> Sequence[User]:
        self._gateway.require(requester, Action.VIEW_SUPERVISORS)
        return self._users.list_by_role(Role.SUPERVISOR)

    def get_supervisor(self, *, requester: User, supervisor_id: int) -> User:
        self._gateway.require(requester, Action.VIEW_SUPERVISORS)
        return load_supervisor(self._users, supervisor_id)

    def list_employees(self, *, requester: User) -> Sequence[User]:
        self._gateway.require(requester, Action.VIEW_DIRECTORY)
        return self._users.list_by_role(Role.EMPLOYEE)

    def my_supervisor(self, *, requester: User) -> User:
        if not is_role(requester, Role.EMPLOYEE):
            raise ValidationError("Only employees have supervisors")
        if requester.supervisor_id is None:
            raise NotFoundError("No supervisor assigned")
        supervisor = self._users.get_by_id(requester.supervisor_id)
        if not supervisor:
            raise NotFoundError("No supervisor assigned")
        return supervisor
