"""Identity & role predicates.

The role set is closed. Anything that is not exactly one of the known roles
resolves to ``None`` so callers fail closed.
"""

from __future__ import annotations

from typing import Any, Iterable, Optional, Union

from ..core.enums import Role


def parse_role(value: Any) -> Optional[Role]:
    if isinstance(value, Role):
        return value
    if not isinstance(value, str):
        return None
    try:
        return Role(value)
    except ValueError:
        return None


def role_of(user: Any) -> Optional[Role]:
    """Role of a User, a mapping with a ``role`` key, or a raw role value."""

    if user is None:
        return None
    if isinstance(user, (Role, str)):
        return parse_role(user)
    if isinstance(user, dict):
        return parse_role(user.get("role"))
    return parse_role(getattr(user, "role", None))


def is_role(user: Any, roles: Union[Role, str, Iterable[Union[Role, str]]]) -> bool:
    role = role_of(user)
    if role is None:
        return False
    if isinstance(roles, (Role, str)):
        return role is parse_role(roles)
    return role in {parse_role(r) for r in roles}
