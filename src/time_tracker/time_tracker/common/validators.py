from __future__ import annotations

import re

from ..core.constants import MAX_EMAIL_LENGTH, MAX_MINUTES
from ..core.exceptions import ValidationError


def _require_text(value: object, field_name: str) -> str:
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValidationError(f"{field_name} must be a string")
    return value


def require_non_empty(value: str, field_name: str) -> str:
    value = _require_text(value, field_name).strip()
    if not value:
        raise ValidationError(f"{field_name} is required")
    return value


def require_max_length(value: str, field_name: str, max_len: int) -> str:
    if len(value) > max_len:
        raise ValidationError(f"{field_name} must be at most {max_len} characters")
    return value


def require_min_length(value: str, field_name: str, min_len: int) -> str:
    if len(_require_text(value, field_name)) < min_len:
        raise ValidationError(f"{field_name} must be at least {min_len} characters")
    return value


def normalize_email(value: str) -> str:
    """Emails are unique case-insensitively, so they are stored lower-cased."""
    return require_max_length(require_non_empty(value, "Email").lower(), "Email", MAX_EMAIL_LENGTH)


def require_positive_minutes(value: object) -> int:
    # bool is an int subclass; True must not count as one minute.
    if isinstance(value, bool) or value is None:
        raise ValidationError("Date and valid minutes are required")
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationError("Date and valid minutes are required")
    if number <= 0:
        raise ValidationError("Date and valid minutes are required")
    if not number.is_integer():
        raise ValidationError("Minutes must be a whole number")
    if number > MAX_MINUTES:
        raise ValidationError(f"Minutes must be at most {MAX_MINUTES}")
    return int(number)


def is_strong_password(value: str, *, min_len: int) -> bool:
    value = value or ""
    return (
        len(value) >= min_len
        and re.search(r"[a-z]", value) is not None
        and re.search(r"[A-Z]", value) is not None
        and re.search(r"\d", value) is not None
        and re.search(r"[^A-Za-z0-9]", value) is not None
    )
