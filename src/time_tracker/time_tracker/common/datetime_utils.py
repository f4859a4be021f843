from __future__ import annotations

import math
from datetime import date, datetime, timezone
from typing import Optional, Union

from ..core.exceptions import ValidationError


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def coerce_work_date(value: Union[str, date, None]) -> date:
    """Calendar day of a time entry. No time zone is attached."""
    if isinstance(value, datetime):
        raise ValidationError("Date must be a calendar day (YYYY-MM-DD)")
    if isinstance(value, date):
        return value
    if not value or not str(value).strip():
        raise ValidationError("Date and valid minutes are required")
    try:
        return parse_iso_date(str(value).strip())
    except ValueError:
        raise ValidationError("Date must be a calendar day (YYYY-MM-DD)")


def try_parse_date(value: object) -> Optional[date]:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return parse_iso_date(str(value).strip())
    except ValueError:
        return None


def now_utc() -> datetime:
    """Current time.

    Note: Wrapped so tests can patch it easily.
    """
    return datetime.now(timezone.utc).replace(tzinfo=None)


def week_number(day: date) -> int:
    """Sunday-based week of year: ceil((days since Jan 1 + Jan 1 weekday + 1) / 7)."""
    jan1 = date(day.year, 1, 1)
    jan1_weekday = (jan1.weekday() + 1) % 7  # Sunday=0
    return math.ceil(((day - jan1).days + jan1_weekday + 1) / 7)


def week_key(day: date) -> str:
    return f"{day.year}-W{week_number(day):02d}"


def month_key(day: date) -> str:
    return f"{day.year}-{day.month:02d}"
