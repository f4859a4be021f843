"""Read-side rollups over time entries.

Everything here is pure: the caller decides which entries are in scope. Rows
may be ``TimeEntry`` objects or plain mappings shaped like the JSON API
(``date``, ``minutes``, ``project``, ``status``, ``userId``). Missing or
non-numeric minutes count as 0.
"""

from __future__ import annotations

import math
from collections import OrderedDict
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Iterable, Optional, Sequence

from ..common.datetime_utils import month_key, try_parse_date, week_key
from ..core.constants import DEFAULT_PROJECT_NAME, MIN_WEEKS_FOR_AVERAGE
from ..core.enums import EntryStatus

_ALIASES = {
    "work_date": "date",
    "user_id": "userId",
}


def _get(entry: Any, name: str) -> Any:
    if isinstance(entry, dict):
        if name in entry:
            return entry[name]
        return entry.get(_ALIASES.get(name, name))
    return getattr(entry, name, None)


def minutes_of(entry: Any) -> int:
    value = _get(entry, "minutes")
    if isinstance(value, bool) or value is None:
        return 0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0
    if math.isnan(number) or math.isinf(number):
        return 0
    return int(number)


def status_of(entry: Any) -> Optional[EntryStatus]:
    value = _get(entry, "status")
    if isinstance(value, EntryStatus):
        return value
    try:
        return EntryStatus(value or EntryStatus.PENDING.value)
    except ValueError:
        return None


def date_of(entry: Any) -> Optional[date]:
    return try_parse_date(_get(entry, "work_date"))


@dataclass(frozen=True)
class ReportFilters:
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    status: Optional[EntryStatus] = None
    project: Optional[str] = None
    user_id: Optional[int] = None


@dataclass(frozen=True)
class ReportSummary:
    entry_count: int
    total_minutes: int
    average_minutes_per_week: float
    by_project: dict[str, int] = field(default_factory=dict)
    by_week: dict[str, int] = field(default_factory=dict)
    by_month: dict[str, int] = field(default_factory=dict)
    status_counts: dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "entryCount": self.entry_count,
            "totalMinutes": self.total_minutes,
            "avgPerWeekMinutes": self.average_minutes_per_week,
            "byProject": dict(self.by_project),
            "byWeek": dict(self.by_week),
            "byMonth": dict(self.by_month),
            "statusCounts": dict(self.status_counts),
        }


def filter_entries(entries: Iterable[Any], filters: Optional[ReportFilters] = None) -> list:
    if filters is None:
        return list(entries)

    out = []
    for e in entries:
        d = date_of(e)
        if filters.start_date and (d is None or d < filters.start_date):
            continue
        if filters.end_date and (d is None or d > filters.end_date):
            continue
        if filters.status and status_of(e) is not filters.status:
            continue
        if filters.project and _get(e, "project") != filters.project:
            continue
        if filters.user_id is not None:
            owner = _get(e, "user_id")
            if owner is None or str(owner) != str(filters.user_id):
                continue
        out.append(e)
    return out


def total_minutes(entries: Iterable[Any]) -> int:
    return sum(minutes_of(e) for e in entries)


def minutes_by_project(entries: Iterable[Any]) -> dict[str, int]:
    totals: dict[str, int] = {}
    for e in entries:
        project = _get(e, "project") or DEFAULT_PROJECT_NAME
        totals[project] = totals.get(project, 0) + minutes_of(e)
    return dict(sorted(totals.items(), key=lambda kv: (-kv[1], kv[0])))


def _bucket(entries: Iterable[Any], key_fn) -> dict[str, int]:
    totals: dict[str, int] = {}
    for e in entries:
        d = date_of(e)
        if d is None:
            continue
        k = key_fn(d)
        totals[k] = totals.get(k, 0) + minutes_of(e)
    return OrderedDict(sorted(totals.items()))


def minutes_by_week(entries: Iterable[Any]) -> dict[str, int]:
    return _bucket(entries, week_key)


def minutes_by_month(entries: Iterable[Any]) -> dict[str, int]:
    return _bucket(entries, month_key)


def status_counts(entries: Iterable[Any]) -> dict[str, int]:
    counts = {s.value: 0 for s in EntryStatus}
    for e in entries:
        s = status_of(e)
        if s is not None:
            counts[s.value] += 1
    return counts


def average_per_week(entries: Sequence[Any]) -> float:
    weeks = {week_key(d) for d in (date_of(e) for e in entries) if d is not None}
    return total_minutes(entries) / max(len(weeks), MIN_WEEKS_FOR_AVERAGE)


def summarize(entries: Iterable[Any], filters: Optional[ReportFilters] = None) -> ReportSummary:
    rows = filter_entries(entries, filters)
    return ReportSummary(
        entry_count=len(rows),
        total_minutes=total_minutes(rows),
        average_minutes_per_week=average_per_week(rows),
        by_project=minutes_by_project(rows),
        by_week=dict(minutes_by_week(rows)),
        by_month=dict(minutes_by_month(rows)),
        status_counts=status_counts(rows),
    )
