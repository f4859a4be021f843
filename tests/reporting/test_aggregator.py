from __future__ import annotations

from datetime import date

import pytest

from src.time_tracker.time_tracker.common.datetime_utils import month_key, week_key, week_number
from src.time_tracker.time_tracker.core.enums import EntryStatus
from src.time_tracker.time_tracker.reporting.aggregator import (
    ReportFilters,
    average_per_week,
    filter_entries,
    minutes_by_month,
    minutes_by_project,
    minutes_by_week,
    minutes_of,
    status_counts,
    summarize,
    total_minutes,
)


@pytest.mark.parametrize(
    "day, expected",
    [
        (date(2024, 1, 1), 1),  # Monday
        (date(2024, 1, 6), 1),  # Saturday
        (date(2024, 1, 7), 2),  # first Sunday starts week 2
        (date(2023, 1, 1), 1),  # Jan 1 on a Sunday
        (date(2023, 1, 7), 1),
        (date(2023, 1, 8), 2),
        (date(2024, 3, 4), 10),
        (date(2024, 3, 10), 11),
    ],
)
def test_week_number_is_sunday_based(day, expected):
    assert week_number(day) == expected


def test_keys():
    assert week_key(date(2024, 3, 4)) == "2024-W10"
    assert week_key(date(2024, 1, 1)) == "2024-W01"
    assert month_key(date(2024, 3, 4)) == "2024-03"


ROWS = [
    {"date": "2024-03-04", "minutes": 60, "project": "Apollo", "status": "approved", "userId": 1},
    {"date": "2024-03-05", "minutes": "30", "project": "Apollo", "status": "pending", "userId": 2},
    {"date": "2024-03-11", "minutes": 45, "project": None, "status": "rejected", "userId": 1},
    {"date": "2024-04-01", "minutes": "abc", "project": "Zeus", "status": "pending", "userId": 1},
]


def test_minutes_of_tolerates_garbage():
    assert minutes_of({"minutes": "abc"}) == 0
    assert minutes_of({"minutes": None}) == 0
    assert minutes_of({}) == 0
    assert minutes_of({"minutes": True}) == 0
    assert minutes_of({"minutes": "15"}) == 15


def test_totals_and_buckets():
    assert total_minutes(ROWS) == 135
    assert minutes_by_project(ROWS) == {"Apollo": 90, "No Project": 45, "Zeus": 0}
    assert minutes_by_week(ROWS) == {"2024-W10": 90, "2024-W11": 45, "2024-W14": 0}
    assert minutes_by_month(ROWS) == {"2024-03": 135, "2024-04": 0}
    assert status_counts(ROWS) == {"pending": 2, "approved": 1, "rejected": 1}
    assert status_counts([]) == {"pending": 0, "approved": 0, "rejected": 0}


def test_average_uses_at_least_four_weeks():
    # Three distinct weeks, so the divisor is the four-week floor.
    assert average_per_week(ROWS) == pytest.approx(135 / 4)

    many = [{"date": f"2024-0{m}-01", "minutes": 100} for m in range(1, 7)]
    assert average_per_week(many) == pytest.approx(100)
    assert average_per_week([]) == 0


def test_filters():
    f = ReportFilters(start_date=date(2024, 3, 5), end_date=date(2024, 3, 31))
    assert [r["minutes"] for r in filter_entries(ROWS, f)] == ["30", 45]

    assert len(filter_entries(ROWS, ReportFilters(status=EntryStatus.PENDING))) == 2
    assert len(filter_entries(ROWS, ReportFilters(project="Apollo"))) == 2
    assert len(filter_entries(ROWS, ReportFilters(user_id=1))) == 3
    assert filter_entries(ROWS, None) == ROWS


def test_summarize_to_dict():
    body = summarize(ROWS, ReportFilters(user_id=1)).to_dict()
    assert body["entryCount"] == 3
    assert body["totalMinutes"] == 105
    assert body["byProject"] == {"Apollo": 60, "No Project": 45, "Zeus": 0}
    assert body["statusCounts"] == {"pending": 1, "approved": 1, "rejected": 1}
    assert body["avgPerWeekMinutes"] == pytest.approx(105 / 4)
