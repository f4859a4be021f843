from __future__ import annotations

import pytest

from src.time_tracker.time_tracker.core.enums import EntryStatus
from src.time_tracker.time_tracker.core.exceptions import AuthorizationError, ValidationError
from src.time_tracker.time_tracker.reporting.aggregator import ReportFilters
from src.time_tracker.time_tracker.time_entries.model import NewTimeEntry


@pytest.fixture
def logged(container, org):
    svc = container.time_entry_service
    rows = [
        ("alice", "2024-03-04", 60, "Apollo"),
        ("alice", "2024-03-12", 30, None),
        ("dave", "2024-03-05", 120, "Apollo"),
        ("carol", "2024-03-06", 45, "Zeus"),
        ("frank", "2024-03-07", 15, None),
    ]
    entries = {}
    for who, day, minutes, project in rows:
        entries[(who, day)] = svc.submit(
            requester=org[who], data=NewTimeEntry(work_date=day, minutes=minutes, project=project)
        )
    return entries


def test_my_report(container, org, logged):
    report = container.report_service.my_report(requester=org["alice"])
    assert report.entry_count == 2
    assert report.total_minutes == 90
    assert report.by_project == {"Apollo": 60, "No Project": 30}


def test_team_report_with_filters(container, org, logged):
    container.approval_service.approve(requester=org["bob"], entry_id=logged[("dave", "2024-03-05")].entry_id)

    report = container.report_service.team_report(requester=org["bob"])
    assert report.total_minutes == 210
    assert report.status_counts == {"pending": 2, "approved": 1, "rejected": 0}

    approved = container.report_service.team_report(
        requester=org["bob"], filters=ReportFilters(status=EntryStatus.APPROVED)
    )
    assert approved.total_minutes == 120

    only_alice = container.report_service.team_report(
        requester=org["bob"], filters=ReportFilters(user_id=org["alice"].user_id)
    )
    assert only_alice.entry_count == 2


def test_team_report_scope(container, org, logged):
    with pytest.raises(AuthorizationError):
        container.report_service.team_report(requester=org["bob"], supervisor_id=org["erin"].user_id)
    with pytest.raises(ValidationError):
        container.report_service.team_report(requester=org["admin"])
    report = container.report_service.team_report(requester=org["admin"], supervisor_id=org["erin"].user_id)
    assert report.total_minutes == 45


def test_organization_report(container, org, logged):
    container.team_service.delete_supervisor(requester=org["admin"], supervisor_id=org["erin"].user_id)

    report = container.report_service.organization_report(requester=org["admin"])
    assert report.totals.total_minutes == 270

    by_name = {s.supervisor_name: s.summary.total_minutes for s in report.supervisors}
    assert by_name == {
        "Bob": 210,
        f"Former supervisor #{org['erin'].user_id}": 45,
        "Unassigned": 15,
    }
    assert [s.supervisor_name for s in report.supervisors][0] == "Bob"
    assert "supervisors" in report.to_dict()


def test_organization_report_is_superadmin_only(container, org):
    with pytest.raises(AuthorizationError):
        container.report_service.organization_report(requester=org["bob"])
