from __future__ import annotations

from typing import Mapping

from flask import Flask, request

from ..common.datetime_utils import parse_iso_date
from ..common.http import current_user, make_login_required, optional_int, success
from ..container import Container
from ..core.enums import EntryStatus
from ..core.exceptions import ValidationError
from .aggregator import ReportFilters


def parse_filters(args: Mapping[str, str]) -> ReportFilters:
    status = None
    raw_status = (args.get("status") or "").strip().lower()
    if raw_status:
        try:
            status = EntryStatus(raw_status)
        except ValueError:
            raise ValidationError(f"Unknown status: {raw_status}")

    def _date(name: str):
        raw = (args.get(name) or "").strip()
        if not raw:
            return None
        try:
            return parse_iso_date(raw)
        except ValueError:
            raise ValidationError(f"{name} must be YYYY-MM-DD")

    start, end = _date("startDate"), _date("endDate")
    if start and end and start > end:
        raise ValidationError("startDate must not be after endDate")

    return ReportFilters(
        start_date=start,
        end_date=end,
        status=status,
        project=(args.get("project") or "").strip() or None,
        user_id=optional_int(args.get("userId"), "userId"),
    )


def register(app: Flask, container: Container) -> None:
    login_required = make_login_required(container.gateway)

    @app.route("/api/reports/me", methods=["GET"], endpoint="report_me")
    @login_required
    def report_me():
        summary = container.report_service.my_report(requester=current_user(), filters=parse_filters(request.args))
        return success({"report": summary.to_dict()})

    @app.route("/api/reports/team", methods=["GET"], endpoint="report_team")
    @login_required
    def report_team():
        summary = container.report_service.team_report(
            requester=current_user(),
            supervisor_id=optional_int(request.args.get("supervisorId"), "supervisorId"),
            filters=parse_filters(request.args),
        )
        return success({"report": summary.to_dict()})

    @app.route("/api/reports/organization", methods=["GET"], endpoint="report_organization")
    @login_required
    def report_organization():
        report = container.report_service.organization_report(
            requester=current_user(),
            filters=parse_filters(request.args),
        )
        return success({"report": report.to_dict()})
