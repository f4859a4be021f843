from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..authorization.gateway import Action, AuthorizationGateway
from ..core.enums import Role
from ..time_entries.service import TimeEntryService
from ..users.model import User
from ..users.repository import UserRepository
from .aggregator import ReportFilters, ReportSummary, summarize


@dataclass(frozen=True)
class SupervisorReport:
    supervisor_id: Optional[int]
    supervisor_name: str
    summary: ReportSummary

    def to_dict(self) -> dict:
        return {
            "supervisorId": self.supervisor_id,
            "supervisorName": self.supervisor_name,
            **self.summary.to_dict(),
        }


@dataclass(frozen=True)
class OrganizationReport:
    totals: ReportSummary
    supervisors: list[SupervisorReport]

    def to_dict(self) -> dict:
        return {
            "totals": self.totals.to_dict(),
            "supervisors": [s.to_dict() for s in self.supervisors],
        }


class ReportService:
    """Scopes entries to the requester's reach, then hands them to the aggregator.

    Nothing is cached; every call recomputes from the store.
    """

    def __init__(self, time_entries: TimeEntryService, users: UserRepository, gateway: AuthorizationGateway):
        self._time_entries = time_entries
        self._users = users
        self._gateway = gateway

    def my_report(self, *, requester: User, filters: Optional[ReportFilters] = None) -> ReportSummary:
        return summarize(self._time_entries.list_mine(requester=requester), filters)

    def team_report(
        self,
        *,
        requester: User,
        supervisor_id: Optional[int] = None,
        filters: Optional[ReportFilters] = None,
    ) -> ReportSummary:
        entries = self._time_entries.list_team(requester=requester, supervisor_id=supervisor_id)
        return summarize(entries, filters)

    def organization_report(self, *, requester: User, filters: Optional[ReportFilters] = None) -> OrganizationReport:
        self._gateway.require(requester, Action.VIEW_ORG_REPORTS)

        entries = list(self._time_entries.list_all())
        names = {u.user_id: u.name for u in self._users.list_by_role(Role.SUPERVISOR)}

        grouped: dict[Optional[int], list] = {sid: [] for sid in names}
        for e in entries:
            grouped.setdefault(e.supervisor_id, []).append(e)

        supervisors = []
        for sid, rows in grouped.items():
            if sid is None:
                label = "Unassigned"
            else:
                # Snapshots may point at supervisors that were deleted since.
                label = names.get(sid, f"Former supervisor #{sid}")
            supervisors.append(SupervisorReport(supervisor_id=sid, supervisor_name=label, summary=summarize(rows, filters)))
        supervisors.sort(key=lambda s: s.supervisor_name.lower())

        return OrganizationReport(totals=summarize(entries, filters), supervisors=supervisors)
