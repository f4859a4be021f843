from __future__ import annotations

from dataclasses import dataclass

from .approvals.service import ApprovalService
from .authorization.gateway import AuthorizationGateway
from .database.connection import DBConfig, DatabaseConnection
from .projects.mysql_project_repository import MySQLProjectRepository
from .projects.repository import ProjectRepository
from .projects.service import ProjectService
from .reporting.service import ReportService
from .teams.service import TeamService
from .time_entries.mysql_time_entry_repository import MySQLTimeEntryRepository
from .time_entries.repository import TimeEntryRepository
from .time_entries.service import TimeEntryService
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository
from .users.service import AuthService, UserService


@dataclass(frozen=True)
class Container:
    users_repo: UserRepository
    entries_repo: TimeEntryRepository
    projects_repo: ProjectRepository

    gateway: AuthorizationGateway
    auth_service: AuthService
    user_service: UserService
    team_service: TeamService
    time_entry_service: TimeEntryService
    approval_service: ApprovalService
    report_service: ReportService
    project_service: ProjectService


def wire_services(
    *,
    users_repo: UserRepository,
    entries_repo: TimeEntryRepository,
    projects_repo: ProjectRepository,
) -> Container:
    gateway = AuthorizationGateway(users_repo)
    time_entry_service = TimeEntryService(entries_repo, users_repo, gateway)

    return Container(
        users_repo=users_repo,
        entries_repo=entries_repo,
        projects_repo=projects_repo,
        gateway=gateway,
        auth_service=AuthService(users_repo),
        user_service=UserService(users_repo, gateway),
        team_service=TeamService(users_repo, gateway),
        time_entry_service=time_entry_service,
        approval_service=ApprovalService(entries_repo, users_repo, gateway),
        report_service=ReportService(time_entry_service, users_repo, gateway),
        project_service=ProjectService(projects_repo),
    )


def build_container(*, db_config: dict) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))
    return wire_services(
        users_repo=MySQLUserRepository(conn),
        entries_repo=MySQLTimeEntryRepository(conn),
        projects_repo=MySQLProjectRepository(conn),
    )
