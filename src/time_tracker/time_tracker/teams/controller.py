from __future__ import annotations

from flask import Flask, request

from ..common.http import current_user, json_body, make_login_required, optional_int, success
from ..container import Container


def register(app: Flask, container: Container) -> None:
    login_required = make_login_required(container.gateway)

    @app.route("/api/team/add", methods=["POST"], endpoint="team_add")
    @login_required
    def team_add():
        data = json_body()
        employee = container.team_service.assign_employee(
            requester=current_user(),
            employee_email=data.get("employeeEmail", ""),
            target_supervisor_id=optional_int(data.get("supervisorId"), "supervisorId"),
        )
        return success({"employee": employee.public_view()}, message="Employee added to team")

    @app.route("/api/team/<int:employee_id>", methods=["DELETE"], endpoint="team_remove")
    @login_required
    def team_remove(employee_id: int):
        employee = container.team_service.unassign_employee(requester=current_user(), employee_id=employee_id)
        return success({"employee": employee.public_view()}, message="Employee removed from team")

    @app.route("/api/team", methods=["GET"], endpoint="team_list")
    @login_required
    def team_list():
        supervisor_id = optional_int(request.args.get("supervisorId"), "supervisorId")
        members = container.team_service.list_team_for(requester=current_user(), supervisor_id=supervisor_id)
        return success({"team": [u.public_view() for u in members]})

    @app.route("/api/supervisors/<int:supervisor_id>", methods=["DELETE"], endpoint="delete_supervisor")
    @login_required
    def delete_supervisor(supervisor_id: int):
        released = container.team_service.delete_supervisor(requester=current_user(), supervisor_id=supervisor_id)
        return success({"releasedEmployees": released}, message="Supervisor deleted")
