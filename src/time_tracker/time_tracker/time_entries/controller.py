from __future__ import annotations

from flask import Flask, request

from ..common.http import current_user, json_body, make_login_required, optional_int, success
from ..container import Container
from .model import NewTimeEntry


def register(app: Flask, container: Container) -> None:
    login_required = make_login_required(container.gateway)

    @app.route("/api/time", methods=["POST"], endpoint="submit_time")
    @login_required
    def submit_time():
        data = json_body()
        entry = container.time_entry_service.submit(
            requester=current_user(),
            data=NewTimeEntry(
                work_date=data.get("date"),
                minutes=data.get("minutes"),
                tasks=data.get("tasks"),
                project=data.get("project"),
            ),
        )
        return success({"entry": entry.to_dict()}, message="Time entry saved", status=201)

    @app.route("/api/time", methods=["GET"], endpoint="my_time")
    @login_required
    def my_time():
        rows = container.time_entry_service.list_mine(requester=current_user())
        return success({"entries": [e.to_dict() for e in rows]})

    @app.route("/api/supervisor/entries", methods=["GET"], endpoint="team_entries")
    @login_required
    def team_entries():
        rows = container.time_entry_service.list_team(
            requester=current_user(),
            supervisor_id=optional_int(request.args.get("supervisorId"), "supervisorId"),
            employee_id=optional_int(request.args.get("userId"), "userId"),
        )
        return success({"entries": [e.to_dict() for e in rows]})

    @app.route("/api/pending-entries", methods=["GET"], endpoint="pending_entries")
    @login_required
    def pending_entries():
        rows = container.time_entry_service.list_pending(
            requester=current_user(),
            supervisor_id=optional_int(request.args.get("supervisorId"), "supervisorId"),
        )
        return success({"entries": [e.to_dict() for e in rows]})
