from __future__ import annotations

from flask import Flask

from ..common.http import current_user, json_body, make_login_required, optional_int, success
from ..container import Container
from ..core.exceptions import ValidationError


def register(app: Flask, container: Container) -> None:
    login_required = make_login_required(container.gateway)

    @app.route("/api/time-entry/<int:entry_id>/approve", methods=["PUT"], endpoint="approve_entry")
    @login_required
    def approve_entry(entry_id: int):
        entry = container.approval_service.approve(requester=current_user(), entry_id=entry_id)
        return success({"entry": entry.to_dict()}, message="Time entry approved")

    @app.route("/api/time-entry/<int:entry_id>/reject", methods=["PUT"], endpoint="reject_entry")
    @login_required
    def reject_entry(entry_id: int):
        reason = json_body().get("reason")
        entry = container.approval_service.reject(
            requester=current_user(),
            entry_id=entry_id,
            reason=reason if isinstance(reason, str) else None,
        )
        return success({"entry": entry.to_dict()}, message="Time entry rejected")

    @app.route(
        "/api/supervisors/<int:supervisor_id>/entries/reassign",
        methods=["POST"],
        endpoint="reassign_entries",
    )
    @login_required
    def reassign_entries(supervisor_id: int):
        to_id = optional_int(json_body().get("toSupervisorId"), "toSupervisorId")
        if to_id is None:
            raise ValidationError("toSupervisorId is required")
        moved = container.approval_service.reassign_pending_entries(
            requester=current_user(),
            from_supervisor_id=supervisor_id,
            to_supervisor_id=to_id,
        )
        return success({"reassigned": moved}, message="Pending entries reassigned")
