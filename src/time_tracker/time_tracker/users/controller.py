from __future__ import annotations

from datetime import timedelta

from flask import Flask, session

from ..common.http import current_user, json_body, make_login_required, success
from ..container import Container
from ..core.constants import DEFAULT_SESSION_HOURS


def register(app: Flask, container: Container) -> None:
    login_required = make_login_required(container.gateway)

    @app.route("/register", methods=["POST"], endpoint="register")
    def register_account():
        data = json_body()
        user = container.auth_service.register(
            name=data.get("name", ""),
            email=data.get("email", ""),
            password=data.get("password", ""),
        )
        return success({"user": user.public_view()}, message="User registered successfully", status=201)

    @app.route("/login", methods=["POST"], endpoint="login")
    def login():
        data = json_body()
        s_user = container.auth_service.authenticate(data.get("email", ""), data.get("password", ""))

        session.clear()
        session.permanent = True
        hours = int(app.config.get("SESSION_HOURS", DEFAULT_SESSION_HOURS))
        app.permanent_session_lifetime = timedelta(hours=hours)

        session["user_id"] = s_user.user_id
        session["role"] = s_user.role.value

        return success(
            {
                "user": {
                    "id": s_user.user_id,
                    "name": s_user.name,
                    "email": s_user.email,
                    "role": s_user.role.value,
                },
                "isFirstLogin": s_user.is_first_login,
            },
            message="Login successful",
        )

    @app.route("/logout", methods=["POST"], endpoint="logout")
    def logout():
        session.clear()
        return success(message="Logged out")

    @app.route("/api/supervisor/create", methods=["POST"], endpoint="create_supervisor")
    @login_required
    def create_supervisor():
        data = json_body()
        supervisor = container.user_service.create_supervisor(
            requester=current_user(),
            name=data.get("name", ""),
            email=data.get("email", ""),
            password=data.get("password", ""),
        )
        return success({"supervisor": supervisor.public_view()}, message="Supervisor created", status=201)

    @app.route("/api/supervisors", methods=["GET"], endpoint="list_supervisors")
    @login_required
    def list_supervisors():
        rows = container.user_service.list_supervisors(requester=current_user())
        return success({"supervisors": [u.public_view() for u in rows]})

    @app.route("/api/supervisors/<int:supervisor_id>", methods=["GET"], endpoint="get_supervisor")
    @login_required
    def get_supervisor(supervisor_id: int):
        supervisor = container.user_service.get_supervisor(requester=current_user(), supervisor_id=supervisor_id)
        return success({"supervisor": supervisor.public_view()})

    @app.route("/api/employees", methods=["GET"], endpoint="list_employees")
    @login_required
    def list_employees():
        rows = container.user_service.list_employees(requester=current_user())
        return success({"employees": [u.public_view() for u in rows]})

    @app.route("/api/user/supervisor", methods=["GET"], endpoint="my_supervisor")
    @login_required
    def my_supervisor():
        supervisor = container.user_service.my_supervisor(requester=current_user())
        return success({"supervisor": supervisor.public_view()})
