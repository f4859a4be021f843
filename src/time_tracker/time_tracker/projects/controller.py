from __future__ import annotations

from flask import Flask

from ..authorization.gateway import Action
from ..common.http import current_user, json_body, make_login_required, success
from ..container import Container


def register(app: Flask, container: Container) -> None:
    login_required = make_login_required(container.gateway)

    def owner_id() -> int:
        user = current_user()
        container.gateway.require(user, Action.MANAGE_OWN_PROJECTS)
        return user.user_id

    @app.route("/api/goals", methods=["POST"], endpoint="create_goal")
    @login_required
    def create_goal():
        data = json_body()
        project = container.project_service.create(
            owner_id=owner_id(),
            name=data.get("name", ""),
            description=data.get("description") or "",
            tasks=data.get("tasks"),
        )
        return success({"goal": project.to_dict()}, message="Goal created", status=201)

    @app.route("/api/goals", methods=["GET"], endpoint="list_goals")
    @login_required
    def list_goals():
        rows = container.project_service.list_for_owner(owner_id=owner_id())
        return success({"goals": [p.to_dict() for p in rows]})

    @app.route("/api/goals/<int:project_id>/tasks", methods=["GET"], endpoint="goal_tasks")
    @login_required
    def goal_tasks(project_id: int):
        tasks = container.project_service.list_tasks(owner_id=owner_id(), project_id=project_id)
        return success({"tasks": [t.to_dict() for t in tasks]})

    @app.route("/api/goals/<int:project_id>/tasks", methods=["POST"], endpoint="add_goal_task")
    @login_required
    def add_goal_task(project_id: int):
        tasks = container.project_service.add_task(
            owner_id=owner_id(),
            project_id=project_id,
            name=json_body().get("name", ""),
        )
        return success({"tasks": [t.to_dict() for t in tasks]}, message="Task added", status=201)
