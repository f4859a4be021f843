from __future__ import annotations

import pytest

from src.time_tracker.time_tracker.core.enums import Role
from src.time_tracker.time_tracker.main import create_app


@pytest.fixture
def app(container, org, monkeypatch):
    monkeypatch.setenv("APP_ENV", "testing")
    return create_app(container)


@pytest.fixture
def login(app):
    def _login(email, password="secret123"):
        client = app.test_client()
        resp = client.post("/login", json={"email": email, "password": password})
        assert resp.status_code == 200, resp.get_json()
        return client

    return _login


def test_api_requires_session(app):
    resp = app.test_client().get("/api/time")
    assert resp.status_code == 401
    assert resp.get_json() == {"status": "Error", "code": "UNAUTHORIZED", "message": "Authentication required"}


def test_register_then_login(app, users_repo):
    client = app.test_client()
    resp = client.post("/register", json={"name": "Zoe", "email": "zoe@example.com", "password": "zoe12345", "role": "superadmin"})
    assert resp.status_code == 201
    assert resp.get_json()["user"]["role"] == "employee"
    assert users_repo.get_by_email("zoe@example.com").role is Role.EMPLOYEE

    again = client.post("/register", json={"name": "Zoe", "email": "zoe@example.com", "password": "zoe12345"})
    assert again.status_code == 409

    login = client.post("/login", json={"email": "zoe@example.com", "password": "zoe12345"})
    body = login.get_json()
    assert login.status_code == 200
    assert body["isFirstLogin"] is True
    assert body["user"]["role"] == "employee"


def test_bad_login(app):
    resp = app.test_client().post("/login", json={"email": "alice@example.com", "password": "nope"})
    assert resp.status_code == 401
    assert resp.get_json()["message"] == "Invalid email or password"


def test_logout_drops_session(login):
    client = login("alice@example.com")
    assert client.post("/logout").status_code == 200
    assert client.get("/api/time").status_code == 401


def test_submit_approve_flow(login, org):
    alice = login("alice@example.com")
    created = alice.post("/api/time", json={"date": "2024-03-04", "minutes": 90, "project": "Apollo", "tasks": ["Design"]})
    assert created.status_code == 201
    entry = created.get_json()["entry"]
    assert entry["status"] == "pending"
    assert entry["supervisorId"] == org["bob"].user_id

    bob = login("bob@example.com")
    pending = bob.get("/api/pending-entries").get_json()["entries"]
    assert [e["id"] for e in pending] == [entry["id"]]

    assert login("erin@example.com").put(f"/api/time-entry/{entry['id']}/approve").status_code == 403
    assert login("admin@example.com").put(f"/api/time-entry/{entry['id']}/approve").status_code == 403

    ok = bob.put(f"/api/time-entry/{entry['id']}/approve")
    assert ok.status_code == 200
    assert ok.get_json()["entry"]["status"] == "approved"

    again = bob.put(f"/api/time-entry/{entry['id']}/reject", json={"reason": "late"})
    assert again.status_code == 409
    assert again.get_json()["code"] == "CONFLICT"

    mine = alice.get("/api/time").get_json()["entries"]
    assert mine[0]["status"] == "approved"


def test_reject_without_body_uses_default_reason(login):
    alice = login("alice@example.com")
    entry_id = alice.post("/api/time", json={"date": "2024-03-04", "minutes": 30}).get_json()["entry"]["id"]
    resp = login("bob@example.com").put(f"/api/time-entry/{entry_id}/reject")
    assert resp.status_code == 200
    assert resp.get_json()["entry"]["rejectionReason"] == "No reason provided"


def test_submit_validation_error(login):
    resp = login("alice@example.com").post("/api/time", json={"date": "2024-03-04", "minutes": 0})
    assert resp.status_code == 400
    assert resp.get_json()["code"] == "VALIDATION_ERROR"


def test_team_management(login, org):
    bob = login("bob@example.com")
    added = bob.post("/api/team/add", json={"employeeEmail": "frank@example.com"})
    assert added.status_code == 200
    assert added.get_json()["employee"]["supervisorId"] == org["bob"].user_id

    taken = bob.post("/api/team/add", json={"employeeEmail": "carol@example.com"})
    assert taken.status_code == 409

    team = bob.get("/api/team").get_json()["team"]
    assert [m["name"] for m in team] == ["Alice", "Dave", "Frank"]

    assert bob.delete(f"/api/team/{org['frank'].user_id}").status_code == 200
    assert bob.delete(f"/api/team/{org['carol'].user_id}").status_code == 403


def test_bad_query_param(login):
    resp = login("admin@example.com").get("/api/team?supervisorId=abc")
    assert resp.status_code == 400


def test_superadmin_routes(login, org, users_repo):
    admin = login("admin@example.com")
    created = admin.post("/api/supervisor/create", json={"name": "Gina", "email": "gina@example.com", "password": "gina1234"})
    assert created.status_code == 201
    gina_id = created.get_json()["supervisor"]["id"]

    names = [s["name"] for s in admin.get("/api/supervisors").get_json()["supervisors"]]
    assert names == ["Bob", "Erin", "Gina"]
    assert admin.get(f"/api/supervisors/{gina_id}").status_code == 200
    assert admin.get("/api/supervisors/9999").status_code == 404

    deleted = admin.delete(f"/api/supervisors/{org['bob'].user_id}")
    assert deleted.status_code == 200
    assert deleted.get_json()["releasedEmployees"] == 2
    assert users_repo.list_by_supervisor(org["bob"].user_id) == []

    assert login("erin@example.com").get("/api/supervisors").status_code == 403


def test_deleted_supervisor_session_is_rejected(login, org):
    bob = login("bob@example.com")
    login("admin@example.com").delete(f"/api/supervisors/{org['bob'].user_id}")
    assert bob.get("/api/team").status_code == 401


def test_reassign_route(login, org):
    alice = login("alice@example.com")
    entry_id = alice.post("/api/time", json={"date": "2024-03-04", "minutes": 30}).get_json()["entry"]["id"]

    admin = login("admin@example.com")
    admin.delete(f"/api/supervisors/{org['bob'].user_id}")
    resp = admin.post(
        f"/api/supervisors/{org['bob'].user_id}/entries/reassign",
        json={"toSupervisorId": org["erin"].user_id},
    )
    assert resp.status_code == 200
    assert resp.get_json()["reassigned"] == 1

    assert login("erin@example.com").put(f"/api/time-entry/{entry_id}/approve").status_code == 200
    assert admin.post(f"/api/supervisors/{org['bob'].user_id}/entries/reassign", json={}).status_code == 400


def test_directory_routes(login, org):
    assert login("alice@example.com").get("/api/user/supervisor").get_json()["supervisor"]["name"] == "Bob"
    assert login("frank@example.com").get("/api/user/supervisor").status_code == 404
    assert login("alice@example.com").get("/api/employees").status_code == 403
    assert len(login("bob@example.com").get("/api/employees").get_json()["employees"]) == 4


def test_reports(login, org):
    alice = login("alice@example.com")
    alice.post("/api/time", json={"date": "2024-03-04", "minutes": 60, "project": "Apollo"})
    alice.post("/api/time", json={"date": "2024-04-02", "minutes": 30})

    me = alice.get("/api/reports/me?startDate=2024-03-01&endDate=2024-03-31").get_json()["report"]
    assert me["totalMinutes"] == 60
    assert me["byMonth"] == {"2024-03": 60}

    assert alice.get("/api/reports/me?startDate=March").status_code == 400
    assert alice.get("/api/reports/me?status=done").status_code == 400

    team = login("bob@example.com").get("/api/reports/team?status=pending").get_json()["report"]
    assert team["entryCount"] == 2

    org_report = login("admin@example.com").get("/api/reports/organization").get_json()["report"]
    assert org_report["totals"]["totalMinutes"] == 90
    assert login("bob@example.com").get("/api/reports/organization").status_code == 403


def test_goals(login):
    alice = login("alice@example.com")
    created = alice.post("/api/goals", json={"name": "Learn SQL", "tasks": ["Joins"]})
    assert created.status_code == 201
    goal_id = created.get_json()["goal"]["id"]

    added = alice.post(f"/api/goals/{goal_id}/tasks", json={"name": "Indexes"})
    assert [t["name"] for t in added.get_json()["tasks"]] == ["Joins", "Indexes"]
    assert [g["name"] for g in alice.get("/api/goals").get_json()["goals"]] == ["Learn SQL"]

    assert login("bob@example.com").get(f"/api/goals/{goal_id}/tasks").status_code == 404


def test_unknown_route_is_json(app):
    resp = app.test_client().get("/nope")
    assert resp.status_code == 404
    assert resp.get_json()["status"] == "Error"


def test_malformed_tasks_are_a_400(login):
    resp = login("alice@example.com").post("/api/time", json={"date": "2024-03-01", "minutes": 90, "tasks": [5]})
    assert resp.status_code == 400
    assert resp.get_json()["code"] == "VALIDATION_ERROR"


def test_non_string_account_fields(app, login):
    client = app.test_client()
    resp = client.post("/register", json={"name": "Zoe", "email": "zoe@example.com", "password": 12345678})
    assert resp.status_code == 400

    resp = client.post("/login", json={"email": 5, "password": "secret123"})
    assert resp.status_code == 401
    assert resp.get_json()["message"] == "Invalid email or password"

    resp = login("admin@example.com").post(
        "/api/supervisor/create", json={"name": "Gina", "email": ["gina@example.com"], "password": "gina1234"}
    )
    assert resp.status_code == 400


def test_long_reject_reason_is_a_400(login):
    entry_id = login("alice@example.com").post("/api/time", json={"date": "2024-03-04", "minutes": 30}).get_json()["entry"]["id"]
    resp = login("bob@example.com").put(f"/api/time-entry/{entry_id}/reject", json={"reason": "x" * 501})
    assert resp.status_code == 400
