from __future__ import annotations

from datetime import datetime

import pytest
from flask import Flask, jsonify

from src.ministry_system.ministry_system.common.web import (
    admin_required,
    query_age_group,
    query_date,
    register_error_handlers,
    staff_required,
    store_user,
)
from src.ministry_system.ministry_system.core.enums import Role
from src.ministry_system.ministry_system.core.exceptions import (
    AlreadyCheckedInError,
    AuthenticationError,
    AuthorizationError,
    CollaboratorError,
    DuplicateCategoryError,
    ValidationError,
)
from src.ministry_system.ministry_system.users.model import SessionUser

RAISED = {
    "already": AlreadyCheckedInError(datetime(2026, 3, 1, 9, 5), session_id=4),
    "duplicate": DuplicateCategoryError("Attendance"),
    "invalid": ValidationError("Student not found"),
    "login": AuthenticationError("Invalid username or password"),
    "forbidden": AuthorizationError("Admins only"),
    "ai": CollaboratorError("AI service unavailable"),
}


@pytest.fixture
def app():
    app = Flask(__name__)
    app.secret_key = "test"
    register_error_handlers(app)

    @app.route("/raise/<name>")
    def raise_error(name):
        raise RAISED[name]

    @app.route("/login-as/<role>")
    def login_as(role):
        store_user(SessionUser(username="someone", role=Role(role)))
        return jsonify({"success": True})

    @app.route("/staff")
    @staff_required
    def staff_only():
        return jsonify({"success": True})

    @app.route("/admin")
    @admin_required
    def admin_only():
        return jsonify({"success": True})

    @app.route("/filters")
    def filters():
        age_group = query_age_group()
        day = query_date("date")
        return jsonify({
            "age_group": age_group.value if age_group else None,
            "date": day.isoformat() if day else None,
        })

    return app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.mark.parametrize(
    "name, status",
    [("invalid", 400), ("login", 401), ("forbidden", 403), ("duplicate", 409), ("ai", 502)],
)
def test_domain_errors_map_to_status_codes(client, name, status):
    resp = client.get(f"/raise/{name}")
    assert resp.status_code == status
    assert resp.get_json()["success"] is False


def test_already_checked_in_is_a_soft_success(client):
    body = client.get("/raise/already").get_json()
    assert body["success"] is True
    assert body["already_present"] is True
    assert body["session_id"] == 4
    assert body["check_in_time"] == "2026-03-01T09:05:00"


def test_duplicate_message_tells_staff_how_to_proceed(client):
    message = client.get("/raise/duplicate").get_json()["message"]
    assert message.startswith("Points already awarded for Attendance today.")
    assert "settings" in message


def test_anonymous_request_is_401(client):
    assert client.get("/staff").status_code == 401


def test_parent_cannot_reach_staff_routes(client):
    client.get("/login-as/PARENTS")
    assert client.get("/staff").status_code == 403


def test_teacher_is_staff_but_not_admin(client):
    client.get("/login-as/TEACHER")
    assert client.get("/staff").status_code == 200
    assert client.get("/admin").status_code == 403


def test_admin_passes_both_guards(client):
    client.get("/login-as/ADMIN")
    assert client.get("/staff").status_code == 200
    assert client.get("/admin").status_code == 200


def test_query_filters_parse_or_reject(client):
    assert client.get("/filters").get_json() == {"age_group": None, "date": None}
    assert client.get("/filters?age_group=7-9&date=2026-03-01").get_json() == {
        "age_group": "7-9",
        "date": "2026-03-01",
    }
    assert client.get("/filters?date=03/01/2026").status_code == 400
