from datetime import date, time

import pytest
from flask import Flask, jsonify

from src.hris_payroll.hris_payroll.common.http import parse_body, register_error_handlers
from src.hris_payroll.hris_payroll.core.enums import AccountStatus, Role
from src.hris_payroll.hris_payroll.core.exceptions import SubscriptionRequiredError
from src.hris_payroll.hris_payroll.leave.schemas import LeaveCreate
from src.hris_payroll.hris_payroll.users.guards import (
    current_user,
    login_required,
    roles_required,
    subscription_required,
)
from src.hris_payroll.hris_payroll.users.model import AuthUser
from src.hris_payroll.hris_payroll.users.tokens import TokenService

SECRET = "test-secret"


def _deny():
    raise SubscriptionRequiredError("Subscription required", code="SUBSCRIPTION_REQUIRED")


@pytest.fixture
def client():
    app = Flask(__name__)
    register_error_handlers(app)
    tokens = TokenService(SECRET)
    auth = login_required(tokens)
    auth_pending = login_required(tokens, allow_pending=True)
    managers = roles_required(Role.ADMIN, Role.HR)
    paid = subscription_required(_deny)
    free = subscription_required(_deny, enabled=False)

    @app.get("/me", endpoint="me")
    @auth
    def me():
        return jsonify({"username": current_user().username, "when": time(9, 5), "day": date(2025, 6, 2)})

    @app.get("/pending-ok", endpoint="pending_ok")
    @auth_pending
    def pending_ok():
        return jsonify({"status": current_user().status})

    @app.get("/managers", endpoint="managers")
    @auth
    @managers
    def managers_only():
        return jsonify({"ok": True})

    @app.get("/paid", endpoint="paid")
    @auth
    @paid
    def paid_view():
        return jsonify({"ok": True})

    @app.get("/free", endpoint="free")
    @auth
    @free
    def free_view():
        return jsonify({"ok": True})

    @app.post("/leave", endpoint="leave")
    def leave():
        data = parse_body(LeaveCreate)
        return jsonify({"start": data.tanggal_mulai})

    @app.get("/boom", endpoint="boom")
    def boom():
        raise RuntimeError("kaboom")

    return app.test_client()


def _token(role=Role.KARYAWAN, status=AccountStatus.ACTIVE, secret=SECRET):
    user = AuthUser(user_id=7, username="sari", role=role, status=status, employee_id=3, email="sari@acme.id")
    return TokenService(secret).issue_for(user)


def _auth(token):
    return {"Authorization": f"Bearer {token}"}


def test_missing_token_is_unauthorized(client):
    resp = client.get("/me")

    assert resp.status_code == 401
    assert resp.get_json() == {"error": "Token tidak ditemukan. Silakan login terlebih dahulu."}


def test_wrong_scheme_is_unauthorized(client):
    resp = client.get("/me", headers={"Authorization": f"Token {_token()}"})

    assert resp.status_code == 401


def test_token_signed_with_other_secret_is_forbidden(client):
    resp = client.get("/me", headers=_auth(_token(secret="other")))

    assert resp.status_code == 403
    assert resp.get_json()["error"] == "Token tidak valid atau sudah kedaluwarsa."


def test_valid_token_exposes_user_and_serializes_dates(client):
    resp = client.get("/me", headers=_auth(_token()))

    assert resp.status_code == 200
    assert resp.get_json() == {"username": "sari", "when": "09:05", "day": "2025-06-02"}


def test_pending_account_is_blocked_unless_allowed(client):
    token = _token(status=AccountStatus.PENDING)

    blocked = client.get("/me", headers=_auth(token))
    allowed = client.get("/pending-ok", headers=_auth(token))

    assert blocked.status_code == 403
    assert blocked.get_json()["code"] == "ACCOUNT_PENDING"
    assert allowed.status_code == 200
    assert allowed.get_json() == {"status": "pending"}


def test_rejected_account_is_blocked(client):
    resp = client.get("/me", headers=_auth(_token(status=AccountStatus.REJECTED)))

    assert resp.status_code == 403
    assert resp.get_json()["code"] == "ACCOUNT_REJECTED"


def test_role_guard_lists_required_roles(client):
    denied = client.get("/managers", headers=_auth(_token()))
    allowed = client.get("/managers", headers=_auth(_token(role=Role.HR)))

    assert denied.status_code == 403
    assert denied.get_json()["details"] == {"required": ["Admin", "HR"], "current": "Karyawan"}
    assert allowed.status_code == 200


def test_subscription_gate_only_when_enabled(client):
    gated = client.get("/paid", headers=_auth(_token()))
    open_ = client.get("/free", headers=_auth(_token()))

    assert gated.status_code == 403
    assert gated.get_json()["code"] == "SUBSCRIPTION_REQUIRED"
    assert open_.status_code == 200


def test_schema_errors_are_reported_per_field(client):
    resp = client.post("/leave", json={"tanggal_mulai": "bukan-tanggal"})

    assert resp.status_code == 400
    body = resp.get_json()
    assert body["error"] == "Data yang dikirim tidak valid."
    assert "tanggal_mulai" in body["details"]


def test_non_object_body_is_rejected(client):
    resp = client.post("/leave", json=[1, 2])

    assert resp.status_code == 400
    assert resp.get_json() == {"error": "Body harus berupa objek JSON."}


def test_unexpected_errors_become_500(client):
    resp = client.get("/boom")

    assert resp.status_code == 500
    assert resp.get_json()["error"] == "Terjadi kesalahan pada server."
