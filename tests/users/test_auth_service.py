from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timedelta
from typing import Optional

import pytest
from werkzeug.security import generate_password_hash

from src.hris_payroll.hris_payroll.core.enums import AccountStatus, Role
from src.hris_payroll.hris_payroll.core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    ValidationError,
)
from src.hris_payroll.hris_payroll.employees.model import Employee
from src.hris_payroll.hris_payroll.users.model import User
from src.hris_payroll.hris_payroll.users.schemas import LoginRequest, RegisterRequest
from src.hris_payroll.hris_payroll.users.service import AuthService, UserService
from src.hris_payroll.hris_payroll.users.tokens import TokenService

NOW = datetime(2025, 6, 2, 9, 0)


class InMemoryUsers:
    def __init__(self):
        self.users: dict[int, User] = {}

    def get_by_id(self, user_id: int) -> Optional[User]:
        return self.users.get(user_id)

    def get_by_username(self, username: str) -> Optional[User]:
        return next((u for u in self.users.values() if u.username == username), None)

    def get_by_email(self, email: str) -> Optional[User]:
        return next((u for u in self.users.values() if u.email == email), None)

    def get_by_login(self, identifier: str) -> Optional[User]:
        return self.get_by_username(identifier) or self.get_by_email(identifier)

    def get_by_reset_token(self, token: str) -> Optional[User]:
        return next((u for u in self.users.values() if u.reset_token == token), None)

    def list_by_status(self, status):
        return [u for u in self.users.values() if u.status == status]

    def create_user(self, *, username, email, password_hash, role, status, status_karyawan=None) -> int:
        user_id = len(self.users) + 1
        self.users[user_id] = User(
            user_id=user_id,
            username=username,
            email=email,
            password_hash=password_hash,
            role=role,
            status=status,
            status_karyawan=status_karyawan,
        )
        return user_id

    def update_password(self, user_id, password_hash):
        self.users[user_id] = replace(self.users[user_id], password_hash=password_hash)

    def update_status(self, user_id, *, status, role=None) -> bool:
        user = self.users[user_id]
        if user.status != AccountStatus.PENDING:
            return False
        self.users[user_id] = replace(user, status=status, role=role or user.role)
        return True

    def set_reset_token(self, user_id, *, token, expires_at):
        self.users[user_id] = replace(self.users[user_id], reset_token=token, reset_token_expiry=expires_at)

    def clear_reset_token(self, user_id):
        self.users[user_id] = replace(self.users[user_id], reset_token=None, reset_token_expiry=None)

    def delete_user(self, user_id) -> bool:
        return self.users.pop(user_id, None) is not None


class InMemoryEmployees:
    def __init__(self):
        self.employees: dict[int, Employee] = {}

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        return self.employees.get(employee_id)

    def get_by_user_id(self, user_id: int) -> Optional[Employee]:
        return next((e for e in self.employees.values() if e.user_id == user_id), None)

    def create(self, **fields) -> int:
        employee_id = len(self.employees) + 1
        self.employees[employee_id] = Employee(employee_id=employee_id, **fields)
        return employee_id

    def delete_by_user_id(self, user_id) -> int:
        ids = [e.employee_id for e in self.employees.values() if e.user_id == user_id]
        for employee_id in ids:
            del self.employees[employee_id]
        return len(ids)


class RecordingMailer:
    def __init__(self, fail: bool = False):
        self.sent = []
        self.fail = fail

    def send(self, to, subject, html):
        if self.fail:
            raise OSError("smtp down")
        self.sent.append((to, subject, html))


@pytest.fixture
def repos():
    return InMemoryUsers(), InMemoryEmployees(), RecordingMailer()


def make_auth(repos, clock=lambda: NOW):
    users, employees, mailer = repos
    return AuthService(users, employees, TokenService("s3cret"), mailer, frontend_url="http://app.local/", clock=clock)


def _register(auth, **overrides):
    fields = dict(username="budi", email="budi@acme.id", password="rahasia", nama_lengkap="Budi Santoso")
    fields.update(overrides)
    fields.setdefault("confirmPassword", fields["password"])
    return auth.register(RegisterRequest(**fields))


def test_register_creates_pending_account_with_employee(repos):
    users, employees, _ = repos

    user = _register(make_auth(repos), jabatan="Staff")

    assert user.status == AccountStatus.PENDING
    assert user.role == Role.KARYAWAN
    assert user.status_karyawan == "Magang"
    employee = employees.get_by_user_id(user.user_id)
    assert employee.nama_lengkap == "Budi Santoso"
    assert employee.gaji_pokok == 5_000_000
    assert employee.tanggal_masuk == NOW.date()


def test_register_rejects_duplicates_and_short_passwords(repos):
    auth = make_auth(repos)
    _register(auth)

    with pytest.raises(ConflictError):
        _register(auth, email="other@acme.id")
    with pytest.raises(ConflictError):
        _register(auth, username="other")
    with pytest.raises(ValidationError):
        _register(auth, username="x", email="x@acme.id", password="123")


def test_register_requires_matching_confirmation(repos):
    auth = make_auth(repos)

    with pytest.raises(ValidationError) as exc:
        _register(auth, confirmPassword="lain")
    with pytest.raises(ValidationError):
        auth.register(RegisterRequest(username="budi", email="budi@acme.id", password="rahasia", nama_lengkap="Budi"))

    assert exc.value.message == "Password dan konfirmasi password tidak cocok."


def test_pending_account_cannot_login(repos):
    auth = make_auth(repos)
    _register(auth)

    with pytest.raises(AuthorizationError) as exc:
        auth.login(LoginRequest(username="budi", password="rahasia"))

    assert exc.value.code == "ACCOUNT_PENDING"


def test_approved_account_logs_in_by_email(repos):
    users, _, mailer = repos
    auth = make_auth(repos)
    user = _register(auth)
    UserService(users, repos[1], mailer, frontend_url="http://app.local").approve(user.user_id, approved_role="HR")

    token, identity = auth.login(LoginRequest(username="budi@acme.id", password="rahasia"))

    assert identity.role == Role.HR
    assert identity.employee_id is not None
    assert TokenService("s3cret").authenticate(token) == identity
    assert mailer.sent[0][0] == "budi@acme.id"
    with pytest.raises(AuthenticationError):
        auth.login(LoginRequest(username="budi", password="salah"))


def test_login_creates_missing_employee_record(repos):
    users, employees, _ = repos
    users.create_user(
        username="admin",
        email="admin@acme.id",
        password_hash=generate_password_hash("admin123"),
        role=Role.ADMIN,
        status=AccountStatus.ACTIVE,
    )

    _, identity = make_auth(repos).login(LoginRequest(username="admin", password="admin123"))

    assert identity.employee_id == employees.get_by_user_id(1).employee_id


def test_account_without_password_is_told_to_complete_profile(repos):
    users, _, _ = repos
    users.create_user(
        username="oauth", email="o@acme.id", password_hash=None, role=Role.KARYAWAN, status=AccountStatus.ACTIVE
    )

    with pytest.raises(AuthenticationError) as exc:
        make_auth(repos).login(LoginRequest(username="oauth", password="apa-saja"))

    assert exc.value.code == "PASSWORD_NOT_SET"


def test_reset_password_flow(repos):
    users, _, mailer = repos
    clock_now = [NOW]
    auth = make_auth(repos, clock=lambda: clock_now[0])
    user = _register(auth)

    auth.forgot_password("budi@acme.id")
    token = users.get_by_id(user.user_id).reset_token
    assert token
    assert f"http://app.local/reset-password?token={token}" in mailer.sent[-1][2]

    auth.reset_password(token, "baru123")

    updated = users.get_by_id(user.user_id)
    assert updated.reset_token is None
    assert updated.password_hash != user.password_hash


def test_expired_reset_token_is_rejected(repos):
    users, _, _ = repos
    clock_now = [NOW]
    auth = make_auth(repos, clock=lambda: clock_now[0])
    user = _register(auth)
    auth.forgot_password("budi@acme.id")
    token = users.get_by_id(user.user_id).reset_token

    clock_now[0] = NOW + timedelta(minutes=61)
    with pytest.raises(AuthenticationError):
        auth.reset_password(token, "baru123")


def test_forgot_password_ignores_unknown_email(repos):
    _, _, mailer = repos

    make_auth(repos).forgot_password("nobody@acme.id")

    assert mailer.sent == []


def test_reject_removes_account_even_when_mail_fails():
    users, employees = InMemoryUsers(), InMemoryEmployees()
    auth = AuthService(users, employees, TokenService("s3cret"), RecordingMailer(), clock=lambda: NOW)
    user = _register(auth)
    service = UserService(users, employees, RecordingMailer(fail=True))

    _, sent = service.reject(user.user_id, reason=None)

    assert sent is False
    assert users.get_by_id(user.user_id) is None
    assert employees.get_by_user_id(user.user_id) is None


def test_approve_twice_conflicts(repos):
    users, employees, mailer = repos
    user = _register(make_auth(repos))
    service = UserService(users, employees, mailer)
    service.approve(user.user_id, approved_role="Karyawan")

    with pytest.raises(ConflictError):
        service.approve(user.user_id, approved_role="Karyawan")
    with pytest.raises(ValidationError):
        service.approve(user.user_id, approved_role="Boss")
