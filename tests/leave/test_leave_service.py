from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime
from typing import Optional

import pytest

from src.hris_payroll.hris_payroll.core.enums import AccountStatus, ApprovalStatus, Role
from src.hris_payroll.hris_payroll.core.exceptions import (
    AuthorizationError,
    ConflictError,
    NotFoundError,
    ValidationError,
)
from src.hris_payroll.hris_payroll.employees.model import Employee
from src.hris_payroll.hris_payroll.leave.model import LeaveRequest
from src.hris_payroll.hris_payroll.leave.schemas import LeaveCreate, LeaveStatusUpdate
from src.hris_payroll.hris_payroll.leave.service import LeaveService
from src.hris_payroll.hris_payroll.users.model import AuthUser


class InMemoryLeaves:
    def __init__(self):
        self.rows: dict[int, LeaveRequest] = {}

    def get(self, leave_id: int) -> Optional[LeaveRequest]:
        return self.rows.get(leave_id)

    def list_all(self):
        return list(self.rows.values())

    def list_for_employee(self, employee_id: int):
        return [r for r in self.rows.values() if r.employee_id == employee_id]

    def create(self, **fields) -> int:
        leave_id = len(self.rows) + 1
        self.rows[leave_id] = LeaveRequest(leave_id=leave_id, **fields)
        return leave_id

    def decide(self, leave_id, *, decision, approver_id, notes, decided_at) -> bool:
        row = self.rows[leave_id]
        if row.status != ApprovalStatus.PENDING:
            return False
        self.rows[leave_id] = replace(
            row, status=decision, approved_by=approver_id, approval_notes=notes, approval_date=decided_at
        )
        return True

    def delete(self, leave_id: int) -> bool:
        return self.rows.pop(leave_id, None) is not None


class InMemoryEmployees:
    def __init__(self, *employee_ids):
        self.employees = {i: Employee(employee_id=i, nama_lengkap=f"Emp {i}") for i in employee_ids}

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        return self.employees.get(employee_id)


STAFF = AuthUser(user_id=10, username="budi", role=Role.KARYAWAN, status=AccountStatus.ACTIVE, employee_id=1)
ADMIN = AuthUser(user_id=1, username="admin", role=Role.ADMIN, status=AccountStatus.ACTIVE)


@pytest.fixture
def service():
    return LeaveService(InMemoryLeaves(), InMemoryEmployees(1, 2), clock=lambda: datetime(2025, 6, 1, 9, 0))


def _submit(service, start=date(2025, 6, 10), end=date(2025, 6, 12)) -> LeaveRequest:
    return service.create(STAFF, LeaveCreate(tanggal_mulai=start, tanggal_selesai=end, jenis_pengajuan=" Cuti ", alasan=" liburan "))


def test_submitted_leave_starts_pending(service):
    leave = _submit(service)

    assert leave.status == ApprovalStatus.PENDING
    assert leave.employee_id == 1
    assert leave.jenis_pengajuan == "Cuti"
    assert leave.alasan == "liburan"
    assert leave.day_span == 3


def test_end_before_start_is_rejected(service):
    with pytest.raises(ValidationError):
        _submit(service, start=date(2025, 6, 12), end=date(2025, 6, 10))


def test_missing_fields_are_rejected(service):
    with pytest.raises(ValidationError):
        service.create(STAFF, LeaveCreate(tanggal_mulai=date(2025, 6, 10)))


def test_admin_decides_once(service):
    leave = _submit(service)

    approved = service.decide(ADMIN, leave.leave_id, LeaveStatusUpdate(status="approved", notes="Selamat berlibur"))

    assert approved.status == ApprovalStatus.APPROVED
    assert approved.approved_by == ADMIN.user_id
    assert approved.approval_date == datetime(2025, 6, 1, 9, 0)
    with pytest.raises(ConflictError):
        service.decide(ADMIN, leave.leave_id, LeaveStatusUpdate(status="rejected"))


def test_invalid_status_value(service):
    leave = _submit(service)

    with pytest.raises(ValidationError):
        service.decide(ADMIN, leave.leave_id, LeaveStatusUpdate(status="pending"))


def test_staff_cannot_decide(service):
    leave = _submit(service)

    with pytest.raises(AuthorizationError):
        service.decide(STAFF, leave.leave_id, LeaveStatusUpdate(status="approved"))


def test_staff_visibility_and_delete_rules(service):
    leave = _submit(service)
    other = replace(STAFF, user_id=11, employee_id=2)

    assert service.list_visible(other) == []
    assert [r.leave_id for r in service.list_visible(ADMIN)] == [leave.leave_id]
    with pytest.raises(AuthorizationError):
        service.list_for_employee(other, 1)
    with pytest.raises(AuthorizationError):
        service.delete(other, leave.leave_id)

    service.decide(ADMIN, leave.leave_id, LeaveStatusUpdate(status="rejected"))
    with pytest.raises(AuthorizationError):
        service.delete(STAFF, leave.leave_id)

    service.delete(ADMIN, leave.leave_id)
    with pytest.raises(NotFoundError):
        service.require(leave.leave_id)
