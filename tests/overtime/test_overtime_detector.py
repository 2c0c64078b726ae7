from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime, time
from typing import Optional

import pytest

from src.hris_payroll.hris_payroll.core.enums import AccountStatus, ApprovalStatus, Role
from src.hris_payroll.hris_payroll.core.exceptions import AuthorizationError, ConflictError
from src.hris_payroll.hris_payroll.overtime.detector import evaluate
from src.hris_payroll.hris_payroll.overtime.model import Overtime
from src.hris_payroll.hris_payroll.overtime.schemas import OvertimeDecision
from src.hris_payroll.hris_payroll.overtime.service import OvertimeService, summarize
from src.hris_payroll.hris_payroll.users.model import AuthUser

JUNE_2 = date(2025, 6, 2)


class InMemoryOvertime:
    def __init__(self, rows):
        self.rows = {r.overtime_id: r for r in rows}

    def get(self, overtime_id: int) -> Optional[Overtime]:
        return self.rows.get(overtime_id)

    def list_records(self, *, status=None, employee_id=None, start=None, end=None):
        return [
            r
            for r in self.rows.values()
            if (status is None or r.status == status)
            and (employee_id is None or r.employee_id == employee_id)
            and (start is None or r.tanggal >= start)
            and (end is None or r.tanggal <= end)
        ]

    def decide(self, overtime_id, *, decision, approver_id, notes, decided_at) -> bool:
        row = self.rows[overtime_id]
        if row.status != ApprovalStatus.PENDING:
            return False
        self.rows[overtime_id] = replace(
            row, status=decision, approved_by=approver_id, approval_notes=notes, approval_date=decided_at
        )
        return True


def _row(overtime_id, hours, status=ApprovalStatus.PENDING, employee_id=1) -> Overtime:
    return Overtime(
        overtime_id=overtime_id,
        employee_id=employee_id,
        tanggal=JUNE_2,
        jam_checkout=time(19, 0),
        jam_scheduled=time(18, 0),
        overtime_hours=hours,
        bonus_per_hour=50_000,
        total_bonus=hours * 50_000,
        status=status,
    )


HR = AuthUser(user_id=2, username="hr", role=Role.HR, status=AccountStatus.ACTIVE)
STAFF = AuthUser(user_id=10, username="budi", role=Role.KARYAWAN, status=AccountStatus.ACTIVE, employee_id=1)


def test_evaluate_prices_hours_past_scheduled_end():
    candidate = evaluate(
        employee_id=1,
        attendance_id=5,
        tanggal=JUNE_2,
        checkout=time(19, 30),
        scheduled_end=time(18, 0),
    )

    assert candidate.overtime_minutes == 90
    assert candidate.overtime_hours == 1.5
    assert candidate.total_bonus == 75_000
    assert candidate.reason == "Auto-detected: Checkout at 19:30, scheduled end 18:00"


def test_evaluate_counts_exactly_thirty_minutes():
    candidate = evaluate(
        employee_id=1, attendance_id=None, tanggal=JUNE_2, checkout=time(18, 30), scheduled_end=time(18, 0)
    )

    assert candidate is not None
    assert candidate.overtime_hours == 0.5


def test_evaluate_ignores_short_or_early_checkout():
    assert evaluate(employee_id=1, attendance_id=None, tanggal=JUNE_2, checkout=time(18, 29), scheduled_end=time(18, 0)) is None
    assert evaluate(employee_id=1, attendance_id=None, tanggal=JUNE_2, checkout=time(17, 0), scheduled_end=time(18, 0)) is None


def test_summary_counts_only_approved_hours():
    summary = summarize(
        [
            _row(1, 1.0, ApprovalStatus.APPROVED),
            _row(2, 2.0, ApprovalStatus.PENDING),
            _row(3, 0.5, ApprovalStatus.REJECTED),
            _row(4, 0.75, ApprovalStatus.APPROVED),
        ]
    )

    assert summary == {"total_hours": 1.75, "total_bonus": 87_500, "pending": 1, "approved": 2, "rejected": 1}


def test_hr_approves_pending_overtime_once():
    service = OvertimeService(InMemoryOvertime([_row(1, 1.0)]), clock=lambda: datetime(2025, 6, 3, 9, 0))

    approved = service.decide(HR, 1, OvertimeDecision(action="approve", notes="ok"))

    assert approved.status == ApprovalStatus.APPROVED
    assert approved.approved_by == 2
    assert approved.approval_notes == "ok"
    with pytest.raises(ConflictError) as exc:
        service.decide(HR, 1, OvertimeDecision(action="reject"))
    assert exc.value.message == "Overtime ini sudah approved"


def test_staff_cannot_decide_overtime():
    service = OvertimeService(InMemoryOvertime([_row(1, 1.0)]))

    with pytest.raises(AuthorizationError):
        service.decide(STAFF, 1, OvertimeDecision(action="approve"))


def test_staff_sees_only_own_overtime():
    service = OvertimeService(InMemoryOvertime([_row(1, 1.0, employee_id=1), _row(2, 1.0, employee_id=2)]))

    mine = service.for_employee(STAFF, 1)

    assert [r["overtime_id"] for r in mine["records"]] == [1]
    with pytest.raises(AuthorizationError):
        service.for_employee(STAFF, 2)
