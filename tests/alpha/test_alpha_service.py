from __future__ import annotations

import dataclasses
from dataclasses import replace
from datetime import date, datetime
from typing import Optional

import pytest

from src.hris_payroll.hris_payroll.alpha.schemas import AlphaCheckRequest, AlphaConvertRequest
from src.hris_payroll.hris_payroll.alpha.service import AlphaService, is_working_day
from src.hris_payroll.hris_payroll.attendance.model import Attendance
from src.hris_payroll.hris_payroll.core.enums import ApprovalStatus, AttendanceStatus
from src.hris_payroll.hris_payroll.core.exceptions import ValidationError
from src.hris_payroll.hris_payroll.employees.model import Employee
from src.hris_payroll.hris_payroll.leave.model import LeaveRequest

MONDAY = date(2025, 6, 2)
SATURDAY = date(2025, 6, 7)


class InMemoryAttendance:
    def __init__(self, rows=()):
        self.rows = {r.attendance_id: r for r in rows}

    def get_by_id(self, attendance_id: int) -> Optional[Attendance]:
        return self.rows.get(attendance_id)

    def list_records(self, *, employee_id=None, start=None, end=None, status=None):
        return [
            r
            for r in self.rows.values()
            if (employee_id is None or r.employee_id == employee_id)
            and (start is None or r.tanggal >= start)
            and (end is None or r.tanggal <= end)
            and (status is None or r.status == status)
        ]

    def create(self, draft) -> int:
        attendance_id = max(self.rows, default=0) + 1
        self.rows[attendance_id] = Attendance(attendance_id=attendance_id, **dataclasses.asdict(draft))
        return attendance_id

    def update(self, attendance_id, changes) -> bool:
        self.rows[attendance_id] = replace(self.rows[attendance_id], **changes)
        return True

    def delete(self, attendance_id: int) -> bool:
        return self.rows.pop(attendance_id, None) is not None


class InMemoryEmployees:
    def __init__(self, *employees):
        self.employees = list(employees)

    def list_active(self):
        return self.employees


class InMemoryLeaves:
    def __init__(self, leaves=()):
        self.leaves = list(leaves)

    def list_approved_overlapping(self, start, end, *, employee_id=None):
        return [l for l in self.leaves if l.status == ApprovalStatus.APPROVED and l.overlaps(start, end)]


def make_service(attendance=(), leaves=()):
    repo = InMemoryAttendance(attendance)
    employees = InMemoryEmployees(
        Employee(employee_id=1, nama_lengkap="Budi"),
        Employee(employee_id=2, nama_lengkap="Sari"),
        Employee(employee_id=3, nama_lengkap="Tono"),
    )
    service = AlphaService(repo, employees, InMemoryLeaves(leaves), clock=lambda: datetime(2025, 6, 3, 1, 0))
    return service, repo


def test_working_days_are_weekdays():
    assert is_working_day(MONDAY)
    assert not is_working_day(SATURDAY)


def test_check_marks_absent_employees_without_leave():
    service, repo = make_service(
        attendance=[Attendance(attendance_id=1, employee_id=1, tanggal=MONDAY, status=AttendanceStatus.HADIR)],
        leaves=[
            LeaveRequest(
                leave_id=1,
                employee_id=2,
                tanggal_mulai=date(2025, 6, 1),
                tanggal_selesai=date(2025, 6, 3),
                jenis_pengajuan="Cuti",
                status=ApprovalStatus.APPROVED,
            )
        ],
    )

    result = service.check(AlphaCheckRequest())

    assert result["date"] == MONDAY
    assert result["alpha_created"] == 1
    assert result["on_leave"] == 1
    assert result["records"][0]["employee_id"] == 3
    created = repo.rows[result["records"][0]["attendance_id"]]
    assert created.status == AttendanceStatus.ALPA
    assert created.recorded_by_role == "System"
    assert created.keterangan == "Tidak hadir tanpa keterangan"


def test_check_is_idempotent_for_same_day():
    service, _ = make_service()

    first = service.check_date(MONDAY)
    second = service.check_date(MONDAY)

    assert first["alpha_created"] == 3
    assert second["alpha_created"] == 0


def test_weekend_is_skipped():
    service, repo = make_service()

    result = service.check(AlphaCheckRequest(date=SATURDAY))

    assert result["skipped"] is True
    assert repo.rows == {}


def test_convert_alpha_to_sakit():
    service, repo = make_service()
    service.check_date(MONDAY)

    updated = service.convert(1, AlphaConvertRequest(new_status="Sakit"), converted_by="hr")

    assert updated.status == AttendanceStatus.SAKIT
    assert updated.keterangan == "Converted from alpha to sakit by hr"


def test_convert_rejects_non_alpha_rows_and_bad_status():
    service, _ = make_service(
        attendance=[Attendance(attendance_id=9, employee_id=1, tanggal=MONDAY, status=AttendanceStatus.HADIR)]
    )

    with pytest.raises(ValidationError):
        service.convert(9, AlphaConvertRequest(new_status="izin"), converted_by="hr")
    with pytest.raises(ValidationError):
        service.convert(9, AlphaConvertRequest(new_status="terlambat"), converted_by="hr")


def test_summary_prices_alpha_per_employee():
    service, _ = make_service()
    service.check_date(MONDAY)
    service.check_date(date(2025, 6, 3))

    summary = service.summary()

    assert summary["total_alpha_records"] == 6
    assert summary["total_deduction"] == 600_000
    assert summary["employees_affected"] == 3
    assert summary["top_10"][0]["alpha_count"] == 2
