from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, time
from typing import Optional

import pytest

from src.hris_payroll.hris_payroll.attendance.model import Attendance
from src.hris_payroll.hris_payroll.core.enums import ApprovalStatus, AttendanceStatus, Role
from src.hris_payroll.hris_payroll.core.exceptions import ConflictError, ValidationError
from src.hris_payroll.hris_payroll.employees.model import Employee, EmployeeProfile
from src.hris_payroll.hris_payroll.leave.model import LeaveRequest
from src.hris_payroll.hris_payroll.overtime.model import Overtime
from src.hris_payroll.hris_payroll.payroll.model import Payroll
from src.hris_payroll.hris_payroll.payroll.schemas import PayrollCreate
from src.hris_payroll.hris_payroll.payroll.service import PayrollService


@dataclass
class InMemoryEmployees:
    employees: dict[int, Employee]

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        return self.employees.get(employee_id)

    def list_profiles(self):
        return [EmployeeProfile(employee=e, username=f"user{e.employee_id}", role=Role.KARYAWAN) for e in self.employees.values()]


@dataclass
class InMemoryAttendance:
    rows: list[Attendance]

    def list_records(self, *, employee_id=None, start=None, end=None, status=None):
        return [
            r
            for r in self.rows
            if (employee_id is None or r.employee_id == employee_id)
            and (start is None or r.tanggal >= start)
            and (end is None or r.tanggal <= end)
        ]


@dataclass
class InMemoryLeaves:
    leaves: list[LeaveRequest]

    def list_approved_overlapping(self, start, end, *, employee_id=None):
        return [
            leave
            for leave in self.leaves
            if leave.status == ApprovalStatus.APPROVED
            and leave.overlaps(start, end)
            and (employee_id is None or leave.employee_id == employee_id)
        ]


@dataclass
class InMemoryOvertime:
    rows: list[Overtime]

    def list_records(self, *, status=None, employee_id=None, start=None, end=None):
        return [
            r
            for r in self.rows
            if (status is None or r.status == status)
            and (employee_id is None or r.employee_id == employee_id)
            and (start is None or r.tanggal >= start)
            and (end is None or r.tanggal <= end)
        ]


@dataclass
class InMemoryPayrolls:
    rows: dict[int, Payroll] = field(default_factory=dict)
    writes: int = 0

    def get(self, payroll_id: int) -> Optional[Payroll]:
        return self.rows.get(payroll_id)

    def get_for_period(self, employee_id: int, periode: str) -> Optional[Payroll]:
        for p in self.rows.values():
            if p.employee_id == employee_id and p.periode == periode:
                return p
        return None

    def list_for_year(self, year: int):
        return [p for p in self.rows.values() if p.periode.startswith(f"{year}-")]

    def create(self, **fields) -> int:
        self.writes += 1
        payroll_id = len(self.rows) + 1
        self.rows[payroll_id] = Payroll(payroll_id=payroll_id, **fields)
        return payroll_id


def _overtime(employee_id: int, day: date, bonus: float, status=ApprovalStatus.APPROVED) -> Overtime:
    return Overtime(
        overtime_id=day.day,
        employee_id=employee_id,
        tanggal=day,
        jam_checkout=time(19, 0),
        jam_scheduled=time(18, 0),
        overtime_hours=bonus / 50_000,
        bonus_per_hour=50_000,
        total_bonus=bonus,
        status=status,
    )


def make_service(*, attendance=(), leaves=(), overtime=(), payrolls=None):
    employees = InMemoryEmployees(
        {
            1: Employee(employee_id=1, nama_lengkap="Budi", jabatan="Staff", gaji_pokok=5_000_000),
            2: Employee(employee_id=2, nama_lengkap="Sari", jabatan=None, gaji_pokok=6_000_000),
        }
    )
    return PayrollService(
        payrolls or InMemoryPayrolls(),
        employees,
        InMemoryAttendance(list(attendance)),
        InMemoryLeaves(list(leaves)),
        InMemoryOvertime(list(overtime)),
        clock=lambda: datetime(2025, 6, 15, 10, 0),
    )


def test_calculate_nets_overtime_allowance_against_deductions():
    service = make_service(
        attendance=[
            Attendance(attendance_id=1, employee_id=1, tanggal=date(2025, 6, 2), status=AttendanceStatus.ALPA),
            Attendance(
                attendance_id=2,
                employee_id=1,
                tanggal=date(2025, 6, 3),
                status=AttendanceStatus.TERLAMBAT,
                jam_masuk=time(9, 15),
            ),
        ],
        overtime=[
            _overtime(1, date(2025, 6, 4), 37_500),
            _overtime(1, date(2025, 6, 5), 50_000, status=ApprovalStatus.PENDING),
        ],
    )

    result = service.calculate(month=6, year=2025)

    assert result["period"] == {"month": 6, "year": 2025, "periode": "2025-06", "monthName": "Juni"}
    budi, sari = result["payroll"]
    assert budi["potongan"] == 125_000
    assert budi["tunjangan"] == 37_500
    assert budi["total_gaji"] == 5_000_000 + 37_500 - 125_000
    assert sari["potongan"] == 0
    assert sari["total_gaji"] == 6_000_000
    assert sari["employee_role"] == "Karyawan"
    assert result["summary"]["total_employees"] == 2
    assert result["summary"]["total_deductions"] == 125_000


def test_calculate_is_read_only_and_repeatable():
    payrolls = InMemoryPayrolls()
    service = make_service(
        attendance=[Attendance(attendance_id=1, employee_id=1, tanggal=date(2025, 6, 2), status=AttendanceStatus.ALPA)],
        leaves=[
            LeaveRequest(
                leave_id=1,
                employee_id=2,
                tanggal_mulai=date(2025, 5, 30),
                tanggal_selesai=date(2025, 6, 1),
                jenis_pengajuan="Cuti",
                status=ApprovalStatus.APPROVED,
            )
        ],
        overtime=[_overtime(2, date(2025, 6, 4), 50_000)],
        payrolls=payrolls,
    )

    first = service.calculate(month=6, year=2025)
    second = service.calculate(month=6, year=2025)

    assert first == second
    assert first["payroll"][1]["potongan"] == 3 * 50_000
    assert payrolls.rows == {}
    assert payrolls.writes == 0


def test_calculate_requires_month_and_year():
    service = make_service()

    with pytest.raises(ValidationError):
        service.calculate(month=None, year=2025)
    with pytest.raises(ValidationError):
        service.calculate(month=13, year=2025)


def test_create_computes_deductions_when_not_given():
    service = make_service(
        attendance=[Attendance(attendance_id=1, employee_id=1, tanggal=date(2025, 6, 2), status=AttendanceStatus.IZIN)],
    )

    payroll = service.create(PayrollCreate(employee_id=1, periode="2025-06"))

    assert payroll.gaji_pokok == 5_000_000
    assert payroll.potongan == 50_000
    assert payroll.total_gaji == 4_950_000
    assert payroll.alasan_potongan == "1x Izin/Cuti = Rp 50.000"


def test_create_twice_for_same_period_conflicts():
    service = make_service()
    service.create(PayrollCreate(employee_id=1, periode="2025-06", potongan=0))

    with pytest.raises(ConflictError):
        service.create(PayrollCreate(employee_id=1, periode="2025-06", potongan=0))


def test_create_rejects_bad_periode():
    service = make_service()

    with pytest.raises(ValidationError):
        service.create(PayrollCreate(employee_id=1, periode="Juni 2025"))


def test_stats_groups_by_month():
    payrolls = InMemoryPayrolls(
        {
            1: Payroll(payroll_id=1, employee_id=1, periode="2025-06", gaji_pokok=5_000_000, potongan=25_000, total_gaji=4_975_000),
            2: Payroll(payroll_id=2, employee_id=2, periode="2025-06", gaji_pokok=6_000_000, total_gaji=6_000_000),
            3: Payroll(payroll_id=3, employee_id=1, periode="2024-06", gaji_pokok=5_000_000, total_gaji=5_000_000),
        }
    )
    service = make_service(payrolls=payrolls)

    stats = service.stats()

    assert stats["year"] == 2025
    june = stats["monthly_stats"][5]
    assert june["monthName"] == "Juni"
    assert june["total_employees"] == 2
    assert june["total_net_salary"] == 10_975_000
    assert stats["yearly_total"]["total_deductions"] == 25_000
