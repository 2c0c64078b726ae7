from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field, replace
from datetime import date, datetime, time
from typing import Optional

import pytest

from src.hris_payroll.hris_payroll.attendance.model import Attendance
from src.hris_payroll.hris_payroll.attendance.schemas import CheckInRequest, CheckOutRequest
from src.hris_payroll.hris_payroll.attendance.service import AttendanceService
from src.hris_payroll.hris_payroll.core.enums import AccountStatus, ApprovalStatus, AttendanceStatus, Role, WorkType
from src.hris_payroll.hris_payroll.core.exceptions import AuthorizationError, ConflictError, ValidationError
from src.hris_payroll.hris_payroll.employees.model import Employee
from src.hris_payroll.hris_payroll.overtime.detector import OvertimeDetector
from src.hris_payroll.hris_payroll.overtime.model import Overtime
from src.hris_payroll.hris_payroll.payroll.ledger import PayrollLedger
from src.hris_payroll.hris_payroll.payroll.model import Payroll, net_salary
from src.hris_payroll.hris_payroll.schedules.model import EmployeeSchedule, WorkSchedule
from src.hris_payroll.hris_payroll.schedules.resolver import ScheduleResolver
from src.hris_payroll.hris_payroll.users.model import AuthUser


class Clock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


class InMemoryAttendance:
    def __init__(self):
        self.rows: dict[int, Attendance] = {}
        self._id = 0

    def get_by_id(self, attendance_id: int) -> Optional[Attendance]:
        return self.rows.get(attendance_id)

    def get_for_employee_and_date(self, employee_id: int, tanggal: date) -> Optional[Attendance]:
        for row in self.rows.values():
            if row.employee_id == employee_id and row.tanggal == tanggal:
                return row
        return None

    def create(self, draft) -> int:
        if self.get_for_employee_and_date(draft.employee_id, draft.tanggal):
            raise ConflictError("duplicate")
        self._id += 1
        self.rows[self._id] = Attendance(attendance_id=self._id, **dataclasses.asdict(draft))
        return self._id

    def fill_checkin(self, attendance_id: int, **fields) -> bool:
        row = self.rows[attendance_id]
        if row.jam_masuk is not None:
            return False
        if "tipe_kerja" in fields:
            fields.update(approval_status=None, approved_by=None, approval_notes=None, approval_date=None)
        self.rows[attendance_id] = replace(row, **fields)
        return True

    def record_checkout(self, attendance_id: int, **fields) -> bool:
        row = self.rows[attendance_id]
        if row.jam_pulang is not None:
            return False
        self.rows[attendance_id] = replace(row, **fields)
        return True


@dataclass
class InMemoryEmployees:
    employees: dict[int, Employee]

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        return self.employees.get(employee_id)


@dataclass
class InMemorySchedules:
    assignments: dict[int, EmployeeSchedule]

    def get_active_assignment(self, employee_id: int) -> Optional[EmployeeSchedule]:
        return self.assignments.get(employee_id)


@dataclass
class InMemoryPayrolls:
    by_period: dict[tuple[int, str], Payroll] = field(default_factory=dict)

    def add_deduction(self, employee_id, periode, *, amount, note, gaji_pokok, employee_role) -> Payroll:
        current = self.by_period.get((employee_id, periode))
        if current is None:
            current = Payroll(
                payroll_id=len(self.by_period) + 1,
                employee_id=employee_id,
                periode=periode,
                gaji_pokok=gaji_pokok,
                total_gaji=net_salary(gaji_pokok, 0, 0),
                employee_role=employee_role,
            )
        updated = current.with_deduction(amount, note)
        self.by_period[(employee_id, periode)] = updated
        return updated


class InMemoryOvertime:
    def __init__(self):
        self.rows: dict[int, Overtime] = {}

    def create(self, candidate) -> int:
        overtime_id = len(self.rows) + 1
        self.rows[overtime_id] = Overtime(
            overtime_id=overtime_id,
            employee_id=candidate.employee_id,
            attendance_id=candidate.attendance_id,
            tanggal=candidate.tanggal,
            jam_checkout=candidate.jam_checkout,
            jam_scheduled=candidate.jam_scheduled,
            overtime_hours=candidate.overtime_hours,
            bonus_per_hour=candidate.bonus_per_hour,
            total_bonus=candidate.total_bonus,
            reason=candidate.reason,
        )
        return overtime_id

    def get(self, overtime_id: int) -> Optional[Overtime]:
        return self.rows.get(overtime_id)


OFFICE = WorkSchedule(schedule_id=1, schedule_name="Kantor", start_time=time(9, 0), end_time=time(18, 0))

KARYAWAN = AuthUser(
    user_id=10,
    username="budi",
    role=Role.KARYAWAN,
    status=AccountStatus.ACTIVE,
    employee_id=1,
    nama_lengkap="Budi",
)


def make_service(now: datetime, *, scheduled: bool = True, schedule: WorkSchedule = OFFICE):
    attendance = InMemoryAttendance()
    payrolls = InMemoryPayrolls()
    overtime = InMemoryOvertime()
    employees = InMemoryEmployees({1: Employee(employee_id=1, nama_lengkap="Budi", jabatan="Staff", gaji_pokok=5_000_000)})
    assignments = {}
    if scheduled:
        assignments[1] = EmployeeSchedule(
            id=1, employee_id=1, schedule_id=1, effective_date=date(2025, 1, 1), schedule=schedule
        )
    resolver = ScheduleResolver(InMemorySchedules(assignments))
    clock = Clock(now)
    service = AttendanceService(
        attendance,
        employees,
        resolver,
        PayrollLedger(payrolls, employees),
        OvertimeDetector(resolver, overtime),
        clock=clock,
    )
    return service, clock, attendance, payrolls, overtime


def test_late_checkin_is_recorded_and_deducted_once():
    service, _, attendance, payrolls, _ = make_service(datetime(2025, 6, 2, 9, 15))

    result = service.check_in(KARYAWAN, CheckInRequest())

    row = result.attendance
    assert row.status == AttendanceStatus.TERLAMBAT
    assert row.jam_masuk == time(9, 15)
    assert row.keterangan == "Terlambat 15 menit (Jadwal: 09:00, Check-in: 09:15)"
    assert row.tipe_kerja == WorkType.WFO.value
    assert "Potongan gaji: Rp 25.000" in result.message

    payroll = payrolls.by_period[(1, "2025-06")]
    assert payroll.potongan == 25_000
    assert payroll.total_gaji == 4_975_000
    assert payroll.alasan_potongan == "Terlambat 2025-06-02 jam 09:15"
    assert payroll.employee_role == "Staff"
    assert len(attendance.rows) == 1


def test_second_late_day_accumulates_in_same_period():
    service, clock, _, payrolls, _ = make_service(datetime(2025, 6, 2, 9, 15))
    service.check_in(KARYAWAN, CheckInRequest())

    clock.now = datetime(2025, 6, 3, 9, 40)
    service.check_in(KARYAWAN, CheckInRequest())

    payroll = payrolls.by_period[(1, "2025-06")]
    assert payroll.potongan == 50_000
    assert payroll.alasan_potongan == "Terlambat 2025-06-02 jam 09:15; Terlambat 2025-06-03 jam 09:40"


def test_on_time_checkin_has_no_deduction():
    service, _, _, payrolls, _ = make_service(datetime(2025, 6, 2, 8, 50))

    result = service.check_in(KARYAWAN, CheckInRequest())

    assert result.attendance.status == AttendanceStatus.HADIR
    assert result.attendance.keterangan == "Check-in lebih awal 10 menit dari jadwal"
    assert result.message == "Absen Masuk berhasil pada 08:50"
    assert payrolls.by_period == {}


def test_checkin_twice_same_day_conflicts():
    service, _, _, _, _ = make_service(datetime(2025, 6, 2, 8, 55))
    service.check_in(KARYAWAN, CheckInRequest())

    with pytest.raises(ConflictError):
        service.check_in(KARYAWAN, CheckInRequest())


def test_checkin_too_early_reports_wait():
    service, _, attendance, _, _ = make_service(datetime(2025, 6, 2, 7, 30))

    with pytest.raises(ValidationError) as exc:
        service.check_in(KARYAWAN, CheckInRequest())

    assert exc.value.code == "TOO_EARLY"
    assert exc.value.details["info"] == "Waktu absen dimulai 30 menit lagi (mulai 08:00)"
    assert exc.value.details["scheduleStartTime"] == "09:00"
    assert attendance.rows == {}


def test_checkin_closed_after_23():
    service, _, _, _, _ = make_service(datetime(2025, 6, 2, 23, 5))

    with pytest.raises(ValidationError) as exc:
        service.check_in(KARYAWAN, CheckInRequest())

    assert exc.value.code == "ATTENDANCE_CLOSED"


def test_default_window_without_schedule_uses_eight_oclock():
    service, _, _, _, _ = make_service(datetime(2025, 6, 2, 8, 10), scheduled=False)

    result = service.check_in(KARYAWAN, CheckInRequest())

    assert result.attendance.status == AttendanceStatus.TERLAMBAT
    assert result.window.has_schedule is False


def test_checkin_fills_approved_remote_work_request():
    service, _, attendance, _, _ = make_service(datetime(2025, 6, 2, 8, 45))
    attendance.rows[7] = Attendance(
        attendance_id=7,
        employee_id=1,
        tanggal=date(2025, 6, 2),
        tipe_kerja=WorkType.WFH.value,
        status=AttendanceStatus.APPROVED,
        approval_status=ApprovalStatus.APPROVED,
    )

    result = service.check_in(KARYAWAN, CheckInRequest(lokasi_masuk="Rumah"))

    assert result.filled_request is True
    assert result.attendance.attendance_id == 7
    assert result.attendance.jam_masuk == time(8, 45)
    assert result.attendance.tipe_kerja == WorkType.WFH.value
    assert result.attendance.lokasi_masuk == "Rumah"


@pytest.mark.parametrize(
    "status, approval",
    [
        (AttendanceStatus.REJECTED, ApprovalStatus.REJECTED),
        (AttendanceStatus.PENDING_APPROVAL, ApprovalStatus.PENDING),
    ],
)
def test_checkin_reopens_unapproved_remote_work_row(status, approval):
    service, _, attendance, _, _ = make_service(datetime(2025, 6, 2, 8, 45))
    attendance.rows[7] = Attendance(
        attendance_id=7,
        employee_id=1,
        tanggal=date(2025, 6, 2),
        tipe_kerja=WorkType.WFH.value,
        status=status,
        approval_status=approval,
        approval_notes="Tidak ada alasan",
    )

    result = service.check_in(KARYAWAN, CheckInRequest())

    row = result.attendance
    assert result.filled_request is False
    assert row.attendance_id == 7
    assert row.jam_masuk == time(8, 45)
    assert row.status == AttendanceStatus.HADIR
    assert row.tipe_kerja == WorkType.WFO.value
    assert row.approval_status is None
    assert row.approval_notes is None
    assert len(attendance.rows) == 1


def test_midnight_window_skips_too_early_check():
    night = WorkSchedule(schedule_id=2, schedule_name="Malam", start_time=time(0, 30), end_time=time(8, 30))
    service, _, _, _, _ = make_service(datetime(2025, 6, 2, 0, 10), schedule=night)

    result = service.check_in(KARYAWAN, CheckInRequest())

    assert result.window.earliest_checkin == time(23, 30)
    assert result.window.crosses_midnight is True
    assert result.attendance.jam_masuk == time(0, 10)
    assert result.attendance.status == AttendanceStatus.HADIR


def test_checkout_late_evening_creates_pending_overtime():
    service, clock, _, _, overtime = make_service(datetime(2025, 6, 2, 8, 55))
    checked_in = service.check_in(KARYAWAN, CheckInRequest())

    clock.now = datetime(2025, 6, 2, 18, 45)
    result = service.check_out(KARYAWAN, checked_in.attendance.attendance_id, CheckOutRequest())

    assert result.attendance.jam_pulang == time(18, 45)
    assert result.overtime is not None
    assert result.overtime.overtime_hours == 0.75
    assert result.overtime.total_bonus == 37_500
    assert result.overtime.status == ApprovalStatus.PENDING
    assert "Overtime terdeteksi: 0.75 jam" in result.message
    assert len(overtime.rows) == 1


def test_checkout_short_overtime_is_ignored():
    service, clock, _, _, overtime = make_service(datetime(2025, 6, 2, 8, 55))
    checked_in = service.check_in(KARYAWAN, CheckInRequest())

    clock.now = datetime(2025, 6, 2, 18, 20)
    result = service.check_out(KARYAWAN, checked_in.attendance.attendance_id, CheckOutRequest())

    assert result.overtime is None
    assert overtime.rows == {}


def test_checkout_twice_conflicts():
    service, clock, _, _, _ = make_service(datetime(2025, 6, 2, 8, 55))
    checked_in = service.check_in(KARYAWAN, CheckInRequest())
    clock.now = datetime(2025, 6, 2, 17, 0)
    service.check_out(KARYAWAN, checked_in.attendance.attendance_id, CheckOutRequest())

    with pytest.raises(ConflictError):
        service.check_out(KARYAWAN, checked_in.attendance.attendance_id, CheckOutRequest())


def test_checkout_for_someone_else_is_forbidden():
    service, _, _, _, _ = make_service(datetime(2025, 6, 2, 8, 55))
    checked_in = service.check_in(KARYAWAN, CheckInRequest())
    other = replace(KARYAWAN, user_id=11, employee_id=2)

    with pytest.raises(AuthorizationError):
        service.check_out(other, checked_in.attendance.attendance_id, CheckOutRequest())
