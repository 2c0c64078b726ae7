from datetime import date, datetime

from src.hris_payroll.hris_payroll.attendance.model import Attendance
from src.hris_payroll.hris_payroll.core.enums import AttendanceStatus
from src.hris_payroll.hris_payroll.payroll.model import Payroll
from src.hris_payroll.hris_payroll.stats.service import DashboardStats, StatsService

TODAY = date(2025, 6, 2)


class Employees:
    def count_all(self) -> int:
        return 12


class TodayAttendance:
    def __init__(self, rows):
        self.rows = rows
        self.calls = []

    def list_records(self, *, employee_id=None, start=None, end=None, status=None):
        self.calls.append((start, end))
        return [r for r in self.rows if start <= r.tanggal <= end]


class Leaves:
    def count_pending(self) -> int:
        return 3


class Payrolls:
    def list_records(self, *, periode=None, employee_id=None):
        rows = [
            Payroll(payroll_id=1, employee_id=1, periode="2025-06", total_gaji=4_975_000),
            Payroll(payroll_id=2, employee_id=2, periode="2025-06", total_gaji=6_000_000),
            Payroll(payroll_id=3, employee_id=1, periode="2025-05", total_gaji=5_000_000),
        ]
        return [p for p in rows if periode is None or p.periode == periode]


def _row(attendance_id, status, day=TODAY):
    return Attendance(attendance_id=attendance_id, employee_id=attendance_id, tanggal=day, status=status)


def test_dashboard_counts_today_and_current_payroll():
    attendance = TodayAttendance(
        [
            _row(1, AttendanceStatus.HADIR),
            _row(2, AttendanceStatus.HADIR),
            _row(3, AttendanceStatus.TERLAMBAT),
            _row(4, AttendanceStatus.SAKIT),
            _row(5, AttendanceStatus.HADIR, day=date(2025, 6, 1)),
        ]
    )
    service = StatsService(Employees(), attendance, Leaves(), Payrolls(), clock=lambda: datetime(2025, 6, 2, 14, 0))

    stats = service.dashboard()

    assert stats == DashboardStats(emp=12, hadir=2, izin=2, cutiPending=3, gajiBulanIni=10_975_000.0)
    assert attendance.calls == [(TODAY, TODAY)]
