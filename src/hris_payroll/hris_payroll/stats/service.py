from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Callable

from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import now_local, period_of
from ..core.enums import AttendanceStatus
from ..employees.repository import EmployeeRepository
from ..leave.repository import LeaveRepository
from ..payroll.repository import PayrollRepository


@dataclass(frozen=True)
class DashboardStats:
    emp: int
    hadir: int
    izin: int
    cutiPending: int
    gajiBulanIni: float


class StatsService:
    """Angka ringkas untuk dashboard Admin/HR."""

    def __init__(
        self,
        employees: EmployeeRepository,
        attendance: AttendanceRepository,
        leaves: LeaveRepository,
        payrolls: PayrollRepository,
        *,
        clock: Callable[[], datetime] = now_local,
    ):
        self._employees = employees
        self._attendance = attendance
        self._leaves = leaves
        self._payrolls = payrolls
        self._clock = clock

    def dashboard(self) -> DashboardStats:
        today = self._clock().date()
        rows = self._attendance.list_records(start=today, end=today)
        hadir = sum(1 for r in rows if r.status == AttendanceStatus.HADIR)
        payroll_total = sum(p.total_gaji for p in self._payrolls.list_records(periode=period_of(today)))
        return DashboardStats(
            emp=self._employees.count_all(),
            hadir=hadir,
            izin=len(rows) - hadir,
            cutiPending=self._leaves.count_pending(),
            gajiBulanIni=float(payroll_total),
        )
