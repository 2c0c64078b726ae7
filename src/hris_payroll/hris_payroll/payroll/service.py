from __future__ import annotations

import logging
from collections import defaultdict
from datetime import datetime
from typing import Callable, Dict, List, Optional

from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import format_period, month_bounds, month_name, now_local, parse_period
from ..common.validators import clean_optional, require_month
from ..core.constants import DEFAULT_BASIC_SALARY
from ..core.enums import ApprovalStatus
from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from ..employees.repository import EmployeeRepository
from ..leave.repository import LeaveRepository
from ..overtime.repository import OvertimeRepository
from ..users.model import AuthUser
from .calculator.base import PayrollCalculator
from .calculator.standard_calculator import StandardPayrollCalculator
from .model import Payroll, net_salary
from .repository import PayrollRepository
from .schemas import PayrollCreate, PayrollUpdate

log = logging.getLogger(__name__)


def _totals(rows: List[Payroll]) -> dict:
    return {
        "total_basic_salary": sum(p.gaji_pokok for p in rows),
        "total_deductions": sum(p.potongan for p in rows),
        "total_net_salary": sum(p.total_gaji for p in rows),
    }


def _parse_periode(periode: Optional[str]):
    if not periode:
        raise ValidationError("Periode wajib diisi (format YYYY-MM).")
    try:
        return parse_period(periode)
    except ValueError:
        raise ValidationError("Format periode harus YYYY-MM.")


class PayrollService:
    """Use case: perhitungan gaji on-demand dan slip gaji tersimpan."""

    def __init__(
        self,
        payrolls: PayrollRepository,
        employees: EmployeeRepository,
        attendance: AttendanceRepository,
        leaves: LeaveRepository,
        overtime: OvertimeRepository,
        *,
        calculator: Optional[PayrollCalculator] = None,
        clock: Callable[[], datetime] = now_local,
    ):
        self._payrolls = payrolls
        self._employees = employees
        self._attendance = attendance
        self._leaves = leaves
        self._overtime = overtime
        self._calculator = calculator or StandardPayrollCalculator()
        self._clock = clock

    def calculate(self, *, month: Optional[int], year: Optional[int]) -> dict:
        """Read-only payroll for every employee in a month."""

        if not month or not year:
            raise ValidationError("Parameter month dan year wajib diisi")
        month = require_month(month)
        start, end = month_bounds(year, month)

        attendance_by_employee = defaultdict(list)
        for row in self._attendance.list_records(start=start, end=end):
            attendance_by_employee[row.employee_id].append(row)
        leaves_by_employee = defaultdict(list)
        for leave in self._leaves.list_approved_overlapping(start, end):
            leaves_by_employee[leave.employee_id].append(leave)
        bonus_by_employee: Dict[int, float] = defaultdict(float)
        for ot in self._overtime.list_records(status=ApprovalStatus.APPROVED, start=start, end=end):
            bonus_by_employee[ot.employee_id] += ot.total_bonus

        rows = []
        for profile in self._employees.list_profiles():
            employee = profile.employee
            breakdown = self._calculator.deductions(
                attendance_by_employee.get(employee.employee_id, []),
                leaves_by_employee.get(employee.employee_id, []),
                period_start=start,
                period_end=end,
            )
            gaji_pokok = float(employee.gaji_pokok or DEFAULT_BASIC_SALARY)
            tunjangan = round(bonus_by_employee.get(employee.employee_id, 0.0), 2)
            rows.append(
                {
                    "employee_id": employee.employee_id,
                    "nama_lengkap": employee.nama_lengkap,
                    "username": profile.username or "-",
                    "role": profile.role.value if profile.role else "-",
                    "jabatan": employee.jabatan or "-",
                    "status_karyawan": employee.status_karyawan,
                    "gaji_pokok": gaji_pokok,
                    "tunjangan": tunjangan,
                    "potongan": breakdown.total,
                    "alasan_potongan": breakdown.alasan,
                    "total_gaji": net_salary(gaji_pokok, tunjangan, breakdown.total),
                    "employee_role": employee.jabatan or "Karyawan",
                    "breakdown": breakdown.items,
                    "details": breakdown.details,
                }
            )

        return {
            "period": {
                "month": month,
                "year": int(year),
                "periode": format_period(year, month),
                "monthName": month_name(month),
            },
            "payroll": rows,
            "summary": {
                "total_employees": len(rows),
                "total_basic_salary": sum(r["gaji_pokok"] for r in rows),
                "total_deductions": sum(r["potongan"] for r in rows),
                "total_net_salary": sum(r["total_gaji"] for r in rows),
            },
        }

    def my_slips(self, actor: AuthUser) -> List[Payroll]:
        if actor.employee_id is None:
            raise ValidationError("Employee ID tidak ditemukan dalam token")
        return list(self._payrolls.list_records(employee_id=actor.employee_id))

    def list_records(self, *, periode: Optional[str] = None, employee_id: Optional[int] = None) -> List[Payroll]:
        return list(self._payrolls.list_records(periode=periode, employee_id=employee_id))

    def require(self, payroll_id: int) -> Payroll:
        payroll = self._payrolls.get(payroll_id)
        if not payroll:
            raise NotFoundError("Data payroll tidak ditemukan.")
        return payroll

    def create(self, data: PayrollCreate) -> Payroll:
        if data.employee_id is None:
            raise ValidationError("employee_id wajib diisi.")
        year, month = _parse_periode(data.periode)
        periode = format_period(year, month)
        employee = self._employees.get_by_id(data.employee_id)
        if not employee:
            raise NotFoundError("Karyawan tidak ditemukan")
        if self._payrolls.get_for_period(employee.employee_id, periode):
            raise ConflictError(f"Payroll untuk periode {periode} dan karyawan ini sudah ada")

        gaji_pokok = float(data.gaji_pokok if data.gaji_pokok is not None else employee.gaji_pokok or DEFAULT_BASIC_SALARY)
        tunjangan = float(data.tunjangan or 0)
        alasan = clean_optional(data.alasan_potongan)
        if data.potongan is None:
            start, end = month_bounds(year, month)
            breakdown = self._calculator.deductions(
                self._attendance.list_records(employee_id=employee.employee_id, start=start, end=end),
                self._leaves.list_approved_overlapping(start, end, employee_id=employee.employee_id),
                period_start=start,
                period_end=end,
            )
            potongan = breakdown.total
            alasan = alasan or breakdown.alasan
        else:
            potongan = float(data.potongan)

        total_gaji = float(data.total_gaji) if data.total_gaji is not None else net_salary(gaji_pokok, tunjangan, potongan)
        payroll_id = self._payrolls.create(
            employee_id=employee.employee_id,
            periode=periode,
            gaji_pokok=gaji_pokok,
            tunjangan=tunjangan,
            potongan=potongan,
            total_gaji=total_gaji,
            alasan_potongan=alasan or "Tidak ada potongan",
            employee_role=clean_optional(data.employee_role) or "Karyawan",
        )
        log.info("Payroll %s created for employee %s periode %s", payroll_id, employee.employee_id, periode)
        return self.require(payroll_id)

    def update(self, payroll_id: int, data: PayrollUpdate) -> Payroll:
        self.require(payroll_id)
        changes = data.model_dump(exclude_unset=True)
        if not changes:
            raise ValidationError("Tidak ada data yang diubah")
        self._payrolls.update(payroll_id, changes)
        return self.require(payroll_id)

    def delete(self, payroll_id: int) -> None:
        if not self._payrolls.delete(payroll_id):
            raise NotFoundError("Data payroll tidak ditemukan.")

    def stats(self, *, year: Optional[int] = None) -> dict:
        target_year = int(year or self._clock().year)
        rows = list(self._payrolls.list_for_year(target_year))

        monthly = []
        for month in range(1, 13):
            periode = format_period(target_year, month)
            month_rows = [p for p in rows if p.periode == periode]
            monthly.append(
                {"month": month, "monthName": month_name(month), "total_employees": len(month_rows), **_totals(month_rows)}
            )
        return {"year": target_year, "monthly_stats": monthly, "yearly_total": _totals(rows)}

    def overtime_bonus(self, employee_id: int, periode: Optional[str]) -> dict:
        year, month = _parse_periode(periode)
        start, end = month_bounds(year, month)
        records = list(
            self._overtime.list_records(status=ApprovalStatus.APPROVED, employee_id=employee_id, start=start, end=end)
        )
        return {
            "employee_id": employee_id,
            "periode": format_period(year, month),
            "overtime_count": len(records),
            "total_bonus": round(sum(r.total_bonus for r in records), 2),
            "records": [r.to_dict() for r in records],
        }

