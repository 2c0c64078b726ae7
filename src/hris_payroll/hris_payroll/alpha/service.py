from __future__ import annotations

import logging
from datetime import date, datetime, timedelta
from typing import Callable, Dict, List, Optional, Tuple

from ..attendance.model import Attendance, NewAttendance
from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import month_bounds, month_name, now_local
from ..common.money import rupiah
from ..common.validators import clean_optional, require_month
from ..core.constants import ALPHA_KETERANGAN, POTONGAN_ALPA, SYSTEM_ROLE
from ..core.enums import AttendanceStatus
from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from ..employees.repository import EmployeeRepository
from ..leave.repository import LeaveRepository
from .schemas import AlphaCheckRequest, AlphaConvertRequest

log = logging.getLogger(__name__)

CONVERTIBLE_STATUSES = (AttendanceStatus.HADIR, AttendanceStatus.IZIN, AttendanceStatus.SAKIT)


def is_working_day(day: date) -> bool:
    """Monday to Friday."""
    return day.weekday() < 5


class AlphaService:
    """Use case: deteksi dan koreksi absen tanpa keterangan (alpa)."""

    def __init__(
        self,
        attendance: AttendanceRepository,
        employees: EmployeeRepository,
        leaves: LeaveRepository,
        *,
        clock: Callable[[], datetime] = now_local,
        rate: float = POTONGAN_ALPA,
    ):
        self._attendance = attendance
        self._employees = employees
        self._leaves = leaves
        self._clock = clock
        self._rate = rate

    def resolve_period(
        self,
        *,
        month: Optional[int] = None,
        year: Optional[int] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> Tuple[date, date]:
        if month and year:
            return month_bounds(year, require_month(month))
        if start and end:
            if end < start:
                raise ValidationError("end_date tidak boleh sebelum start_date.")
            return start, end
        today = self._clock().date()
        return month_bounds(today.year, today.month)

    def check(self, data: AlphaCheckRequest) -> dict:
        today = self._clock().date()
        if data.date:
            day = data.date
        elif data.days_ago:
            if data.days_ago < 0:
                raise ValidationError("days_ago tidak boleh negatif.")
            day = today - timedelta(days=data.days_ago)
        else:
            day = today - timedelta(days=1)
        return self.check_date(day)

    def check_date(self, day: date) -> dict:
        """Record alpa for active employees with no attendance and no approved leave on ``day``."""

        if not is_working_day(day):
            return {"date": day, "skipped": True, "reason": "Bukan hari kerja", "alpha_created": 0, "records": []}

        present = {row.employee_id for row in self._attendance.list_records(start=day, end=day)}
        on_leave = {leave.employee_id for leave in self._leaves.list_approved_overlapping(day, day)}
        employees = list(self._employees.list_active())

        created = []
        for employee in employees:
            if employee.employee_id in present or employee.employee_id in on_leave:
                continue
            try:
                attendance_id = self._attendance.create(
                    NewAttendance(
                        employee_id=employee.employee_id,
                        tanggal=day,
                        status=AttendanceStatus.ALPA,
                        keterangan=ALPHA_KETERANGAN,
                        recorded_by_role=SYSTEM_ROLE,
                    )
                )
            except ConflictError:
                log.info("Attendance for employee %s on %s appeared during alpha check", employee.employee_id, day)
                continue
            created.append(
                {
                    "attendance_id": attendance_id,
                    "employee_id": employee.employee_id,
                    "nama_lengkap": employee.nama_lengkap,
                }
            )

        log.info("Alpha check for %s: %s of %s employees marked alpa", day, len(created), len(employees))
        return {
            "date": day,
            "skipped": False,
            "checked_employees": len(employees),
            "on_leave": len(on_leave),
            "alpha_created": len(created),
            "records": created,
        }

    def _alpha_rows(self, start: date, end: date, employee_id: Optional[int] = None) -> List[Attendance]:
        return list(
            self._attendance.list_records(employee_id=employee_id, start=start, end=end, status=AttendanceStatus.ALPA)
        )

    def _group(self, rows: List[Attendance]) -> List[dict]:
        grouped: Dict[int, dict] = {}
        for row in rows:
            entry = grouped.setdefault(
                row.employee_id,
                {
                    "employee_id": row.employee_id,
                    "nama_lengkap": row.nama_lengkap,
                    "jabatan": row.jabatan,
                    "alpha_count": 0,
                    "total_deduction": 0.0,
                },
            )
            entry["alpha_count"] += 1
            entry["total_deduction"] += self._rate
        return sorted(grouped.values(), key=lambda e: e["alpha_count"], reverse=True)

    def stats(self, start: date, end: date) -> dict:
        rows = self._alpha_rows(start, end)
        return {
            "period": {"start": start, "end": end},
            "total_alpha_records": len(rows),
            "total_deduction": len(rows) * self._rate,
            "employees": self._group(rows),
        }

    def status(self) -> dict:
        today = self._clock().date()
        yesterday = today - timedelta(days=1)

        def system_alpha(day: date) -> int:
            return sum(1 for r in self._alpha_rows(day, day) if r.recorded_by_role == SYSTEM_ROLE)

        return {
            "status": "Alpha check service is running",
            "today": {"date": today, "alpha_records": system_alpha(today)},
            "yesterday": {"date": yesterday, "alpha_records": system_alpha(yesterday)},
            "deduction_rate": f"{rupiah(self._rate)} per alpha",
        }

    def _require_alpha(self, attendance_id: int) -> Attendance:
        row = self._attendance.get_by_id(attendance_id)
        if not row:
            raise NotFoundError("Record tidak ditemukan")
        if row.status != AttendanceStatus.ALPA:
            raise ValidationError(
                "Record ini bukan alpha record",
                details={"current_status": row.status.value if row.status else None},
            )
        return row

    def remove(self, attendance_id: int) -> Attendance:
        row = self._require_alpha(attendance_id)
        self._attendance.delete(attendance_id)
        return row

    def convert(self, attendance_id: int, data: AlphaConvertRequest, *, converted_by: str) -> Attendance:
        try:
            new_status = AttendanceStatus((data.new_status or "").strip().lower())
        except ValueError:
            new_status = None
        if new_status not in CONVERTIBLE_STATUSES:
            raise ValidationError("Status harus: hadir, izin, atau sakit", details={"provided": data.new_status})

        self._require_alpha(attendance_id)
        keterangan = clean_optional(data.keterangan) or f"Converted from alpha to {new_status.value} by {converted_by}"
        self._attendance.update(attendance_id, {"status": new_status, "keterangan": keterangan})
        updated = self._attendance.get_by_id(attendance_id)
        log.info("Alpha %s converted to %s by %s", attendance_id, new_status.value, converted_by)
        return updated

    def for_employee(self, employee_id: int, start: date, end: date) -> dict:
        rows = self._alpha_rows(start, end, employee_id=employee_id)
        return {
            "employee_id": employee_id,
            "employee_name": rows[0].nama_lengkap if rows else "Unknown",
            "period": {"start": start, "end": end},
            "alpha_count": len(rows),
            "total_deduction": len(rows) * self._rate,
            "records": [r.to_dict() for r in rows],
        }

    def summary(self) -> dict:
        today = self._clock().date()
        start, end = month_bounds(today.year, today.month)
        rows = self._alpha_rows(start, end)
        grouped = self._group(rows)
        return {
            "period": {"month": today.month, "year": today.year, "month_name": month_name(today.month)},
            "total_alpha_records": len(rows),
            "total_deduction": len(rows) * self._rate,
            "employees_affected": len(grouped),
            "top_10": grouped[:10],
            "all_employees": grouped,
        }
