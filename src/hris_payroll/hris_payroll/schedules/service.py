from __future__ import annotations

from datetime import date, datetime, time
from typing import Callable, List, Optional

from ..common.datetime_utils import now_local, parse_hhmm
from ..common.validators import clean_optional
from ..core.constants import DEFAULT_BREAK_MINUTES, DEFAULT_SHIFT_TYPE, DEFAULT_WORK_DAYS
from ..core.exceptions import AuthorizationError, ConflictError, NotFoundError, ValidationError
from ..employees.repository import EmployeeRepository
from ..users.model import AuthUser
from .model import EmployeeSchedule, WorkSchedule
from .repository import ScheduleRepository
from .schemas import CheckAttendanceRequest, ScheduleAssign, ScheduleCreate, ScheduleUpdate


def _parse_time(value: str, field_name: str) -> time:
    try:
        return parse_hhmm(value)
    except ValueError:
        raise ValidationError(f"{field_name} harus berformat HH:MM")


class ScheduleService:
    def __init__(
        self,
        schedules: ScheduleRepository,
        employees: EmployeeRepository,
        *,
        clock: Callable[[], datetime] = now_local,
    ):
        self._schedules = schedules
        self._employees = employees
        self._clock = clock

    def list_with_assignments(self) -> List[dict]:
        by_schedule: dict = {}
        for a in self._schedules.list_active_assignments():
            by_schedule.setdefault(a.schedule_id, []).append(
                {
                    "id": a.id,
                    "employee_id": a.employee_id,
                    "nama_lengkap": a.nama_lengkap,
                    "jabatan": a.jabatan,
                    "effective_date": a.effective_date,
                    "end_date": a.end_date,
                }
            )
        return [
            {**schedule_to_dict(s), "employee_schedules": by_schedule.get(s.schedule_id, [])}
            for s in self._schedules.list_schedules()
        ]

    def get(self, schedule_id: int) -> WorkSchedule:
        schedule = self._schedules.get_schedule(schedule_id)
        if not schedule:
            raise NotFoundError("Jadwal tidak ditemukan")
        return schedule

    def create(self, data: ScheduleCreate) -> WorkSchedule:
        name = clean_optional(data.schedule_name)
        if not name or not data.start_time or not data.end_time:
            raise ValidationError("Nama jadwal, jam masuk, dan jam pulang wajib diisi")

        schedule_id = self._schedules.create_schedule(
            schedule_name=name,
            shift_type=clean_optional(data.shift_type) or DEFAULT_SHIFT_TYPE,
            start_time=_parse_time(data.start_time, "Jam masuk"),
            end_time=_parse_time(data.end_time, "Jam pulang"),
            break_duration=DEFAULT_BREAK_MINUTES if data.break_duration is None else int(data.break_duration),
            work_days=clean_optional(data.work_days) or DEFAULT_WORK_DAYS,
            description=clean_optional(data.description),
        )
        return self.get(schedule_id)

    def update(self, schedule_id: int, data: ScheduleUpdate) -> WorkSchedule:
        self.get(schedule_id)
        changes = data.model_dump(exclude_unset=True)
        if "start_time" in changes and changes["start_time"] is not None:
            changes["start_time"] = _parse_time(changes["start_time"], "Jam masuk")
        if "end_time" in changes and changes["end_time"] is not None:
            changes["end_time"] = _parse_time(changes["end_time"], "Jam pulang")
        changes = {k: v for k, v in changes.items() if v is not None}
        if changes:
            # assigned schedules are frozen; create a new one and re-assign instead
            in_use = self._schedules.count_active_assignments(schedule_id)
            if in_use > 0:
                raise ConflictError(
                    f"Tidak dapat mengubah. Jadwal ini sedang digunakan oleh {in_use} karyawan, "
                    "buat jadwal baru lalu assign ulang"
                )
            self._schedules.update_schedule(schedule_id, changes)
        return self.get(schedule_id)

    def delete(self, schedule_id: int) -> None:
        self.get(schedule_id)
        in_use = self._schedules.count_active_assignments(schedule_id)
        if in_use > 0:
            raise ConflictError(f"Tidak dapat menghapus. Jadwal ini sedang digunakan oleh {in_use} karyawan")
        self._schedules.delete_schedule(schedule_id)

    def assign(self, data: ScheduleAssign) -> EmployeeSchedule:
        if not data.employee_id or not data.schedule_id or not data.effective_date:
            raise ValidationError("Employee ID, Schedule ID, dan tanggal efektif wajib diisi")
        if not self._employees.get_by_id(data.employee_id):
            raise NotFoundError("Karyawan tidak ditemukan")
        self.get(data.schedule_id)
        if data.end_date and data.end_date < data.effective_date:
            raise ValidationError("Tanggal berakhir tidak boleh sebelum tanggal efektif")

        self._schedules.assign(
            employee_id=data.employee_id,
            schedule_id=data.schedule_id,
            effective_date=data.effective_date,
            end_date=data.end_date,
            notes=clean_optional(data.notes),
        )
        assignment = self._schedules.get_active_assignment(data.employee_id)
        if not assignment:
            raise NotFoundError("Jadwal tidak ditemukan untuk karyawan ini")
        return assignment

    def current_for(self, actor: AuthUser, employee_id: int) -> EmployeeSchedule:
        if not actor.is_manager and actor.employee_id != employee_id:
            raise AuthorizationError("Anda hanya dapat melihat jadwal Anda sendiri")
        assignment = self._schedules.get_active_assignment(employee_id)
        if not assignment:
            raise NotFoundError("Jadwal tidak ditemukan untuk karyawan ini")
        return assignment

    def check_attendance(self, data: CheckAttendanceRequest) -> dict:
        """Report lateness / overtime of a given clock time against the active schedule."""

        assignment = self._schedules.get_active_assignment(data.employee_id)
        if not assignment or not assignment.schedule:
            return {"hasSchedule": False, "message": "Karyawan tidak memiliki jadwal aktif"}

        schedule = assignment.schedule
        day = data.date or self._clock().date()
        checked = datetime.combine(day, _parse_time(data.check_time, "Jam"))
        start = datetime.combine(day, schedule.start_time)
        end = datetime.combine(day, schedule.end_time)

        is_late = checked > start
        is_overtime = checked > end
        return {
            "hasSchedule": True,
            "schedule": {
                "name": schedule.schedule_name,
                "start_time": schedule.start_time,
                "end_time": schedule.end_time,
            },
            "attendance": {
                "check_time": data.check_time,
                "is_late": is_late,
                "late_minutes": int((checked - start).total_seconds() // 60) if is_late else 0,
                "is_overtime": is_overtime,
                "overtime_minutes": int((checked - end).total_seconds() // 60) if is_overtime else 0,
            },
        }


def schedule_to_dict(schedule: WorkSchedule) -> dict:
    return {
        "schedule_id": schedule.schedule_id,
        "schedule_name": schedule.schedule_name,
        "shift_type": schedule.shift_type,
        "start_time": schedule.start_time,
        "end_time": schedule.end_time,
        "break_duration": schedule.break_duration,
        "work_days": schedule.work_days,
        "description": schedule.description,
        "is_active": schedule.is_active,
    }


def assignment_to_dict(assignment: EmployeeSchedule) -> dict:
    return {
        "id": assignment.id,
        "employee_id": assignment.employee_id,
        "schedule_id": assignment.schedule_id,
        "effective_date": assignment.effective_date,
        "end_date": assignment.end_date,
        "notes": assignment.notes,
        "is_active": assignment.is_active,
        "employee": {"nama_lengkap": assignment.nama_lengkap, "jabatan": assignment.jabatan},
        "schedule": schedule_to_dict(assignment.schedule) if assignment.schedule else None,
    }
