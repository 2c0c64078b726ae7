from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime, time
from typing import Optional

import pytest

from src.hris_payroll.hris_payroll.core.enums import AccountStatus, Role
from src.hris_payroll.hris_payroll.core.exceptions import AuthorizationError, ConflictError, ValidationError
from src.hris_payroll.hris_payroll.employees.model import Employee
from src.hris_payroll.hris_payroll.schedules.model import EmployeeSchedule, WorkSchedule
from src.hris_payroll.hris_payroll.schedules.resolver import DEFAULT_WINDOW, ScheduleResolver, earliest_checkin_for
from src.hris_payroll.hris_payroll.schedules.schemas import CheckAttendanceRequest, ScheduleAssign, ScheduleCreate, ScheduleUpdate
from src.hris_payroll.hris_payroll.schedules.service import ScheduleService
from src.hris_payroll.hris_payroll.users.model import AuthUser


class InMemorySchedules:
    def __init__(self):
        self.schedules: dict[int, WorkSchedule] = {}
        self.assignments: dict[int, EmployeeSchedule] = {}

    def get_schedule(self, schedule_id: int) -> Optional[WorkSchedule]:
        return self.schedules.get(schedule_id)

    def create_schedule(self, **fields) -> int:
        schedule_id = len(self.schedules) + 1
        self.schedules[schedule_id] = WorkSchedule(schedule_id=schedule_id, **fields)
        return schedule_id

    def count_active_assignments(self, schedule_id: int) -> int:
        return sum(1 for a in self.assignments.values() if a.schedule_id == schedule_id and a.is_active)

    def update_schedule(self, schedule_id: int, changes: dict) -> bool:
        self.schedules[schedule_id] = replace(self.schedules[schedule_id], **changes)
        return True

    def delete_schedule(self, schedule_id: int) -> bool:
        return self.schedules.pop(schedule_id, None) is not None

    def get_active_assignment(self, employee_id: int) -> Optional[EmployeeSchedule]:
        return self.assignments.get(employee_id)

    def assign(self, *, employee_id, schedule_id, effective_date, end_date, notes) -> int:
        self.assignments[employee_id] = EmployeeSchedule(
            id=len(self.assignments) + 1,
            employee_id=employee_id,
            schedule_id=schedule_id,
            effective_date=effective_date,
            end_date=end_date,
            notes=notes,
            schedule=self.schedules[schedule_id],
        )
        return self.assignments[employee_id].id


class InMemoryEmployees:
    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        return Employee(employee_id=employee_id, nama_lengkap="Budi") if employee_id == 1 else None


STAFF = AuthUser(user_id=10, username="budi", role=Role.KARYAWAN, status=AccountStatus.ACTIVE, employee_id=1)


@pytest.fixture
def service_and_repo():
    repo = InMemorySchedules()
    service = ScheduleService(repo, InMemoryEmployees(), clock=lambda: datetime(2025, 6, 2, 8, 0))
    return service, repo


def test_earliest_checkin_is_one_hour_before_start():
    assert earliest_checkin_for(time(9, 0)) == time(8, 0)
    assert earliest_checkin_for(time(7, 15)) == time(6, 15)


def test_earliest_checkin_wraps_past_midnight():
    assert earliest_checkin_for(time(0, 30)) == time(23, 30)


def test_resolver_falls_back_to_default_window(service_and_repo):
    _, repo = service_and_repo

    window = ScheduleResolver(repo).resolve(1)

    assert window is DEFAULT_WINDOW
    assert window.start == time(8, 0)
    assert window.earliest_checkin == time(6, 0)
    assert window.has_schedule is False


def test_assigned_schedule_drives_window(service_and_repo):
    service, repo = service_and_repo
    schedule = service.create(ScheduleCreate(schedule_name="Shift Siang", start_time="13:00", end_time="21:00"))
    service.assign(ScheduleAssign(employee_id=1, schedule_id=schedule.schedule_id, effective_date=date(2025, 6, 1)))

    window = ScheduleResolver(repo).resolve(1)

    assert window.has_schedule
    assert window.start == time(13, 0)
    assert window.end == time(21, 0)
    assert window.earliest_checkin == time(12, 0)
    assert window.schedule_name == "Shift Siang"


def test_create_applies_defaults_and_validates_times(service_and_repo):
    service, _ = service_and_repo

    schedule = service.create(ScheduleCreate(schedule_name=" Kantor ", start_time="09:00", end_time="18:00"))

    assert schedule.schedule_name == "Kantor"
    assert schedule.shift_type == "Regular"
    assert schedule.break_duration == 60
    assert schedule.work_days == "Mon-Fri"
    with pytest.raises(ValidationError):
        service.create(ScheduleCreate(schedule_name="Rusak", start_time="9 pagi", end_time="18:00"))


def test_schedule_in_use_cannot_be_deleted(service_and_repo):
    service, _ = service_and_repo
    schedule = service.create(ScheduleCreate(schedule_name="Kantor", start_time="09:00", end_time="18:00"))
    service.assign(ScheduleAssign(employee_id=1, schedule_id=schedule.schedule_id, effective_date=date(2025, 6, 1)))

    with pytest.raises(ConflictError) as exc:
        service.delete(schedule.schedule_id)

    assert exc.value.message == "Tidak dapat menghapus. Jadwal ini sedang digunakan oleh 1 karyawan"


def test_unassigned_schedule_can_be_updated(service_and_repo):
    service, _ = service_and_repo
    schedule = service.create(ScheduleCreate(schedule_name="Kantor", start_time="09:00", end_time="18:00"))

    updated = service.update(schedule.schedule_id, ScheduleUpdate(start_time="07:00", description="Pagi"))

    assert updated.start_time == time(7, 0)
    assert updated.description == "Pagi"


def test_assigned_schedule_is_frozen(service_and_repo):
    service, repo = service_and_repo
    schedule = service.create(ScheduleCreate(schedule_name="Kantor", start_time="09:00", end_time="18:00"))
    service.assign(ScheduleAssign(employee_id=1, schedule_id=schedule.schedule_id, effective_date=date(2025, 6, 1)))

    with pytest.raises(ConflictError) as exc:
        service.update(schedule.schedule_id, ScheduleUpdate(start_time="07:00"))

    assert "sedang digunakan oleh 1 karyawan" in exc.value.message
    assert repo.get_schedule(schedule.schedule_id).start_time == time(9, 0)
    assert ScheduleResolver(repo).resolve(1).start == time(9, 0)


def test_staff_can_only_view_own_schedule(service_and_repo):
    service, _ = service_and_repo
    schedule = service.create(ScheduleCreate(schedule_name="Kantor", start_time="09:00", end_time="18:00"))
    service.assign(ScheduleAssign(employee_id=1, schedule_id=schedule.schedule_id, effective_date=date(2025, 6, 1)))

    assert service.current_for(STAFF, 1).schedule_id == schedule.schedule_id
    with pytest.raises(AuthorizationError):
        service.current_for(STAFF, 2)


def test_check_attendance_reports_late_and_overtime(service_and_repo):
    service, _ = service_and_repo
    schedule = service.create(ScheduleCreate(schedule_name="Kantor", start_time="09:00", end_time="18:00"))
    service.assign(ScheduleAssign(employee_id=1, schedule_id=schedule.schedule_id, effective_date=date(2025, 6, 1)))

    late = service.check_attendance(CheckAttendanceRequest(employee_id=1, check_time="09:20"))
    evening = service.check_attendance(CheckAttendanceRequest(employee_id=1, check_time="19:05"))
    unscheduled = service.check_attendance(CheckAttendanceRequest(employee_id=2, check_time="09:00"))

    assert late["attendance"]["is_late"] is True
    assert late["attendance"]["late_minutes"] == 20
    assert late["attendance"]["is_overtime"] is False
    assert evening["attendance"]["overtime_minutes"] == 65
    assert unscheduled == {"hasSchedule": False, "message": "Karyawan tidak memiliki jadwal aktif"}
