from __future__ import annotations

from datetime import date, time
from typing import Mapping, Optional, Protocol, Sequence

from .model import EmployeeSchedule, WorkSchedule


class ScheduleRepository(Protocol):
    def list_schedules(self) -> Sequence[WorkSchedule]:
        raise NotImplementedError

    def get_schedule(self, schedule_id: int) -> Optional[WorkSchedule]:
        raise NotImplementedError

    def create_schedule(
        self,
        *,
        schedule_name: str,
        shift_type: str,
        start_time: time,
        end_time: time,
        break_duration: int,
        work_days: str,
        description: Optional[str],
    ) -> int:
        raise NotImplementedError

    def update_schedule(self, schedule_id: int, changes: Mapping[str, object]) -> bool:
        raise NotImplementedError

    def delete_schedule(self, schedule_id: int) -> bool:
        raise NotImplementedError

    def count_active_assignments(self, schedule_id: int) -> int:
        raise NotImplementedError

    def list_active_assignments(self) -> Sequence[EmployeeSchedule]:
        raise NotImplementedError

    def get_active_assignment(self, employee_id: int) -> Optional[EmployeeSchedule]:
        """Current active assignment (with its schedule) for an employee."""

        raise NotImplementedError

    def assign(
        self,
        *,
        employee_id: int,
        schedule_id: int,
        effective_date: date,
        end_date: Optional[date],
        notes: Optional[str],
    ) -> int:
        """Deactivate the employee's previous assignments and create a new active one.

        Returns the new assignment id.
        """

        raise NotImplementedError
