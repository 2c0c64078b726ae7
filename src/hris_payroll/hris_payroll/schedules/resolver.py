from __future__ import annotations

from dataclasses import dataclass
from datetime import time
from typing import Optional

from ..common.datetime_utils import minutes_of, parse_hhmm
from ..core.constants import DEFAULT_EARLIEST_CHECKIN, DEFAULT_START_TIME, EARLY_CHECKIN_WINDOW_MINUTES
from .repository import ScheduleRepository


@dataclass(frozen=True)
class ScheduleWindow:
    """Expected working window for one employee on one day."""

    start: time
    earliest_checkin: time
    end: Optional[time] = None
    has_schedule: bool = False
    schedule_name: Optional[str] = None

    @property
    def crosses_midnight(self) -> bool:
        """Start in the morning but earliest check-in still on the previous evening."""
        return self.start.hour < 12 and self.earliest_checkin.hour > 12


def earliest_checkin_for(start: time, *, window_minutes: int = EARLY_CHECKIN_WINDOW_MINUTES) -> time:
    hour, minute = divmod(minutes_of(start) - int(window_minutes), 60)
    if hour < 0:
        hour += 24
    return time(hour=hour, minute=minute)


DEFAULT_WINDOW = ScheduleWindow(
    start=parse_hhmm(DEFAULT_START_TIME),
    earliest_checkin=parse_hhmm(DEFAULT_EARLIEST_CHECKIN),
)


class ScheduleResolver:
    def __init__(self, schedules: ScheduleRepository, *, window_minutes: int = EARLY_CHECKIN_WINDOW_MINUTES):
        self._schedules = schedules
        self._window_minutes = window_minutes

    def resolve(self, employee_id: int) -> ScheduleWindow:
        assignment = self._schedules.get_active_assignment(employee_id)
        if not assignment or not assignment.schedule:
            return DEFAULT_WINDOW

        schedule = assignment.schedule
        return ScheduleWindow(
            start=schedule.start_time,
            end=schedule.end_time,
            earliest_checkin=earliest_checkin_for(schedule.start_time, window_minutes=self._window_minutes),
            has_schedule=True,
            schedule_name=schedule.schedule_name,
        )
