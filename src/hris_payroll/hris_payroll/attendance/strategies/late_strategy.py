from __future__ import annotations

from datetime import time

from ...common.datetime_utils import format_hhmm, humanize_minutes, minutes_of
from ...core.enums import AttendanceStatus
from ...schedules.resolver import ScheduleWindow
from .base import AttendanceStrategy, StatusDecision


class LateStrategy(AttendanceStrategy):
    """Late check-in."""

    def decide_checkin(self, *, now: time, window: ScheduleWindow) -> StatusDecision:
        late = minutes_of(now) - minutes_of(window.start)
        return StatusDecision(
            status=AttendanceStatus.TERLAMBAT,
            note=(
                f"Terlambat {humanize_minutes(late)} "
                f"(Jadwal: {format_hhmm(window.start)}, Check-in: {format_hhmm(now)})"
            ),
            late_minutes=late,
        )
