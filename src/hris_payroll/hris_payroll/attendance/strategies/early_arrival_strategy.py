from __future__ import annotations

from datetime import time

from ...common.datetime_utils import minutes_of
from ...core.enums import AttendanceStatus
from ...schedules.resolver import ScheduleWindow
from .base import AttendanceStrategy, StatusDecision


class EarlyArrivalStrategy(AttendanceStrategy):
    """Check-in before the scheduled start: present, with a note."""

    def decide_checkin(self, *, now: time, window: ScheduleWindow) -> StatusDecision:
        early = minutes_of(window.start) - minutes_of(now)
        return StatusDecision(
            status=AttendanceStatus.HADIR,
            note=f"Check-in lebih awal {early} menit dari jadwal",
        )
