from __future__ import annotations

from datetime import time

from ...core.enums import AttendanceStatus
from ...schedules.resolver import ScheduleWindow
from .base import AttendanceStrategy, StatusDecision


class NormalStrategy(AttendanceStrategy):
    """Check-in exactly at the scheduled start."""

    def decide_checkin(self, *, now: time, window: ScheduleWindow) -> StatusDecision:
        return StatusDecision(status=AttendanceStatus.HADIR)
