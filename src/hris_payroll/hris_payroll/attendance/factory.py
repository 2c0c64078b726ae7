from __future__ import annotations

from dataclasses import dataclass
from datetime import time

from ..common.datetime_utils import minutes_of
from ..schedules.resolver import ScheduleWindow
from .strategies.base import AttendanceStrategy
from .strategies.early_arrival_strategy import EarlyArrivalStrategy
from .strategies.late_strategy import LateStrategy
from .strategies.normal_strategy import NormalStrategy


@dataclass
class AttendanceStrategyFactory:
    """Factory Pattern: choose appropriate strategy based on rules."""

    def for_checkin(self, *, now: time, window: ScheduleWindow) -> AttendanceStrategy:
        now_minutes = minutes_of(now)
        start_minutes = minutes_of(window.start)
        if now_minutes > start_minutes:
            return LateStrategy()
        if now_minutes < start_minutes:
            return EarlyArrivalStrategy()
        return NormalStrategy()
