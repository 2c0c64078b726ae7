from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import time
from typing import Optional

from ...core.enums import AttendanceStatus
from ...schedules.resolver import ScheduleWindow


@dataclass(frozen=True)
class StatusDecision:
    status: AttendanceStatus
    note: Optional[str] = None
    late_minutes: int = 0

    @property
    def is_late(self) -> bool:
        return self.status == AttendanceStatus.TERLAMBAT


class AttendanceStrategy(ABC):
    """Strategy Pattern: encapsulate how we decide a check-in status."""

    @abstractmethod
    def decide_checkin(self, *, now: time, window: ScheduleWindow) -> StatusDecision:
        raise NotImplementedError
