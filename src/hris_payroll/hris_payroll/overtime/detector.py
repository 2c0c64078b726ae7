from __future__ import annotations

import logging
from datetime import date, time
from typing import Optional

from ..common.datetime_utils import format_hhmm, minutes_of
from ..core.constants import BONUS_PER_HOUR, MIN_OVERTIME_MINUTES
from ..schedules.resolver import ScheduleResolver
from .model import Overtime, OvertimeCandidate
from .repository import OvertimeRepository

log = logging.getLogger(__name__)


def evaluate(
    *,
    employee_id: int,
    attendance_id: Optional[int],
    tanggal: date,
    checkout: time,
    scheduled_end: time,
    bonus_per_hour: float = BONUS_PER_HOUR,
    min_minutes: int = MIN_OVERTIME_MINUTES,
) -> Optional[OvertimeCandidate]:
    """Overtime earned by a check-out, or None below the minimum."""

    diff = minutes_of(checkout) - minutes_of(scheduled_end)
    if diff < min_minutes:
        return None

    hours = round(diff / 60, 2)
    return OvertimeCandidate(
        employee_id=employee_id,
        attendance_id=attendance_id,
        tanggal=tanggal,
        jam_checkout=checkout,
        jam_scheduled=scheduled_end,
        overtime_minutes=diff,
        overtime_hours=hours,
        bonus_per_hour=float(bonus_per_hour),
        total_bonus=round(hours * bonus_per_hour, 2),
        reason=f"Auto-detected: Checkout at {format_hhmm(checkout)}, scheduled end {format_hhmm(scheduled_end)}",
    )


class OvertimeDetector:
    def __init__(self, resolver: ScheduleResolver, overtime: OvertimeRepository):
        self._resolver = resolver
        self._overtime = overtime

    def detect(self, attendance_id: int, employee_id: int, checkout: time, tanggal: date) -> Optional[Overtime]:
        window = self._resolver.resolve(employee_id)
        if not window.has_schedule or window.end is None:
            return None

        candidate = evaluate(
            employee_id=employee_id,
            attendance_id=attendance_id,
            tanggal=tanggal,
            checkout=checkout,
            scheduled_end=window.end,
        )
        if candidate is None:
            return None

        overtime_id = self._overtime.create(candidate)
        log.info(
            "Overtime detected for employee %s on %s: %.2f h (Rp %.0f)",
            employee_id,
            tanggal,
            candidate.overtime_hours,
            candidate.total_bonus,
        )
        return self._overtime.get(overtime_id)
