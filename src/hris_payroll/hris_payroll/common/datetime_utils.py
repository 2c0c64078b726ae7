from __future__ import annotations

import calendar
from datetime import date, datetime, time
from typing import Tuple

MONTH_NAMES_ID = (
    "Januari",
    "Februari",
    "Maret",
    "April",
    "Mei",
    "Juni",
    "Juli",
    "Agustus",
    "September",
    "Oktober",
    "November",
    "Desember",
)


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mock it easier.
    """
    return datetime.now()


def parse_hhmm(value: str) -> time:
    """Parse 'HH:MM' or 'HH:MM:SS' into a time."""
    parts = value.strip().split(":")
    if len(parts) < 2:
        raise ValueError(f"Invalid time string: {value!r}")
    seconds = int(parts[2]) if len(parts) >= 3 and parts[2] else 0
    return time(hour=int(parts[0]), minute=int(parts[1]), second=seconds)


def format_hhmm(value: time) -> str:
    return value.strftime("%H:%M")


def minutes_of(value: time) -> int:
    return value.hour * 60 + value.minute


def humanize_minutes(total_minutes: int) -> str:
    """45 -> '45 menit', 75 -> '1 jam 15 menit'."""
    hours, minutes = divmod(int(total_minutes), 60)
    prefix = f"{hours} jam " if hours > 0 else ""
    return f"{prefix}{minutes} menit"


def period_of(value: date) -> str:
    return value.strftime("%Y-%m")


def format_period(year: int, month: int) -> str:
    return f"{int(year)}-{int(month):02d}"


def parse_period(periode: str) -> Tuple[int, int]:
    """'2025-06' -> (2025, 6)."""
    try:
        year_s, month_s = periode.strip().split("-")
        year, month = int(year_s), int(month_s)
    except (AttributeError, ValueError):
        raise ValueError(f"Invalid periode: {periode!r}")
    if not 1 <= month <= 12:
        raise ValueError(f"Invalid periode: {periode!r}")
    return year, month


def month_bounds(year: int, month: int) -> Tuple[date, date]:
    """First and last calendar day of a month."""
    last_day = calendar.monthrange(int(year), int(month))[1]
    return date(int(year), int(month), 1), date(int(year), int(month), last_day)


def month_name(month: int) -> str:
    return MONTH_NAMES_ID[int(month) - 1]
