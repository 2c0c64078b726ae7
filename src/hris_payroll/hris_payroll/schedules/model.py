from __future__ import annotations

from dataclasses import dataclass
from datetime import date, time
from typing import Optional


@dataclass(frozen=True)
class WorkSchedule:
    schedule_id: int
    schedule_name: str
    start_time: time
    end_time: time
    shift_type: str = "Regular"
    break_duration: int = 60
    work_days: str = "Mon-Fri"
    description: Optional[str] = None
    is_active: bool = True


@dataclass(frozen=True)
class EmployeeSchedule:
    """Penugasan jadwal ke karyawan; paling banyak satu yang aktif."""

    id: int
    employee_id: int
    schedule_id: int
    effective_date: date
    end_date: Optional[date] = None
    notes: Optional[str] = None
    is_active: bool = True
    schedule: Optional[WorkSchedule] = None
    nama_lengkap: Optional[str] = None
    jabatan: Optional[str] = None
