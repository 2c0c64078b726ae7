from __future__ import annotations

import datetime as dt
from datetime import date
from typing import Optional

from pydantic import BaseModel


class ScheduleCreate(BaseModel):
    schedule_name: Optional[str] = None
    shift_type: Optional[str] = None
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    break_duration: Optional[int] = None
    work_days: Optional[str] = None
    description: Optional[str] = None


class ScheduleUpdate(BaseModel):
    schedule_name: Optional[str] = None
    shift_type: Optional[str] = None
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    break_duration: Optional[int] = None
    work_days: Optional[str] = None
    description: Optional[str] = None
    is_active: Optional[bool] = None


class ScheduleAssign(BaseModel):
    employee_id: Optional[int] = None
    schedule_id: Optional[int] = None
    effective_date: Optional[date] = None
    end_date: Optional[date] = None
    notes: Optional[str] = None


class CheckAttendanceRequest(BaseModel):
    employee_id: int
    check_time: str
    date: Optional[dt.date] = None
