from __future__ import annotations

import datetime as dt
from typing import Optional

from pydantic import BaseModel


class AlphaCheckRequest(BaseModel):
    date: Optional[dt.date] = None
    days_ago: Optional[int] = None


class AlphaConvertRequest(BaseModel):
    new_status: Optional[str] = None
    keterangan: Optional[str] = None


class AlphaRemoveRequest(BaseModel):
    reason: Optional[str] = None


class UserApproveRequest(BaseModel):
    approved_role: Optional[str] = None
    notes: Optional[str] = None


class UserRejectRequest(BaseModel):
    reason: Optional[str] = None
