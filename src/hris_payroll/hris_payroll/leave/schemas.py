from __future__ import annotations

from datetime import date
from typing import Optional

from pydantic import BaseModel


class LeaveCreate(BaseModel):
    tanggal_mulai: Optional[date] = None
    tanggal_selesai: Optional[date] = None
    jenis_pengajuan: Optional[str] = None
    alasan: Optional[str] = None


class LeaveStatusUpdate(BaseModel):
    status: Optional[str] = None
    notes: Optional[str] = None
