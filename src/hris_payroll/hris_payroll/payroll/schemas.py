from __future__ import annotations

from typing import Optional

from pydantic import BaseModel


class PayrollCreate(BaseModel):
    employee_id: Optional[int] = None
    periode: Optional[str] = None
    gaji_pokok: Optional[float] = None
    tunjangan: Optional[float] = None
    potongan: Optional[float] = None
    alasan_potongan: Optional[str] = None
    total_gaji: Optional[float] = None
    employee_role: Optional[str] = None


class PayrollUpdate(BaseModel):
    gaji_pokok: Optional[float] = None
    tunjangan: Optional[float] = None
    potongan: Optional[float] = None
    alasan_potongan: Optional[str] = None
    total_gaji: Optional[float] = None
    employee_role: Optional[str] = None
