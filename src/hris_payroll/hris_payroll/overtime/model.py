from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Optional

from ..core.enums import ApprovalStatus


@dataclass(frozen=True)
class OvertimeCandidate:
    """Lembur terdeteksi dari check-out, belum disimpan."""

    employee_id: int
    attendance_id: Optional[int]
    tanggal: date
    jam_checkout: time
    jam_scheduled: time
    overtime_minutes: int
    overtime_hours: float
    bonus_per_hour: float
    total_bonus: float
    reason: str


@dataclass(frozen=True)
class Overtime:
    overtime_id: int
    employee_id: int
    tanggal: date
    jam_checkout: time
    jam_scheduled: time
    overtime_hours: float
    bonus_per_hour: float
    total_bonus: float
    status: ApprovalStatus = ApprovalStatus.PENDING
    attendance_id: Optional[int] = None
    reason: Optional[str] = None
    approved_by: Optional[int] = None
    approval_notes: Optional[str] = None
    approval_date: Optional[datetime] = None
    created_at: Optional[datetime] = None
    nama_lengkap: Optional[str] = None
    jabatan: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "overtime_id": self.overtime_id,
            "employee_id": self.employee_id,
            "attendance_id": self.attendance_id,
            "tanggal": self.tanggal,
            "jam_checkout": self.jam_checkout,
            "jam_scheduled": self.jam_scheduled,
            "overtime_hours": self.overtime_hours,
            "bonus_per_hour": self.bonus_per_hour,
            "total_bonus": self.total_bonus,
            "status": self.status,
            "reason": self.reason,
            "approved_by": self.approved_by,
            "approval_notes": self.approval_notes,
            "approval_date": self.approval_date,
            "created_at": self.created_at,
            "employee": {"nama_lengkap": self.nama_lengkap, "jabatan": self.jabatan},
        }
