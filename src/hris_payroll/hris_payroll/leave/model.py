from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import ApprovalStatus


@dataclass(frozen=True)
class LeaveRequest:
    """Entitas domain: pengajuan izin / cuti / sakit."""

    leave_id: int
    employee_id: int
    tanggal_mulai: date
    tanggal_selesai: date
    jenis_pengajuan: str
    status: ApprovalStatus = ApprovalStatus.PENDING
    alasan: str = ""
    tanggal_pengajuan: Optional[datetime] = None
    approved_by: Optional[int] = None
    approval_notes: Optional[str] = None
    approval_date: Optional[datetime] = None
    nama_lengkap: Optional[str] = None
    jabatan: Optional[str] = None

    @property
    def is_sick_leave(self) -> bool:
        return "sakit" in (self.jenis_pengajuan or "").lower()

    @property
    def day_span(self) -> int:
        """Inclusive number of days between start and end."""
        return abs((self.tanggal_selesai - self.tanggal_mulai).days) + 1

    def overlaps(self, start: date, end: date) -> bool:
        starts_inside = start <= self.tanggal_mulai <= end
        ends_inside = start <= self.tanggal_selesai <= end
        spans = self.tanggal_mulai <= start and self.tanggal_selesai >= end
        return starts_inside or ends_inside or spans

    def covers(self, day: date) -> bool:
        return self.tanggal_mulai <= day <= self.tanggal_selesai

    def to_dict(self) -> dict:
        return {
            "leave_id": self.leave_id,
            "employee_id": self.employee_id,
            "tanggal_pengajuan": self.tanggal_pengajuan,
            "tanggal_mulai": self.tanggal_mulai,
            "tanggal_selesai": self.tanggal_selesai,
            "jenis_pengajuan": self.jenis_pengajuan,
            "alasan": self.alasan,
            "status": self.status,
            "approved_by": self.approved_by,
            "approval_notes": self.approval_notes,
            "approval_date": self.approval_date,
            "employee": {"nama_lengkap": self.nama_lengkap, "jabatan": self.jabatan},
        }
