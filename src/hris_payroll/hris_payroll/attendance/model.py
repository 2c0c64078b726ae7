from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Optional

from ..core.enums import ApprovalStatus, AttendanceStatus


@dataclass(frozen=True)
class Attendance:
    """Entitas domain: satu baris absensi per karyawan per hari."""

    attendance_id: int
    employee_id: int
    tanggal: date
    jam_masuk: Optional[time] = None
    jam_pulang: Optional[time] = None
    lokasi_masuk: Optional[str] = None
    lokasi_pulang: Optional[str] = None
    akurasi_masuk: Optional[int] = None
    akurasi_pulang: Optional[int] = None
    tipe_kerja: str = "WFO"
    status: Optional[AttendanceStatus] = None
    keterangan: Optional[str] = None
    recorded_by_role: Optional[str] = None
    approval_status: Optional[ApprovalStatus] = None
    approved_by: Optional[int] = None
    approval_notes: Optional[str] = None
    approval_date: Optional[datetime] = None
    nama_lengkap: Optional[str] = None
    jabatan: Optional[str] = None

    @property
    def has_checked_in(self) -> bool:
        return self.jam_masuk is not None

    @property
    def has_checked_out(self) -> bool:
        return self.jam_pulang is not None

    def to_dict(self) -> dict:
        return {
            "attendance_id": self.attendance_id,
            "employee_id": self.employee_id,
            "tanggal": self.tanggal,
            "jam_masuk": self.jam_masuk,
            "jam_pulang": self.jam_pulang,
            "lokasi_masuk": self.lokasi_masuk,
            "lokasi_pulang": self.lokasi_pulang,
            "akurasi_masuk": self.akurasi_masuk,
            "akurasi_pulang": self.akurasi_pulang,
            "tipe_kerja": self.tipe_kerja,
            "status": self.status,
            "keterangan": self.keterangan,
            "recorded_by_role": self.recorded_by_role,
            "approval_status": self.approval_status,
            "approved_by": self.approved_by,
            "approval_notes": self.approval_notes,
            "approval_date": self.approval_date,
            "employee": {"nama_lengkap": self.nama_lengkap, "jabatan": self.jabatan},
        }


@dataclass(frozen=True)
class NewAttendance:
    """Data untuk baris absensi baru (check-in, input manual, request WFH, alpa)."""

    employee_id: int
    tanggal: date
    status: Optional[AttendanceStatus]
    jam_masuk: Optional[time] = None
    jam_pulang: Optional[time] = None
    tipe_kerja: str = "WFO"
    lokasi_masuk: Optional[str] = None
    lokasi_pulang: Optional[str] = None
    akurasi_masuk: Optional[int] = None
    akurasi_pulang: Optional[int] = None
    keterangan: Optional[str] = None
    recorded_by_role: Optional[str] = None
    approval_status: Optional[ApprovalStatus] = None
