from __future__ import annotations

from datetime import date, time
from typing import Optional

from pydantic import BaseModel


class CheckInRequest(BaseModel):
    employee_id: Optional[int] = None
    jam_masuk: Optional[time] = None
    tipe_kerja: Optional[str] = None
    lokasi_masuk: Optional[str] = None
    akurasi_masuk: Optional[int] = None


class CheckOutRequest(BaseModel):
    jam_pulang: Optional[time] = None
    lokasi_pulang: Optional[str] = None
    akurasi_pulang: Optional[int] = None


class AttendanceCreate(BaseModel):
    employee_id: Optional[int] = None
    tanggal: Optional[date] = None
    jam_masuk: Optional[time] = None
    jam_pulang: Optional[time] = None
    status: Optional[str] = None
    tipe_kerja: Optional[str] = None
    lokasi_masuk: Optional[str] = None
    lokasi_pulang: Optional[str] = None
    akurasi_masuk: Optional[int] = None
    akurasi_pulang: Optional[int] = None
    keterangan: Optional[str] = None
    recorded_by_role: Optional[str] = None


class AttendanceUpdate(BaseModel):
    jam_masuk: Optional[time] = None
    jam_pulang: Optional[time] = None
    status: Optional[str] = None
    tipe_kerja: Optional[str] = None
    lokasi_masuk: Optional[str] = None
    lokasi_pulang: Optional[str] = None
    akurasi_masuk: Optional[int] = None
    akurasi_pulang: Optional[int] = None
    keterangan: Optional[str] = None


class ApprovalDecision(BaseModel):
    action: Optional[str] = None
    notes: Optional[str] = None


class RemoteWorkRequest(BaseModel):
    tanggal: Optional[date] = None
    tipe_kerja: Optional[str] = None
    keterangan: Optional[str] = None
