from __future__ import annotations

from datetime import date
from typing import Optional

from pydantic import BaseModel


class EmployeeCreate(BaseModel):
    nama_lengkap: Optional[str] = None
    user_id: Optional[int] = None
    jenis_kelamin: Optional[str] = None
    alamat: Optional[str] = None
    no_hp: Optional[str] = None
    jabatan: Optional[str] = None
    tanggal_masuk: Optional[date] = None
    status_karyawan: Optional[str] = None
    gaji_pokok: Optional[float] = None


class EmployeeUpdate(BaseModel):
    nama_lengkap: Optional[str] = None
    user_id: Optional[int] = None
    jenis_kelamin: Optional[str] = None
    alamat: Optional[str] = None
    no_hp: Optional[str] = None
    jabatan: Optional[str] = None
    tanggal_masuk: Optional[date] = None
    status_karyawan: Optional[str] = None
    gaji_pokok: Optional[float] = None
