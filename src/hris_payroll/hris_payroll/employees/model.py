from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..core.enums import AccountStatus, Role


@dataclass(frozen=True)
class Employee:
    """Entitas domain: data kepegawaian (terpisah dari akun login)."""

    employee_id: int
    nama_lengkap: str
    user_id: Optional[int] = None
    jenis_kelamin: Optional[str] = None
    alamat: Optional[str] = None
    no_hp: Optional[str] = None
    jabatan: Optional[str] = None
    tanggal_masuk: Optional[date] = None
    status_karyawan: str = "Tetap"
    gaji_pokok: float = 0.0


@dataclass(frozen=True)
class EmployeeProfile:
    """Read model: employee joined with its login account (if any)."""

    employee: Employee
    username: Optional[str] = None
    email: Optional[str] = None
    role: Optional[Role] = None
    account_status: Optional[AccountStatus] = None

    def to_dict(self) -> dict:
        e = self.employee
        return {
            "employee_id": e.employee_id,
            "user_id": e.user_id,
            "nama_lengkap": e.nama_lengkap,
            "jenis_kelamin": e.jenis_kelamin,
            "alamat": e.alamat,
            "no_hp": e.no_hp,
            "jabatan": e.jabatan,
            "tanggal_masuk": e.tanggal_masuk,
            "status_karyawan": e.status_karyawan,
            "gaji_pokok": e.gaji_pokok,
            "username": self.username,
            "email": self.email,
            "role": self.role,
            "status": self.account_status,
        }
