from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Optional


def net_salary(gaji_pokok: float, tunjangan: float, potongan: float) -> float:
    return float(gaji_pokok) + float(tunjangan) - float(potongan)


@dataclass(frozen=True)
class Payroll:
    """Entitas domain: slip gaji satu karyawan untuk satu periode (YYYY-MM)."""

    payroll_id: int
    employee_id: int
    periode: str
    gaji_pokok: float = 0.0
    tunjangan: float = 0.0
    potongan: float = 0.0
    total_gaji: float = 0.0
    alasan_potongan: Optional[str] = None
    employee_role: Optional[str] = None
    nama_lengkap: Optional[str] = None
    jabatan: Optional[str] = None
    status_karyawan: Optional[str] = None

    def with_deduction(self, amount: float, note: str) -> "Payroll":
        """Add one deduction line; the rationale is a '; '-joined history."""

        potongan = float(self.potongan) + float(amount)
        alasan = f"{self.alasan_potongan}; {note}" if self.alasan_potongan else note
        return replace(
            self,
            potongan=potongan,
            total_gaji=net_salary(self.gaji_pokok, self.tunjangan, potongan),
            alasan_potongan=alasan,
        )

    def to_dict(self) -> dict:
        return {
            "payroll_id": self.payroll_id,
            "employee_id": self.employee_id,
            "periode": self.periode,
            "gaji_pokok": self.gaji_pokok,
            "tunjangan": self.tunjangan,
            "potongan": self.potongan,
            "total_gaji": self.total_gaji,
            "alasan_potongan": self.alasan_potongan,
            "employee_role": self.employee_role,
            "employee": {
                "nama_lengkap": self.nama_lengkap,
                "jabatan": self.jabatan,
                "status_karyawan": self.status_karyawan,
            },
        }
