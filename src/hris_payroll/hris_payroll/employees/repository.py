from __future__ import annotations

from datetime import date
from typing import Mapping, Optional, Protocol, Sequence

from .model import Employee, EmployeeProfile


class EmployeeRepository(Protocol):
    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        raise NotImplementedError

    def get_by_user_id(self, user_id: int) -> Optional[Employee]:
        raise NotImplementedError

    def get_profile(self, employee_id: int) -> Optional[EmployeeProfile]:
        raise NotImplementedError

    def list_profiles(self) -> Sequence[EmployeeProfile]:
        raise NotImplementedError

    def list_active(self) -> Sequence[Employee]:
        """Employees whose login account is active."""
        raise NotImplementedError

    def count_active(self) -> int:
        raise NotImplementedError

    def count_all(self) -> int:
        raise NotImplementedError

    def create(
        self,
        *,
        nama_lengkap: str,
        user_id: Optional[int],
        jenis_kelamin: Optional[str],
        alamat: Optional[str],
        no_hp: Optional[str],
        jabatan: Optional[str],
        tanggal_masuk: Optional[date],
        status_karyawan: str,
        gaji_pokok: float,
    ) -> int:
        raise NotImplementedError

    def update(self, employee_id: int, changes: Mapping[str, object]) -> bool:
        raise NotImplementedError

    def delete(self, employee_id: int) -> bool:
        raise NotImplementedError

    def delete_by_user_id(self, user_id: int) -> int:
        raise NotImplementedError
