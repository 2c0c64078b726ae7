from __future__ import annotations

from typing import List, Optional

from ..common.validators import optional_phone, require_non_empty
from ..core.constants import DEFAULT_BASIC_SALARY
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..users.model import AuthUser
from ..users.repository import UserRepository
from .model import Employee, EmployeeProfile
from .repository import EmployeeRepository
from .schemas import EmployeeCreate, EmployeeUpdate


class EmployeeService:
    """Use case: kelola data karyawan (Admin/HR)."""

    def __init__(self, employees: EmployeeRepository, users: UserRepository):
        self._employees = employees
        self._users = users

    def list_profiles(self) -> List[EmployeeProfile]:
        return list(self._employees.list_profiles())

    def get_profile(self, actor: AuthUser, employee_id: int) -> EmployeeProfile:
        if not actor.is_manager and actor.employee_id != employee_id:
            raise AuthorizationError("Anda hanya dapat melihat data karyawan Anda sendiri.")
        profile = self._employees.get_profile(employee_id)
        if not profile:
            raise NotFoundError("Karyawan tidak ditemukan")
        return profile

    def require(self, employee_id: int) -> Employee:
        employee = self._employees.get_by_id(employee_id)
        if not employee:
            raise NotFoundError("Karyawan tidak ditemukan")
        return employee

    def create(self, data: EmployeeCreate) -> int:
        nama = require_non_empty(data.nama_lengkap or "", "Nama lengkap")
        if data.user_id is not None and not self._users.get_by_id(data.user_id):
            raise ValidationError("User tidak ditemukan")
        if data.gaji_pokok is not None and data.gaji_pokok < 0:
            raise ValidationError("Gaji pokok tidak boleh negatif")

        return self._employees.create(
            nama_lengkap=nama,
            user_id=data.user_id,
            jenis_kelamin=data.jenis_kelamin,
            alamat=data.alamat,
            no_hp=optional_phone(data.no_hp),
            jabatan=data.jabatan,
            tanggal_masuk=data.tanggal_masuk,
            status_karyawan=data.status_karyawan or "Tetap",
            gaji_pokok=float(data.gaji_pokok) if data.gaji_pokok is not None else float(DEFAULT_BASIC_SALARY),
        )

    def update(self, employee_id: int, data: EmployeeUpdate) -> Employee:
        self.require(employee_id)
        changes = data.model_dump(exclude_unset=True)
        if "nama_lengkap" in changes:
            changes["nama_lengkap"] = require_non_empty(changes["nama_lengkap"] or "", "Nama lengkap")
        if "no_hp" in changes:
            changes["no_hp"] = optional_phone(changes["no_hp"])
        if changes.get("gaji_pokok") is not None and changes["gaji_pokok"] < 0:
            raise ValidationError("Gaji pokok tidak boleh negatif")
        if changes.get("user_id") is not None and not self._users.get_by_id(changes["user_id"]):
            raise ValidationError("User tidak ditemukan")
        if not changes:
            raise ValidationError("Tidak ada data yang diubah")

        self._employees.update(employee_id, changes)
        return self.require(employee_id)

    def delete(self, employee_id: int) -> None:
        if not self._employees.delete(employee_id):
            raise NotFoundError("Karyawan tidak ditemukan")

    def find_by_user(self, user_id: int) -> Optional[Employee]:
        return self._employees.get_by_user_id(user_id)
