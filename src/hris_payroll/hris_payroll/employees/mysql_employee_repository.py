from __future__ import annotations

from datetime import date
from typing import Any, Dict, Mapping, Optional, Sequence

from ..core.enums import AccountStatus, Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_float, as_optional_int, db_cursor, execute_delete, execute_unique, fetchall, fetchone
from .model import Employee, EmployeeProfile
from .repository import EmployeeRepository

_EMPLOYEE_COLUMNS = (
    "e.employee_id, e.user_id, e.nama_lengkap, e.jenis_kelamin, e.alamat, e.no_hp, "
    "e.jabatan, e.tanggal_masuk, e.status_karyawan, e.gaji_pokok"
)

UPDATABLE_FIELDS = (
    "nama_lengkap",
    "jenis_kelamin",
    "alamat",
    "no_hp",
    "jabatan",
    "tanggal_masuk",
    "status_karyawan",
    "gaji_pokok",
    "user_id",
)


def _to_employee(row: Dict[str, Any]) -> Employee:
    return Employee(
        employee_id=int(row["employee_id"]),
        user_id=as_optional_int(row.get("user_id")),
        nama_lengkap=row["nama_lengkap"],
        jenis_kelamin=row.get("jenis_kelamin"),
        alamat=row.get("alamat"),
        no_hp=row.get("no_hp"),
        jabatan=row.get("jabatan"),
        tanggal_masuk=row.get("tanggal_masuk"),
        status_karyawan=row.get("status_karyawan") or "Tetap",
        gaji_pokok=as_float(row.get("gaji_pokok")),
    )


def _to_profile(row: Dict[str, Any]) -> EmployeeProfile:
    return EmployeeProfile(
        employee=_to_employee(row),
        username=row.get("username"),
        email=row.get("email"),
        role=Role(row["role"]) if row.get("role") else None,
        account_status=AccountStatus(row["user_status"]) if row.get("user_status") else None,
    )


class MySQLEmployeeRepository(EmployeeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_EMPLOYEE_COLUMNS} FROM employees e WHERE e.employee_id=%s", (employee_id,))
            row = fetchone(cur)
            return _to_employee(row) if row else None

    def get_by_user_id(self, user_id: int) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_EMPLOYEE_COLUMNS} FROM employees e WHERE e.user_id=%s", (user_id,))
            row = fetchone(cur)
            return _to_employee(row) if row else None

    def get_profile(self, employee_id: int) -> Optional[EmployeeProfile]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_EMPLOYEE_COLUMNS}, u.username, u.email, u.role, u.status AS user_status
                FROM employees e
                LEFT JOIN users u ON u.user_id = e.user_id
                WHERE e.employee_id=%s
                """,
                (employee_id,),
            )
            row = fetchone(cur)
            return _to_profile(row) if row else None

    def list_profiles(self) -> Sequence[EmployeeProfile]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_EMPLOYEE_COLUMNS}, u.username, u.email, u.role, u.status AS user_status
                FROM employees e
                LEFT JOIN users u ON u.user_id = e.user_id
                ORDER BY e.employee_id DESC
                """
            )
            return [_to_profile(r) for r in fetchall(cur)]

    def list_active(self) -> Sequence[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_EMPLOYEE_COLUMNS}
                FROM employees e
                INNER JOIN users u ON u.user_id = e.user_id
                WHERE u.status='active'
                ORDER BY e.employee_id
                """
            )
            return [_to_employee(r) for r in fetchall(cur)]

    def count_active(self) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT COUNT(*) AS total
                FROM employees e
                INNER JOIN users u ON u.user_id = e.user_id
                WHERE u.status='active'
                """
            )
            row = fetchone(cur) or {}
            return int(row.get("total") or 0)

    def count_all(self) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS total FROM employees")
            row = fetchone(cur) or {}
            return int(row.get("total") or 0)

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
        with db_cursor(self._conn_factory) as (_, cur):
            execute_unique(
                cur,
                """
                INSERT INTO employees(
                    user_id, nama_lengkap, jenis_kelamin, alamat, no_hp,
                    jabatan, tanggal_masuk, status_karyawan, gaji_pokok
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    user_id,
                    nama_lengkap,
                    jenis_kelamin,
                    alamat,
                    no_hp,
                    jabatan,
                    tanggal_masuk,
                    status_karyawan,
                    gaji_pokok,
                ),
                message="User ini sudah terhubung dengan data karyawan lain.",
            )
            return int(cur.lastrowid)

    def update(self, employee_id: int, changes: Mapping[str, object]) -> bool:
        fields = [k for k in UPDATABLE_FIELDS if k in changes]
        if not fields:
            return False
        assignments = ", ".join(f"{k}=%s" for k in fields)
        params = [changes[k] for k in fields] + [employee_id]
        with db_cursor(self._conn_factory) as (_, cur):
            execute_unique(
                cur,
                f"UPDATE employees SET {assignments} WHERE employee_id=%s",
                params,
                message="User ini sudah terhubung dengan data karyawan lain.",
            )
            return cur.rowcount > 0

    def delete(self, employee_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            deleted = execute_delete(
                cur,
                "DELETE FROM employees WHERE employee_id=%s",
                (employee_id,),
                message="Karyawan tidak dapat dihapus karena masih digunakan oleh data payroll.",
            )
            return deleted > 0

    def delete_by_user_id(self, user_id: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            return execute_delete(
                cur,
                "DELETE FROM employees WHERE user_id=%s",
                (user_id,),
                message="Karyawan tidak dapat dihapus karena masih digunakan oleh data payroll.",
            )
