from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_float, db_cursor, execute_delete, execute_unique, fetchall, fetchone
from .model import Payroll
from .repository import PayrollRepository

_SELECT = """
    SELECT p.payroll_id, p.employee_id, p.periode, p.gaji_pokok, p.tunjangan, p.potongan,
           p.total_gaji, p.alasan_potongan, p.employee_role,
           e.nama_lengkap, e.jabatan, e.status_karyawan
    FROM payroll p
    INNER JOIN employees e ON e.employee_id = p.employee_id
"""

UPDATABLE_FIELDS = (
    "gaji_pokok",
    "tunjangan",
    "potongan",
    "alasan_potongan",
    "total_gaji",
    "employee_role",
)


def _to_payroll(row: Dict[str, Any]) -> Payroll:
    return Payroll(
        payroll_id=int(row["payroll_id"]),
        employee_id=int(row["employee_id"]),
        periode=row["periode"],
        gaji_pokok=as_float(row.get("gaji_pokok")),
        tunjangan=as_float(row.get("tunjangan")),
        potongan=as_float(row.get("potongan")),
        total_gaji=as_float(row.get("total_gaji")),
        alasan_potongan=row.get("alasan_potongan"),
        employee_role=row.get("employee_role"),
        nama_lengkap=row.get("nama_lengkap"),
        jabatan=row.get("jabatan"),
        status_karyawan=row.get("status_karyawan"),
    )


def _duplicate_message(periode: str) -> str:
    return f"Payroll untuk periode {periode} dan karyawan ini sudah ada"


class MySQLPayrollRepository(PayrollRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self, payroll_id: int) -> Optional[Payroll]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE p.payroll_id=%s", (payroll_id,))
            row = fetchone(cur)
            return _to_payroll(row) if row else None

    def get_for_period(self, employee_id: int, periode: str) -> Optional[Payroll]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE p.employee_id=%s AND p.periode=%s", (employee_id, periode))
            row = fetchone(cur)
            return _to_payroll(row) if row else None

    def list_records(self, *, periode: Optional[str] = None, employee_id: Optional[int] = None) -> Sequence[Payroll]:
        clauses: List[str] = []
        params: List[Any] = []
        if periode:
            clauses.append("p.periode=%s")
            params.append(periode)
        if employee_id is not None:
            clauses.append("p.employee_id=%s")
            params.append(employee_id)

        where = (" WHERE " + " AND ".join(clauses)) if clauses else ""
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + where + " ORDER BY p.periode DESC, p.payroll_id DESC", tuple(params))
            return [_to_payroll(r) for r in fetchall(cur)]

    def list_for_year(self, year: int) -> Sequence[Payroll]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE p.periode LIKE %s ORDER BY p.periode", (f"{int(year)}-%",))
            return [_to_payroll(r) for r in fetchall(cur)]

    def create(
        self,
        *,
        employee_id: int,
        periode: str,
        gaji_pokok: float,
        tunjangan: float,
        potongan: float,
        total_gaji: float,
        alasan_potongan: str,
        employee_role: str,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            execute_unique(
                cur,
                """
                INSERT INTO payroll(
                    employee_id, periode, gaji_pokok, tunjangan, potongan, total_gaji, alasan_potongan, employee_role
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (employee_id, periode, gaji_pokok, tunjangan, potongan, total_gaji, alasan_potongan, employee_role),
                message=_duplicate_message(periode),
            )
            return int(cur.lastrowid)

    def update(self, payroll_id: int, changes: Mapping[str, object]) -> bool:
        fields = [k for k in UPDATABLE_FIELDS if k in changes]
        if not fields:
            return False
        assignments = ", ".join(f"{k}=%s" for k in fields)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"UPDATE payroll SET {assignments} WHERE payroll_id=%s",
                tuple(changes[k] for k in fields) + (payroll_id,),
            )
            return cur.rowcount > 0

    def delete(self, payroll_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            deleted = execute_delete(
                cur,
                "DELETE FROM payroll WHERE payroll_id=%s",
                (payroll_id,),
                message="Data payroll tidak dapat dihapus.",
            )
            return deleted > 0

    def add_deduction(
        self,
        employee_id: int,
        periode: str,
        *,
        amount: float,
        note: str,
        gaji_pokok: float,
        employee_role: str,
    ) -> Payroll:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT IGNORE INTO payroll(
                    employee_id, periode, gaji_pokok, tunjangan, potongan, total_gaji, alasan_potongan, employee_role
                )
                VALUES(%s,%s,%s,0,0,%s,NULL,%s)
                """,
                (employee_id, periode, gaji_pokok, gaji_pokok, employee_role),
            )
            cur.execute(_SELECT + " WHERE p.employee_id=%s AND p.periode=%s FOR UPDATE", (employee_id, periode))
            current = _to_payroll(fetchone(cur))
            updated = current.with_deduction(amount, note)
            cur.execute(
                "UPDATE payroll SET potongan=%s, total_gaji=%s, alasan_potongan=%s WHERE payroll_id=%s",
                (updated.potongan, updated.total_gaji, updated.alasan_potongan, updated.payroll_id),
            )
            return updated
