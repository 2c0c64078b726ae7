from __future__ import annotations

from datetime import date, datetime
from typing import Any, Dict, List, Optional, Sequence

from ..core.enums import ApprovalStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_float, as_optional_int, db_cursor, fetchall, fetchone, normalize_mysql_time
from .model import Overtime, OvertimeCandidate
from .repository import OvertimeRepository

_SELECT = """
    SELECT o.overtime_id, o.employee_id, o.attendance_id, o.tanggal, o.jam_checkout, o.jam_scheduled,
           o.overtime_hours, o.bonus_per_hour, o.total_bonus, o.status, o.reason, o.approved_by,
           o.approval_notes, o.approval_date, o.created_at, e.nama_lengkap, e.jabatan
    FROM overtime o
    INNER JOIN employees e ON e.employee_id = o.employee_id
"""


def _to_overtime(row: Dict[str, Any]) -> Overtime:
    return Overtime(
        overtime_id=int(row["overtime_id"]),
        employee_id=int(row["employee_id"]),
        attendance_id=as_optional_int(row.get("attendance_id")),
        tanggal=row["tanggal"],
        jam_checkout=normalize_mysql_time(row["jam_checkout"]),
        jam_scheduled=normalize_mysql_time(row["jam_scheduled"]),
        overtime_hours=as_float(row.get("overtime_hours")),
        bonus_per_hour=as_float(row.get("bonus_per_hour")),
        total_bonus=as_float(row.get("total_bonus")),
        status=ApprovalStatus(row.get("status") or ApprovalStatus.PENDING.value),
        reason=row.get("reason"),
        approved_by=as_optional_int(row.get("approved_by")),
        approval_notes=row.get("approval_notes"),
        approval_date=row.get("approval_date"),
        created_at=row.get("created_at"),
        nama_lengkap=row.get("nama_lengkap"),
        jabatan=row.get("jabatan"),
    )


class MySQLOvertimeRepository(OvertimeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self, overtime_id: int) -> Optional[Overtime]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE o.overtime_id=%s", (overtime_id,))
            row = fetchone(cur)
            return _to_overtime(row) if row else None

    def list_records(
        self,
        *,
        status: Optional[ApprovalStatus] = None,
        employee_id: Optional[int] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> Sequence[Overtime]:
        clauses: List[str] = []
        params: List[Any] = []
        if status is not None:
            clauses.append("o.status=%s")
            params.append(status.value)
        if employee_id is not None:
            clauses.append("o.employee_id=%s")
            params.append(employee_id)
        if start is not None:
            clauses.append("o.tanggal >= %s")
            params.append(start)
        if end is not None:
            clauses.append("o.tanggal <= %s")
            params.append(end)

        where = (" WHERE " + " AND ".join(clauses)) if clauses else ""
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + where + " ORDER BY o.tanggal DESC, o.overtime_id DESC", tuple(params))
            return [_to_overtime(r) for r in fetchall(cur)]

    def create(self, candidate: OvertimeCandidate) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO overtime(
                    employee_id, attendance_id, tanggal, jam_checkout, jam_scheduled,
                    overtime_hours, bonus_per_hour, total_bonus, status, reason
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,'pending',%s)
                """,
                (
                    candidate.employee_id,
                    candidate.attendance_id,
                    candidate.tanggal,
                    candidate.jam_checkout,
                    candidate.jam_scheduled,
                    candidate.overtime_hours,
                    candidate.bonus_per_hour,
                    candidate.total_bonus,
                    candidate.reason,
                ),
            )
            return int(cur.lastrowid)

    def decide(
        self,
        overtime_id: int,
        *,
        decision: ApprovalStatus,
        approver_id: int,
        notes: Optional[str],
        decided_at: datetime,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE overtime
                SET status=%s, approved_by=%s, approval_notes=%s, approval_date=%s
                WHERE overtime_id=%s AND status='pending'
                """,
                (decision.value, approver_id, notes, decided_at, overtime_id),
            )
            return cur.rowcount > 0

    def delete(self, overtime_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM overtime WHERE overtime_id=%s", (overtime_id,))
            return cur.rowcount > 0
