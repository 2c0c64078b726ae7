from __future__ import annotations

from datetime import date, datetime
from typing import Any, Dict, List, Optional, Sequence

from ..core.enums import ApprovalStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_optional_int, db_cursor, fetchall, fetchone
from .model import LeaveRequest
from .repository import LeaveRepository

_SELECT = """
    SELECT l.leave_id, l.employee_id, l.tanggal_pengajuan, l.tanggal_mulai, l.tanggal_selesai,
           l.jenis_pengajuan, l.alasan, l.status, l.approved_by, l.approval_notes, l.approval_date,
           e.nama_lengkap, e.jabatan
    FROM leave_requests l
    INNER JOIN employees e ON e.employee_id = l.employee_id
"""


def _to_leave(row: Dict[str, Any]) -> LeaveRequest:
    return LeaveRequest(
        leave_id=int(row["leave_id"]),
        employee_id=int(row["employee_id"]),
        tanggal_mulai=row["tanggal_mulai"],
        tanggal_selesai=row["tanggal_selesai"],
        jenis_pengajuan=row["jenis_pengajuan"],
        status=ApprovalStatus(row.get("status") or ApprovalStatus.PENDING.value),
        alasan=row.get("alasan") or "",
        tanggal_pengajuan=row.get("tanggal_pengajuan"),
        approved_by=as_optional_int(row.get("approved_by")),
        approval_notes=row.get("approval_notes"),
        approval_date=row.get("approval_date"),
        nama_lengkap=row.get("nama_lengkap"),
        jabatan=row.get("jabatan"),
    )


class MySQLLeaveRepository(LeaveRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self, leave_id: int) -> Optional[LeaveRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE l.leave_id=%s", (leave_id,))
            row = fetchone(cur)
            return _to_leave(row) if row else None

    def list_all(self) -> Sequence[LeaveRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " ORDER BY l.tanggal_pengajuan DESC, l.leave_id DESC")
            return [_to_leave(r) for r in fetchall(cur)]

    def list_for_employee(self, employee_id: int) -> Sequence[LeaveRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT + " WHERE l.employee_id=%s ORDER BY l.tanggal_pengajuan DESC, l.leave_id DESC",
                (employee_id,),
            )
            return [_to_leave(r) for r in fetchall(cur)]

    def list_approved_overlapping(
        self,
        start: date,
        end: date,
        *,
        employee_id: Optional[int] = None,
    ) -> Sequence[LeaveRequest]:
        clauses: List[str] = [
            "l.status='approved'",
            """(
                (l.tanggal_mulai BETWEEN %s AND %s)
                OR (l.tanggal_selesai BETWEEN %s AND %s)
                OR (l.tanggal_mulai <= %s AND l.tanggal_selesai >= %s)
            )""",
        ]
        params: List[Any] = [start, end, start, end, start, end]
        if employee_id is not None:
            clauses.append("l.employee_id=%s")
            params.append(employee_id)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE " + " AND ".join(clauses), tuple(params))
            return [_to_leave(r) for r in fetchall(cur)]

    def count_pending(self) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS total FROM leave_requests WHERE status='pending'")
            row = fetchone(cur) or {}
            return int(row.get("total") or 0)

    def create(
        self,
        *,
        employee_id: int,
        tanggal_mulai: date,
        tanggal_selesai: date,
        jenis_pengajuan: str,
        alasan: str,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO leave_requests(employee_id, tanggal_mulai, tanggal_selesai, jenis_pengajuan, alasan, status)
                VALUES(%s,%s,%s,%s,%s,'pending')
                """,
                (employee_id, tanggal_mulai, tanggal_selesai, jenis_pengajuan, alasan),
            )
            return int(cur.lastrowid)

    def decide(
        self,
        leave_id: int,
        *,
        decision: ApprovalStatus,
        approver_id: int,
        notes: Optional[str],
        decided_at: datetime,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE leave_requests
                SET status=%s, approved_by=%s, approval_notes=%s, approval_date=%s
                WHERE leave_id=%s AND status='pending'
                """,
                (decision.value, approver_id, notes, decided_at, leave_id),
            )
            return cur.rowcount > 0

    def delete(self, leave_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM leave_requests WHERE leave_id=%s", (leave_id,))
            return cur.rowcount > 0
