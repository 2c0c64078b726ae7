from __future__ import annotations

from datetime import date, datetime, time
from typing import Any, Dict, List, Mapping, Optional, Sequence

from ..core.enums import ApprovalStatus, AttendanceStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_optional_int, db_cursor, execute_unique, fetchall, fetchone, normalize_mysql_time
from .model import Attendance, NewAttendance
from .repository import AttendanceRepository

_SELECT = """
    SELECT a.attendance_id, a.employee_id, a.tanggal, a.jam_masuk, a.jam_pulang,
           a.lokasi_masuk, a.lokasi_pulang, a.akurasi_masuk, a.akurasi_pulang, a.tipe_kerja,
           a.status, a.keterangan, a.recorded_by_role, a.approval_status, a.approved_by,
           a.approval_notes, a.approval_date, e.nama_lengkap, e.jabatan
    FROM attendance a
    INNER JOIN employees e ON e.employee_id = a.employee_id
"""

UPDATABLE_FIELDS = (
    "jam_masuk",
    "jam_pulang",
    "status",
    "tipe_kerja",
    "lokasi_masuk",
    "lokasi_pulang",
    "akurasi_masuk",
    "akurasi_pulang",
    "keterangan",
    "recorded_by_role",
)

_DUPLICATE_MESSAGE = "Absensi untuk karyawan ini pada tanggal tersebut sudah ada."


def _to_attendance(row: Dict[str, Any]) -> Attendance:
    return Attendance(
        attendance_id=int(row["attendance_id"]),
        employee_id=int(row["employee_id"]),
        tanggal=row["tanggal"],
        jam_masuk=normalize_mysql_time(row.get("jam_masuk")),
        jam_pulang=normalize_mysql_time(row.get("jam_pulang")),
        lokasi_masuk=row.get("lokasi_masuk"),
        lokasi_pulang=row.get("lokasi_pulang"),
        akurasi_masuk=as_optional_int(row.get("akurasi_masuk")),
        akurasi_pulang=as_optional_int(row.get("akurasi_pulang")),
        tipe_kerja=row.get("tipe_kerja") or "WFO",
        status=AttendanceStatus.parse(row.get("status")),
        keterangan=row.get("keterangan"),
        recorded_by_role=row.get("recorded_by_role"),
        approval_status=ApprovalStatus(row["approval_status"]) if row.get("approval_status") else None,
        approved_by=as_optional_int(row.get("approved_by")),
        approval_notes=row.get("approval_notes"),
        approval_date=row.get("approval_date"),
        nama_lengkap=row.get("nama_lengkap"),
        jabatan=row.get("jabatan"),
    )


def _db_value(value: Any) -> Any:
    return value.value if isinstance(value, (AttendanceStatus, ApprovalStatus)) else value


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, attendance_id: int) -> Optional[Attendance]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE a.attendance_id=%s", (attendance_id,))
            row = fetchone(cur)
            return _to_attendance(row) if row else None

    def get_for_employee_and_date(self, employee_id: int, tanggal: date) -> Optional[Attendance]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE a.employee_id=%s AND a.tanggal=%s", (employee_id, tanggal))
            row = fetchone(cur)
            return _to_attendance(row) if row else None

    def list_records(
        self,
        *,
        employee_id: Optional[int] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
        status: Optional[AttendanceStatus] = None,
    ) -> Sequence[Attendance]:
        clauses: List[str] = []
        params: List[Any] = []
        if employee_id is not None:
            clauses.append("a.employee_id=%s")
            params.append(employee_id)
        if start is not None:
            clauses.append("a.tanggal >= %s")
            params.append(start)
        if end is not None:
            clauses.append("a.tanggal <= %s")
            params.append(end)
        if status is not None:
            clauses.append("a.status=%s")
            params.append(status.value)

        where = (" WHERE " + " AND ".join(clauses)) if clauses else ""
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + where + " ORDER BY a.tanggal DESC, a.attendance_id DESC", tuple(params))
            return [_to_attendance(r) for r in fetchall(cur)]

    def list_pending_approvals(self) -> Sequence[Attendance]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE a.approval_status='pending' ORDER BY a.tanggal DESC")
            return [_to_attendance(r) for r in fetchall(cur)]

    def create(self, draft: NewAttendance) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            execute_unique(
                cur,
                """
                INSERT INTO attendance(
                    employee_id, tanggal, jam_masuk, jam_pulang, tipe_kerja, lokasi_masuk, lokasi_pulang,
                    akurasi_masuk, akurasi_pulang, status, keterangan, recorded_by_role, approval_status
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    draft.employee_id,
                    draft.tanggal,
                    draft.jam_masuk,
                    draft.jam_pulang,
                    draft.tipe_kerja,
                    draft.lokasi_masuk,
                    draft.lokasi_pulang,
                    draft.akurasi_masuk,
                    draft.akurasi_pulang,
                    _db_value(draft.status),
                    draft.keterangan,
                    draft.recorded_by_role,
                    _db_value(draft.approval_status),
                ),
                message=_DUPLICATE_MESSAGE,
            )
            return int(cur.lastrowid)

    def fill_checkin(
        self,
        attendance_id: int,
        *,
        jam_masuk: time,
        lokasi_masuk: Optional[str],
        akurasi_masuk: Optional[int],
        status: AttendanceStatus,
        keterangan: Optional[str],
        recorded_by_role: str,
        tipe_kerja: Optional[str] = None,
    ) -> bool:
        sets = "jam_masuk=%s, lokasi_masuk=%s, akurasi_masuk=%s, status=%s, keterangan=%s, recorded_by_role=%s"
        params = [jam_masuk, lokasi_masuk, akurasi_masuk, status.value, keterangan, recorded_by_role]
        if tipe_kerja is not None:
            sets += (
                ", tipe_kerja=%s, approval_status=NULL, approved_by=NULL, approval_notes=NULL, approval_date=NULL"
            )
            params.append(tipe_kerja)
        params.append(attendance_id)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"UPDATE attendance SET {sets} WHERE attendance_id=%s AND jam_masuk IS NULL",
                tuple(params),
            )
            return cur.rowcount > 0

    def record_checkout(
        self,
        attendance_id: int,
        *,
        jam_pulang: time,
        lokasi_pulang: Optional[str],
        akurasi_pulang: Optional[int],
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance
                SET jam_pulang=%s, lokasi_pulang=%s, akurasi_pulang=%s
                WHERE attendance_id=%s AND jam_pulang IS NULL
                """,
                (jam_pulang, lokasi_pulang, akurasi_pulang, attendance_id),
            )
            return cur.rowcount > 0

    def update(self, attendance_id: int, changes: Mapping[str, object]) -> bool:
        fields = [k for k in UPDATABLE_FIELDS if k in changes]
        if not fields:
            return False
        assignments = ", ".join(f"{k}=%s" for k in fields)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"UPDATE attendance SET {assignments} WHERE attendance_id=%s",
                tuple(_db_value(changes[k]) for k in fields) + (attendance_id,),
            )
            return cur.rowcount > 0

    def decide_approval(
        self,
        attendance_id: int,
        *,
        decision: ApprovalStatus,
        approver_id: int,
        notes: Optional[str],
        decided_at: datetime,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance
                SET approval_status=%s, status=%s, approved_by=%s, approval_notes=%s, approval_date=%s
                WHERE attendance_id=%s AND approval_status='pending'
                """,
                (decision.value, decision.value, approver_id, notes, decided_at, attendance_id),
            )
            return cur.rowcount > 0

    def delete(self, attendance_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM attendance WHERE attendance_id=%s", (attendance_id,))
            return cur.rowcount > 0
