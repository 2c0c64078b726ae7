from __future__ import annotations

from datetime import date, time
from typing import Any, Dict, Mapping, Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, normalize_mysql_time
from .model import EmployeeSchedule, WorkSchedule
from .repository import ScheduleRepository

_SCHEDULE_COLUMNS = (
    "ws.schedule_id, ws.schedule_name, ws.shift_type, ws.start_time, ws.end_time, "
    "ws.break_duration, ws.work_days, ws.description, ws.is_active"
)

UPDATABLE_FIELDS = (
    "schedule_name",
    "shift_type",
    "start_time",
    "end_time",
    "break_duration",
    "work_days",
    "description",
    "is_active",
)


def _to_schedule(row: Dict[str, Any]) -> WorkSchedule:
    return WorkSchedule(
        schedule_id=int(row["schedule_id"]),
        schedule_name=row["schedule_name"],
        shift_type=row.get("shift_type") or "Regular",
        start_time=normalize_mysql_time(row["start_time"]),
        end_time=normalize_mysql_time(row["end_time"]),
        break_duration=int(row.get("break_duration") or 0),
        work_days=row.get("work_days") or "Mon-Fri",
        description=row.get("description"),
        is_active=bool(row.get("is_active", True)),
    )


def _to_assignment(row: Dict[str, Any]) -> EmployeeSchedule:
    return EmployeeSchedule(
        id=int(row["id"]),
        employee_id=int(row["employee_id"]),
        schedule_id=int(row["schedule_id"]),
        effective_date=row["effective_date"],
        end_date=row.get("end_date"),
        notes=row.get("notes"),
        is_active=bool(row.get("assignment_active", True)),
        schedule=_to_schedule(row),
        nama_lengkap=row.get("nama_lengkap"),
        jabatan=row.get("jabatan"),
    )


class MySQLScheduleRepository(ScheduleRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_schedules(self) -> Sequence[WorkSchedule]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_SCHEDULE_COLUMNS} FROM work_schedules ws ORDER BY ws.created_at DESC")
            return [_to_schedule(r) for r in fetchall(cur)]

    def get_schedule(self, schedule_id: int) -> Optional[WorkSchedule]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_SCHEDULE_COLUMNS} FROM work_schedules ws WHERE ws.schedule_id=%s", (schedule_id,))
            row = fetchone(cur)
            return _to_schedule(row) if row else None

    def create_schedule(
        self,
        *,
        schedule_name: str,
        shift_type: str,
        start_time: time,
        end_time: time,
        break_duration: int,
        work_days: str,
        description: Optional[str],
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO work_schedules(
                    schedule_name, shift_type, start_time, end_time, break_duration, work_days, description
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                (schedule_name, shift_type, start_time, end_time, break_duration, work_days, description),
            )
            return int(cur.lastrowid)

    def update_schedule(self, schedule_id: int, changes: Mapping[str, object]) -> bool:
        fields = [k for k in UPDATABLE_FIELDS if k in changes]
        if not fields:
            return False
        assignments = ", ".join(f"{k}=%s" for k in fields)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"UPDATE work_schedules SET {assignments} WHERE schedule_id=%s",
                tuple(changes[k] for k in fields) + (schedule_id,),
            )
            return cur.rowcount > 0

    def delete_schedule(self, schedule_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM work_schedules WHERE schedule_id=%s", (schedule_id,))
            return cur.rowcount > 0

    def count_active_assignments(self, schedule_id: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT COUNT(*) AS total FROM employee_schedules WHERE schedule_id=%s AND is_active=1",
                (schedule_id,),
            )
            row = fetchone(cur) or {}
            return int(row.get("total") or 0)

    def list_active_assignments(self) -> Sequence[EmployeeSchedule]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT es.id, es.employee_id, es.schedule_id, es.effective_date, es.end_date, es.notes,
                       es.is_active AS assignment_active, e.nama_lengkap, e.jabatan, {_SCHEDULE_COLUMNS}
                FROM employee_schedules es
                INNER JOIN work_schedules ws ON ws.schedule_id = es.schedule_id
                INNER JOIN employees e ON e.employee_id = es.employee_id
                WHERE es.is_active=1
                ORDER BY es.schedule_id, e.nama_lengkap
                """
            )
            return [_to_assignment(r) for r in fetchall(cur)]

    def get_active_assignment(self, employee_id: int) -> Optional[EmployeeSchedule]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT es.id, es.employee_id, es.schedule_id, es.effective_date, es.end_date, es.notes,
                       es.is_active AS assignment_active, e.nama_lengkap, e.jabatan, {_SCHEDULE_COLUMNS}
                FROM employee_schedules es
                INNER JOIN work_schedules ws ON ws.schedule_id = es.schedule_id
                INNER JOIN employees e ON e.employee_id = es.employee_id
                WHERE es.employee_id=%s AND es.is_active=1
                ORDER BY es.effective_date DESC, es.id DESC
                LIMIT 1
                """,
                (employee_id,),
            )
            row = fetchone(cur)
            return _to_assignment(row) if row else None

    def assign(
        self,
        *,
        employee_id: int,
        schedule_id: int,
        effective_date: date,
        end_date: Optional[date],
        notes: Optional[str],
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE employee_schedules SET is_active=0 WHERE employee_id=%s AND is_active=1",
                (employee_id,),
            )
            cur.execute(
                """
                INSERT INTO employee_schedules(employee_id, schedule_id, effective_date, end_date, notes, is_active)
                VALUES(%s,%s,%s,%s,%s,1)
                """,
                (employee_id, schedule_id, effective_date, end_date, notes),
            )
            return int(cur.lastrowid)
