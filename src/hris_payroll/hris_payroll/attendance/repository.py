from __future__ import annotations

from datetime import date, datetime, time
from typing import Mapping, Optional, Protocol, Sequence

from ..core.enums import ApprovalStatus, AttendanceStatus
from .model import Attendance, NewAttendance


class AttendanceRepository(Protocol):
    def get_by_id(self, attendance_id: int) -> Optional[Attendance]:
        raise NotImplementedError

    def get_for_employee_and_date(self, employee_id: int, tanggal: date) -> Optional[Attendance]:
        raise NotImplementedError

    def list_records(
        self,
        *,
        employee_id: Optional[int] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
        status: Optional[AttendanceStatus] = None,
    ) -> Sequence[Attendance]:
        """Rows ordered by tanggal DESC, filtered by the given criteria."""

        raise NotImplementedError

    def list_pending_approvals(self) -> Sequence[Attendance]:
        raise NotImplementedError

    def create(self, draft: NewAttendance) -> int:
        """Insert a row; a second row for the same employee/day raises ConflictError."""

        raise NotImplementedError

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
        """Fill check-in on an existing row that has none yet.

        With ``tipe_kerja`` the row is reopened as a plain check-in and its
        remote-work approval fields are cleared.
        """

        raise NotImplementedError

    def record_checkout(
        self,
        attendance_id: int,
        *,
        jam_pulang: time,
        lokasi_pulang: Optional[str],
        akurasi_pulang: Optional[int],
    ) -> bool:
        """Set check-out only if the row has none yet."""

        raise NotImplementedError

    def update(self, attendance_id: int, changes: Mapping[str, object]) -> bool:
        raise NotImplementedError

    def decide_approval(
        self,
        attendance_id: int,
        *,
        decision: ApprovalStatus,
        approver_id: int,
        notes: Optional[str],
        decided_at: datetime,
    ) -> bool:
        """Apply a decision only while the row is still pending."""

        raise NotImplementedError

    def delete(self, attendance_id: int) -> bool:
        raise NotImplementedError
