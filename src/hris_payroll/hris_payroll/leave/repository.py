from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import ApprovalStatus
from .model import LeaveRequest


class LeaveRepository(Protocol):
    def get(self, leave_id: int) -> Optional[LeaveRequest]:
        raise NotImplementedError

    def list_all(self) -> Sequence[LeaveRequest]:
        raise NotImplementedError

    def list_for_employee(self, employee_id: int) -> Sequence[LeaveRequest]:
        raise NotImplementedError

    def list_approved_overlapping(
        self,
        start: date,
        end: date,
        *,
        employee_id: Optional[int] = None,
    ) -> Sequence[LeaveRequest]:
        """Approved leaves that start in, end in, or span [start, end]."""

        raise NotImplementedError

    def count_pending(self) -> int:
        raise NotImplementedError

    def create(
        self,
        *,
        employee_id: int,
        tanggal_mulai: date,
        tanggal_selesai: date,
        jenis_pengajuan: str,
        alasan: str,
    ) -> int:
        raise NotImplementedError

    def decide(
        self,
        leave_id: int,
        *,
        decision: ApprovalStatus,
        approver_id: int,
        notes: Optional[str],
        decided_at: datetime,
    ) -> bool:
        """Apply a decision only while the request is still pending."""

        raise NotImplementedError

    def delete(self, leave_id: int) -> bool:
        raise NotImplementedError
