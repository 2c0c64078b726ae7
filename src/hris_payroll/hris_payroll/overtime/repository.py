from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import ApprovalStatus
from .model import Overtime, OvertimeCandidate


class OvertimeRepository(Protocol):
    def get(self, overtime_id: int) -> Optional[Overtime]:
        raise NotImplementedError

    def list_records(
        self,
        *,
        status: Optional[ApprovalStatus] = None,
        employee_id: Optional[int] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> Sequence[Overtime]:
        raise NotImplementedError

    def create(self, candidate: OvertimeCandidate) -> int:
        raise NotImplementedError

    def decide(
        self,
        overtime_id: int,
        *,
        decision: ApprovalStatus,
        approver_id: int,
        notes: Optional[str],
        decided_at: datetime,
    ) -> bool:
        """Apply a decision only while the overtime is still pending."""

        raise NotImplementedError

    def delete(self, overtime_id: int) -> bool:
        raise NotImplementedError
