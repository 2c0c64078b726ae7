from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Callable, Dict, List, Optional

from ..approvals.workflow import ApprovalAction, decide, ensure_applied
from ..common.datetime_utils import month_bounds, now_local
from ..common.validators import clean_optional, require_month
from ..core.enums import ApprovalStatus
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..users.model import AuthUser
from .model import Overtime
from .repository import OvertimeRepository
from .schemas import OvertimeDecision

log = logging.getLogger(__name__)


def _parse_status(value: Optional[str]) -> Optional[ApprovalStatus]:
    if not value:
        return None
    try:
        return ApprovalStatus(value.strip().lower())
    except ValueError:
        raise ValidationError("Status tidak valid. Gunakan: pending, approved, atau rejected")


def summarize(records: List[Overtime]) -> dict:
    """Counts per status; hours and bonus count approved rows only."""

    approved = [r for r in records if r.status == ApprovalStatus.APPROVED]
    return {
        "total_hours": round(sum(r.overtime_hours for r in approved), 2),
        "total_bonus": round(sum(r.total_bonus for r in approved), 2),
        "pending": sum(1 for r in records if r.status == ApprovalStatus.PENDING),
        "approved": len(approved),
        "rejected": sum(1 for r in records if r.status == ApprovalStatus.REJECTED),
    }


class OvertimeService:
    def __init__(self, overtime: OvertimeRepository, *, clock: Callable[[], datetime] = now_local):
        self._overtime = overtime
        self._clock = clock

    def list_records(
        self,
        *,
        status: Optional[str] = None,
        month: Optional[int] = None,
        year: Optional[int] = None,
        employee_id: Optional[int] = None,
    ) -> List[Overtime]:
        start: Optional[date] = None
        end: Optional[date] = None
        if month and year:
            start, end = month_bounds(year, require_month(month))
        return list(
            self._overtime.list_records(status=_parse_status(status), employee_id=employee_id, start=start, end=end)
        )

    def for_employee(self, actor: AuthUser, employee_id: int) -> dict:
        if not actor.is_manager and actor.employee_id != employee_id:
            raise AuthorizationError("Anda hanya dapat melihat overtime diri sendiri")
        records = list(self._overtime.list_records(employee_id=employee_id))
        return {"records": [r.to_dict() for r in records], "summary": summarize(records)}

    def pending(self) -> List[Overtime]:
        return list(self._overtime.list_records(status=ApprovalStatus.PENDING))

    def require(self, overtime_id: int) -> Overtime:
        overtime = self._overtime.get(overtime_id)
        if not overtime:
            raise NotFoundError("Overtime tidak ditemukan")
        return overtime

    def decide(self, actor: AuthUser, overtime_id: int, data: OvertimeDecision) -> Overtime:
        action = ApprovalAction.parse(data.action)
        overtime = self.require(overtime_id)
        outcome = decide(overtime.status, action, actor_role=actor.role, entity_label="Overtime")
        updated = self._overtime.decide(
            overtime_id,
            decision=outcome,
            approver_id=actor.user_id,
            notes=clean_optional(data.notes),
            decided_at=self._clock(),
        )
        ensure_applied(updated, entity_label="Overtime")
        log.info("Overtime %s %s by user %s", overtime_id, outcome.value, actor.user_id)
        return self.require(overtime_id)

    def stats(self, *, month: Optional[int] = None, year: Optional[int] = None) -> dict:
        today = self._clock().date()
        start, end = month_bounds(year or today.year, require_month(month or today.month))
        records = list(self._overtime.list_records(start=start, end=end))
        summary = summarize(records)

        by_employee: Dict[int, dict] = {}
        for r in records:
            if r.status != ApprovalStatus.APPROVED:
                continue
            entry = by_employee.setdefault(
                r.employee_id,
                {
                    "employee_id": r.employee_id,
                    "nama_lengkap": r.nama_lengkap,
                    "jabatan": r.jabatan,
                    "total_hours": 0.0,
                    "total_bonus": 0.0,
                    "count": 0,
                },
            )
            entry["total_hours"] = round(entry["total_hours"] + r.overtime_hours, 2)
            entry["total_bonus"] = round(entry["total_bonus"] + r.total_bonus, 2)
            entry["count"] += 1

        return {
            "total_records": len(records),
            "pending": summary["pending"],
            "approved": summary["approved"],
            "rejected": summary["rejected"],
            "total_hours": summary["total_hours"],
            "total_bonus": summary["total_bonus"],
            "by_employee": sorted(by_employee.values(), key=lambda e: e["total_bonus"], reverse=True),
        }

    def delete(self, overtime_id: int) -> None:
        if not self._overtime.delete(overtime_id):
            raise NotFoundError("Overtime tidak ditemukan")

