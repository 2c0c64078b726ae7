from __future__ import annotations

from enum import Enum
from typing import Optional

from ..core.enums import ApprovalStatus, Role
from ..core.exceptions import AuthorizationError, ConflictError, ValidationError

APPROVER_ROLES = (Role.ADMIN, Role.HR)


class ApprovalAction(str, Enum):
    APPROVE = "approve"
    REJECT = "reject"

    @classmethod
    def parse(cls, value: Optional[str]) -> "ApprovalAction":
        try:
            return cls(str(value or "").strip().lower())
        except ValueError:
            raise ValidationError("Action harus 'approve' atau 'reject'")

    @classmethod
    def from_status(cls, value: Optional[str]) -> "ApprovalAction":
        """Accept 'approved' / 'rejected' as used by the leave endpoint."""

        status = str(value or "").strip().lower()
        if status == ApprovalStatus.APPROVED.value:
            return cls.APPROVE
        if status == ApprovalStatus.REJECTED.value:
            return cls.REJECT
        raise ValidationError("Status tidak valid. Gunakan: approved atau rejected")

    @property
    def outcome(self) -> ApprovalStatus:
        return ApprovalStatus.APPROVED if self is ApprovalAction.APPROVE else ApprovalStatus.REJECTED


def decide(
    current_status: Optional[ApprovalStatus],
    action: ApprovalAction,
    *,
    actor_role: Role,
    entity_label: str,
) -> ApprovalStatus:
    """One-shot transition pending -> approved/rejected.

    Raises AuthorizationError for non-approvers and ConflictError when the
    item has already left the pending state.
    """

    if actor_role not in APPROVER_ROLES:
        raise AuthorizationError("Hanya Admin atau HR yang dapat memproses approval.")
    if current_status != ApprovalStatus.PENDING:
        shown = current_status.value if current_status else "diproses"
        raise ConflictError(f"{entity_label} ini sudah {shown}")
    return action.outcome


def ensure_applied(updated: bool, *, entity_label: str) -> None:
    """A conditional pending-only UPDATE that touched no row lost a race."""

    if not updated:
        raise ConflictError(f"{entity_label} ini sudah diproses")
