import pytest

from src.hris_payroll.hris_payroll.approvals.workflow import ApprovalAction, decide, ensure_applied
from src.hris_payroll.hris_payroll.core.enums import ApprovalStatus, Role
from src.hris_payroll.hris_payroll.core.exceptions import AuthorizationError, ConflictError, ValidationError


@pytest.mark.parametrize("role", [Role.ADMIN, Role.HR])
def test_approvers_move_pending_to_outcome(role):
    assert decide(ApprovalStatus.PENDING, ApprovalAction.APPROVE, actor_role=role, entity_label="Cuti") == ApprovalStatus.APPROVED
    assert decide(ApprovalStatus.PENDING, ApprovalAction.REJECT, actor_role=role, entity_label="Cuti") == ApprovalStatus.REJECTED


def test_karyawan_cannot_approve():
    with pytest.raises(AuthorizationError):
        decide(ApprovalStatus.PENDING, ApprovalAction.APPROVE, actor_role=Role.KARYAWAN, entity_label="Cuti")


def test_decided_item_cannot_be_decided_again():
    with pytest.raises(ConflictError) as exc:
        decide(ApprovalStatus.REJECTED, ApprovalAction.APPROVE, actor_role=Role.ADMIN, entity_label="Pengajuan")

    assert exc.value.message == "Pengajuan ini sudah rejected"


def test_action_parsing():
    assert ApprovalAction.parse(" Approve ") is ApprovalAction.APPROVE
    assert ApprovalAction.from_status("rejected") is ApprovalAction.REJECT
    with pytest.raises(ValidationError):
        ApprovalAction.parse("maybe")
    with pytest.raises(ValidationError):
        ApprovalAction.from_status("pending")


def test_lost_race_is_a_conflict():
    ensure_applied(True, entity_label="Overtime")
    with pytest.raises(ConflictError):
        ensure_applied(False, entity_label="Overtime")
