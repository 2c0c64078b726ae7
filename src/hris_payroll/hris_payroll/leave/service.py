from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, List

from ..approvals.workflow import ApprovalAction, decide, ensure_applied
from ..common.datetime_utils import now_local
from ..common.validators import clean_optional
from ..core.enums import ApprovalStatus
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..employees.repository import EmployeeRepository
from ..users.model import AuthUser
from .model import LeaveRequest
from .repository import LeaveRepository
from .schemas import LeaveCreate, LeaveStatusUpdate

log = logging.getLogger(__name__)


class LeaveService:
    """Use case: pengajuan izin/cuti/sakit dan approval oleh Admin/HR."""

    def __init__(
        self,
        leaves: LeaveRepository,
        employees: EmployeeRepository,
        *,
        clock: Callable[[], datetime] = now_local,
    ):
        self._leaves = leaves
        self._employees = employees
        self._clock = clock

    def list_visible(self, actor: AuthUser) -> List[LeaveRequest]:
        if actor.is_manager:
            return list(self._leaves.list_all())
        if actor.employee_id is None:
            raise ValidationError("Employee ID tidak ditemukan dalam token.")
        return list(self._leaves.list_for_employee(actor.employee_id))

    def list_for_employee(self, actor: AuthUser, employee_id: int) -> List[LeaveRequest]:
        if not self._employees.get_by_id(employee_id):
            raise NotFoundError("Karyawan tidak ditemukan.")
        if not actor.is_manager and actor.employee_id != employee_id:
            raise AuthorizationError("Akses ditolak.")
        return list(self._leaves.list_for_employee(employee_id))

    def create(self, actor: AuthUser, data: LeaveCreate) -> LeaveRequest:
        if actor.employee_id is None:
            raise ValidationError("Employee ID tidak ditemukan dalam token. Silakan login kembali.")
        jenis = clean_optional(data.jenis_pengajuan)
        if not data.tanggal_mulai or not data.tanggal_selesai or not jenis:
            raise ValidationError("Tanggal mulai, tanggal selesai, dan jenis pengajuan harus diisi.")
        if data.tanggal_selesai < data.tanggal_mulai:
            raise ValidationError("Tanggal selesai tidak boleh sebelum tanggal mulai.")
        if not self._employees.get_by_id(actor.employee_id):
            raise NotFoundError("Data karyawan tidak ditemukan di sistem.")

        leave_id = self._leaves.create(
            employee_id=actor.employee_id,
            tanggal_mulai=data.tanggal_mulai,
            tanggal_selesai=data.tanggal_selesai,
            jenis_pengajuan=jenis,
            alasan=(data.alasan or "").strip(),
        )
        return self.require(leave_id)

    def require(self, leave_id: int) -> LeaveRequest:
        leave = self._leaves.get(leave_id)
        if not leave:
            raise NotFoundError("Data cuti tidak ditemukan.")
        return leave

    def decide(self, actor: AuthUser, leave_id: int, data: LeaveStatusUpdate) -> LeaveRequest:
        try:
            action = ApprovalAction.from_status(data.status)
        except ValidationError:
            raise ValidationError("Status tidak valid. Gunakan: approved atau rejected")

        leave = self.require(leave_id)
        outcome = decide(leave.status, action, actor_role=actor.role, entity_label="Pengajuan")
        updated = self._leaves.decide(
            leave_id,
            decision=outcome,
            approver_id=actor.user_id,
            notes=clean_optional(data.notes),
            decided_at=self._clock(),
        )
        ensure_applied(updated, entity_label="Pengajuan")
        log.info("Leave %s %s by user %s", leave_id, outcome.value, actor.user_id)
        return self.require(leave_id)

    def delete(self, actor: AuthUser, leave_id: int) -> None:
        leave = self.require(leave_id)
        if not actor.is_manager:
            if leave.employee_id != actor.employee_id:
                raise AuthorizationError("Anda hanya bisa menghapus cuti Anda sendiri.")
            if leave.status != ApprovalStatus.PENDING:
                raise AuthorizationError("Cuti yang sudah disetujui/ditolak tidak bisa dihapus.")
        self._leaves.delete(leave_id)
