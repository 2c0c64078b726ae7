from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Callable, List, Optional

from ..approvals.workflow import ApprovalAction, decide, ensure_applied
from ..common.datetime_utils import format_hhmm, humanize_minutes, minutes_of, now_local
from ..common.money import rupiah
from ..common.validators import clean_optional
from ..core.constants import ATTENDANCE_CLOSE_HOUR, POTONGAN_TERLAMBAT
from ..core.enums import ApprovalStatus, AttendanceStatus, Role, WorkType
from ..core.exceptions import AuthorizationError, ConflictError, NotFoundError, ValidationError
from ..employees.repository import EmployeeRepository
from ..overtime.detector import OvertimeDetector
from ..overtime.model import Overtime
from ..payroll.ledger import PayrollLedger
from ..schedules.resolver import ScheduleResolver, ScheduleWindow
from ..users.model import AuthUser
from .factory import AttendanceStrategyFactory
from .model import Attendance, NewAttendance
from .repository import AttendanceRepository
from .schemas import (
    ApprovalDecision,
    AttendanceCreate,
    AttendanceUpdate,
    CheckInRequest,
    CheckOutRequest,
    RemoteWorkRequest,
)
from .strategies.base import StatusDecision

log = logging.getLogger(__name__)

REMOTE_WORK_TYPES = (WorkType.WFH.value, WorkType.HYBRID.value)


@dataclass(frozen=True)
class CheckInResult:
    attendance: Attendance
    decision: StatusDecision
    window: ScheduleWindow
    checked_at: time
    filled_request: bool

    @property
    def potongan(self) -> int:
        return POTONGAN_TERLAMBAT if self.decision.is_late else 0

    @property
    def message(self) -> str:
        if not self.decision.is_late:
            return f"Absen Masuk berhasil pada {format_hhmm(self.checked_at)}"
        return (
            f"Check-in berhasil (TERLAMBAT) pada {format_hhmm(self.checked_at)}. "
            f"Jadwal masuk: {format_hhmm(self.window.start)}. "
            f"Terlambat: {humanize_minutes(self.decision.late_minutes)}. "
            f"Potongan gaji: {rupiah(self.potongan)}"
        )


@dataclass(frozen=True)
class CheckOutResult:
    attendance: Attendance
    overtime: Optional[Overtime]

    @property
    def message(self) -> str:
        message = f"Check-out berhasil pada {format_hhmm(self.attendance.jam_pulang)}"
        if self.overtime:
            message += (
                f". Overtime terdeteksi: {self.overtime.overtime_hours} jam, "
                f"menunggu approval dari admin."
            )
        return message


def _parse_status(value: Optional[str]) -> Optional[AttendanceStatus]:
    try:
        return AttendanceStatus.parse(value)
    except ValueError:
        raise ValidationError("Status absensi tidak valid.")


class AttendanceService:
    """Use case: check-in/check-out, input manual, dan request WFH/Hybrid."""

    def __init__(
        self,
        attendance: AttendanceRepository,
        employees: EmployeeRepository,
        resolver: ScheduleResolver,
        ledger: PayrollLedger,
        detector: OvertimeDetector,
        *,
        strategy_factory: Optional[AttendanceStrategyFactory] = None,
        clock: Callable[[], datetime] = now_local,
    ):
        self._attendance = attendance
        self._employees = employees
        self._resolver = resolver
        self._ledger = ledger
        self._detector = detector
        self._factory = strategy_factory or AttendanceStrategyFactory()
        self._clock = clock

    def _target_employee(self, actor: AuthUser, requested: Optional[int]) -> int:
        if actor.is_manager:
            if requested is None:
                raise ValidationError("employee_id wajib diisi.")
            if not self._employees.get_by_id(requested):
                raise NotFoundError("Employee tidak ditemukan.")
            return requested
        if actor.employee_id is None:
            raise ValidationError("employee_id tidak dapat ditentukan.")
        return actor.employee_id

    def _record_late(self, employee_id: int, tanggal: date, jam_masuk: time) -> None:
        try:
            self._ledger.record_late(employee_id, datetime.combine(tanggal, jam_masuk))
        except Exception:
            log.exception("Failed to record late deduction for employee %s on %s", employee_id, tanggal)

    def require(self, attendance_id: int) -> Attendance:
        row = self._attendance.get_by_id(attendance_id)
        if not row:
            raise NotFoundError("Data absensi tidak ditemukan.")
        return row

    def check_in(self, actor: AuthUser, data: CheckInRequest) -> CheckInResult:
        employee_id = self._target_employee(actor, data.employee_id)
        now = self._clock()
        today = now.date()
        current = now.time().replace(second=0, microsecond=0)

        if now.hour >= ATTENDANCE_CLOSE_HOUR:
            raise ValidationError(
                "Absensi sudah ditutup. Waktu absen: 06:00 - 22:59",
                code="ATTENDANCE_CLOSED",
                details={"currentTime": format_hhmm(current)},
            )

        existing = self._attendance.get_for_employee_and_date(employee_id, today)
        if existing and existing.has_checked_in:
            raise ConflictError("Sudah melakukan check-in hari ini.")

        window = self._resolver.resolve(employee_id)
        wait = minutes_of(window.earliest_checkin) - minutes_of(current)
        if not window.crosses_midnight and wait > 0:
            raise ValidationError(
                "Belum waktunya absen",
                code="TOO_EARLY",
                details={
                    "message": f"Anda terlalu awal untuk absen. Jadwal masuk: {format_hhmm(window.start)}",
                    "info": (
                        f"Waktu absen dimulai {humanize_minutes(wait)} lagi "
                        f"(mulai {format_hhmm(window.earliest_checkin)})"
                    ),
                    "currentTime": format_hhmm(current),
                    "earliestCheckInTime": format_hhmm(window.earliest_checkin),
                    "scheduleStartTime": format_hhmm(window.start),
                },
            )

        decision = self._factory.for_checkin(now=current, window=window).decide_checkin(now=current, window=window)
        jam_masuk = data.jam_masuk or current
        recorded_by = actor.role.value

        fill_request = existing is not None and existing.approval_status == ApprovalStatus.APPROVED
        if existing is not None:
            # pending or rejected remote-work rows are reopened as a plain check-in
            reopen = {} if fill_request else {"tipe_kerja": clean_optional(data.tipe_kerja) or WorkType.WFO.value}
            filled = self._attendance.fill_checkin(
                existing.attendance_id,
                jam_masuk=jam_masuk,
                lokasi_masuk=clean_optional(data.lokasi_masuk),
                akurasi_masuk=data.akurasi_masuk,
                status=decision.status,
                keterangan=decision.note,
                recorded_by_role=recorded_by,
                **reopen,
            )
            if not filled:
                raise ConflictError("Sudah melakukan check-in hari ini.")
            attendance_id = existing.attendance_id
        else:
            attendance_id = self._attendance.create(
                NewAttendance(
                    employee_id=employee_id,
                    tanggal=today,
                    status=decision.status,
                    jam_masuk=jam_masuk,
                    tipe_kerja=clean_optional(data.tipe_kerja) or WorkType.WFO.value,
                    lokasi_masuk=clean_optional(data.lokasi_masuk),
                    akurasi_masuk=data.akurasi_masuk,
                    keterangan=decision.note,
                    recorded_by_role=recorded_by,
                )
            )

        if decision.is_late:
            log.info("Late check-in for employee %s: %s minutes", employee_id, decision.late_minutes)
            self._record_late(employee_id, today, jam_masuk)

        return CheckInResult(
            attendance=self.require(attendance_id),
            decision=decision,
            window=window,
            checked_at=current,
            filled_request=fill_request,
        )

    def check_out(self, actor: AuthUser, attendance_id: int, data: CheckOutRequest) -> CheckOutResult:
        row = self.require(attendance_id)
        if not actor.is_manager and row.employee_id != actor.employee_id:
            raise AuthorizationError("Anda hanya dapat check-out untuk diri sendiri.")
        if not row.has_checked_in:
            raise ValidationError("Belum melakukan check-in.")
        if row.has_checked_out:
            raise ConflictError("Sudah melakukan check-out.")

        jam_pulang = data.jam_pulang or self._clock().time().replace(second=0, microsecond=0)
        recorded = self._attendance.record_checkout(
            attendance_id,
            jam_pulang=jam_pulang,
            lokasi_pulang=clean_optional(data.lokasi_pulang),
            akurasi_pulang=data.akurasi_pulang,
        )
        if not recorded:
            raise ConflictError("Sudah melakukan check-out.")

        overtime: Optional[Overtime] = None
        try:
            overtime = self._detector.detect(attendance_id, row.employee_id, jam_pulang, row.tanggal)
        except Exception:
            log.exception("Overtime detection failed for attendance %s", attendance_id)

        return CheckOutResult(attendance=self.require(attendance_id), overtime=overtime)

    def list_visible(
        self,
        actor: AuthUser,
        *,
        employee_id: Optional[int] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
        status: Optional[str] = None,
    ) -> List[Attendance]:
        if not actor.is_manager:
            if actor.employee_id is None:
                raise ValidationError("Employee ID tidak ditemukan untuk user ini.")
            employee_id = actor.employee_id
        return list(
            self._attendance.list_records(employee_id=employee_id, start=start, end=end, status=_parse_status(status))
        )

    def get_visible(self, actor: AuthUser, attendance_id: int) -> Attendance:
        row = self.require(attendance_id)
        if not actor.is_manager and row.employee_id != actor.employee_id:
            raise AuthorizationError("Anda tidak memiliki akses ke data absensi ini.")
        return row

    def list_for_employee(self, actor: AuthUser, employee_id: int) -> List[Attendance]:
        if not actor.is_manager and actor.employee_id != employee_id:
            raise AuthorizationError("Anda hanya dapat melihat data absensi diri sendiri.")
        return list(self._attendance.list_records(employee_id=employee_id))

    def pending_approvals(self) -> List[Attendance]:
        return list(self._attendance.list_pending_approvals())

    def decide(self, actor: AuthUser, attendance_id: int, data: ApprovalDecision) -> Attendance:
        action = ApprovalAction.parse(data.action)
        row = self._attendance.get_by_id(attendance_id)
        if not row:
            raise NotFoundError("Attendance tidak ditemukan")
        outcome = decide(row.approval_status, action, actor_role=actor.role, entity_label="Request")
        updated = self._attendance.decide_approval(
            attendance_id,
            decision=outcome,
            approver_id=actor.user_id,
            notes=clean_optional(data.notes),
            decided_at=self._clock(),
        )
        ensure_applied(updated, entity_label="Request")
        log.info("Remote-work request %s %s by user %s", attendance_id, outcome.value, actor.user_id)
        return self.require(attendance_id)

    def request_remote_work(self, actor: AuthUser, data: RemoteWorkRequest) -> Attendance:
        if actor.employee_id is None:
            raise ValidationError("Employee ID tidak ditemukan dalam token")
        if data.tipe_kerja not in REMOTE_WORK_TYPES:
            raise ValidationError("Tipe kerja harus WFH atau Hybrid")
        if data.tanggal is None:
            raise ValidationError("Tanggal wajib diisi.")
        if self._attendance.get_for_employee_and_date(actor.employee_id, data.tanggal):
            raise ConflictError("Anda sudah memiliki absensi untuk tanggal ini")

        attendance_id = self._attendance.create(
            NewAttendance(
                employee_id=actor.employee_id,
                tanggal=data.tanggal,
                status=AttendanceStatus.PENDING_APPROVAL,
                tipe_kerja=data.tipe_kerja,
                keterangan=clean_optional(data.keterangan),
                recorded_by_role=Role.KARYAWAN.value,
                approval_status=ApprovalStatus.PENDING,
            )
        )
        return self.require(attendance_id)

    def create_manual(self, actor: AuthUser, data: AttendanceCreate) -> Attendance:
        if data.employee_id is None:
            raise ValidationError("employee_id wajib diisi.")
        if not self._employees.get_by_id(data.employee_id):
            raise NotFoundError("Employee tidak ditemukan.")

        status = _parse_status(data.status) or AttendanceStatus.HADIR
        tanggal = data.tanggal or self._clock().date()
        attendance_id = self._attendance.create(
            NewAttendance(
                employee_id=data.employee_id,
                tanggal=tanggal,
                status=status,
                jam_masuk=data.jam_masuk,
                jam_pulang=data.jam_pulang,
                tipe_kerja=clean_optional(data.tipe_kerja) or WorkType.WFO.value,
                lokasi_masuk=clean_optional(data.lokasi_masuk),
                lokasi_pulang=clean_optional(data.lokasi_pulang),
                akurasi_masuk=data.akurasi_masuk,
                akurasi_pulang=data.akurasi_pulang,
                keterangan=clean_optional(data.keterangan),
                recorded_by_role=clean_optional(data.recorded_by_role) or actor.role.value,
            )
        )
        if status == AttendanceStatus.TERLAMBAT and data.jam_masuk:
            self._record_late(data.employee_id, tanggal, data.jam_masuk)
        return self.require(attendance_id)

    def update(self, attendance_id: int, data: AttendanceUpdate) -> Attendance:
        self.require(attendance_id)
        changes = data.model_dump(exclude_unset=True)
        if "status" in changes:
            changes["status"] = _parse_status(changes["status"])
        if not changes:
            raise ValidationError("Tidak ada data yang diubah")
        self._attendance.update(attendance_id, changes)
        return self.require(attendance_id)

    def delete(self, attendance_id: int) -> None:
        if not self._attendance.delete(attendance_id):
            raise NotFoundError("Data absensi tidak ditemukan.")
