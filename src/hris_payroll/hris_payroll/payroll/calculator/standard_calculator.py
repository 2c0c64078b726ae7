from __future__ import annotations

from datetime import date
from typing import Iterable, List, Optional

from ...attendance.model import Attendance
from ...common.datetime_utils import minutes_of, parse_hhmm
from ...common.money import rupiah
from ...core.constants import LEGACY_LATE_THRESHOLD
from ...core.enums import ApprovalStatus, AttendanceStatus
from ...leave.model import LeaveRequest
from .base import DeductionBreakdown, DeductionItem, DeductionRates, PayrollCalculator

_LEGACY_THRESHOLD = parse_hhmm(LEGACY_LATE_THRESHOLD)


def is_late(row: Attendance) -> bool:
    """Stored terlambat status, or a check-in after the fixed 08:00 threshold."""

    if row.status == AttendanceStatus.TERLAMBAT:
        return True
    if row.jam_masuk is not None:
        return minutes_of(row.jam_masuk) > minutes_of(_LEGACY_THRESHOLD)
    return False


def compute_deductions(
    attendance: Iterable[Attendance],
    leaves: Iterable[LeaveRequest],
    rates: Optional[DeductionRates] = None,
    *,
    period_start: date,
    period_end: date,
) -> DeductionBreakdown:
    """Count anomalies of one employee in a period and price them.

    Pure: same rows in, same breakdown out.
    """

    rates = rates or DeductionRates()
    rows = [a for a in attendance if period_start <= a.tanggal <= period_end]

    alpa = sum(1 for a in rows if a.status == AttendanceStatus.ALPA)
    terlambat = sum(1 for a in rows if is_late(a))
    izin = sum(1 for a in rows if a.status == AttendanceStatus.IZIN)
    sakit = sum(1 for a in rows if a.status == AttendanceStatus.SAKIT)

    for leave in leaves:
        if leave.status != ApprovalStatus.APPROVED or not leave.overlaps(period_start, period_end):
            continue
        if leave.is_sick_leave:
            sakit += leave.day_span
        else:
            izin += leave.day_span

    items: List[DeductionItem] = []
    reasons: List[str] = []
    if alpa:
        items.append(DeductionItem("Alpa", alpa, alpa * rates.alpa))
        reasons.append(f"{alpa}x Alpa = {rupiah(alpa * rates.alpa)}")
    if terlambat:
        items.append(DeductionItem("Terlambat", terlambat, terlambat * rates.terlambat))
        reasons.append(f"{terlambat}x Terlambat = {rupiah(terlambat * rates.terlambat)}")
    if izin:
        items.append(DeductionItem("Izin/Cuti", izin, izin * rates.izin))
        reasons.append(f"{izin}x Izin/Cuti = {rupiah(izin * rates.izin)}")
    if sakit:
        items.append(DeductionItem("Sakit", sakit, sakit * rates.sakit))
        reasons.append(f"{sakit}x Sakit (Tidak ada potongan)")

    return DeductionBreakdown(
        alpa=alpa,
        terlambat=terlambat,
        izin=izin,
        sakit=sakit,
        items=items,
        total=float(sum(i.amount for i in items)),
        alasan=" | ".join(reasons) if reasons else "Tidak ada potongan",
    )


class StandardPayrollCalculator(PayrollCalculator):
    """Fixed-rate deductions: alpa, late, izin per occurrence; sakit free."""

    def __init__(self, rates: Optional[DeductionRates] = None):
        self._rates = rates or DeductionRates()

    @property
    def rates(self) -> DeductionRates:
        return self._rates

    def deductions(
        self,
        attendance: Iterable[Attendance],
        leaves: Iterable[LeaveRequest],
        *,
        period_start: date,
        period_end: date,
    ) -> DeductionBreakdown:
        return compute_deductions(
            attendance,
            leaves,
            self._rates,
            period_start=period_start,
            period_end=period_end,
        )
