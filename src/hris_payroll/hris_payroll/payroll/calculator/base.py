from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import date
from typing import Iterable, List

from ...attendance.model import Attendance
from ...core.constants import POTONGAN_ALPA, POTONGAN_IZIN, POTONGAN_SAKIT, POTONGAN_TERLAMBAT
from ...leave.model import LeaveRequest


@dataclass(frozen=True)
class DeductionRates:
    terlambat: float = POTONGAN_TERLAMBAT
    alpa: float = POTONGAN_ALPA
    izin: float = POTONGAN_IZIN
    sakit: float = POTONGAN_SAKIT


@dataclass(frozen=True)
class DeductionItem:
    type: str
    count: int
    amount: float


@dataclass(frozen=True)
class DeductionBreakdown:
    alpa: int = 0
    terlambat: int = 0
    izin: int = 0
    sakit: int = 0
    items: List[DeductionItem] = field(default_factory=list)
    total: float = 0.0
    alasan: str = "Tidak ada potongan"

    @property
    def details(self) -> dict:
        return {"alpa": self.alpa, "terlambat": self.terlambat, "izin": self.izin, "sakit": self.sakit}


class PayrollCalculator(ABC):
    """Calculator interface (Strategy Pattern for payroll)."""

    @abstractmethod
    def deductions(
        self,
        attendance: Iterable[Attendance],
        leaves: Iterable[LeaveRequest],
        *,
        period_start: date,
        period_end: date,
    ) -> DeductionBreakdown:
        raise NotImplementedError
