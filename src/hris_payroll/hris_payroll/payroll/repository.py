from __future__ import annotations

from typing import Mapping, Optional, Protocol, Sequence

from .model import Payroll


class PayrollRepository(Protocol):
    def get(self, payroll_id: int) -> Optional[Payroll]:
        raise NotImplementedError

    def get_for_period(self, employee_id: int, periode: str) -> Optional[Payroll]:
        raise NotImplementedError

    def list_records(self, *, periode: Optional[str] = None, employee_id: Optional[int] = None) -> Sequence[Payroll]:
        """Rows ordered by periode DESC."""

        raise NotImplementedError

    def list_for_year(self, year: int) -> Sequence[Payroll]:
        raise NotImplementedError

    def create(
        self,
        *,
        employee_id: int,
        periode: str,
        gaji_pokok: float,
        tunjangan: float,
        potongan: float,
        total_gaji: float,
        alasan_potongan: str,
        employee_role: str,
    ) -> int:
        """Insert one slip; a second slip for the same employee/periode raises ConflictError."""

        raise NotImplementedError

    def update(self, payroll_id: int, changes: Mapping[str, object]) -> bool:
        raise NotImplementedError

    def delete(self, payroll_id: int) -> bool:
        raise NotImplementedError

    def add_deduction(
        self,
        employee_id: int,
        periode: str,
        *,
        amount: float,
        note: str,
        gaji_pokok: float,
        employee_role: str,
    ) -> Payroll:
        """Find-or-create the slip and accumulate one deduction atomically."""

        raise NotImplementedError
