from __future__ import annotations

import logging
from datetime import datetime

from ..common.datetime_utils import period_of
from ..core.constants import DEFAULT_BASIC_SALARY, POTONGAN_TERLAMBAT
from ..employees.repository import EmployeeRepository
from .model import Payroll
from .repository import PayrollRepository

log = logging.getLogger(__name__)


class PayrollLedger:
    """Persisted deductions recorded as attendance events happen."""

    def __init__(
        self,
        payrolls: PayrollRepository,
        employees: EmployeeRepository,
        *,
        late_rate: float = POTONGAN_TERLAMBAT,
    ):
        self._payrolls = payrolls
        self._employees = employees
        self._late_rate = late_rate

    def record_late(self, employee_id: int, when: datetime) -> Payroll:
        employee = self._employees.get_by_id(employee_id)
        gaji_pokok = employee.gaji_pokok if employee and employee.gaji_pokok else DEFAULT_BASIC_SALARY
        role = (employee.jabatan if employee else None) or "Karyawan"
        note = f"Terlambat {when:%Y-%m-%d} jam {when:%H:%M}"

        payroll = self._payrolls.add_deduction(
            employee_id,
            period_of(when.date()),
            amount=self._late_rate,
            note=note,
            gaji_pokok=float(gaji_pokok),
            employee_role=role,
        )
        log.info(
            "Late deduction Rp %.0f for employee %s in %s (total potongan Rp %.0f)",
            self._late_rate,
            employee_id,
            payroll.periode,
            payroll.potongan,
        )
        return payroll
