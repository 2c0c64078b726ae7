from __future__ import annotations

from dataclasses import replace
from typing import Optional

import pytest

from src.hris_payroll.hris_payroll.core.enums import AccountStatus, Role
from src.hris_payroll.hris_payroll.core.exceptions import AuthorizationError, NotFoundError, ValidationError
from src.hris_payroll.hris_payroll.employees.model import Employee, EmployeeProfile
from src.hris_payroll.hris_payroll.employees.schemas import EmployeeCreate, EmployeeUpdate
from src.hris_payroll.hris_payroll.employees.service import EmployeeService
from src.hris_payroll.hris_payroll.users.model import AuthUser


class InMemoryEmployees:
    def __init__(self):
        self.employees: dict[int, Employee] = {}

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        return self.employees.get(employee_id)

    def get_profile(self, employee_id: int) -> Optional[EmployeeProfile]:
        employee = self.employees.get(employee_id)
        return EmployeeProfile(employee=employee) if employee else None

    def create(self, **fields) -> int:
        employee_id = len(self.employees) + 1
        self.employees[employee_id] = Employee(employee_id=employee_id, **fields)
        return employee_id

    def update(self, employee_id, changes) -> bool:
        self.employees[employee_id] = replace(self.employees[employee_id], **changes)
        return True

    def delete(self, employee_id) -> bool:
        return self.employees.pop(employee_id, None) is not None


class NoUsers:
    def get_by_id(self, user_id):
        return None


STAFF = AuthUser(user_id=10, username="budi", role=Role.KARYAWAN, status=AccountStatus.ACTIVE, employee_id=1)
HR = AuthUser(user_id=2, username="hr", role=Role.HR, status=AccountStatus.ACTIVE)


@pytest.fixture
def service():
    return EmployeeService(InMemoryEmployees(), NoUsers())


def test_create_defaults_salary_and_status(service):
    employee_id = service.create(EmployeeCreate(nama_lengkap="  Budi ", no_hp="+62 812-3456"))

    employee = service.require(employee_id)
    assert employee.nama_lengkap == "Budi"
    assert employee.gaji_pokok == 5_000_000
    assert employee.status_karyawan == "Tetap"
    assert employee.no_hp == "+62 812-3456"


def test_create_validates_input(service):
    with pytest.raises(ValidationError):
        service.create(EmployeeCreate(nama_lengkap=" "))
    with pytest.raises(ValidationError):
        service.create(EmployeeCreate(nama_lengkap="Budi", gaji_pokok=-1))
    with pytest.raises(ValidationError):
        service.create(EmployeeCreate(nama_lengkap="Budi", user_id=99))
    with pytest.raises(ValidationError):
        service.create(EmployeeCreate(nama_lengkap="Budi", no_hp="08abc"))


def test_update_requires_changes(service):
    employee_id = service.create(EmployeeCreate(nama_lengkap="Budi"))

    updated = service.update(employee_id, EmployeeUpdate(jabatan="Supervisor", gaji_pokok=7_000_000))

    assert updated.jabatan == "Supervisor"
    assert updated.gaji_pokok == 7_000_000
    with pytest.raises(ValidationError):
        service.update(employee_id, EmployeeUpdate())


def test_staff_can_only_read_own_profile(service):
    service.create(EmployeeCreate(nama_lengkap="Budi"))
    service.create(EmployeeCreate(nama_lengkap="Sari"))

    assert service.get_profile(STAFF, 1).employee.nama_lengkap == "Budi"
    assert service.get_profile(HR, 2).employee.nama_lengkap == "Sari"
    with pytest.raises(AuthorizationError):
        service.get_profile(STAFF, 2)


def test_delete_missing_employee(service):
    with pytest.raises(NotFoundError):
        service.delete(42)
