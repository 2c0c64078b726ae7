from __future__ import annotations

from flask import Flask, jsonify

from ..common.http import parse_body
from ..container import Container
from ..core.enums import Role
from ..users.guards import current_user, login_required, roles_required
from .schemas import EmployeeCreate, EmployeeUpdate


def register(app: Flask, container: Container) -> None:
    auth = login_required(container.tokens)
    managers = roles_required(Role.ADMIN, Role.HR)
    service = container.employee_service

    @app.get("/api/employees", endpoint="employees_list")
    @auth
    def list_employees():
        return jsonify([p.to_dict() for p in service.list_profiles()])

    @app.get("/api/employees/<int:employee_id>", endpoint="employees_get")
    @auth
    def get_employee(employee_id: int):
        return jsonify(service.get_profile(current_user(), employee_id).to_dict())

    @app.post("/api/employees", endpoint="employees_create")
    @auth
    @managers
    def create_employee():
        employee_id = service.create(parse_body(EmployeeCreate))
        return jsonify({"message": "Karyawan berhasil ditambahkan", "employee_id": employee_id}), 201

    @app.put("/api/employees/<int:employee_id>", endpoint="employees_update")
    @auth
    @managers
    def update_employee(employee_id: int):
        employee = service.update(employee_id, parse_body(EmployeeUpdate))
        return jsonify({"message": "Data karyawan berhasil diperbarui", "data": employee})

    @app.delete("/api/employees/<int:employee_id>", endpoint="employees_delete")
    @auth
    @managers
    def delete_employee(employee_id: int):
        service.delete(employee_id)
        return jsonify({"message": "Karyawan berhasil dihapus"})
