from __future__ import annotations

from flask import Flask, jsonify

from ..common.http import parse_body, query_int, query_str
from ..container import Container
from ..core.enums import Role
from ..users.guards import current_user, login_required, roles_required
from .schemas import PayrollCreate, PayrollUpdate


def register(app: Flask, container: Container) -> None:
    auth = login_required(container.tokens)
    managers = roles_required(Role.ADMIN, Role.HR)
    service = container.payroll_service

    @app.get("/api/payroll/calculate", endpoint="payroll_calculate")
    @auth
    @managers
    def calculate():
        return jsonify(service.calculate(month=query_int("month"), year=query_int("year")))

    @app.get("/api/payroll/my-slip", endpoint="payroll_my_slip")
    @auth
    def my_slip():
        return jsonify([p.to_dict() for p in service.my_slips(current_user())])

    @app.get("/api/payroll", endpoint="payroll_list")
    @auth
    @managers
    def list_payroll():
        rows = service.list_records(periode=query_str("periode"), employee_id=query_int("employee_id"))
        return jsonify([p.to_dict() for p in rows])

    @app.post("/api/payroll", endpoint="payroll_create")
    @auth
    @managers
    def create_payroll():
        return jsonify(service.create(parse_body(PayrollCreate)).to_dict()), 201

    @app.put("/api/payroll/<int:payroll_id>", endpoint="payroll_update")
    @auth
    @managers
    def update_payroll(payroll_id: int):
        return jsonify(service.update(payroll_id, parse_body(PayrollUpdate)).to_dict())

    @app.delete("/api/payroll/<int:payroll_id>", endpoint="payroll_delete")
    @auth
    @managers
    def delete_payroll(payroll_id: int):
        service.delete(payroll_id)
        return jsonify({"message": "Data payroll berhasil dihapus."})

    @app.get("/api/payroll/stats", endpoint="payroll_stats")
    @auth
    @managers
    def payroll_stats():
        return jsonify(service.stats(year=query_int("year")))

    @app.get("/api/payroll/bonus/<int:employee_id>", endpoint="payroll_bonus")
    @auth
    @managers
    def overtime_bonus(employee_id: int):
        return jsonify(service.overtime_bonus(employee_id, query_str("periode")))
