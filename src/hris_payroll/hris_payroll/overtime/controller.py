from __future__ import annotations

from flask import Flask, jsonify

from ..common.http import parse_body, query_int, query_str
from ..container import Container
from ..core.enums import ApprovalStatus, Role
from ..users.guards import current_user, login_required, roles_required
from .schemas import OvertimeDecision


def register(app: Flask, container: Container) -> None:
    auth = login_required(container.tokens)
    managers = roles_required(Role.ADMIN, Role.HR)
    admin_only = roles_required(Role.ADMIN)
    service = container.overtime_service

    @app.get("/api/overtime", endpoint="overtime_list")
    @auth
    @managers
    def list_overtime():
        records = service.list_records(
            status=query_str("status"),
            month=query_int("month"),
            year=query_int("year"),
            employee_id=query_int("employee_id"),
        )
        return jsonify([r.to_dict() for r in records])

    @app.get("/api/overtime/employee/<int:employee_id>", endpoint="overtime_by_employee")
    @auth
    def overtime_by_employee(employee_id: int):
        return jsonify(service.for_employee(current_user(), employee_id))

    @app.get("/api/overtime/pending", endpoint="overtime_pending")
    @auth
    @managers
    def pending_overtime():
        return jsonify([r.to_dict() for r in service.pending()])

    @app.post("/api/overtime/approve/<int:overtime_id>", endpoint="overtime_approve")
    @auth
    @managers
    def approve_overtime(overtime_id: int):
        overtime = service.decide(current_user(), overtime_id, parse_body(OvertimeDecision))
        verb = "disetujui" if overtime.status == ApprovalStatus.APPROVED else "ditolak"
        return jsonify({"message": f"Overtime dari {overtime.nama_lengkap} telah {verb}", "data": overtime.to_dict()})

    @app.get("/api/overtime/stats", endpoint="overtime_stats")
    @auth
    @managers
    def overtime_stats():
        return jsonify(service.stats(month=query_int("month"), year=query_int("year")))

    @app.delete("/api/overtime/<int:overtime_id>", endpoint="overtime_delete")
    @auth
    @admin_only
    def delete_overtime(overtime_id: int):
        service.delete(overtime_id)
        return jsonify({"message": "Overtime berhasil dihapus"})
