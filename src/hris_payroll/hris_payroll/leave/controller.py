from __future__ import annotations

from flask import Flask, jsonify

from ..common.http import parse_body
from ..container import Container
from ..core.enums import ApprovalStatus, Role
from ..users.guards import current_user, login_required, roles_required
from .schemas import LeaveCreate, LeaveStatusUpdate


def register(app: Flask, container: Container) -> None:
    auth = login_required(container.tokens)
    managers = roles_required(Role.ADMIN, Role.HR)
    service = container.leave_service

    @app.get("/api/leave", endpoint="leave_list")
    @auth
    def list_leave():
        return jsonify([leave.to_dict() for leave in service.list_visible(current_user())])

    @app.get("/api/leave/employee/<int:employee_id>", endpoint="leave_by_employee")
    @auth
    def leave_by_employee(employee_id: int):
        return jsonify([leave.to_dict() for leave in service.list_for_employee(current_user(), employee_id)])

    @app.post("/api/leave", endpoint="leave_create")
    @auth
    def create_leave():
        leave = service.create(current_user(), parse_body(LeaveCreate))
        return jsonify({"message": "Pengajuan berhasil dikirim", "data": leave.to_dict()}), 201

    @app.put("/api/leave/<int:leave_id>/status", endpoint="leave_status")
    @auth
    @managers
    def update_status(leave_id: int):
        leave = service.decide(current_user(), leave_id, parse_body(LeaveStatusUpdate))
        verb = "disetujui" if leave.status == ApprovalStatus.APPROVED else "ditolak"
        return jsonify({"message": f"Pengajuan berhasil {verb}", "data": leave.to_dict()})

    @app.delete("/api/leave/<int:leave_id>", endpoint="leave_delete")
    @auth
    def delete_leave(leave_id: int):
        service.delete(current_user(), leave_id)
        return jsonify({"message": "Data cuti berhasil dihapus."})
