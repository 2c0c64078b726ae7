from __future__ import annotations

from flask import Flask, jsonify

from ..common.datetime_utils import format_hhmm
from ..common.http import parse_body, query_date, query_int, query_str
from ..container import Container
from ..core.enums import ApprovalStatus, Role
from ..users.guards import current_user, login_required, roles_required
from .schemas import (
    ApprovalDecision,
    AttendanceCreate,
    AttendanceUpdate,
    CheckInRequest,
    CheckOutRequest,
    RemoteWorkRequest,
)


def register(app: Flask, container: Container) -> None:
    auth = login_required(container.tokens)
    managers = roles_required(Role.ADMIN, Role.HR)
    service = container.attendance_service

    @app.get("/api/attendance", endpoint="attendance_list")
    @auth
    def list_attendance():
        rows = service.list_visible(
            current_user(),
            employee_id=query_int("employee_id"),
            start=query_date("start_date"),
            end=query_date("end_date"),
            status=query_str("status"),
        )
        return jsonify([r.to_dict() for r in rows])

    @app.get("/api/attendance/pending-approvals", endpoint="attendance_pending")
    @auth
    @managers
    def pending_approvals():
        return jsonify([r.to_dict() for r in service.pending_approvals()])

    @app.post("/api/attendance/approve/<int:attendance_id>", endpoint="attendance_approve")
    @auth
    @managers
    def approve(attendance_id: int):
        row = service.decide(current_user(), attendance_id, parse_body(ApprovalDecision))
        verb = "telah disetujui" if row.approval_status == ApprovalStatus.APPROVED else "ditolak"
        return jsonify({"message": f"Request {row.tipe_kerja} dari {row.nama_lengkap} {verb}", "data": row.to_dict()})

    @app.post("/api/attendance/request-wfh", endpoint="attendance_request_wfh")
    @auth
    def request_wfh():
        row = service.request_remote_work(current_user(), parse_body(RemoteWorkRequest))
        message = f"Request {row.tipe_kerja} berhasil dikirim. Menunggu approval dari admin."
        return jsonify({"message": message, "data": row.to_dict()}), 201

    @app.post("/api/attendance/checkin", endpoint="attendance_checkin")
    @auth
    def check_in():
        result = service.check_in(current_user(), parse_body(CheckInRequest))
        body = {
            "message": result.message,
            "status": result.decision.status,
            "schedule_start_time": format_hhmm(result.window.start),
            "actual_checkin_time": format_hhmm(result.checked_at),
            "potongan": result.potongan,
            "data": result.attendance.to_dict(),
        }
        return jsonify(body), 200 if result.filled_request else 201

    @app.put("/api/attendance/checkout/<int:attendance_id>", endpoint="attendance_checkout")
    @auth
    def check_out(attendance_id: int):
        result = service.check_out(current_user(), attendance_id, parse_body(CheckOutRequest))
        return jsonify(
            {
                "message": result.message,
                "data": result.attendance.to_dict(),
                "overtime": result.overtime.to_dict() if result.overtime else None,
            }
        )

    @app.get("/api/attendance/employee/<int:employee_id>", endpoint="attendance_by_employee")
    @auth
    def attendance_by_employee(employee_id: int):
        return jsonify([r.to_dict() for r in service.list_for_employee(current_user(), employee_id)])

    @app.get("/api/attendance/<int:attendance_id>", endpoint="attendance_get")
    @auth
    def get_attendance(attendance_id: int):
        return jsonify(service.get_visible(current_user(), attendance_id).to_dict())

    @app.post("/api/attendance", endpoint="attendance_create")
    @auth
    @managers
    def create_attendance():
        row = service.create_manual(current_user(), parse_body(AttendanceCreate))
        return jsonify(row.to_dict()), 201

    @app.put("/api/attendance/<int:attendance_id>", endpoint="attendance_update")
    @auth
    @managers
    def update_attendance(attendance_id: int):
        return jsonify(service.update(attendance_id, parse_body(AttendanceUpdate)).to_dict())

    @app.delete("/api/attendance/<int:attendance_id>", endpoint="attendance_delete")
    @auth
    @managers
    def delete_attendance(attendance_id: int):
        service.delete(attendance_id)
        return jsonify({"message": "Absensi berhasil dihapus."})
