from __future__ import annotations

from flask import Flask, jsonify

from ..common.http import parse_body, query_date, query_int
from ..container import Container
from ..core.enums import Role
from ..users.guards import current_user, login_required, roles_required
from .schemas import AlphaCheckRequest, AlphaConvertRequest, AlphaRemoveRequest, UserApproveRequest, UserRejectRequest


def _period(service):
    return service.resolve_period(
        month=query_int("month"),
        year=query_int("year"),
        start=query_date("start_date"),
        end=query_date("end_date"),
    )


def register(app: Flask, container: Container) -> None:
    auth = login_required(container.tokens)
    managers = roles_required(Role.ADMIN, Role.HR)
    admin_only = roles_required(Role.ADMIN)
    service = container.alpha_service
    users = container.user_service

    @app.get("/api/alpha/users/pending", endpoint="alpha_users_pending")
    @auth
    @admin_only
    def pending_users():
        rows = users.list_pending()
        return jsonify({"count": len(rows), "users": rows})

    @app.post("/api/alpha/users/approve/<int:user_id>", endpoint="alpha_users_approve")
    @auth
    @admin_only
    def approve_user(user_id: int):
        data = parse_body(UserApproveRequest)
        user, sent = users.approve(user_id, approved_role=data.approved_role)
        return jsonify(
            {
                "message": "User berhasil diapprove",
                "user": {"username": user.username, "email": user.email, "role": user.role, "status": user.status},
                "approved_by": current_user().username,
                "notes": data.notes or "Approved",
                "email_sent": sent,
            }
        )

    @app.post("/api/alpha/users/reject/<int:user_id>", endpoint="alpha_users_reject")
    @auth
    @admin_only
    def reject_user(user_id: int):
        data = parse_body(UserRejectRequest)
        user, sent = users.reject(user_id, reason=data.reason)
        return jsonify(
            {
                "message": "User berhasil ditolak dan dihapus dari database.",
                "rejected_user": {"username": user.username, "email": user.email},
                "rejected_by": current_user().username,
                "reason": data.reason or "No reason provided",
                "email_sent": sent,
                "deleted": True,
            }
        )

    @app.post("/api/alpha/check", endpoint="alpha_check")
    @auth
    @managers
    def check_alpha():
        result = service.check(parse_body(AlphaCheckRequest))
        return jsonify({"message": "Alpha check completed", "triggered_by": current_user().username, **result})

    @app.get("/api/alpha/stats", endpoint="alpha_stats")
    @auth
    @managers
    def alpha_stats():
        start, end = _period(service)
        return jsonify(service.stats(start, end))

    @app.get("/api/alpha/status", endpoint="alpha_status")
    @auth
    @managers
    def alpha_status():
        return jsonify(service.status())

    @app.delete("/api/alpha/remove/<int:attendance_id>", endpoint="alpha_remove")
    @auth
    @admin_only
    def remove_alpha(attendance_id: int):
        data = parse_body(AlphaRemoveRequest)
        row = service.remove(attendance_id)
        return jsonify(
            {
                "message": "Alpha record berhasil dihapus",
                "deleted_record": {
                    "attendance_id": row.attendance_id,
                    "employee_name": row.nama_lengkap,
                    "tanggal": row.tanggal,
                    "deleted_by": current_user().username,
                    "reason": data.reason or "Not specified",
                },
            }
        )

    @app.put("/api/alpha/convert/<int:attendance_id>", endpoint="alpha_convert")
    @auth
    @managers
    def convert_alpha(attendance_id: int):
        actor = current_user()
        row = service.convert(attendance_id, parse_body(AlphaConvertRequest), converted_by=actor.username)
        return jsonify(
            {
                "message": f"Alpha record berhasil diubah menjadi {row.status.value}",
                "updated_record": {
                    "attendance_id": row.attendance_id,
                    "employee_name": row.nama_lengkap,
                    "tanggal": row.tanggal,
                    "old_status": "alpa",
                    "new_status": row.status,
                    "keterangan": row.keterangan,
                    "converted_by": actor.username,
                },
            }
        )

    @app.get("/api/alpha/employee/<int:employee_id>", endpoint="alpha_by_employee")
    @auth
    @managers
    def alpha_by_employee(employee_id: int):
        start, end = _period(service)
        return jsonify(service.for_employee(employee_id, start, end))

    @app.get("/api/alpha/summary", endpoint="alpha_summary")
    @auth
    @managers
    def alpha_summary():
        return jsonify(service.summary())
