from __future__ import annotations

from flask import Flask, jsonify

from ..common.http import parse_body
from ..container import Container
from ..core.enums import Role
from ..users.guards import current_user, login_required, roles_required
from .schemas import CheckAttendanceRequest, ScheduleAssign, ScheduleCreate, ScheduleUpdate
from .service import assignment_to_dict, schedule_to_dict


def register(app: Flask, container: Container) -> None:
    auth = login_required(container.tokens)
    managers = roles_required(Role.ADMIN, Role.HR)
    service = container.schedule_service

    @app.get("/api/schedules", endpoint="schedules_list")
    @auth
    @managers
    def list_schedules():
        return jsonify(service.list_with_assignments())

    @app.get("/api/schedules/<int:schedule_id>", endpoint="schedules_get")
    @auth
    def get_schedule(schedule_id: int):
        return jsonify(schedule_to_dict(service.get(schedule_id)))

    @app.post("/api/schedules", endpoint="schedules_create")
    @auth
    @managers
    def create_schedule():
        schedule = service.create(parse_body(ScheduleCreate))
        return jsonify({"message": "Jadwal kerja berhasil dibuat", "schedule": schedule_to_dict(schedule)}), 201

    @app.post("/api/schedules/assign", endpoint="schedules_assign")
    @auth
    @managers
    def assign_schedule():
        assignment = service.assign(parse_body(ScheduleAssign))
        return (
            jsonify(
                {
                    "message": f"Jadwal berhasil diterapkan untuk {assignment.nama_lengkap}",
                    "assignment": assignment_to_dict(assignment),
                }
            ),
            201,
        )

    @app.put("/api/schedules/<int:schedule_id>", endpoint="schedules_update")
    @auth
    @managers
    def update_schedule(schedule_id: int):
        schedule = service.update(schedule_id, parse_body(ScheduleUpdate))
        return jsonify({"message": "Jadwal berhasil diperbarui", "schedule": schedule_to_dict(schedule)})

    @app.delete("/api/schedules/<int:schedule_id>", endpoint="schedules_delete")
    @auth
    @managers
    def delete_schedule(schedule_id: int):
        service.delete(schedule_id)
        return jsonify({"message": "Jadwal berhasil dihapus"})

    @app.get("/api/schedules/employee/<int:employee_id>", endpoint="schedules_for_employee")
    @auth
    def employee_schedule(employee_id: int):
        return jsonify(assignment_to_dict(service.current_for(current_user(), employee_id)))

    @app.post("/api/schedules/check-attendance", endpoint="schedules_check_attendance")
    @auth
    def check_attendance():
        return jsonify(service.check_attendance(parse_body(CheckAttendanceRequest)))
