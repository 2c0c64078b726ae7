from __future__ import annotations

from flask import Flask, jsonify

from ..common.http import parse_body
from ..container import Container
from .guards import current_user, login_required
from .schemas import (
    ChangePasswordRequest,
    CompleteProfileRequest,
    ForgotPasswordRequest,
    LoginRequest,
    ProfileUpdate,
    RegisterRequest,
    ResetPasswordRequest,
)


def register(app: Flask, container: Container) -> None:
    auth = login_required(container.tokens)
    auth_pending = login_required(container.tokens, allow_pending=True)

    @app.post("/api/users/register", endpoint="users_register")
    def register_user():
        user = container.auth_service.register(parse_body(RegisterRequest))
        return (
            jsonify(
                {
                    "success": True,
                    "message": "Registrasi berhasil! Akun Anda menunggu approval dari Admin.",
                    "pendingApproval": True,
                    "user": {"username": user.username, "email": user.email, "status": user.status},
                }
            ),
            201,
        )

    @app.post("/api/users/login", endpoint="users_login")
    def login():
        token, identity = container.auth_service.login(parse_body(LoginRequest))
        return jsonify(
            {
                "token": token,
                "user": {
                    "user_id": identity.user_id,
                    "username": identity.username,
                    "email": identity.email,
                    "role": identity.role,
                    "employee_id": identity.employee_id,
                    "nama_lengkap": identity.nama_lengkap,
                },
            }
        )

    @app.get("/api/users/profile", endpoint="users_profile")
    @auth
    def get_profile():
        return jsonify(container.user_service.get_profile(current_user()))

    @app.put("/api/users/profile", endpoint="users_profile_update")
    @auth
    def update_profile():
        container.user_service.update_profile(current_user(), parse_body(ProfileUpdate))
        return jsonify({"message": "Profil berhasil diupdate."})

    @app.post("/api/users/change-password", endpoint="users_change_password")
    @auth
    def change_password():
        container.user_service.change_password(current_user(), parse_body(ChangePasswordRequest))
        return jsonify({"message": "Password berhasil diubah."})

    @app.post("/api/users/forgot-password", endpoint="users_forgot_password")
    def forgot_password():
        body = parse_body(ForgotPasswordRequest)
        container.auth_service.forgot_password(body.email)
        return jsonify({"message": "Jika email terdaftar, link reset password telah dikirim."})

    @app.post("/api/users/reset-password", endpoint="users_reset_password")
    def reset_password():
        body = parse_body(ResetPasswordRequest)
        container.auth_service.reset_password(body.token, body.new_password)
        return jsonify({"message": "Password berhasil direset."})

    @app.post("/api/complete-profile", endpoint="complete_profile")
    @auth_pending
    def complete_profile():
        token = container.auth_service.complete_profile(current_user(), parse_body(CompleteProfileRequest))
        return jsonify(
            {
                "success": True,
                "message": "Profil berhasil dilengkapi",
                "token": token,
                "redirect": "/dashboard",
            }
        )
