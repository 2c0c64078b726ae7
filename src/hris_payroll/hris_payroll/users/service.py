from __future__ import annotations

import logging
import secrets
from datetime import datetime, timedelta
from typing import Callable, List, Optional

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.datetime_utils import now_local
from ..common.validators import clean_optional, optional_phone
from ..core.constants import DEFAULT_BASIC_SALARY, DEFAULT_RESET_TOKEN_MINUTES, MIN_PASSWORD_LENGTH
from ..core.enums import AccountStatus, Role
from ..core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    NotFoundError,
    ValidationError,
)
from ..employees.model import Employee
from ..employees.repository import EmployeeRepository
from ..notifications import templates
from ..notifications.email import EmailSender, send_best_effort
from .model import AuthUser, User
from .repository import UserRepository
from .schemas import (
    ChangePasswordRequest,
    CompleteProfileRequest,
    LoginRequest,
    ProfileUpdate,
    RegisterRequest,
)
from .tokens import TokenService

log = logging.getLogger(__name__)


def _password_matches(password_hash: Optional[str], password: str) -> bool:
    if not password_hash:
        return False
    try:
        return check_password_hash(password_hash, password)
    except ValueError:
        # placeholder or corrupted hashes
        return False


def _identity(user: User, employee: Optional[Employee]) -> AuthUser:
    return AuthUser(
        user_id=user.user_id,
        username=user.username,
        role=user.role,
        status=user.status,
        employee_id=employee.employee_id if employee else None,
        nama_lengkap=employee.nama_lengkap if employee else user.username,
        email=user.email,
    )


class AuthService:
    """Use case: registrasi, login, lengkapi profil dan reset password."""

    def __init__(
        self,
        users: UserRepository,
        employees: EmployeeRepository,
        tokens: TokenService,
        mailer: EmailSender,
        *,
        frontend_url: str = "http://localhost:3000",
        reset_token_minutes: int = DEFAULT_RESET_TOKEN_MINUTES,
        clock: Callable[[], datetime] = now_local,
    ):
        self._users = users
        self._employees = employees
        self._tokens = tokens
        self._mailer = mailer
        self._frontend_url = frontend_url.rstrip("/")
        self._reset_minutes = int(reset_token_minutes)
        self._clock = clock

    def register(self, data: RegisterRequest) -> User:
        username = (data.username or "").strip()
        email = str(data.email or "").strip()
        password = data.password or ""
        if not username or not password or not email:
            raise ValidationError("Username, password, dan email wajib diisi.")
        if not (data.nama_lengkap or "").strip():
            raise ValidationError("Nama lengkap wajib diisi.")
        if password != data.confirm_password:
            raise ValidationError("Password dan konfirmasi password tidak cocok.")
        if len(password) < MIN_PASSWORD_LENGTH:
            raise ValidationError(f"Password minimal {MIN_PASSWORD_LENGTH} karakter.")
        no_hp = optional_phone(data.no_hp)

        if self._users.get_by_username(username):
            raise ConflictError("Username sudah terdaftar.")
        if self._users.get_by_email(email):
            raise ConflictError("Email sudah terdaftar.")

        status_karyawan = clean_optional(data.status_karyawan) or "Magang"
        user_id = self._users.create_user(
            username=username,
            email=email,
            password_hash=generate_password_hash(password),
            role=Role.KARYAWAN,
            status=AccountStatus.PENDING,
            status_karyawan=status_karyawan,
        )
        self._employees.create(
            nama_lengkap=data.nama_lengkap.strip(),
            user_id=user_id,
            jenis_kelamin=clean_optional(data.jenis_kelamin),
            alamat=clean_optional(data.alamat),
            no_hp=no_hp,
            jabatan=clean_optional(data.jabatan),
            tanggal_masuk=self._clock().date(),
            status_karyawan=status_karyawan,
            gaji_pokok=float(DEFAULT_BASIC_SALARY),
        )
        log.info("Registered user %s (id=%s) awaiting approval", username, user_id)

        user = self._users.get_by_id(user_id)
        if not user:
            raise NotFoundError("User tidak ditemukan.")
        return user

    def login(self, data: LoginRequest) -> tuple[str, AuthUser]:
        identifier = (data.username or "").strip()
        password = data.password or ""
        if not identifier or not password:
            raise ValidationError("Username dan password wajib diisi.")

        user = self._users.get_by_login(identifier)
        if not user:
            raise AuthenticationError("Username atau email tidak ditemukan.")

        if user.status == AccountStatus.PENDING:
            raise AuthorizationError(
                "Akun Anda masih menunggu approval dari Admin. Silakan tunggu konfirmasi.",
                code="ACCOUNT_PENDING",
            )
        if user.status == AccountStatus.REJECTED:
            raise AuthorizationError(
                "Akun Anda telah ditolak oleh Admin. Silakan hubungi administrator untuk informasi lebih lanjut.",
                code="ACCOUNT_REJECTED",
            )
        if user.status != AccountStatus.ACTIVE:
            raise AuthorizationError(
                "Status akun Anda tidak valid. Silakan hubungi administrator.",
                code="INVALID_STATUS",
            )

        if not user.has_password:
            raise AuthenticationError(
                "Anda belum mengatur password. Silakan lengkapi profil terlebih dahulu.",
                code="PASSWORD_NOT_SET",
            )
        if not _password_matches(user.password_hash, password):
            raise AuthenticationError("Password salah.")

        employee = self._employees.get_by_user_id(user.user_id)
        if employee is None:
            employee_id = self._employees.create(
                nama_lengkap=user.username,
                user_id=user.user_id,
                jenis_kelamin=None,
                alamat=None,
                no_hp=None,
                jabatan=None,
                tanggal_masuk=None,
                status_karyawan=user.status_karyawan or "Magang",
                gaji_pokok=float(DEFAULT_BASIC_SALARY),
            )
            log.info("Created missing employee record %s for user %s", employee_id, user.user_id)
            employee = self._employees.get_by_id(employee_id)

        identity = _identity(user, employee)
        return self._tokens.issue_for(identity), identity

    def complete_profile(self, actor: AuthUser, data: CompleteProfileRequest) -> str:
        required = {
            "jabatan": data.jabatan,
            "alamat": data.alamat,
            "no_hp": data.no_hp,
            "status_karyawan": data.status_karyawan,
            "jenis_kelamin": data.jenis_kelamin,
        }
        missing = {k: not (v or "").strip() for k, v in required.items()}
        if any(missing.values()):
            raise ValidationError("Semua field wajib diisi", details={"missing": missing})
        if actor.employee_id is None:
            raise ValidationError("Employee ID tidak ditemukan. Silakan login ulang.")
        if data.password and len(data.password.strip()) < MIN_PASSWORD_LENGTH:
            raise ValidationError(f"Password minimal {MIN_PASSWORD_LENGTH} karakter.")

        self._employees.update(
            actor.employee_id,
            {
                "jabatan": data.jabatan.strip(),
                "alamat": data.alamat.strip(),
                "no_hp": optional_phone(data.no_hp),
                "status_karyawan": data.status_karyawan.strip(),
                "jenis_kelamin": data.jenis_kelamin.strip(),
            },
        )
        if data.password and data.password.strip():
            self._users.update_password(actor.user_id, generate_password_hash(data.password.strip()))

        user = self._users.get_by_id(actor.user_id)
        if not user:
            raise NotFoundError("User tidak ditemukan.")
        employee = self._employees.get_by_id(actor.employee_id)
        return self._tokens.issue_for(_identity(user, employee))

    def forgot_password(self, email: Optional[str]) -> None:
        """Store a reset token and mail it. Unknown emails are silently ignored."""

        email = (email or "").strip()
        if not email:
            raise ValidationError("Email wajib diisi.")
        user = self._users.get_by_email(email)
        if not user:
            return

        token = secrets.token_urlsafe(32)
        expires_at = self._clock() + timedelta(minutes=self._reset_minutes)
        self._users.set_reset_token(user.user_id, token=token, expires_at=expires_at)

        subject, html = templates.password_reset(
            reset_url=f"{self._frontend_url}/reset-password?token={token}",
            token=token,
            minutes=self._reset_minutes,
        )
        send_best_effort(self._mailer, user.email, subject, html)

    def reset_password(self, token: Optional[str], new_password: Optional[str]) -> None:
        if not token or not new_password:
            raise ValidationError("Token dan password baru wajib diisi.")
        if len(new_password) < MIN_PASSWORD_LENGTH:
            raise ValidationError(f"Password minimal {MIN_PASSWORD_LENGTH} karakter.")

        user = self._users.get_by_reset_token(token)
        if not user:
            raise AuthenticationError("Token tidak valid atau sudah expired.")
        if not user.reset_token_expiry or user.reset_token_expiry < self._clock():
            raise AuthenticationError("Token sudah expired.")

        self._users.update_password(user.user_id, generate_password_hash(new_password))
        self._users.clear_reset_token(user.user_id)


class UserService:
    """Use case: profil akun sendiri dan approval pendaftaran."""

    def __init__(
        self,
        users: UserRepository,
        employees: EmployeeRepository,
        mailer: EmailSender,
        *,
        frontend_url: str = "http://localhost:3000",
    ):
        self._users = users
        self._employees = employees
        self._mailer = mailer
        self._frontend_url = frontend_url.rstrip("/")

    def require(self, user_id: int) -> User:
        user = self._users.get_by_id(user_id)
        if not user:
            raise NotFoundError("User tidak ditemukan.")
        return user

    def get_profile(self, actor: AuthUser) -> dict:
        user = self.require(actor.user_id)
        employee = self._employees.get_by_user_id(user.user_id)
        return {
            "user_id": user.user_id,
            "username": user.username,
            "email": user.email,
            "role": user.role,
            "status_karyawan": user.status_karyawan,
            "created_at": user.created_at,
            "employee": None
            if employee is None
            else {
                "employee_id": employee.employee_id,
                "nama_lengkap": employee.nama_lengkap,
                "jabatan": employee.jabatan,
                "no_hp": employee.no_hp,
                "alamat": employee.alamat,
                "tanggal_masuk": employee.tanggal_masuk,
                "gaji_pokok": employee.gaji_pokok,
            },
        }

    def update_profile(self, actor: AuthUser, data: ProfileUpdate) -> None:
        self.require(actor.user_id)
        if data.email:
            self._users.update_email(actor.user_id, str(data.email))

        if actor.employee_id is not None:
            changes = {}
            if clean_optional(data.nama_lengkap):
                changes["nama_lengkap"] = data.nama_lengkap.strip()
            if clean_optional(data.no_hp):
                changes["no_hp"] = optional_phone(data.no_hp)
            if clean_optional(data.alamat):
                changes["alamat"] = data.alamat.strip()
            if changes:
                self._employees.update(actor.employee_id, changes)

    def change_password(self, actor: AuthUser, data: ChangePasswordRequest) -> None:
        if not data.old_password or not data.new_password:
            raise ValidationError("Password lama dan baru wajib diisi.")
        if len(data.new_password) < MIN_PASSWORD_LENGTH:
            raise ValidationError(f"Password minimal {MIN_PASSWORD_LENGTH} karakter.")

        user = self.require(actor.user_id)
        if not _password_matches(user.password_hash, data.old_password):
            raise AuthenticationError("Password lama tidak sesuai.")
        self._users.update_password(user.user_id, generate_password_hash(data.new_password))

    def list_pending(self) -> List[dict]:
        rows = []
        for user in self._users.list_by_status(AccountStatus.PENDING):
            employee = self._employees.get_by_user_id(user.user_id)
            rows.append(
                {
                    "user_id": user.user_id,
                    "username": user.username,
                    "email": user.email,
                    "role": user.role,
                    "status": user.status,
                    "status_karyawan": user.status_karyawan,
                    "created_at": user.created_at,
                    "employee": None
                    if employee is None
                    else {
                        "nama_lengkap": employee.nama_lengkap,
                        "jabatan": employee.jabatan,
                        "no_hp": employee.no_hp,
                    },
                }
            )
        return rows

    def approve(self, user_id: int, *, approved_role: Optional[str]) -> tuple[User, bool]:
        try:
            role = Role(approved_role or "")
        except ValueError:
            raise ValidationError(
                "Role tidak valid",
                details={"valid_roles": [r.value for r in Role]},
            )

        user = self.require(user_id)
        if user.status != AccountStatus.PENDING:
            raise ConflictError("User sudah diproses", details={"current_status": user.status.value})
        if not self._users.update_status(user_id, status=AccountStatus.ACTIVE, role=role):
            raise ConflictError("User sudah diproses")
        log.info("User %s approved as %s", user.username, role.value)

        approved = self.require(user_id)
        subject, html = templates.account_approved(
            username=approved.username,
            email=approved.email,
            role=role.value,
            login_url=f"{self._frontend_url}/login",
        )
        sent = send_best_effort(self._mailer, approved.email, subject, html)
        return approved, sent

    def reject(self, user_id: int, *, reason: Optional[str]) -> tuple[User, bool]:
        user = self._users.get_by_id(user_id)
        if not user or user.status != AccountStatus.PENDING:
            raise ValidationError("User tidak valid")

        subject, html = templates.account_rejected(
            username=user.username,
            email=user.email,
            reason=clean_optional(reason) or "Administrator tidak memberikan alasan spesifik.",
        )
        sent = send_best_effort(self._mailer, user.email, subject, html)

        self._employees.delete_by_user_id(user_id)
        self._users.delete_user(user_id)
        log.info("User %s rejected and removed", user.username)
        return user, sent
