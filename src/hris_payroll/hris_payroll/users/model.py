from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import AccountStatus, Role


@dataclass(frozen=True)
class User:
    """Entitas domain: akun login.

    Catatan: objek data murni (tidak berisi kode akses DB).
    """

    user_id: int
    username: str
    email: str
    password_hash: Optional[str]
    role: Role
    status: AccountStatus
    status_karyawan: Optional[str] = None
    reset_token: Optional[str] = None
    reset_token_expiry: Optional[datetime] = None
    created_at: Optional[datetime] = None

    @property
    def has_password(self) -> bool:
        return bool(self.password_hash)


@dataclass(frozen=True)
class AuthUser:
    """Identity decoded from a bearer token for the current request."""

    user_id: int
    username: str
    role: Role
    status: AccountStatus
    employee_id: Optional[int] = None
    nama_lengkap: Optional[str] = None
    email: Optional[str] = None

    @property
    def is_manager(self) -> bool:
        return self.role in (Role.ADMIN, Role.HR)

    def to_claims(self) -> dict:
        return {
            "userId": self.user_id,
            "username": self.username,
            "email": self.email,
            "role": self.role.value,
            "employee_id": self.employee_id,
            "nama_lengkap": self.nama_lengkap,
            "status": self.status.value,
        }

    @classmethod
    def from_claims(cls, claims: dict) -> "AuthUser":
        employee_id = claims.get("employee_id")
        return cls(
            user_id=int(claims["userId"]),
            username=str(claims.get("username") or ""),
            role=Role(claims["role"]),
            status=AccountStatus(claims.get("status") or AccountStatus.ACTIVE.value),
            employee_id=int(employee_id) if employee_id is not None else None,
            nama_lengkap=claims.get("nama_lengkap"),
            email=claims.get("email"),
        )
