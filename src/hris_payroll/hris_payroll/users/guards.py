from __future__ import annotations

from functools import wraps
from typing import Callable

from flask import g, request

from ..core.enums import AccountStatus, Role
from ..core.exceptions import AuthenticationError, AuthorizationError
from .model import AuthUser
from .tokens import TokenService


def bearer_token() -> str:
    header = request.headers.get("Authorization", "")
    if not header:
        raise AuthenticationError("Token tidak ditemukan. Silakan login terlebih dahulu.")

    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise AuthenticationError("Format token tidak valid. Gunakan 'Bearer <token>'.")
    return token.strip()


def check_account_status(user: AuthUser, *, allow_pending: bool = False) -> None:
    """Only active accounts pass; pending ones only where explicitly allowed."""

    if user.status == AccountStatus.PENDING:
        if allow_pending:
            return
        raise AuthorizationError(
            "Akun Anda masih menunggu approval dari Admin.",
            code="ACCOUNT_PENDING",
        )
    if user.status == AccountStatus.REJECTED:
        raise AuthorizationError(
            "Akun Anda telah ditolak oleh Admin.",
            code="ACCOUNT_REJECTED",
        )
    if user.status != AccountStatus.ACTIVE:
        raise AuthorizationError("Status akun Anda tidak valid.", code="INVALID_STATUS")


def current_user() -> AuthUser:
    user = g.get("auth_user")
    if user is None:
        raise AuthenticationError("Token tidak ditemukan. Silakan login terlebih dahulu.")
    return user


def login_required(tokens: TokenService, *, allow_pending: bool = False) -> Callable:
    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            user = tokens.authenticate(bearer_token())
            check_account_status(user, allow_pending=allow_pending)
            g.auth_user = user
            return view(*args, **kwargs)

        return wrapper

    return decorator


def roles_required(*roles: Role) -> Callable:
    allowed = tuple(roles)

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            user = current_user()
            if user.role not in allowed:
                raise AuthorizationError(
                    "Akses ditolak. Anda tidak memiliki izin untuk aksi ini.",
                    details={"required": [r.value for r in allowed], "current": user.role.value},
                )
            return view(*args, **kwargs)

        return wrapper

    return decorator


def subscription_required(ensure_active: Callable[[], object], *, enabled: bool = True) -> Callable:
    """Gate a view on the company subscription; ``ensure_active`` raises when missing."""

    def decorator(view):
        if not enabled:
            return view

        @wraps(view)
        def wrapper(*args, **kwargs):
            ensure_active()
            return view(*args, **kwargs)

        return wrapper

    return decorator
