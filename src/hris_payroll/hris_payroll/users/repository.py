from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import AccountStatus, Role
from .model import User


class UserRepository(Protocol):
    def get_by_id(self, user_id: int) -> Optional[User]:
        raise NotImplementedError

    def get_by_username(self, username: str) -> Optional[User]:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[User]:
        raise NotImplementedError

    def get_by_login(self, identifier: str) -> Optional[User]:
        """Look a user up by username or email."""
        raise NotImplementedError

    def get_by_reset_token(self, token: str) -> Optional[User]:
        raise NotImplementedError

    def get_first_admin(self) -> Optional[User]:
        raise NotImplementedError

    def list_by_status(self, status: AccountStatus) -> Sequence[User]:
        raise NotImplementedError

    def create_user(
        self,
        *,
        username: str,
        email: str,
        password_hash: Optional[str],
        role: Role,
        status: AccountStatus,
        status_karyawan: Optional[str],
    ) -> int:
        raise NotImplementedError

    def update_email(self, user_id: int, email: str) -> None:
        raise NotImplementedError

    def update_password(self, user_id: int, password_hash: str) -> None:
        raise NotImplementedError

    def update_status(self, user_id: int, *, status: AccountStatus, role: Optional[Role] = None) -> bool:
        raise NotImplementedError

    def set_reset_token(self, user_id: int, *, token: str, expires_at: datetime) -> None:
        raise NotImplementedError

    def clear_reset_token(self, user_id: int) -> None:
        raise NotImplementedError

    def delete_user(self, user_id: int) -> bool:
        raise NotImplementedError
