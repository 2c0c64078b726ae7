from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional, Sequence

from ..core.enums import AccountStatus, Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, execute_delete, execute_unique, fetchall, fetchone
from .model import User
from .repository import UserRepository

_USER_COLUMNS = (
    "user_id, username, email, password_hash, role, status, status_karyawan, "
    "reset_token, reset_token_expiry, created_at"
)


def _to_user(row: Dict[str, Any]) -> User:
    return User(
        user_id=int(row["user_id"]),
        username=row["username"],
        email=row["email"],
        password_hash=row.get("password_hash"),
        role=Role(row["role"]),
        status=AccountStatus(row["status"]),
        status_karyawan=row.get("status_karyawan"),
        reset_token=row.get("reset_token"),
        reset_token_expiry=row.get("reset_token_expiry"),
        created_at=row.get("created_at"),
    )


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _get_one(self, where: str, params: tuple) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_USER_COLUMNS} FROM users WHERE {where} LIMIT 1", params)
            row = fetchone(cur)
            return _to_user(row) if row else None

    def get_by_id(self, user_id: int) -> Optional[User]:
        return self._get_one("user_id=%s", (user_id,))

    def get_by_username(self, username: str) -> Optional[User]:
        return self._get_one("username=%s", (username,))

    def get_by_email(self, email: str) -> Optional[User]:
        return self._get_one("email=%s", (email,))

    def get_by_login(self, identifier: str) -> Optional[User]:
        return self._get_one("username=%s OR email=%s", (identifier, identifier))

    def get_by_reset_token(self, token: str) -> Optional[User]:
        return self._get_one("reset_token=%s", (token,))

    def get_first_admin(self) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_USER_COLUMNS} FROM users WHERE role='Admin' ORDER BY user_id LIMIT 1"
            )
            row = fetchone(cur)
            return _to_user(row) if row else None

    def list_by_status(self, status: AccountStatus) -> Sequence[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_USER_COLUMNS} FROM users WHERE status=%s ORDER BY created_at DESC",
                (status.value,),
            )
            return [_to_user(r) for r in fetchall(cur)]

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
        with db_cursor(self._conn_factory) as (_, cur):
            execute_unique(
                cur,
                """
                INSERT INTO users(username, email, password_hash, role, status, status_karyawan)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (username, email, password_hash, role.value, status.value, status_karyawan),
                message="Username atau email sudah terdaftar.",
            )
            return int(cur.lastrowid)

    def update_email(self, user_id: int, email: str) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            execute_unique(
                cur,
                "UPDATE users SET email=%s WHERE user_id=%s",
                (email, user_id),
                message="Email sudah terdaftar.",
            )

    def update_password(self, user_id: int, password_hash: str) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE users SET password_hash=%s WHERE user_id=%s", (password_hash, user_id))

    def update_status(self, user_id: int, *, status: AccountStatus, role: Optional[Role] = None) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            if role is None:
                cur.execute(
                    "UPDATE users SET status=%s WHERE user_id=%s AND status='pending'",
                    (status.value, user_id),
                )
            else:
                cur.execute(
                    "UPDATE users SET status=%s, role=%s WHERE user_id=%s AND status='pending'",
                    (status.value, role.value, user_id),
                )
            return cur.rowcount > 0

    def set_reset_token(self, user_id: int, *, token: str, expires_at: datetime) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE users SET reset_token=%s, reset_token_expiry=%s WHERE user_id=%s",
                (token, expires_at, user_id),
            )

    def clear_reset_token(self, user_id: int) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE users SET reset_token=NULL, reset_token_expiry=NULL WHERE user_id=%s",
                (user_id,),
            )

    def delete_user(self, user_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            deleted = execute_delete(
                cur,
                "DELETE FROM users WHERE user_id=%s",
                (user_id,),
                message="User tidak dapat dihapus karena masih digunakan.",
            )
            return deleted > 0
