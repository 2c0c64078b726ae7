from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from jose import JWTError, jwt

from ..core.constants import DEFAULT_TOKEN_HOURS
from ..core.exceptions import AuthorizationError
from .model import AuthUser


class TokenService:
    """Signs and verifies HS256 bearer tokens with python-jose."""

    ALGORITHM = "HS256"

    def __init__(self, secret: str, *, expires_hours: int = DEFAULT_TOKEN_HOURS):
        self._secret = secret
        self._expires_hours = int(expires_hours)

    def issue(self, claims: Dict[str, Any], *, expires_hours: Optional[int] = None) -> str:
        hours = self._expires_hours if expires_hours is None else int(expires_hours)
        to_encode = dict(claims)
        to_encode["exp"] = int((datetime.now(timezone.utc) + timedelta(hours=hours)).timestamp())
        return jwt.encode(to_encode, self._secret, algorithm=self.ALGORITHM)

    def issue_for(self, user: AuthUser, *, expires_hours: Optional[int] = None) -> str:
        return self.issue(user.to_claims(), expires_hours=expires_hours)

    def decode(self, token: str) -> Dict[str, Any]:
        try:
            return jwt.decode(token, self._secret, algorithms=[self.ALGORITHM])
        except JWTError:
            raise AuthorizationError("Token tidak valid atau sudah kedaluwarsa.")

    def authenticate(self, token: str) -> AuthUser:
        claims = self.decode(token)
        try:
            return AuthUser.from_claims(claims)
        except (KeyError, ValueError):
            raise AuthorizationError("Token tidak valid atau sudah kedaluwarsa.")
