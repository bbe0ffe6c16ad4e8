from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any, Optional

from jose import JWTError, jwt

from ..core.constants import TOKEN_TTL_HOURS
from ..core.enums import Role
from ..core.exceptions import AuthenticationError


class TokenCodec:
    """Issues and verifies signed bearer tokens (JWT)."""

    def __init__(self, secret: str, *, algorithm: str = "HS256", ttl_hours: int = TOKEN_TTL_HOURS):
        self._secret = secret
        self._algorithm = algorithm
        self._ttl = timedelta(hours=int(ttl_hours))

    @property
    def ttl(self) -> timedelta:
        return self._ttl

    def issue(self, *, identity_id: int, role: Role, now: Optional[datetime] = None) -> str:
        issued_at = now or datetime.now(timezone.utc)
        claims = {
            "sub": str(identity_id),
            "role": role.value,
            "iat": issued_at,
            "exp": issued_at + self._ttl,
            "type": "access",
        }
        return jwt.encode(claims, self._secret, algorithm=self._algorithm)

    def decode(self, token: str) -> dict[str, Any]:
        """Return the claims, or raise AuthenticationError for bad/expired tokens."""
        try:
            payload = jwt.decode(token, self._secret, algorithms=[self._algorithm])
        except JWTError:
            raise AuthenticationError("Invalid or expired token")

        if payload.get("type") != "access" or not str(payload.get("sub", "")).isdigit():
            raise AuthenticationError("Invalid or expired token")
        return payload
