"""
Signed, time-bounded session tokens (HS256 JWT by default).

Verification is purely cryptographic: it never consults the database, so a
token stays structurally valid until it expires even if the account behind it
is disabled or deleted. Account-state checks belong to the request gate.
"""

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from functools import lru_cache
from typing import Any

import jwt

from newcloud_auth.core.config import get_settings
from newcloud_auth.core.errors import InvalidTokenError


@dataclass(frozen=True)
class TokenClaims:
    """Identity asserted by a verified token."""

    user_id: int
    username: str


class TokenService:
    """Issues and verifies bearer tokens carrying {user id, username}."""

    def __init__(self, secret: str, algorithm: str = "HS256", expire_minutes: int = 1440) -> None:
        if not secret or not secret.strip():
            raise ValueError("Token signing secret must be non-empty")
        self._secret = secret
        self._algorithm = algorithm
        self._expire = timedelta(minutes=expire_minutes)

    def issue(self, user_id: int, username: str, now: datetime | None = None) -> str:
        """Create a token for the given identity that expires after the configured duration."""
        issued_at = now or datetime.now(UTC)
        payload: dict[str, Any] = {
            "sub": str(user_id),
            "username": username,
            "iat": issued_at,
            "exp": issued_at + self._expire,
        }
        return jwt.encode(payload, self._secret, algorithm=self._algorithm)

    def verify(self, token: str) -> TokenClaims:
        """
        Decode and validate a token.
        Raises InvalidTokenError on bad signature, malformed input, missing claims or expiry.
        """
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                options={"require": ["sub", "exp"]},
            )
        except jwt.ExpiredSignatureError as e:
            raise InvalidTokenError("Token expired") from e
        except jwt.PyJWTError as e:
            raise InvalidTokenError() from e

        username = payload.get("username")
        try:
            user_id = int(payload["sub"])
        except (TypeError, ValueError) as e:
            raise InvalidTokenError("Invalid token payload") from e
        if not isinstance(username, str) or not username:
            raise InvalidTokenError("Invalid token payload")
        return TokenClaims(user_id=user_id, username=username)


@lru_cache
def get_token_service() -> TokenService:
    """Process-wide token service built once from settings (dependency-friendly)."""
    settings = get_settings()
    return TokenService(
        secret=settings.JWT_SECRET.get_secret_value(),
        algorithm=settings.JWT_ALGORITHM,
        expire_minutes=settings.JWT_EXPIRE_MINUTES,
    )
