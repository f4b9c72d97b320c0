"""Token issuer: signs and verifies access and refresh JWTs with separate secrets."""

import uuid
from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from typing import Any

import jwt

from roster.core.config import Settings
from roster.core.errors import AuthError, AuthErrorKind
from roster.models import User
from roster.schemas.auth import ROLE_VALUES, AccessTokenClaims, RefreshTokenClaims

ACCESS_TOKEN_TYPE = "access"
REFRESH_TOKEN_TYPE = "refresh"

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(UTC)


class TokenIssuer:
    """
    Mints and verifies HMAC-signed JWTs.

    Access tokens carry sub (user id), role and a short expiry and are signed
    with JWT_SECRET. Refresh tokens carry sub, a random jti and a long expiry
    and are signed with REFRESH_TOKEN_SECRET, so neither secret can forge the
    other kind of token.
    """

    def __init__(self, settings: Settings, clock: Clock = utc_now) -> None:
        self._access_secret = settings.JWT_SECRET.get_secret_value()
        self._refresh_secret = settings.REFRESH_TOKEN_SECRET.get_secret_value()
        self.algorithm = settings.JWT_ALGORITHM
        self.access_ttl = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
        self.refresh_ttl = timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS)
        self.clock = clock

    def issue_access_token(self, user: User) -> str:
        """Create an access token with sub, role, type, iat and exp."""
        now = self.clock()
        payload: dict[str, Any] = {
            "sub": str(user.id),
            "role": user.role,
            "type": ACCESS_TOKEN_TYPE,
            "iat": now,
            "exp": now + self.access_ttl,
        }
        return jwt.encode(payload, self._access_secret, algorithm=self.algorithm)

    def issue_refresh_token(self, user: User) -> tuple[str, datetime]:
        """Create a refresh token; returns (token, expires_at) for the registry row."""
        now = self.clock()
        expires_at = now + self.refresh_ttl
        payload: dict[str, Any] = {
            "sub": str(user.id),
            "type": REFRESH_TOKEN_TYPE,
            "jti": uuid.uuid4().hex,
            "iat": now,
            "exp": expires_at,
        }
        token = jwt.encode(payload, self._refresh_secret, algorithm=self.algorithm)
        # JWT timestamps have second resolution; keep the row in step with the token.
        return token, expires_at.replace(microsecond=0)

    def _decode(self, token: str, secret: str, token_type: str) -> dict[str, Any] | None:
        try:
            payload = jwt.decode(
                token,
                secret,
                algorithms=[self.algorithm],
                options={
                    "require": ["sub", "exp", "iat", "type"],
                    # Expiry is checked against self.clock below, not the wall clock.
                    "verify_exp": False,
                    "verify_iat": False,
                },
            )
        except jwt.PyJWTError:
            return None
        if payload.get("type") != token_type:
            return None
        exp = payload.get("exp")
        if not isinstance(exp, (int, float)) or isinstance(exp, bool):
            return None
        if self.clock().timestamp() >= exp:
            return None
        return payload

    def decode_access_token(self, token: str) -> AccessTokenClaims | AuthError:
        """Verify signature, expiry and shape; every failure is INVALID_OR_EXPIRED_TOKEN."""
        payload = self._decode(token, self._access_secret, ACCESS_TOKEN_TYPE)
        if payload is None or payload.get("role") not in ROLE_VALUES:
            return AuthError(AuthErrorKind.INVALID_OR_EXPIRED_TOKEN)
        try:
            return AccessTokenClaims(
                user_id=int(payload["sub"]),
                role=payload["role"],
                expires_at=datetime.fromtimestamp(payload["exp"], tz=UTC),
            )
        except (TypeError, ValueError):
            return AuthError(AuthErrorKind.INVALID_OR_EXPIRED_TOKEN)

    def decode_refresh_token(self, token: str) -> RefreshTokenClaims | AuthError:
        """Verify signature, expiry and shape; every failure is INVALID_REFRESH_TOKEN."""
        payload = self._decode(token, self._refresh_secret, REFRESH_TOKEN_TYPE)
        if payload is None or not payload.get("jti"):
            return AuthError(AuthErrorKind.INVALID_REFRESH_TOKEN)
        try:
            return RefreshTokenClaims(
                user_id=int(payload["sub"]),
                token_id=str(payload["jti"]),
                expires_at=datetime.fromtimestamp(payload["exp"], tz=UTC),
            )
        except (TypeError, ValueError):
            return AuthError(AuthErrorKind.INVALID_REFRESH_TOKEN)
