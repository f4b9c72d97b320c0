"""FastAPI dependencies wiring the auth core into request handling.

Protected routes run an ordered pipeline: ``get_current_claims`` decodes the
access token, then the gate built by ``require_role`` checks the role. Each
step receives a result value from the core and raises it here, at the HTTP
boundary.
"""

from collections.abc import Callable, Iterable
from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from roster.core.config import Settings
from roster.core.database import get_db
from roster.core.errors import AuthError, AuthErrorKind, RateLimitExceeded
from roster.schemas.auth import AccessTokenClaims, Role
from roster.services.authentication import authenticate
from roster.services.credentials import CredentialStore
from roster.services.rate_limit import LoginRateLimiter
from roster.services.refresh_registry import RefreshTokenRegistry
from roster.services.roles import Decision, authorize, role_set
from roster.services.tokens import TokenIssuer


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_token_issuer(request: Request) -> TokenIssuer:
    return request.app.state.token_issuer


def get_login_rate_limiter(request: Request) -> LoginRateLimiter:
    return request.app.state.login_rate_limiter


def get_credential_store(
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> CredentialStore:
    return CredentialStore(db, rounds=settings.BCRYPT_ROUNDS)


def get_refresh_registry(
    db: Annotated[Session, Depends(get_db)],
    issuer: Annotated[TokenIssuer, Depends(get_token_issuer)],
) -> RefreshTokenRegistry:
    return RefreshTokenRegistry(db, clock=issuer.clock)


def client_key(request: Request) -> str:
    """Rate limit key for the caller (client address)."""
    return request.client.host if request.client else "unknown"


def enforce_login_rate_limit(
    request: Request,
    limiter: Annotated[LoginRateLimiter, Depends(get_login_rate_limiter)],
) -> None:
    """Dependency: count this login/register attempt; 429 when the client is over its window."""
    key = client_key(request)
    if not limiter.allow(key):
        raise RateLimitExceeded(limiter.retry_after(key))


def get_current_claims(
    request: Request,
    issuer: Annotated[TokenIssuer, Depends(get_token_issuer)],
) -> AccessTokenClaims:
    """Dependency: require a valid Bearer access token and return its claims. 401 otherwise."""
    result = authenticate(request.headers.get("authorization"), issuer)
    if isinstance(result, AuthError):
        raise result
    return result


def require_role(allowed: Iterable[Role]) -> Callable[[AccessTokenClaims], AccessTokenClaims]:
    """
    Build a dependency that admits only the given roles (403 for others).

    The role set is checked against the closed role set when the gate is built,
    so a typo fails at import time rather than denying everyone.
    """
    allowed_roles = role_set(allowed)

    def _gate(
        claims: Annotated[AccessTokenClaims, Depends(get_current_claims)],
    ) -> AccessTokenClaims:
        if authorize(claims, allowed_roles) is Decision.DENY:
            raise AuthError(AuthErrorKind.FORBIDDEN)
        return claims

    return _gate


CurrentClaims = Annotated[AccessTokenClaims, Depends(get_current_claims)]
