"""Auth core: credentials, tokens, refresh token registry, role gate and rate limiting."""

from roster.services.authentication import authenticate
from roster.services.credentials import CredentialStore
from roster.services.rate_limit import LoginRateLimiter
from roster.services.refresh_registry import RefreshTokenRegistry
from roster.services.roles import Decision, authorize, role_set
from roster.services.tokens import TokenIssuer

__all__ = [
    "CredentialStore",
    "Decision",
    "LoginRateLimiter",
    "RefreshTokenRegistry",
    "TokenIssuer",
    "authenticate",
    "authorize",
    "role_set",
]
