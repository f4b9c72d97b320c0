"""Access token check for protected requests (stateless, no registry lookup)."""

from roster.core.errors import AuthError, AuthErrorKind
from roster.schemas.auth import AccessTokenClaims
from roster.services.tokens import TokenIssuer


def extract_bearer_token(authorization: str | None) -> str | None:
    """Return the token from 'Bearer <token>', or None when absent or another scheme."""
    if not authorization:
        return None
    scheme, _, token = authorization.strip().partition(" ")
    if scheme.lower() != "bearer":
        return None
    token = token.strip()
    return token or None


def authenticate(authorization: str | None, issuer: TokenIssuer) -> AccessTokenClaims | AuthError:
    """
    Decode the bearer token in an Authorization header value.

    MISSING_TOKEN when there is no bearer token; INVALID_OR_EXPIRED_TOKEN for
    any signature, shape or expiry failure.
    """
    token = extract_bearer_token(authorization)
    if token is None:
        return AuthError(AuthErrorKind.MISSING_TOKEN)
    return issuer.decode_access_token(token)
