"""Role gate: pure allow/deny decision on decoded access token claims."""

from collections.abc import Iterable
from enum import Enum

from roster.schemas.auth import ROLE_VALUES, AccessTokenClaims, Role


class Decision(str, Enum):
    ALLOW = "allow"
    DENY = "deny"


def role_set(roles: Iterable[str]) -> frozenset[Role]:
    """Build an allowed-role set, rejecting names outside the closed role set."""
    allowed = frozenset(roles)
    if not allowed:
        raise ValueError("at least one role must be allowed")
    unknown = allowed - ROLE_VALUES
    if unknown:
        raise ValueError(
            f"unknown role(s) {sorted(unknown)}; must be in {sorted(ROLE_VALUES)}"
        )
    return allowed  # type: ignore[return-value]


def authorize(claims: AccessTokenClaims, allowed_roles: frozenset[Role]) -> Decision:
    """ALLOW iff claims.role is in allowed_roles."""
    return Decision.ALLOW if claims.role in allowed_roles else Decision.DENY
