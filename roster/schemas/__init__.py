"""Pydantic request/response schemas."""

from roster.schemas.auth import (
    ROLE_VALUES,
    AccessTokenClaims,
    LoginRequest,
    LoginResponse,
    LogoutResponse,
    RefreshTokenClaims,
    RegisterRequest,
    RegisterResponse,
    Role,
    TokenResponse,
    UserOut,
)
from roster.schemas.health import HealthResponse
from roster.schemas.player import DeletedResponse, PlayerCreate, PlayerOut

__all__ = [
    "ROLE_VALUES",
    "AccessTokenClaims",
    "DeletedResponse",
    "HealthResponse",
    "LoginRequest",
    "LoginResponse",
    "LogoutResponse",
    "PlayerCreate",
    "PlayerOut",
    "RefreshTokenClaims",
    "RegisterRequest",
    "RegisterResponse",
    "Role",
    "TokenResponse",
    "UserOut",
]
