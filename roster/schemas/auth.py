"""Request/response schemas for auth endpoints, plus decoded token claims."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

# Closed set of roles; gates and registration validate against ROLE_VALUES.
Role = Literal["admin", "manager", "viewer"]

ROLE_VALUES: frozenset[str] = frozenset({"admin", "manager", "viewer"})

DEFAULT_ROLE: Role = "viewer"


class RegisterRequest(BaseModel):
    """Registration payload. Format rules are enforced by the credential store."""

    username: str = Field(..., max_length=255, description="3-30 letters or digits")
    password: str = Field(..., max_length=1024, description="At least 8 characters")
    role: str | None = Field(default=None, description="admin, manager or viewer (default viewer)")


class LoginRequest(BaseModel):
    """Credentials for login."""

    username: str = Field(..., max_length=255, description="Username")
    password: str = Field(..., max_length=1024, description="Password")


class UserOut(BaseModel):
    """Public view of a user (never includes the password hash)."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    role: str


class RegisterResponse(BaseModel):
    user: UserOut


class TokenResponse(BaseModel):
    """JWT access token returned by login and refresh."""

    access_token: str = Field(..., description="JWT access token")
    token_type: str = Field(default="bearer", description="Token type")


class LoginResponse(TokenResponse):
    user: UserOut


class LogoutResponse(BaseModel):
    ok: bool = True
    revoked: int | None = Field(
        default=None, description="Number of refresh tokens revoked (logout-all only)"
    )


class AccessTokenClaims(BaseModel):
    """Identity carried inside a verified access token."""

    model_config = ConfigDict(frozen=True)

    user_id: int
    role: Role
    expires_at: datetime


class RefreshTokenClaims(BaseModel):
    """Identity carried inside a verified refresh token."""

    model_config = ConfigDict(frozen=True)

    user_id: int
    token_id: str
    expires_at: datetime
