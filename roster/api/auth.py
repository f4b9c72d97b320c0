"""Auth endpoints: register, login, refresh, logout."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Request, Response

from roster.api.deps import (
    CurrentClaims,
    enforce_login_rate_limit,
    get_app_settings,
    get_credential_store,
    get_refresh_registry,
    get_token_issuer,
)
from roster.core.config import Settings
from roster.core.errors import AuthError, AuthErrorKind, ValidationError
from roster.schemas.auth import (
    LoginRequest,
    LoginResponse,
    LogoutResponse,
    RegisterRequest,
    RegisterResponse,
    TokenResponse,
    UserOut,
)
from roster.services.credentials import CredentialStore
from roster.services.refresh_registry import RefreshTokenRegistry
from roster.services.tokens import TokenIssuer

logger = logging.getLogger(__name__)

router = APIRouter()


def _cookie_path(settings: Settings) -> str:
    return f"{settings.API_PREFIX}/auth"


def _set_refresh_cookie(response: Response, token: str, settings: Settings) -> None:
    response.set_cookie(
        key=settings.REFRESH_COOKIE_NAME,
        value=token,
        max_age=settings.REFRESH_TOKEN_EXPIRE_DAYS * 24 * 3600,
        path=_cookie_path(settings),
        httponly=True,
        secure=settings.refresh_cookie_secure,
        samesite="lax",
    )


def _clear_refresh_cookie(response: Response, settings: Settings) -> None:
    response.delete_cookie(
        key=settings.REFRESH_COOKIE_NAME,
        path=_cookie_path(settings),
        httponly=True,
        secure=settings.refresh_cookie_secure,
        samesite="lax",
    )


@router.post(
    "/register",
    response_model=RegisterResponse,
    dependencies=[Depends(enforce_login_rate_limit)],
)
def register(
    body: RegisterRequest,
    store: Annotated[CredentialStore, Depends(get_credential_store)],
) -> RegisterResponse:
    """Create a user. Role defaults to viewer. 400 on bad input, 409 when the username is taken."""
    result = store.register(body.username, body.password, body.role)
    if isinstance(result, (ValidationError, AuthError)):
        raise result
    return RegisterResponse(user=UserOut.model_validate(result))


@router.post(
    "/login",
    response_model=LoginResponse,
    dependencies=[Depends(enforce_login_rate_limit)],
)
def login(
    body: LoginRequest,
    response: Response,
    store: Annotated[CredentialStore, Depends(get_credential_store)],
    registry: Annotated[RefreshTokenRegistry, Depends(get_refresh_registry)],
    issuer: Annotated[TokenIssuer, Depends(get_token_issuer)],
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> LoginResponse:
    """
    Authenticate with username and password.

    Returns an access token in the body (send it as `Authorization: Bearer <token>`)
    and sets the refresh token as an httpOnly cookie scoped to the auth routes.
    """
    result = store.verify(body.username, body.password)
    if isinstance(result, AuthError):
        logger.warning("Failed login for username=%s", body.username)
        raise result
    user = result

    access_token = issuer.issue_access_token(user)
    refresh_token, expires_at = issuer.issue_refresh_token(user)
    registry.store(refresh_token, user.id, expires_at)

    _set_refresh_cookie(response, refresh_token, settings)
    logger.info("Login user_id=%s role=%s", user.id, user.role)
    return LoginResponse(
        access_token=access_token,
        token_type="bearer",
        user=UserOut.model_validate(user),
    )


@router.post("/refresh", response_model=TokenResponse)
def refresh(
    request: Request,
    store: Annotated[CredentialStore, Depends(get_credential_store)],
    registry: Annotated[RefreshTokenRegistry, Depends(get_refresh_registry)],
    issuer: Annotated[TokenIssuer, Depends(get_token_issuer)],
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> TokenResponse:
    """
    Mint a new access token from the refresh cookie.

    The refresh token must verify against the refresh secret and still be in
    the registry. It is not rotated: the same cookie stays usable until it
    expires or is revoked by logout.
    """
    invalid = AuthError(AuthErrorKind.INVALID_REFRESH_TOKEN)
    token = request.cookies.get(settings.REFRESH_COOKIE_NAME)
    if not token:
        raise invalid
    claims = issuer.decode_refresh_token(token)
    if isinstance(claims, AuthError):
        raise claims
    if not registry.exists(token):
        raise invalid
    user = store.get(claims.user_id)
    if user is None:
        raise invalid
    return TokenResponse(access_token=issuer.issue_access_token(user), token_type="bearer")


@router.post("/logout", response_model=LogoutResponse, response_model_exclude_none=True)
def logout(
    request: Request,
    response: Response,
    claims: CurrentClaims,
    registry: Annotated[RefreshTokenRegistry, Depends(get_refresh_registry)],
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> LogoutResponse:
    """Revoke the refresh token in the cookie (if any) and clear the cookie."""
    token = request.cookies.get(settings.REFRESH_COOKIE_NAME)
    if token:
        registry.revoke(token)
    _clear_refresh_cookie(response, settings)
    logger.info("Logout user_id=%s", claims.user_id)
    return LogoutResponse(ok=True)


@router.post("/logout-all", response_model=LogoutResponse)
def logout_all(
    response: Response,
    claims: CurrentClaims,
    registry: Annotated[RefreshTokenRegistry, Depends(get_refresh_registry)],
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> LogoutResponse:
    """Revoke every refresh token of the current user (log out everywhere)."""
    revoked = registry.revoke_all(claims.user_id)
    _clear_refresh_cookie(response, settings)
    return LogoutResponse(ok=True, revoked=revoked)
