"""Error taxonomy for the auth core and its HTTP rendering.

Verification functions return an ``AuthError`` or ``ValidationError`` instance
as a result value instead of raising it; the API layer raises the value and
the handlers registered by ``register_exception_handlers`` render it.
Storage failures are raised as ``StorageError`` and shown to clients only as a
generic 500.
"""

import logging
from enum import Enum
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class AuthErrorKind(str, Enum):
    INVALID_CREDENTIALS = "invalid_credentials"
    DUPLICATE_USERNAME = "duplicate_username"
    MISSING_TOKEN = "missing_token"
    INVALID_OR_EXPIRED_TOKEN = "invalid_or_expired_token"
    FORBIDDEN = "forbidden"
    INVALID_REFRESH_TOKEN = "invalid_refresh_token"


_STATUS_BY_KIND: dict[AuthErrorKind, int] = {
    AuthErrorKind.INVALID_CREDENTIALS: 401,
    AuthErrorKind.DUPLICATE_USERNAME: 409,
    AuthErrorKind.MISSING_TOKEN: 401,
    AuthErrorKind.INVALID_OR_EXPIRED_TOKEN: 401,
    AuthErrorKind.FORBIDDEN: 403,
    AuthErrorKind.INVALID_REFRESH_TOKEN: 401,
}

_MESSAGE_BY_KIND: dict[AuthErrorKind, str] = {
    AuthErrorKind.INVALID_CREDENTIALS: "Invalid credentials",
    AuthErrorKind.DUPLICATE_USERNAME: "Username already taken",
    AuthErrorKind.MISSING_TOKEN: "Missing token",
    AuthErrorKind.INVALID_OR_EXPIRED_TOKEN: "Invalid or expired token",
    AuthErrorKind.FORBIDDEN: "Forbidden",
    AuthErrorKind.INVALID_REFRESH_TOKEN: "Invalid refresh token",
}


class AuthError(Exception):
    """Authentication or authorization failure of a fixed kind."""

    def __init__(self, kind: AuthErrorKind) -> None:
        self.kind = kind
        self.status_code = _STATUS_BY_KIND[kind]
        self.message = _MESSAGE_BY_KIND[kind]
        super().__init__(self.message)

    def __eq__(self, other: object) -> bool:
        return isinstance(other, AuthError) and other.kind == self.kind

    def __hash__(self) -> int:
        return hash(self.kind)

    def __repr__(self) -> str:
        return f"AuthError({self.kind.value})"


class ValidationError(Exception):
    """Malformed input (400). errors is a list of {field, message} dicts."""

    status_code = 400

    def __init__(self, errors: list[dict[str, str]]) -> None:
        self.errors = errors
        super().__init__("; ".join(f"{e['field']}: {e['message']}" for e in errors))


class StorageError(Exception):
    """Persistence failure in the record store. Detail is logged, never returned."""

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        self.message = message
        self.cause = cause
        super().__init__(message)


class RateLimitExceeded(Exception):
    """Too many login or registration attempts from one client (429)."""

    status_code = 429

    def __init__(self, retry_after_seconds: int) -> None:
        self.retry_after_seconds = retry_after_seconds
        super().__init__("Too many requests, try again later.")


def _error_body(code: str, detail: Any) -> dict[str, Any]:
    return {"error": code, "detail": detail}


async def _auth_error_handler(request: Request, exc: AuthError) -> JSONResponse:
    headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(exc.kind.value, exc.message),
        headers=headers,
    )


async def _validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    return JSONResponse(status_code=400, content={"error": "validation_error", "errors": exc.errors})


async def _request_validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    errors = [
        {
            "field": ".".join(str(p) for p in err.get("loc", ()) if p != "body"),
            "message": err.get("msg", "invalid"),
        }
        for err in exc.errors()
    ]
    return JSONResponse(status_code=400, content={"error": "validation_error", "errors": errors})


async def _storage_error_handler(request: Request, exc: StorageError) -> JSONResponse:
    logger.error(
        "Storage failure on %s %s: %s",
        request.method,
        request.url.path,
        exc.message,
        exc_info=exc.cause or exc,
    )
    return JSONResponse(status_code=500, content=_error_body("server_error", "Internal server error"))


async def _rate_limit_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    return JSONResponse(
        status_code=429,
        content=_error_body("rate_limited", str(exc)),
        headers={"Retry-After": str(exc.retry_after_seconds)},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AuthError, _auth_error_handler)
    app.add_exception_handler(ValidationError, _validation_error_handler)
    app.add_exception_handler(RequestValidationError, _request_validation_error_handler)
    app.add_exception_handler(StorageError, _storage_error_handler)
    app.add_exception_handler(RateLimitExceeded, _rate_limit_handler)
