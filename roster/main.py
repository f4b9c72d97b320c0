"""FastAPI application factory. No business logic; only wiring and middleware.

Run with:
  uvicorn roster.main:create_app --factory --port 4000
or:
  python -m roster.main
"""

import logging

from dotenv import load_dotenv

load_dotenv()

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from roster.api import router as api_router
from roster.core.config import Settings
from roster.core.database import create_db_engine, create_session_factory
from roster.core.errors import register_exception_handlers
from roster.services.rate_limit import LoginRateLimiter
from roster.services.tokens import TokenIssuer

logger = logging.getLogger(__name__)

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "no-referrer",
    "Cross-Origin-Opener-Policy": "same-origin",
}


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%SZ",
    )


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the app; every component gets its settings and store from here, not from globals."""
    settings = settings or Settings()
    configure_logging(settings.LOG_LEVEL)

    app = FastAPI(
        title="Roster API",
        version="0.1.0",
        docs_url="/docs" if settings.APP_ENV == "dev" else None,
        redoc_url=None,
    )

    engine = create_db_engine(settings)
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = create_session_factory(engine)
    app.state.token_issuer = TokenIssuer(settings)
    app.state.login_rate_limiter = LoginRateLimiter(
        capacity=settings.LOGIN_RATE_LIMIT_MAX,
        window_seconds=settings.LOGIN_RATE_LIMIT_WINDOW_SECONDS,
    )

    register_exception_handlers(app)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.FRONTEND_ORIGIN] if settings.FRONTEND_ORIGIN else [],
        allow_credentials=True,
        allow_methods=["GET", "POST", "DELETE"],
        allow_headers=["Authorization", "Content-Type"],
    )

    @app.middleware("http")
    async def add_security_headers(request: Request, call_next):
        response = await call_next(request)
        for name, value in SECURITY_HEADERS.items():
            response.headers.setdefault(name, value)
        return response

    app.include_router(api_router, prefix=settings.API_PREFIX)

    @app.get("/")
    def root() -> dict[str, str]:
        """Root route; minimal payload for discovery."""
        return {"message": "Roster API"}

    logger.info("Roster API configured (env=%s, prefix=%s)", settings.APP_ENV, settings.API_PREFIX)
    return app


def main() -> None:
    import uvicorn

    settings = Settings()
    uvicorn.run(create_app(settings), host="0.0.0.0", port=settings.PORT)


if __name__ == "__main__":
    main()
