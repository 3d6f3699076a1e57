from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from starlette.middleware.sessions import SessionMiddleware

from travel_packages.api.routes.auth import router as auth_router
from travel_packages.api.routes.packages import router as packages_router
from travel_packages.core.errors import AppError, BackendUnavailableError, NotFoundError
from travel_packages.core.logging_config import configure_logging
from travel_packages.core.settings import Settings, get_settings
from travel_packages.db.session import AppContext, get_db

logger = logging.getLogger(__name__)

openapi_tags = [
    {"name": "System", "description": "Health checks and system endpoints."},
    {"name": "Auth", "description": "Signup, login, logout and session-gated routes."},
    {"name": "Packages", "description": "Read-only travel package catalog."},
]

GENERIC_ERROR_MESSAGE = "Something went wrong!"


async def _handle_app_error(request: Request, exc: AppError):
    if isinstance(exc, BackendUnavailableError):
        # Log the chained store error; the client only gets the generic message.
        logger.error("Backend failure on %s %s", request.method, request.url.path, exc_info=exc)
        return PlainTextResponse(GENERIC_ERROR_MESSAGE, status_code=exc.status_code)
    if exc.status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        logger.warning("%s on %s %s: %s", type(exc).__name__, request.method, request.url.path, exc.message)
        return PlainTextResponse(GENERIC_ERROR_MESSAGE, status_code=exc.status_code)
    if isinstance(exc, NotFoundError):
        return JSONResponse({"message": exc.message}, status_code=exc.status_code)
    return PlainTextResponse(exc.message, status_code=exc.status_code)


async def _handle_unexpected_error(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return PlainTextResponse(GENERIC_ERROR_MESSAGE, status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)


def _install_origin_gate(app: FastAPI, allowed_origins: tuple[str, ...]) -> None:
    """Reject requests whose Origin header is not on the allow-list."""
    allowed = frozenset(allowed_origins)

    @app.middleware("http")
    async def origin_gate(request: Request, call_next):
        origin = request.headers.get("origin")
        if origin is not None and origin.rstrip("/") not in allowed:
            logger.warning("Rejected request from origin %s", origin)
            return PlainTextResponse("Origin not allowed", status_code=status.HTTP_403_FORBIDDEN)
        return await call_next(request)


# PUBLIC_INTERFACE
def create_app(settings: Settings | None = None) -> FastAPI:
    """This is a public function.

    Build the application. The database context is opened on startup and
    closed on shutdown; nothing is created at import time.

    Args:
        settings: Explicit settings; loaded from the environment when omitted.

    Returns:
        FastAPI: The configured application.
    """
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        context = AppContext.open(settings)
        app.state.context = context
        logger.info("Travel packages API starting (env=%s)", settings.environment)
        try:
            yield
        finally:
            context.close()
            logger.info("Travel packages API stopped")

    app = FastAPI(
        title="Travel Packages Backend API",
        description="Backend APIs for user sessions and the travel package catalog.",
        version="0.1.0",
        openapi_tags=openapi_tags,
        lifespan=lifespan,
    )

    # Starlette runs the last-added middleware first: origin gate, CORS, then sessions.
    app.add_middleware(
        SessionMiddleware,
        secret_key=settings.session_secret,
        session_cookie=settings.session_cookie_name,
        max_age=settings.session_max_age,
        same_site=settings.session_same_site,
        https_only=settings.is_production,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    _install_origin_gate(app, settings.cors_origins)

    app.add_exception_handler(AppError, _handle_app_error)
    app.add_exception_handler(Exception, _handle_unexpected_error)

    # Register API routers
    app.include_router(auth_router)
    app.include_router(packages_router)

    app.add_api_route(
        "/api/health",
        api_health_check,
        methods=["GET"],
        tags=["System"],
        summary="Liveness check",
        description="Answers without touching the database; see /health/db for store connectivity.",
        operation_id="api_health_check",
    )
    app.add_api_route(
        "/health/db",
        db_health_check,
        methods=["GET"],
        tags=["System"],
        summary="Database connectivity check",
        description="Runs a trivial SELECT 1 against the database to verify connectivity.",
    )
    return app


def api_health_check():
    """Report that the process is up and serving requests."""
    return {"status": "ok"}


def db_health_check(db: Session = Depends(get_db)):
    """Database connectivity check.

    Args:
        db: SQLAlchemy Session (FastAPI dependency).

    Returns:
        dict: Connection status, or a 503 response if the database is unreachable.
    """
    try:
        db.execute(text("SELECT 1"))
        return {"database": "ok"}
    except SQLAlchemyError:
        # Report DB as unavailable without crashing the app or leaking detail.
        logger.warning("Database health check failed", exc_info=True)
        return JSONResponse({"database": "unavailable"}, status_code=status.HTTP_503_SERVICE_UNAVAILABLE)
