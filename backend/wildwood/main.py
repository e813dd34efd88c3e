"""
Wildwood Zoo Backend — FastAPI Application Factory
====================================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app() returns a configured FastAPI instance
       bound to one Database handle (from settings, or injected by tests).
Who:   Called by uvicorn (`uvicorn wildwood.main:app`) and by the test suite.

Application Architecture:
    ┌──────────────────────────────────────────────────────┐
    │                    FastAPI App                       │
    │                                                      │
    │  Middleware Chain:                                   │
    │  ┌────────┐ ┌─────────┐ ┌────────────────┐           │
    │  │ Req ID │→│ Logging │→│ Auth rate limit│           │
    │  └────────┘ └─────────┘ └────────────────┘           │
    │                                                      │
    │  Routes (/api/...):                                  │
    │  auth · animals · enclosures · staff · visitors ·    │
    │  tickets · observations · notifications · products · │
    │  inventory · shop · attractions        + /health     │
    │                                                      │
    │  Exception Handlers:                                 │
    │  ZooError→status_code │ RequestValidation→400 │      │
    │  SQLAlchemyError→500  │ Exception→500                │
    └──────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  logging, configuration check, ready banner
    Shutdown: dispose the Database handle (close pooled connections)
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from wildwood import __version__
from wildwood.config import settings
from wildwood.database import Database
from wildwood.exceptions import RateLimitExceededError, ZooError
from wildwood.middleware.logging import RequestLoggingMiddleware
from wildwood.middleware.rate_limit import AuthRateLimitMiddleware
from wildwood.middleware.request_id import RequestIDMiddleware, request_id_var
from wildwood.routes import (
    animals,
    attractions,
    auth,
    enclosures,
    health,
    observations,
    shop,
    staff,
    tickets,
    visitors,
)

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure logging for the entire application.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    Called once during startup, before anything else logs.
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[
            logging.StreamHandler(sys.stdout),  # Docker captures stdout
        ],
        force=True,
    )

    # Reduce noise from third-party libraries
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Startup: logging and configuration check.
    Shutdown: dispose the application's Database handle.
    """
    setup_logging()
    logger.info("=" * 60)
    logger.info("Wildwood Zoo Backend %s starting up...", __version__)

    try:
        settings.validate_required_for_production()
    except ValueError as e:
        # Keep serving: local development runs on the default secret
        logger.warning("Configuration warning: %s", str(e))

    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)
    logger.info("API docs: http://%s:%d/docs", settings.backend_host, settings.backend_port)
    logger.info("=" * 60)

    yield

    logger.info("Wildwood Zoo Backend shutting down...")
    await app.state.db.dispose()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _error(status_code: int, message: str, headers: Optional[dict] = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": message, "request_id": request_id_var.get("")},
        headers=headers,
    )


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exceptions to the `{"error", "request_id"}` envelope.

    Handler hierarchy:
        ZooError subclasses     → their own status_code (400/401/403/404/429/500)
        RequestValidationError  → 400 with the first failing field
        SQLAlchemyError         → 500, generic message
        Exception (fallback)    → 500, generic message

    Security: 500 responses never include SQL, stack traces or context;
    those are logged server-side with the request id.
    """

    @app.exception_handler(ZooError)
    async def handle_zoo_error(request: Request, exc: ZooError):
        rid = request_id_var.get("")
        if exc.status_code >= 500:
            logger.error("[%s] %s: %s | Context: %s", rid, type(exc).__name__, exc.message, exc.context)
        else:
            logger.info("[%s] %s: %s", rid, type(exc).__name__, exc.message)

        headers = None
        if isinstance(exc, RateLimitExceededError):
            headers = {"Retry-After": str(exc.retry_after)}
        return _error(exc.status_code, exc.message, headers)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        """Missing or malformed input is a 400, not FastAPI's default 422."""
        errors = exc.errors()
        message = "Invalid request"
        if errors:
            first = errors[0]
            location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
            message = f"{location}: {first.get('msg', 'invalid value')}" if location else first.get("msg", message)
        logger.info("[%s] Request validation failed: %s", request_id_var.get(""), message)
        return _error(400, message)

    @app.exception_handler(SQLAlchemyError)
    async def handle_sqlalchemy_error(request: Request, exc: SQLAlchemyError):
        logger.error("[%s] Database error: %s", request_id_var.get(""), str(exc), exc_info=True)
        return _error(500, "A database error occurred. Please try again later.")

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.error("[%s] Unexpected error: %s", request_id_var.get(""), str(exc), exc_info=True)
        return _error(500, "An unexpected error occurred. Please try again or contact support.")


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(database: Optional[Database] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        database: Data-access handle to serve requests from. Defaults to one
                  built from settings; tests pass an in-memory SQLite handle.
    """
    app = FastAPI(
        title="Wildwood Zoo API",
        description=(
            "Zoo management API: animals, enclosures, staff, visitors, tickets, "
            "gift shops, observations, notifications and attractions."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )
    app.state.db = database or Database.from_settings(settings)

    # ── Register Middleware ───────────────────────────────────────────────
    # Middleware executes in REVERSE order of addition:
    # RequestID → Logging → AuthRateLimit → GZip → CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID", "Retry-After"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(AuthRateLimitMiddleware)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    app.include_router(auth.router)
    app.include_router(animals.router)
    app.include_router(enclosures.router)
    app.include_router(staff.router)
    app.include_router(visitors.router)
    app.include_router(tickets.router)
    app.include_router(observations.router)
    app.include_router(observations.notifications_router)
    app.include_router(shop.products_router)
    app.include_router(shop.inventory_router)
    app.include_router(shop.shop_router)
    app.include_router(attractions.router)
    app.include_router(health.router)

    return app


# uvicorn expects `wildwood.main:app` to be importable
app = create_app()
