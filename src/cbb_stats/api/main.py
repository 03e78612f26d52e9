"""
FastAPI application for CBB Stats API.

Serves season, rolling and percentile-ranked player stat lines computed
per request from stored game logs, plus raw game logs and team results.
"""

import logging
import time
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any

import msgspec
from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from starlette.status import HTTP_500_INTERNAL_SERVER_ERROR, HTTP_503_SERVICE_UNAVAILABLE

from ..core.config import get_settings
from ..core.errors import InvalidWindowError
from .errors import APIError, api_error_handler, invalid_window_handler
from .routers import games, stats

logger = logging.getLogger(__name__)


class MSGSpecResponse(Response):
    """Custom response class using msgspec for fast JSON serialization."""

    media_type = "application/json"

    def render(self, content: Any) -> bytes:
        """
        Serialize content using msgspec.

        Dates in aggregates and game logs encode as ISO strings.

        Args:
            content: Content to serialize

        Returns:
            Serialized JSON bytes
        """
        if content is None:
            return b""
        return msgspec.json.encode(content)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application lifecycle.

    Startup:
    - Open the database connection pool when a database is configured

    Shutdown:
    - Close database connections
    """
    logger.info("Starting CBB Stats API...")
    settings = get_settings()

    if settings.db_url:
        try:
            from .dependencies import get_db

            get_db().open()
        except Exception as e:
            logger.error("Failed to initialize database: %s", e)
            # Don't fail startup, let requests handle connection errors
    else:
        logger.warning("DATABASE_URL not set; data endpoints will return 503")

    yield

    logger.info("Shutting down CBB Stats API...")
    try:
        from .dependencies import close_db

        close_db()
    except Exception as e:
        logger.warning("Error closing database connections: %s", e)


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application instance
    """
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="College basketball player aggregates and percentile rankings",
        version=settings.app_version,
        default_response_class=MSGSpecResponse,
        docs_url=settings.api_docs_url,
        redoc_url=settings.api_redoc_url,
        lifespan=lifespan,
    )

    # CORS middleware - allows web clients to access the API
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_methods=settings.cors_allow_methods,
        allow_headers=settings.cors_allow_headers,
        allow_credentials=settings.cors_allow_credentials,
        expose_headers=settings.cors_expose_headers,
    )

    # GZip compression middleware - compresses responses > 1KB
    app.add_middleware(GZipMiddleware, minimum_size=1000)

    @app.middleware("http")
    async def add_performance_headers(request: Request, call_next):
        """Add timing header; computed responses are never cacheable."""
        start_time = time.time()
        response = await call_next(request)
        process_time = (time.time() - start_time) * 1000
        response.headers["X-Process-Time"] = f"{process_time:.2f}ms"

        if request.url.path.startswith("/api/") and "Cache-Control" not in response.headers:
            response.headers["Cache-Control"] = "no-store"

        return response

    # Register custom API error handlers for consistent error responses
    app.add_exception_handler(APIError, api_error_handler)
    app.add_exception_handler(InvalidWindowError, invalid_window_handler)

    # Global exception handler
    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Handle unexpected exceptions with consistent format."""
        logger.error("Unhandled exception: %s", exc, exc_info=True)
        # Never leak exception details in production, regardless of DEBUG flag
        show_detail = settings.debug and settings.environment != "production"
        return JSONResponse(
            status_code=HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "error": {
                    "code": "INTERNAL_ERROR",
                    "message": "An internal error occurred",
                    "detail": str(exc) if show_detail else None,
                }
            },
        )

    # Health check endpoints
    @app.get("/health", tags=["health"])
    async def health_check():
        """Basic health check endpoint."""
        return {"status": "healthy", "timestamp": datetime.now(tz=timezone.utc).isoformat()}

    @app.get("/health/db", tags=["health"])
    def health_check_db():
        """Database connectivity health check."""
        from .dependencies import get_db

        try:
            db = get_db()
            db.fetchone("SELECT 1 AS test")
            return {
                "status": "healthy",
                "database": "connected",
                "timestamp": datetime.now(tz=timezone.utc).isoformat(),
            }
        except Exception as e:
            logger.error("Database health check failed: %s", e)
            return JSONResponse(
                status_code=HTTP_503_SERVICE_UNAVAILABLE,
                content={
                    "status": "unhealthy",
                    "database": "disconnected",
                    "error": "Database connection check failed",
                    "timestamp": datetime.now(tz=timezone.utc).isoformat(),
                },
            )

    @app.get("/", tags=["root"])
    async def root():
        """Root endpoint with API information."""
        return {
            "name": settings.app_name,
            "version": settings.app_version,
            "status": "running",
            "docs": settings.api_docs_url,
        }

    # Stat lines and percentile config
    app.include_router(stats.router, prefix="/api", tags=["stats"])
    # Raw game logs and team results
    app.include_router(games.router, prefix="/api", tags=["games"])

    return app


# Create app instance
app = create_app()
