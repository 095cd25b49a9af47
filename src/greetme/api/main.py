"""
FastAPI application factory and configuration.

This module creates the FastAPI application instance,
configures middleware, exception handlers, and lifespan events.
"""

import logging
import traceback
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from psycopg_pool import ConnectionPool
from starlette.exceptions import HTTPException as StarletteHTTPException

from greetme.adapters.repository.memory import InMemoryAccountRepository
from greetme.adapters.repository.postgres import PostgresAccountRepository, run_migrations
from greetme.api.models import HealthResponse
from greetme.api.v1 import router as v1_router
from greetme.config.settings import Settings, get_settings
from greetme.domain.credentials import CredentialManager

logger = logging.getLogger(__name__)

# OpenAPI tags for documentation grouping
tags_metadata = [
    {
        "name": "v1",
        "description": "GreetMe account API - Register, verify and log in to accounts",
    },
]


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    FastAPI lifespan context manager.

    Manages application startup and shutdown:
    - Creates the account store selected by settings (in-memory or PostgreSQL)
    - Runs migrations on startup when PostgreSQL is used
    - Closes the connection pool on shutdown
    """
    settings: Settings = app.state.settings

    logger.info("Starting application...")
    app.state.credentials = CredentialManager(rounds=settings.bcrypt_cost)

    pool = None
    if settings.use_postgres:
        logger.info("Connecting to database...")
        # Create connection pool with explicit sizing
        pool = ConnectionPool(
            conninfo=settings.database_url,
            min_size=settings.pool_min_size,
            max_size=settings.pool_max_size,
            open=True,
        )

        logger.info("Running database migrations...")
        run_migrations(pool)
        app.state.repository = PostgresAccountRepository(pool)
    else:
        logger.info("Using in-memory account store")
        app.state.repository = InMemoryAccountRepository()

    logger.info("Application startup complete (environment: %s)", settings.environment)

    yield

    # Shutdown
    logger.info("Shutting down application...")
    if pool is not None:
        pool.close()
        logger.info("Database connection pool closed")


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Render HTTP errors as {error}; unmatched routes also echo path and method."""
    # Starlette only sets "endpoint" in the scope once a route has matched
    if exc.status_code == status.HTTP_404_NOT_FOUND and "endpoint" not in request.scope:
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "error": "Route not found",
                "path": request.url.path,
                "method": request.method,
            },
        )
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Malformed request bodies are client errors (400), not 422."""
    logger.info("Rejected malformed request to %s (%d error(s))", request.url.path, len(exc.errors()))
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": "Invalid request body."},
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Last-resort handler. Error detail is only returned outside production."""
    logger.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)

    settings: Settings = request.app.state.settings
    if settings.is_production:
        content = {"error": "Internal Server Error"}
    else:
        content = {
            "error": str(exc),
            "stack": "".join(traceback.format_exception(type(exc), exc, exc.__traceback__)),
        }
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=content)


def create_app(settings: Settings | None = None) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        settings: Configuration to use; defaults to the cached environment settings
    """
    settings = settings or get_settings()

    app = FastAPI(
        title="greetme",
        description="GreetMe account API - Registration, email verification and login",
        version="0.1.0",
        openapi_tags=tags_metadata,
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(
            dict.fromkeys([settings.allowed_origin, settings.frontend_url, "http://localhost:8000"])
        ),
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        logger.info("%s %s", request.method, request.url.path)
        return await call_next(request)

    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    # Account routes
    app.include_router(v1_router, prefix="/api")

    @app.get("/health", response_model=HealthResponse)
    async def health_check() -> HealthResponse:
        """Liveness check."""
        return HealthResponse(
            status="OK",
            message="GreetMe API is running",
            timestamp=datetime.now(timezone.utc),
        )

    return app


app = create_app()
