"""
FastAPI Application Entry Point.

This is the main application file for the Trip Log Backend.
"""

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, HTTPException
from fastapi.exceptions import RequestValidationError
from triplog.app.core.config import settings
from triplog.app.api.v1.router import router as api_v1_router
from triplog.app.core.observability import ObservabilityMiddleware, configure_logging
from triplog.app.core.reliability import CircuitBreaker
from triplog.app.core.redis_client import close_redis, ping_redis
from triplog.app.db.session import init_models
from triplog.app.repositories.sheets import SheetsTripRepository
from triplog.app.repositories.store import TripStore
from triplog.app.core.exceptions import (
    AppException,
    app_exception_handler,
    http_exception_handler,
    validation_exception_handler,
    generic_exception_handler
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for application startup/shutdown.

    1. Creates database tables on startup.
    2. Opens the spreadsheet client when that backend is configured.
    3. Closes it and the Redis connection on shutdown.
    """
    configure_logging()

    await init_models()

    if settings.persistence_backend == "sheets":
        if not settings.sheets_api_url:
            raise RuntimeError("SHEETS_API_URL must be set when PERSISTENCE_BACKEND=sheets")
        app.state.sheets_repository = SheetsTripRepository(
            settings.sheets_api_url,
            timeout=settings.sheets_timeout_seconds,
            breaker=CircuitBreaker(
                name="sheets",
                failure_threshold=settings.sheets_failure_threshold,
                reset_timeout=settings.sheets_reset_timeout,
            ),
        )
    logger.info("%s started with '%s' persistence", settings.app_name, settings.persistence_backend)

    yield

    repository = getattr(app.state, "sheets_repository", None)
    if repository is not None:
        await repository.aclose()
    await close_redis()


# Initialize FastAPI application
app = FastAPI(
    title=settings.app_name,
    version=settings.api_version,
    debug=settings.debug,
    description="Trip logging and approval workflow for a trucking operation",
    lifespan=lifespan,
)

# One trip mirror per process
app.state.trip_store = TripStore()

app.add_middleware(ObservabilityMiddleware)

# Register global exception handlers
app.add_exception_handler(AppException, app_exception_handler)
app.add_exception_handler(HTTPException, http_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(Exception, generic_exception_handler)


@app.get("/health", tags=["Health"])
async def health_check():
    """
    Health check endpoint.

    Returns:
        dict: Status and application information
    """
    return {
        "status": "healthy",
        "token_store": "up" if await ping_redis() else "down",
        "app_name": settings.app_name,
        "version": settings.api_version,
        "persistence_backend": settings.persistence_backend,
    }


# Include API v1 router
app.include_router(api_v1_router, prefix=f"/{settings.api_version}")


@app.get("/", tags=["Root"])
async def root():
    """
    Root endpoint.

    Returns:
        dict: Welcome message and API documentation links
    """
    return {
        "message": "Welcome to Trip Log Backend API",
        "docs": "/docs",
        "health": "/health",
    }
