"""FastAPI application factory."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from rolegate import __version__
from rolegate.api.router import api_router
from rolegate.config import settings
from rolegate.core.auth import IdentityMiddleware, RequestIdMiddleware
from rolegate.core.database import async_engine
from rolegate.core.errors import register_exception_handlers
from rolegate.core.logging import RequestLoggingMiddleware, configure_logging


configure_logging(settings.log_level, json_logs=settings.is_production)

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler.

    Handles startup and shutdown events.
    """
    # Startup
    logger.info(
        "application_startup",
        app_name=settings.app_name,
        environment=settings.environment,
        identity_header=settings.identity_header,
    )

    yield

    # Shutdown
    logger.info("application_shutdown")

    # Close database connection pool
    await async_engine.dispose()
    logger.info("database_pool_closed")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application instance.
    """
    app = FastAPI(
        title=settings.app_name,
        description="Role-based access control with inherited role permissions",
        version=__version__,
        debug=settings.debug,
        lifespan=lifespan,
        # Disable docs in production
        docs_url="/docs" if not settings.is_production else None,
        redoc_url="/redoc" if not settings.is_production else None,
        openapi_url="/openapi.json" if not settings.is_production else None,
    )

    # Configure CORS
    cors_origins = settings.cors_origins
    if settings.is_development and not cors_origins:
        cors_origins = ["http://localhost:3000", "http://localhost:5173"]

    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "X-Request-ID", settings.identity_header],
    )

    # Middleware added last runs first: request ID, then identity, then logging
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(IdentityMiddleware)
    app.add_middleware(RequestIdMiddleware)

    # Register exception handlers for RFC 7807 error responses
    register_exception_handlers(app)

    # Include API router
    app.include_router(api_router)

    return app
