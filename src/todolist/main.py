"""FastAPI application factory."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from todolist import __version__
from todolist.api.router import api_router
from todolist.config import settings
from todolist.core.auth import RequestIdMiddleware
from todolist.core.cache import close_redis_pool
from todolist.core.database import Database
from todolist.core.errors import register_exception_handlers
from todolist.core.logging import RequestLoggingMiddleware
from todolist.core.tenancy import TenantCache, TenantResolutionMiddleware


# Configure structlog
structlog.configure(
    processors=[
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        (
            structlog.processors.JSONRenderer()
            if settings.is_production
            else structlog.dev.ConsoleRenderer()
        ),
    ],
    wrapper_class=structlog.make_filtering_bound_logger(
        logging.getLevelNamesMapping().get(settings.log_level.upper(), logging.INFO)
    ),
    context_class=dict,
    logger_factory=structlog.PrintLoggerFactory(),
    cache_logger_on_first_use=True,
)

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler.

    Initializes the database handle on startup and releases it, together
    with the Redis pool, on shutdown.
    """
    database: Database = app.state.database

    logger.info(
        "application_startup",
        app_name=settings.app_name,
        environment=settings.environment,
        main_domain=settings.main_domain,
    )
    await database.initialize()

    yield

    logger.info("application_shutdown")

    await database.shutdown()

    await close_redis_pool()
    logger.info("redis_pool_closed")


def create_app(database: Database | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        database: Database handle to serve from. Built from settings when
            omitted; tests pass one bound to their own engine.

    Returns:
        Configured FastAPI application instance.
    """
    app = FastAPI(
        title=settings.app_name,
        description="Multi-tenant to-do API with subdomain tenant resolution",
        version=__version__,
        debug=settings.debug,
        lifespan=lifespan,
        # Disable docs in production
        docs_url="/docs" if not settings.is_production else None,
        redoc_url="/redoc" if not settings.is_production else None,
        openapi_url="/openapi.json" if not settings.is_production else None,
    )

    app.state.database = database or Database.from_settings(settings)
    app.state.tenant_cache = (
        TenantCache(settings.tenant_cache_ttl_seconds)
        if settings.tenant_cache_ttl_seconds > 0
        else None
    )

    cors_origins = settings.cors_origins
    if settings.is_development and not cors_origins:
        cors_origins = ["http://localhost:3000", "http://localhost:5173"]

    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["Authorization", "Content-Type", "X-Request-ID"],
    )

    # Middleware added last runs first:
    # RequestId -> RequestLogging -> TenantResolution -> routes
    app.add_middleware(TenantResolutionMiddleware)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIdMiddleware)

    # Register exception handlers for RFC 7807 error responses
    register_exception_handlers(app)

    app.include_router(api_router)

    return app
