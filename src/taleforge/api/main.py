"""FastAPI application entry point.

Main application configuration, middleware, and startup lifecycle.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware

from taleforge.api.exceptions import register_exception_handlers
from taleforge.api.routers import auth_router, health_router, stories_router
from taleforge.core.config import Settings, get_settings
from taleforge.core.logging import configure_logging
from taleforge.core.security import TokenService
from taleforge.models.database import close_db, create_tables, init_db

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler.

    Startup:
    - Initialize database connection pool
    - Create missing tables when enabled

    Shutdown:
    - Close database connections
    """
    settings: Settings = app.state.settings

    logger.info("Initializing database connection...")
    init_db(settings.async_database_url, **settings.engine_options)
    if settings.database_create_tables:
        await create_tables()
    logger.info("Database initialized")

    yield

    logger.info("Shutting down...")
    await close_db()
    logger.info("Database connections closed")


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Explicit settings; defaults to the environment-derived ones

    Returns:
        Configured FastAPI application
    """
    settings = settings or get_settings()
    configure_logging(settings.log_level)
    is_production = settings.is_production

    app = FastAPI(
        title=f"{settings.app_name} API",
        description="Register, log in, and generate genre-tagged stories from hints",
        version=settings.app_version,
        docs_url="/docs" if not is_production else None,
        redoc_url="/redoc" if not is_production else None,
        openapi_url="/openapi.json" if not is_production else None,
        lifespan=lifespan,
    )
    app.state.settings = settings
    # Signing key is read once here; rotating it invalidates issued tokens
    app.state.token_service = TokenService.from_settings(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Add compression for responses > 1KB
    app.add_middleware(GZipMiddleware, minimum_size=1000)

    prefix = settings.api_prefix.rstrip("/")
    app.include_router(health_router, prefix=prefix, tags=["health"])
    app.include_router(auth_router, prefix=f"{prefix}/auth", tags=["auth"])
    app.include_router(stories_router, prefix=f"{prefix}/stories", tags=["stories"])

    register_exception_handlers(app)

    return app


# Application instance for uvicorn
app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "taleforge.api.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.environment == "development",
        workers=settings.workers if settings.is_production else 1,
    )
