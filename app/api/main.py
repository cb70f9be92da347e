"""
Main FastAPI application for Arrangement Sync.

Serves the order and layout records that clients push after local
reordering, and hands them back on the next load.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from app.api.v1 import api_router
from app.api.v1.error_handlers import register_error_handlers
from app.api.v1.routers.health import router as health_router
from app.core.config import Settings, get_settings
from app.core.logging import configure_logging

logger = logging.getLogger(__name__)


# ============================================================================
# STARTUP
# ============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialize storage on startup."""
    settings = get_settings()
    logger.info(f"Starting {settings.app_name} ({settings.environment})")

    if settings.use_memory_persistence:
        logger.info("Using in-memory order records")
    else:
        from app.core.database import init_database

        try:
            await init_database()
        except Exception as e:
            logger.error(f"Database initialization failed: {e}")
            raise

    yield

    logger.info(f"Shutting down {settings.app_name}")


# ============================================================================
# APP FACTORY
# ============================================================================

def create_app(settings: Settings = None) -> FastAPI:
    """Build the application with logging, routers and error handlers wired."""
    settings = settings or get_settings()
    configure_logging(level=settings.log_level, format_type=settings.log_format)

    app = FastAPI(
        title=settings.app_name,
        description="Persisted user arrangements for ordered collections",
        version=settings.app_version,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    register_error_handlers(app)

    app.include_router(health_router)
    app.include_router(api_router)

    @app.get("/")
    async def root():
        """Root endpoint - API information."""
        return {
            "name": settings.app_name,
            "version": settings.app_version,
            "endpoints": {
                "health": "/health",
                "order": "/api/v1/order",
                "layout": "/api/v1/layout",
                "docs": "/docs",
            },
        }

    return app


app = create_app()
