"""
Database configuration and session management.

Provides async database sessions and metadata for ORM models.

DATABASE_URL is read from app.core.config (single resolution path). The
engine is only created when the database-backed repository is enabled;
the in-memory repository never touches it.
"""
from functools import lru_cache

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base
import logging

from app.core.config import get_settings

logger = logging.getLogger(__name__)

# Create declarative base for ORM models
Base = declarative_base()


@lru_cache
def get_engine() -> AsyncEngine:
    """Create the async engine from settings (cached)."""
    settings = get_settings()
    if not settings.database_url:
        raise RuntimeError("DATABASE_URL is not configured")

    return create_async_engine(
        settings.async_database_url,
        echo=False,
        pool_pre_ping=True,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )


@lru_cache
def get_session_factory() -> async_sessionmaker:
    """Create async session factory bound to the engine (cached)."""
    return async_sessionmaker(
        get_engine(),
        class_=AsyncSession,
        expire_on_commit=False,
    )


async def init_database():
    """
    Initialize database - create tables if they don't exist.

    Note: In production, use Alembic migrations instead.
    This is mainly for development/testing.
    """
    # Every ORM model must be imported so Base.metadata knows its table.
    from app.persistence.orm import OrderRecordORM  # noqa: F401

    async with get_engine().begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    logger.info("Database initialized")
