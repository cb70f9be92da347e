"""FastAPI dependency injection for API endpoints."""

from functools import lru_cache

from app.core.config import get_settings
from app.persistence.pg_repositories import create_repository
from app.persistence.repositories import OrderRecordRepository


@lru_cache
def get_order_repository() -> OrderRecordRepository:
    """Get the order record repository selected by settings (cached)."""
    settings = get_settings()
    if settings.use_memory_persistence:
        return create_repository(session_factory=None, use_postgres=False)

    from app.core.database import get_session_factory
    return create_repository(session_factory=get_session_factory(), use_postgres=True)


def clear_caches() -> None:
    """Clear cached dependencies (for testing)."""
    get_settings.cache_clear()
    get_order_repository.cache_clear()
