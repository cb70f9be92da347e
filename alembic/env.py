"""
Alembic environment configuration for Arrangement Sync.

Configured to:
- Use DATABASE_URL from app.core.config (asyncpg driver)
- Import all models for autogenerate support
- Support both online and offline migrations
"""

import asyncio
from logging.config import fileConfig

from sqlalchemy import pool
from sqlalchemy.ext.asyncio import async_engine_from_config

from alembic import context

# =============================================================================
# ARRANGEMENT-SPECIFIC CONFIGURATION
# =============================================================================

from app.core.config import get_settings
from app.core.database import Base

# Import all models here so they're registered with Base.metadata
from app.persistence.orm import OrderRecordORM  # noqa: F401

# =============================================================================
# ALEMBIC CONFIGURATION
# =============================================================================

config = context.config

settings = get_settings()
if settings.database_url:
    config.set_main_option("sqlalchemy.url", settings.async_database_url)

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


def run_migrations_offline() -> None:
    """
    Run migrations in 'offline' mode.

    Emits SQL to the script output without connecting.
    """
    url = config.get_main_option("sqlalchemy.url")
    context.configure(
        url=url,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )

    with context.begin_transaction():
        context.run_migrations()


def do_run_migrations(connection) -> None:
    context.configure(connection=connection, target_metadata=target_metadata)

    with context.begin_transaction():
        context.run_migrations()


async def run_migrations_online() -> None:
    """Run migrations in 'online' mode over an async engine."""
    connectable = async_engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )

    async with connectable.connect() as connection:
        await connection.run_sync(do_run_migrations)

    await connectable.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    asyncio.run(run_migrations_online())
