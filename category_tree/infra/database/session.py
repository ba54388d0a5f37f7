"""Async engine and session management.

The engine is created lazily from DatabaseSettings and cached, so importing
this module never opens a connection.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from functools import lru_cache
from typing import TYPE_CHECKING

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.ext.asyncio import create_async_engine as _create_async_engine

from category_tree.core.settings import DatabaseSettings, get_db_settings

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

    from sqlalchemy.ext.asyncio import AsyncEngine

logger = logging.getLogger(__name__)


def create_engine(settings: DatabaseSettings | None = None) -> AsyncEngine:
    """Create an async engine for the configured database.

    Args:
        settings: Database settings; loaded via get_db_settings() when omitted.

    Returns:
        New AsyncEngine
    """
    db_settings = settings or get_db_settings()
    return _create_async_engine(db_settings.url, **db_settings.engine_kwargs())


def create_sessionmaker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Session factory bound to ``engine``."""
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


@lru_cache(maxsize=1)
def get_engine() -> AsyncEngine:
    """Get the process-wide engine built from cached settings."""
    return create_engine()


@lru_cache(maxsize=1)
def get_sessionmaker() -> async_sessionmaker[AsyncSession]:
    """Get the process-wide session factory."""
    return create_sessionmaker(get_engine())


@asynccontextmanager
async def get_async_session() -> AsyncGenerator[AsyncSession]:
    """Get async database session.

    The caller decides when to commit; uncommitted work is rolled back
    when the session closes.

    Example:
        async with get_async_session() as session:
            category_id = await repo.add(session, category, 0)
            await session.commit()
    """
    async with get_sessionmaker()() as session:
        yield session


async def init_database(engine: AsyncEngine | None = None) -> None:
    """Check connectivity and create the category tables when configured.

    Table creation uses ``checkfirst`` and is therefore idempotent.

    Args:
        engine: Engine to initialise; defaults to get_engine().
    """
    from category_tree.core.database.base import Base
    from category_tree.features.categories import models  # noqa: F401

    engine = engine or get_engine()
    db_settings = get_db_settings()
    url = engine.url.render_as_string(hide_password=True)
    try:
        async with engine.begin() as conn:
            await conn.execute(text("SELECT 1"))
            if db_settings.create_schema:
                await conn.run_sync(Base.metadata.create_all, checkfirst=True)
    except Exception as e:
        logger.error(
            "Failed to initialize database",
            extra={"url": url, "error": str(e)},
        )
        raise

    logger.info(
        "Database initialized",
        extra={"url": url, "schema": db_settings.create_schema},
    )


async def close_database() -> None:
    """Dispose the cached engine and forget the cached factories."""
    if get_engine.cache_info().currsize == 0:
        return

    logger.info("Closing database connection")
    await get_engine().dispose()
    get_sessionmaker.cache_clear()
    get_engine.cache_clear()
