"""Pytest configuration and shared fixtures.

Organization:
    - Environment: settings that keep tests off real infrastructure
    - Database Fixtures: SQLAlchemy engine and session on in-memory SQLite
    - Category Fixtures: mapper, repository, service and a tree builder
"""

from __future__ import annotations

import os
from collections.abc import AsyncGenerator, Awaitable, Callable
from typing import TYPE_CHECKING

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from category_tree.core.settings import clear_settings_cache
from category_tree.features.categories import (
    CategoryMapper,
    CategoryRepository,
    CategoryService,
)

from tests.utils import make_category

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncEngine

# Ensure tests never touch a database file or the console
os.environ.setdefault("DB_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("LOG_CONSOLE_ENABLED", "false")


@pytest.fixture(autouse=True)
def _fresh_settings():
    """Drop cached settings so env changes made by a test stay local to it."""
    clear_settings_cache()
    yield
    clear_settings_cache()


# ============================================================================
# Database Fixtures
# ============================================================================


@pytest.fixture
async def db_engine() -> AsyncGenerator[AsyncEngine]:
    """Create async SQLAlchemy engine with in-memory SQLite.

    Each test gets a fresh database that disappears with the engine.
    """
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", echo=False)

    try:
        yield engine
    finally:
        await engine.dispose()


@pytest.fixture
async def db_session(db_engine: AsyncEngine) -> AsyncGenerator[AsyncSession]:
    """Create async database session with the category tables in place.

    Example:
        async def test_add(db_session, repo):
            category_id = await repo.add(db_session, make_category("Fruit"), 0)
            await db_session.commit()
    """
    from category_tree.core.database.base import Base

    async with db_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(
        db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with session_factory() as session:
        try:
            yield session
        finally:
            await session.rollback()

    async with db_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


# ============================================================================
# Category Fixtures
# ============================================================================


@pytest.fixture
def mapper() -> CategoryMapper:
    return CategoryMapper()


@pytest.fixture
def repo(mapper: CategoryMapper) -> CategoryRepository:
    return CategoryRepository(mapper)


@pytest.fixture
def service(db_session: AsyncSession, repo: CategoryRepository) -> CategoryService:
    return CategoryService(db_session, repo)


@pytest.fixture
def add_category(
    db_session: AsyncSession,
    repo: CategoryRepository,
) -> Callable[[str, int], Awaitable[int]]:
    """Add a named category under a parent and return its id."""

    async def _add(name: str, parent: int = 0) -> int:
        return await repo.add(db_session, make_category(name), parent)

    return _add


@pytest.fixture
async def sample_tree(add_category) -> dict[str, int]:
    """Build a small fixed tree and return name -> id.

        Fruit                 Vegetables
        ├── Citrus            └── Roots
        │   ├── Lemon             └── Carrot
        │   └── Orange
        │       └── Blood Orange
        └── Berries
    """
    ids: dict[str, int] = {}
    ids["Fruit"] = await add_category("Fruit")
    ids["Citrus"] = await add_category("Citrus", ids["Fruit"])
    ids["Lemon"] = await add_category("Lemon", ids["Citrus"])
    ids["Orange"] = await add_category("Orange", ids["Citrus"])
    ids["Blood Orange"] = await add_category("Blood Orange", ids["Orange"])
    ids["Berries"] = await add_category("Berries", ids["Fruit"])
    ids["Vegetables"] = await add_category("Vegetables")
    ids["Roots"] = await add_category("Roots", ids["Vegetables"])
    ids["Carrot"] = await add_category("Carrot", ids["Roots"])
    return ids
