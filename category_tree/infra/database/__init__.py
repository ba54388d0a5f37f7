"""Database infrastructure: engine factory and session management.

Example:
    from category_tree.infra.database import get_async_session, init_database

    await init_database()
    async with get_async_session() as session:
        ...
"""

from .session import (
    close_database,
    create_engine,
    create_sessionmaker,
    get_async_session,
    get_engine,
    get_sessionmaker,
    init_database,
)

__all__ = [
    "close_database",
    "create_engine",
    "create_sessionmaker",
    "get_async_session",
    "get_engine",
    "get_sessionmaker",
    "init_database",
]
