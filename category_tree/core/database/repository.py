"""Generic persistence helpers shared by feature mappers.

Every method takes the session explicitly and only flushes; committing is
the caller's business. Statements beyond these four are written by the
subclass against the session directly.

Example:
    class CategoryMapper(BaseRepository[Category]):
        def __init__(self) -> None:
            super().__init__(Category)

    category = await CategoryMapper().get(session, 7)
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from sqlalchemy import delete, func, inspect, select

from category_tree.infra.logging import get_lazy_logger

if TYPE_CHECKING:
    from collections.abc import Iterable

    from sqlalchemy.ext.asyncio import AsyncSession

# Deletes above this size are logged at WARNING
BULK_DELETE_THRESHOLD = 10

T = TypeVar("T")


class BaseRepository(Generic[T]):
    """get / count / create / delete_many for one mapped class."""

    __slots__ = ("model", "_logger", "_lazy")

    def __init__(self, model: type[T]) -> None:
        self.model = model
        name = f"repository.{model.__name__}"
        self._logger = logging.getLogger(name)
        self._lazy = get_lazy_logger(name)

    async def get(self, session: AsyncSession, id: Any) -> T | None:  # noqa: A002
        """Load one row by primary key, or None."""
        instance = await session.get(self.model, id)
        self._lazy.debug(lambda: f"get {self.model.__name__}({id}) -> {instance is not None}")
        return instance

    async def count(self, session: AsyncSession) -> int:
        total = (await session.execute(select(func.count()).select_from(self.model))).scalar_one()
        self._lazy.debug(lambda: f"count {self.model.__name__} -> {total}")
        return total

    async def create(self, session: AsyncSession, instance: T) -> T:
        """Insert ``instance`` and return it with generated columns loaded.

        The flush assigns the primary key; the refresh picks up server
        defaults such as the timestamps.
        """
        session.add(instance)
        await session.flush()
        await session.refresh(instance)
        self._lazy.debug(lambda: f"create {self.model.__name__}(id={getattr(instance, 'id', None)})")
        return instance

    async def delete_many(self, session: AsyncSession, ids: Iterable[Any]) -> int:
        """Delete rows by primary key in one statement; returns the row count.

        Matching instances already in the identity map are removed from the
        session as well.
        """
        keys = list(ids)
        if not keys:
            return 0

        (pk,) = inspect(self.model).primary_key
        stmt = (
            delete(self.model)
            .where(pk.in_(keys))
            .execution_options(synchronize_session="fetch")
        )
        deleted = (await session.execute(stmt)).rowcount
        await session.flush()

        if deleted > BULK_DELETE_THRESHOLD:
            self._logger.warning(
                "Bulk delete executed",
                extra={
                    "entity": self.model.__name__,
                    "requested": len(keys),
                    "deleted": deleted,
                    "operation": "db.delete_many",
                },
            )
        else:
            self._lazy.debug(lambda: f"delete_many {self.model.__name__} -> {deleted}")
        return deleted


__all__ = ["BULK_DELETE_THRESHOLD", "BaseRepository"]
