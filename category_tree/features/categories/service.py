"""Service layer for the category tree.

Binds a session to CategoryRepository and makes every mutation atomic:
the repository issues several statements per operation, and the unit of
work here commits them together or rolls all of them back.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from category_tree.core.database import InvalidArgumentError
from category_tree.features.categories.models import ROOT_ID, Category
from category_tree.features.categories.repository import (
    CategoryRepository,
    get_category_repository,
)
from category_tree.features.categories.schemas import CategoryRead, CategoryTreeNode
from category_tree.infra.logging import get_lazy_logger

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from sqlalchemy.ext.asyncio import AsyncSession

    from category_tree.features.categories.schemas import CategoryCreate, CategoryUpdate


# Standard logger for INFO/WARNING/ERROR
logger = logging.getLogger(__name__)
# Lazy logger for DEBUG (zero overhead when DEBUG disabled)
lazy_logger = get_lazy_logger(__name__)


class CategoryService:
    """Category tree operations with transaction handling.

    Reads return CategoryRead models. Mutations commit on success and
    roll back on any exception, which is then re-raised unchanged.
    """

    def __init__(
        self,
        session: AsyncSession,
        repo: CategoryRepository | None = None,
    ) -> None:
        """Initialize the category service.

        Args:
            session: Database session for operations
            repo: Category repository (optional, uses default if not provided)
        """
        self._session = session
        self._repo = repo or get_category_repository()

    @asynccontextmanager
    async def _unit_of_work(self, operation: str) -> AsyncIterator[None]:
        try:
            yield
            await self._session.commit()
        except Exception:
            await self._session.rollback()
            logger.warning("Category transaction rolled back", extra={"operation": operation})
            raise

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def get_category(self, category_id: int) -> CategoryRead | None:
        category = await self._repo.get(self._session, category_id)
        return None if category is None else CategoryRead.model_validate(category)

    async def count(self, layer: int | None = None) -> int:
        return await self._repo.get_count(self._session, layer)

    async def list_children(self, category_id: int, n: int = 1) -> list[CategoryRead]:
        """Categories ``n`` levels below ``category_id`` (0 for the root)."""
        children = await self._repo.find_children(self._session, category_id, n)
        return [CategoryRead.model_validate(c) for c in children]

    async def list_descendants(self, category_id: int) -> list[CategoryRead]:
        descendants = await self._repo.find_by_ancestor(self._session, category_id)
        return [CategoryRead.model_validate(c) for c in descendants]

    async def get_path(self, category_id: int) -> list[CategoryRead]:
        """Breadcrumb from the top-level ancestor down to ``category_id``."""
        path = await self._repo.get_path(self._session, category_id)
        return [CategoryRead.model_validate(c) for c in path]

    async def get_tree(self, root: int = ROOT_ID) -> list[CategoryTreeNode]:
        """Build the nested tree below ``root``.

        Uses one query for the categories and one for their parents.

        Args:
            root: Category id whose subtree is built; 0 builds the forest

        Returns:
            The children of ``root``, each with nested children, ordered by id

        Raises:
            InvalidArgumentError: If root is negative
        """
        categories = await self._repo.find_by_ancestor(self._session, root)
        parents = await self._repo.get_parent_map(self._session, [c.id for c in categories])

        nodes = {
            c.id: CategoryTreeNode.model_validate(c, from_attributes=True) for c in categories
        }
        top: list[CategoryTreeNode] = []
        for category_id, node in nodes.items():
            parent = parents[category_id]
            if parent == root:
                top.append(node)
            else:
                nodes[parent].children.append(node)

        lazy_logger.debug(lambda: f"service.get_tree({root}) -> {len(nodes)} nodes, {len(top)} top")
        return top

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    async def create_category(self, payload: CategoryCreate) -> CategoryRead:
        """Create a category under ``payload.parent``.

        Raises:
            InvalidArgumentError: If the parent does not exist
        """
        category = Category(name=payload.name, summary=payload.summary, cover=payload.cover)
        async with self._unit_of_work("create"):
            await self._repo.add(self._session, category, payload.parent)
            created = CategoryRead.model_validate(category)
        return created

    async def update_category(self, category_id: int, payload: CategoryUpdate) -> CategoryRead:
        """Apply the fields set in ``payload`` to an existing category.

        Raises:
            InvalidArgumentError: If the category does not exist
        """
        async with self._unit_of_work("update"):
            category = await self._repo.get(self._session, category_id)
            if category is None:
                raise InvalidArgumentError(
                    f"category {category_id} does not exist",
                    argument="id",
                    value=category_id,
                )
            # The stored instance stays clean; the UPDATE is the only write
            changes = payload.model_dump(exclude_unset=True, exclude_none=True)
            values = Category(
                id=category.id,
                name=changes.get("name", category.name),
                summary=changes.get("summary", category.summary),
                cover=changes.get("cover", category.cover),
            )
            await self._repo.update(self._session, values)
            await self._session.refresh(category)
            updated = CategoryRead.model_validate(category)
        return updated

    async def delete_category(self, category_id: int) -> None:
        """Delete one category; its children move up a level."""
        async with self._unit_of_work("delete"):
            await self._repo.delete(self._session, category_id)

    async def delete_tree(self, category_id: int) -> None:
        async with self._unit_of_work("delete_tree"):
            await self._repo.delete_tree(self._session, category_id)

    async def move_category(
        self,
        category_id: int,
        target: int,
        *,
        with_subtree: bool = True,
    ) -> None:
        """Move a category under ``target`` (0 for the top level).

        Args:
            category_id: Category to move
            target: New parent id
            with_subtree: Move the descendants along (default); otherwise
                they stay behind under the old parent
        """
        async with self._unit_of_work("move"):
            if with_subtree:
                await self._repo.move_tree_to(self._session, category_id, target)
            else:
                await self._repo.move_to(self._session, category_id, target)


__all__ = ["CategoryService"]
