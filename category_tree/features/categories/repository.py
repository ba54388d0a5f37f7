"""Category tree operations over the closure table.

CategoryRepository validates arguments, sequences the mapper's statements
and turns storage faults into InvalidArgumentError. It never commits:
the caller (usually CategoryService) owns the transaction, so a failure
part-way through a mutation is undone by rolling the session back.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import TYPE_CHECKING

from sqlalchemy.exc import SQLAlchemyError

from category_tree.core.database import InvalidArgumentError
from category_tree.core.validators import (
    check_effective,
    check_not_negative,
    check_not_none,
    check_positive,
)
from category_tree.features.categories.mapper import CategoryMapper
from category_tree.features.categories.models import ROOT_ID
from category_tree.infra.logging import get_lazy_logger

if TYPE_CHECKING:
    from collections.abc import Iterator, Sequence

    from sqlalchemy.ext.asyncio import AsyncSession

    from category_tree.features.categories.models import Category


# Standard logger for INFO/WARNING/ERROR
logger = logging.getLogger(__name__)
# Lazy logger for DEBUG (zero overhead when DEBUG disabled)
lazy_logger = get_lazy_logger(__name__)


@contextmanager
def _storage_errors(operation: str) -> Iterator[None]:
    """Re-raise SQLAlchemy failures as InvalidArgumentError."""
    try:
        yield
    except SQLAlchemyError as exc:
        logger.warning(
            "Category write rejected by the database",
            extra={"operation": operation, "error": str(exc)},
        )
        raise InvalidArgumentError(f"{operation} rejected by the database: {exc}") from exc


class CategoryRepository:
    """Hierarchical category store.

    Every category hangs off the implicit root (id 0), which is never
    stored and never returned. Structure is kept in the closure table;
    attributes in the category table.

    Queries:
        - get, get_count, find_children, find_by_ancestor
        - get_parent, get_ancestor, get_path, get_layer

    Mutations:
        - add, update, delete, delete_tree, move_to, move_tree_to
    """

    def __init__(self, mapper: CategoryMapper | None = None) -> None:
        """Initialize with a statement mapper.

        Args:
            mapper: Storage statements (a fresh CategoryMapper if omitted)
        """
        self._mapper = mapper or CategoryMapper()

    @property
    def mapper(self) -> CategoryMapper:
        return self._mapper

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    async def get(self, session: AsyncSession, id: int) -> Category | None:  # noqa: A002
        """Get a category by id.

        Raises:
            InvalidArgumentError: If id is not positive
        """
        check_positive(id, "id")
        return await self._mapper.select_attributes(session, id)

    async def get_count(self, session: AsyncSession, layer: int | None = None) -> int:
        """Count categories, optionally only those on ``layer``.

        Args:
            session: Database session
            layer: Layer to count (top-level categories are layer 1);
                None counts every category

        Raises:
            InvalidArgumentError: If layer is given and not positive
        """
        if layer is None:
            total = await self._mapper.select_count(session)
        else:
            check_positive(layer, "layer")
            total = await self._mapper.select_count_by_layer(session, layer)

        lazy_logger.debug(lambda: f"get_count(layer={layer}) -> {total}")
        return total

    async def find_children(
        self,
        session: AsyncSession,
        id: int,  # noqa: A002
        n: int = 1,
    ) -> list[Category]:
        """Find the categories exactly ``n`` levels below ``id``.

        With ``id == 0`` this is every category on layer ``n``. Unknown
        ids have no children.

        Args:
            session: Database session
            id: Category id, or 0 for the root
            n: Levels down; 1 means direct children

        Returns:
            Categories ordered by id

        Raises:
            InvalidArgumentError: If id is negative or n is not positive
        """
        check_not_negative(id, "id")
        check_positive(n, "n")
        children = await self._mapper.select_sub_layer(session, id, n)

        lazy_logger.debug(lambda: f"find_children({id}, n={n}) -> {[c.id for c in children]}")
        return children

    async def find_by_ancestor(self, session: AsyncSession, ancestor: int) -> list[Category]:
        """Find every category below ``ancestor`` at any depth.

        The ancestor itself is not included; for the root every category
        is returned.

        Raises:
            InvalidArgumentError: If ancestor is negative
        """
        check_not_negative(ancestor, "ancestor")
        descendants = await self._mapper.select_descendant(session, ancestor)

        lazy_logger.debug(lambda: f"find_by_ancestor({ancestor}) -> {len(descendants)} categories")
        return descendants

    async def get_parent(self, session: AsyncSession, id: int) -> int:  # noqa: A002
        """Id of the parent of ``id``; 0 for top-level categories."""
        await self._require_existing(session, id, "id")
        parent = await self._mapper.select_ancestor(session, id, 1)
        return ROOT_ID if parent is None else parent

    async def get_ancestor(self, session: AsyncSession, id: int, distance: int) -> int:  # noqa: A002
        """Id of the ancestor ``distance`` levels above ``id``.

        Climbing exactly ``layer`` levels reaches the root, so 0 is returned.

        Raises:
            InvalidArgumentError: If distance is not positive, the category
                does not exist, or distance is larger than its layer
        """
        check_positive(distance, "distance")
        await self._require_existing(session, id, "id")

        layer = await self._mapper.select_layer(session, id)
        if distance > layer:
            raise InvalidArgumentError(
                f"distance {distance} exceeds layer {layer} of category {id}",
                argument="distance",
                value=distance,
            )
        if distance == layer:
            return ROOT_ID

        ancestor = await self._mapper.select_ancestor(session, id, distance)
        return check_not_none(ancestor, "ancestor")

    async def get_path(self, session: AsyncSession, id: int) -> list[Category]:  # noqa: A002
        """Categories from the top-level ancestor down to ``id``, inclusive."""
        await self._require_existing(session, id, "id")
        return await self._mapper.select_path(session, id)

    async def get_layer(self, session: AsyncSession, id: int) -> int:  # noqa: A002
        """Layer of ``id``; top-level categories are on layer 1."""
        await self._require_existing(session, id, "id")
        return await self._mapper.select_layer(session, id)

    async def get_parent_map(self, session: AsyncSession, ids: Sequence[int]) -> dict[int, int]:
        """Parent id for each of ``ids`` (0 for top-level), in one query."""
        return await self._mapper.select_parent_map(session, ids)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    async def add(self, session: AsyncSession, category: Category, parent: int) -> int:
        """Add ``category`` under ``parent`` (0 for top level).

        Args:
            session: Database session
            category: New category; its id is assigned by the database
            parent: Parent id, or 0 for a top-level category

        Returns:
            The id of the new category

        Raises:
            InvalidArgumentError: If parent is negative or unknown, category
                is None or already carries an id, or the database rejects
                the row
        """
        check_not_none(category, "category")
        if category.id is not None:
            raise InvalidArgumentError(
                "id is assigned by the store",
                argument="id",
                value=category.id,
            )
        check_not_negative(parent, "parent")
        if parent != ROOT_ID and not await self._mapper.contains(session, parent):
            raise InvalidArgumentError(
                "parent category does not exist",
                argument="parent",
                value=parent,
            )

        with _storage_errors("add"):
            await self._mapper.insert(session, category)
            await self._mapper.insert_path(session, category.id, parent)
            await self._mapper.insert_node(session, category.id)

        logger.info(
            "Category added",
            extra={"category_id": category.id, "parent": parent, "operation": "add"},
        )
        return category.id

    async def update(self, session: AsyncSession, category: Category) -> None:
        """Overwrite the attributes of an existing category.

        Only name, summary and cover change; the category keeps its place
        in the tree.

        Raises:
            InvalidArgumentError: If category is None, its id is missing or
                not positive, no row has that id, or the database rejects
                the write
        """
        check_not_none(category, "category")
        check_not_none(category.id, "id")
        check_positive(category.id, "id")

        with _storage_errors("update"):
            rowcount = await self._mapper.update(session, category)
        check_effective(rowcount)

        logger.info("Category updated", extra={"category_id": category.id, "operation": "update"})

    async def delete(self, session: AsyncSession, id: int) -> None:  # noqa: A002
        """Delete a single category; its children move up to its parent.

        Subtrees below the children keep their shape.

        Raises:
            InvalidArgumentError: If the category does not exist
        """
        await self._require_existing(session, id, "id")

        with _storage_errors("delete"):
            parent = await self._mapper.select_ancestor(session, id, 1)
            await self._mapper.collapse_path(session, id)
            await self._mapper.delete(session, id)
            await self._mapper.delete_path(session, id)

        logger.info(
            "Category deleted",
            extra={
                "category_id": id,
                "parent": ROOT_ID if parent is None else parent,
                "operation": "delete",
            },
        )

    async def delete_tree(self, session: AsyncSession, id: int) -> None:  # noqa: A002
        """Delete a category together with all of its descendants.

        Raises:
            InvalidArgumentError: If the category does not exist
        """
        await self._require_existing(session, id, "id")

        with _storage_errors("delete_tree"):
            ids = [id, *await self._mapper.select_descendant_id(session, id)]
            await self._mapper.delete_all(session, ids)
            await self._mapper.delete_paths(session, ids)

        logger.info(
            "Category tree deleted",
            extra={"category_id": id, "deleted": len(ids), "operation": "delete_tree"},
        )
        lazy_logger.debug(lambda: f"delete_tree({id}) removed {ids}")

    async def move_to(self, session: AsyncSession, id: int, target: int) -> None:  # noqa: A002
        """Move one category under ``target``, leaving its children behind.

        The children are re-attached to the old parent exactly as delete()
        would do, then the category alone is linked under ``target``.

        Raises:
            InvalidArgumentError: If the category does not exist, target is
                negative, unknown, or the category itself
        """
        await self._require_existing(session, id, "id")
        await self._require_target(session, target)
        if target == id:
            raise InvalidArgumentError(
                "cannot move a category under itself",
                argument="target",
                value=target,
            )

        with _storage_errors("move_to"):
            await self._mapper.collapse_path(session, id)
            await self._mapper.detach_path(session, id)
            await self._mapper.attach_path(session, id, target)

        logger.info(
            "Category moved",
            extra={"category_id": id, "parent": target, "operation": "move_to"},
        )

    async def move_tree_to(self, session: AsyncSession, id: int, target: int) -> None:  # noqa: A002
        """Move a category and its whole subtree under ``target``.

        Moving under the current parent changes nothing.

        Raises:
            InvalidArgumentError: If the category does not exist, target is
                negative or unknown, or target lies inside the subtree
        """
        await self._require_existing(session, id, "id")
        await self._require_target(session, target)
        if target == id or target in await self._mapper.select_descendant_id(session, id):
            raise InvalidArgumentError(
                "cannot move a category into its own subtree",
                argument="target",
                value=target,
            )

        current = await self._mapper.select_ancestor(session, id, 1)
        if (ROOT_ID if current is None else current) == target:
            lazy_logger.debug(lambda: f"move_tree_to({id}, {target}) -> already there")
            return

        with _storage_errors("move_tree_to"):
            await self._mapper.detach_path(session, id)
            await self._mapper.attach_path(session, id, target)

        logger.info(
            "Category tree moved",
            extra={"category_id": id, "parent": target, "operation": "move_tree_to"},
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    async def _require_existing(self, session: AsyncSession, id: int, name: str) -> None:  # noqa: A002
        if not await self._mapper.contains(session, id):
            raise InvalidArgumentError(f"category {id} does not exist", argument=name, value=id)

    async def _require_target(self, session: AsyncSession, target: int) -> None:
        check_not_negative(target, "target")
        if target != ROOT_ID:
            await self._require_existing(session, target, "target")


_category_repository: CategoryRepository | None = None


def get_category_repository() -> CategoryRepository:
    """Get the shared CategoryRepository instance.

    The repository holds no session state, so one instance serves every
    caller.
    """
    global _category_repository
    if _category_repository is None:
        _category_repository = CategoryRepository()
    return _category_repository


__all__ = [
    "CategoryRepository",
    "get_category_repository",
]
