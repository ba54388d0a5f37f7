"""Storage statements for the category tree.

CategoryMapper owns every SQL statement the tree issues and nothing else:
no validation, no error translation. Callers pass ids that
CategoryRepository has already checked.

Id lists that feed an UPDATE or DELETE on ``category_tree`` are read
first and bound as literal lists, so no statement selects from the
table it modifies.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import Integer, delete, func, insert, literal, or_, select, true, update
from sqlalchemy.orm import aliased

from category_tree.core.database import BaseRepository
from category_tree.features.categories.models import ROOT_ID, Category, CategoryNode, CategoryPath

if TYPE_CHECKING:
    from collections.abc import Sequence

    from sqlalchemy.ext.asyncio import AsyncSession


class CategoryMapper(BaseRepository[Category]):
    """Closure-table statements over category, category_tree and category_node."""

    __slots__ = ()

    def __init__(self) -> None:
        super().__init__(Category)

    # ------------------------------------------------------------------
    # Attribute reads
    # ------------------------------------------------------------------

    async def select_attributes(self, session: AsyncSession, id: int) -> Category | None:  # noqa: A002
        return await self.get(session, id)

    async def select_count(self, session: AsyncSession) -> int:
        return await self.count(session)

    async def select_count_by_layer(self, session: AsyncSession, layer: int) -> int:
        """Count categories whose layer equals ``layer``."""
        at_layer = (
            select(CategoryPath.descendant)
            .group_by(CategoryPath.descendant)
            .having(func.count() == layer)
            .subquery()
        )
        stmt = select(func.count()).select_from(at_layer)
        return (await session.execute(stmt)).scalar_one()

    async def select_sub_layer(
        self,
        session: AsyncSession,
        id: int,  # noqa: A002
        n: int,
    ) -> list[Category]:
        """Categories exactly ``n`` levels below ``id``, ordered by id.

        Below the implicit root that means categories whose layer is ``n``.
        """
        if id == ROOT_ID:
            at_layer = (
                select(CategoryPath.descendant)
                .group_by(CategoryPath.descendant)
                .having(func.count() == n)
            )
            stmt = select(Category).where(Category.id.in_(at_layer))
        else:
            stmt = (
                select(Category)
                .join(CategoryPath, CategoryPath.descendant == Category.id)
                .where(CategoryPath.ancestor == id, CategoryPath.distance == n)
            )
        result = await session.execute(stmt.order_by(Category.id))
        return list(result.scalars().all())

    async def select_descendant(self, session: AsyncSession, ancestor: int) -> list[Category]:
        """All strict descendants of ``ancestor``; every category for the root."""
        if ancestor == ROOT_ID:
            stmt = select(Category)
        else:
            stmt = (
                select(Category)
                .join(CategoryPath, CategoryPath.descendant == Category.id)
                .where(CategoryPath.ancestor == ancestor, CategoryPath.distance > 0)
            )
        result = await session.execute(stmt.order_by(Category.id))
        return list(result.scalars().all())

    async def select_path(self, session: AsyncSession, id: int) -> list[Category]:  # noqa: A002
        """Categories from the top-level ancestor down to ``id`` inclusive."""
        stmt = (
            select(Category)
            .join(CategoryPath, CategoryPath.ancestor == Category.id)
            .where(CategoryPath.descendant == id)
            .order_by(CategoryPath.distance.desc())
        )
        result = await session.execute(stmt)
        return list(result.scalars().all())

    # ------------------------------------------------------------------
    # Structure reads
    # ------------------------------------------------------------------

    async def select_descendant_id(self, session: AsyncSession, id: int) -> list[int]:  # noqa: A002
        stmt = (
            select(CategoryPath.descendant)
            .where(CategoryPath.ancestor == id, CategoryPath.distance > 0)
            .order_by(CategoryPath.descendant)
        )
        return list((await session.execute(stmt)).scalars().all())

    async def select_ancestor_ids(self, session: AsyncSession, id: int) -> list[int]:  # noqa: A002
        stmt = (
            select(CategoryPath.ancestor)
            .where(CategoryPath.descendant == id, CategoryPath.distance > 0)
            .order_by(CategoryPath.distance)
        )
        return list((await session.execute(stmt)).scalars().all())

    async def select_ancestor(
        self,
        session: AsyncSession,
        id: int,  # noqa: A002
        distance: int,
    ) -> int | None:
        """Id of the ancestor ``distance`` levels above ``id``, or None."""
        stmt = select(CategoryPath.ancestor).where(
            CategoryPath.descendant == id,
            CategoryPath.distance == distance,
        )
        return (await session.execute(stmt)).scalar_one_or_none()

    async def select_parent_map(self, session: AsyncSession, ids: Sequence[int]) -> dict[int, int]:
        """Map each id in ``ids`` to its parent id; top-level ids map to the root."""
        if not ids:
            return {}
        stmt = select(CategoryPath.descendant, CategoryPath.ancestor).where(
            CategoryPath.descendant.in_(ids),
            CategoryPath.distance == 1,
        )
        parents = {descendant: ancestor for descendant, ancestor in await session.execute(stmt)}
        return {i: parents.get(i, ROOT_ID) for i in ids}

    async def select_layer(self, session: AsyncSession, id: int) -> int:  # noqa: A002
        """Number of path rows ending at ``id``; 0 when ``id`` is unknown."""
        stmt = select(func.count()).select_from(CategoryPath).where(CategoryPath.descendant == id)
        return (await session.execute(stmt)).scalar_one()

    async def contains(self, session: AsyncSession, id: int) -> bool:  # noqa: A002
        stmt = select(CategoryNode.id).where(CategoryNode.id == id)
        return (await session.execute(stmt)).scalar_one_or_none() is not None

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    async def insert(self, session: AsyncSession, category: Category) -> Category:
        """Insert the attribute row; the generated id is set on ``category``."""
        return await self.create(session, category)

    async def insert_node(self, session: AsyncSession, id: int) -> None:  # noqa: A002
        await session.execute(insert(CategoryNode).values(id=id))

    async def insert_path(self, session: AsyncSession, id: int, parent: int) -> None:  # noqa: A002
        """Add the closure rows for a new leaf ``id`` under ``parent``.

        Every ancestor-or-self of ``parent`` gains a row to ``id`` one step
        further away, then ``id`` gets its self row.
        """
        if parent != ROOT_ID:
            inherited = select(
                CategoryPath.ancestor,
                literal(id, Integer),
                CategoryPath.distance + 1,
            ).where(CategoryPath.descendant == parent)
            await session.execute(
                insert(CategoryPath).from_select(["ancestor", "descendant", "distance"], inherited)
            )
        await session.execute(insert(CategoryPath).values(ancestor=id, descendant=id, distance=0))

    async def update(self, session: AsyncSession, category: Category) -> int:
        """Overwrite name, summary and cover of ``category.id``.

        Returns:
            Number of rows changed (0 when the id has no attribute row)
        """
        stmt = (
            update(Category)
            .where(Category.id == category.id)
            .values(name=category.name, summary=category.summary, cover=category.cover)
        )
        result = await session.execute(stmt)
        return result.rowcount

    async def delete(self, session: AsyncSession, id: int) -> None:  # noqa: A002
        """Remove the attribute and registry rows of ``id``."""
        await self.delete_all(session, [id])

    async def delete_all(self, session: AsyncSession, ids: Sequence[int]) -> None:
        """Remove the attribute and registry rows of every id in ``ids``."""
        if not ids:
            return
        await self.delete_many(session, ids)
        await session.execute(delete(CategoryNode).where(CategoryNode.id.in_(ids)))

    async def delete_path(self, session: AsyncSession, id: int) -> None:  # noqa: A002
        """Remove every closure row mentioning ``id`` on either side."""
        stmt = delete(CategoryPath).where(
            or_(CategoryPath.ancestor == id, CategoryPath.descendant == id)
        )
        await session.execute(stmt)

    async def delete_paths(self, session: AsyncSession, ids: Sequence[int]) -> None:
        if not ids:
            return
        stmt = delete(CategoryPath).where(
            or_(CategoryPath.ancestor.in_(ids), CategoryPath.descendant.in_(ids))
        )
        await session.execute(stmt)

    async def collapse_path(self, session: AsyncSession, id: int) -> None:  # noqa: A002
        """Splice ``id`` out of its descendants' paths.

        Every descendant moves one level up: paths that ran through ``id``
        shrink by one, and the rows from ``id`` to its descendants go away.
        The self and ancestor rows of ``id`` are left for the caller.
        """
        descendants = await self.select_descendant_id(session, id)
        if not descendants:
            return

        ancestors = await self.select_ancestor_ids(session, id)
        if ancestors:
            shrink = (
                update(CategoryPath)
                .where(
                    CategoryPath.descendant.in_(descendants),
                    CategoryPath.ancestor.in_(ancestors),
                )
                .values(distance=CategoryPath.distance - 1)
                .execution_options(synchronize_session=False)
            )
            await session.execute(shrink)

        unlink = delete(CategoryPath).where(
            CategoryPath.ancestor == id,
            CategoryPath.descendant.in_(descendants),
        )
        await session.execute(unlink)

    async def detach_path(self, session: AsyncSession, id: int) -> None:  # noqa: A002
        """Cut the subtree rooted at ``id`` loose from everything above it.

        Rows inside the subtree survive, so it keeps its internal shape.
        """
        ancestors = await self.select_ancestor_ids(session, id)
        if not ancestors:
            return

        subtree = [id, *await self.select_descendant_id(session, id)]
        stmt = delete(CategoryPath).where(
            CategoryPath.descendant.in_(subtree),
            CategoryPath.ancestor.in_(ancestors),
        )
        await session.execute(stmt)

    async def attach_path(self, session: AsyncSession, id: int, parent: int) -> None:  # noqa: A002
        """Hang a detached subtree rooted at ``id`` under ``parent``.

        Each ancestor-or-self of ``parent`` is linked to each member of the
        subtree with the two partial distances plus one.
        """
        if parent == ROOT_ID:
            return

        above = aliased(CategoryPath)
        below = aliased(CategoryPath)
        links = (
            select(above.ancestor, below.descendant, above.distance + below.distance + 1)
            .select_from(above)
            .join(below, true())
            .where(above.descendant == parent, below.ancestor == id)
        )
        await session.execute(
            insert(CategoryPath).from_select(["ancestor", "descendant", "distance"], links)
        )


__all__ = ["CategoryMapper"]
