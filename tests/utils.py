"""Test utilities for the category tree.

Usage:
    from tests.utils import assert_closure_consistent, make_category, parent_map

    category = make_category("Fruit")
    await assert_closure_consistent(session)
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import select

from category_tree.features.categories.models import Category, CategoryNode, CategoryPath

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession


# ============================================================================
# Factories
# ============================================================================


def make_category(name: str, summary: str | None = None, cover: str | None = None) -> Category:
    """Build an unsaved category with filler attributes.

    Example:
        category = make_category("Citrus")
        category_id = await repo.add(session, category, fruit_id)
    """
    return Category(
        name=name,
        summary=summary if summary is not None else f"{name} summary",
        cover=cover if cover is not None else f"covers/{name.lower()}.png",
    )


# ============================================================================
# Table snapshots
# ============================================================================


async def path_rows(session: AsyncSession) -> set[tuple[int, int, int]]:
    """All (ancestor, descendant, distance) rows."""
    result = await session.execute(
        select(CategoryPath.ancestor, CategoryPath.descendant, CategoryPath.distance)
    )
    return {tuple(row) for row in result.all()}


async def parent_map(session: AsyncSession) -> dict[int, int]:
    """Parent of every registered category, 0 for top-level ones."""
    registered = (await session.execute(select(CategoryNode.id))).scalars().all()
    parents = {
        descendant: ancestor
        for ancestor, descendant, distance in await path_rows(session)
        if distance == 1
    }
    return {i: parents.get(i, 0) for i in registered}


# ============================================================================
# Assertion Helpers
# ============================================================================


async def assert_closure_consistent(session: AsyncSession) -> None:
    """Assert the three tables describe one well-formed forest.

    Recomputes the expected path rows from the distance-1 rows and compares
    them with the stored ones, after checking that attribute rows and
    registry rows cover the same ids.

    Raises:
        AssertionError: On the first inconsistency found
    """
    category_ids = set((await session.execute(select(Category.id))).scalars().all())
    node_ids = set((await session.execute(select(CategoryNode.id))).scalars().all())
    assert category_ids == node_ids, f"attribute ids {category_ids} != registry ids {node_ids}"
    assert 0 not in node_ids, "the root must never be stored"

    rows = await path_rows(session)
    referenced = {a for a, _, _ in rows} | {d for _, d, _ in rows}
    assert referenced <= node_ids, f"path rows reference deleted ids {referenced - node_ids}"

    parent_rows: dict[int, list[int]] = {}
    for ancestor, descendant, distance in rows:
        if distance == 1:
            parent_rows.setdefault(descendant, []).append(ancestor)
    for node, parents in parent_rows.items():
        assert len(parents) == 1, f"category {node} has several parents {parents}"

    parents = {node: found[0] for node, found in parent_rows.items()}
    expected: set[tuple[int, int, int]] = set()
    for node in node_ids:
        expected.add((node, node, 0))
        seen = {node}
        current, distance = node, 0
        while current in parents:
            current = parents[current]
            distance += 1
            assert current not in seen, f"cycle through category {current}"
            seen.add(current)
            expected.add((current, node, distance))

    assert rows == expected, (
        f"missing rows {sorted(expected - rows)}, unexpected rows {sorted(rows - expected)}"
    )


def ids_of(categories) -> list[int]:
    """Ids of a list of categories, in order."""
    return [c.id for c in categories]
