"""SQLAlchemy models for the category tree.

Three tables back the tree:

    category       attribute rows (name, summary, cover)
    category_tree  closure table, one row per (ancestor, descendant) pair
    category_node  existence registry, one row per category id

    Tree:  Fruit(1) -> Citrus(2) -> Lemon(3)

    category_tree:
    ancestor | descendant | distance
    ---------|------------|---------
       1     |     1      |    0
       1     |     2      |    1
       1     |     3      |    2
       2     |     2      |    0
       2     |     3      |    1
       3     |     3      |    0

The implicit root (id 0) never appears in any table. A category without
a distance-1 row is top-level, and its layer equals the number of rows
whose descendant it is.
"""

from __future__ import annotations

from sqlalchemy import Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from category_tree.core.database import Base, TimestampedBase

ROOT_ID = 0


class Category(TimestampedBase):
    """Category attributes.

    Structure is not stored here: parent, children and layer are derived
    from the category_tree table.
    """

    __tablename__ = "category"

    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Display name",
    )
    summary: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        comment="Short description of the category",
    )
    cover: Mapped[str] = mapped_column(
        String(1024),
        nullable=False,
        comment="Cover image reference",
    )

    def __repr__(self) -> str:
        """Return category summary for debugging."""
        return f"<Category(id={self.id}, name={self.name!r})>"


class CategoryPath(Base):
    """Closure table row: ``ancestor`` is ``distance`` hops above ``descendant``."""

    __tablename__ = "category_tree"
    __table_args__ = (
        Index("ix_category_tree_descendant", "descendant"),
        Index("ix_category_tree_ancestor_distance", "ancestor", "distance"),
    )

    ancestor: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    descendant: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    distance: Mapped[int] = mapped_column(Integer, nullable=False)

    def __repr__(self) -> str:
        return f"<CategoryPath({self.ancestor} -> {self.descendant}, distance={self.distance})>"


class CategoryNode(Base):
    """Existence marker for a category id."""

    __tablename__ = "category_node"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)


__all__ = [
    "ROOT_ID",
    "Category",
    "CategoryNode",
    "CategoryPath",
]
