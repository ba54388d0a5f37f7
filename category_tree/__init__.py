"""Category tree store backed by a closure table.

Example:
    from category_tree import Category, CategoryRepository
    from category_tree.infra.database import get_async_session

    repo = CategoryRepository()
    async with get_async_session() as session:
        fruit = await repo.add(session, Category(name="Fruit", summary="", cover=""), 0)
        await session.commit()
"""

from __future__ import annotations

from category_tree.core.database import InvalidArgumentError, RepositoryError
from category_tree.features.categories import (
    Category,
    CategoryMapper,
    CategoryRepository,
    CategoryService,
)

__version__ = "0.1.0"

__all__ = [
    "Category",
    "CategoryMapper",
    "CategoryRepository",
    "CategoryService",
    "InvalidArgumentError",
    "RepositoryError",
    "__version__",
]
