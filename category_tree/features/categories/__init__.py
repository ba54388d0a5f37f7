"""Hierarchical categories stored as a closure table."""

from __future__ import annotations

from .mapper import CategoryMapper
from .models import ROOT_ID, Category, CategoryNode, CategoryPath
from .repository import CategoryRepository, get_category_repository
from .schemas import CategoryCreate, CategoryRead, CategoryTreeNode, CategoryUpdate
from .service import CategoryService

__all__ = [
    "ROOT_ID",
    "Category",
    "CategoryCreate",
    "CategoryMapper",
    "CategoryNode",
    "CategoryPath",
    "CategoryRead",
    "CategoryRepository",
    "CategoryService",
    "CategoryTreeNode",
    "CategoryUpdate",
    "get_category_repository",
]
