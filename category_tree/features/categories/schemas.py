"""Pydantic schemas for category payloads and read models."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class CategoryBase(BaseModel):
    """Shared attributes for category payloads."""

    name: str = Field(
        ...,
        min_length=1,
        max_length=255,
        description="Display name (e.g., 'Citrus')",
    )
    summary: str = Field(
        default="",
        description="Short description of the category",
    )
    cover: str = Field(
        default="",
        max_length=1024,
        description="Cover image reference (URL or storage key)",
    )

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, v: Any) -> Any:
        """Strip surrounding whitespace before the length bounds apply."""
        return v.strip() if isinstance(v, str) else v


class CategoryCreate(CategoryBase):
    """Payload used when creating a category."""

    parent: int = Field(
        default=0,
        ge=0,
        description="Parent category id; 0 places the category at the top level",
    )


class CategoryUpdate(BaseModel):
    """Partial update; omitted fields keep their stored value."""

    name: str | None = Field(default=None, min_length=1, max_length=255)
    summary: str | None = None
    cover: str | None = Field(default=None, max_length=1024)

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, v: Any) -> Any:
        return v.strip() if isinstance(v, str) else v


class CategoryRead(CategoryBase):
    """Category as stored."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    created_at: datetime
    updated_at: datetime


class CategoryTreeNode(CategoryRead):
    """Category with its nested children, ordered by id."""

    children: list[CategoryTreeNode] = Field(default_factory=list)


CategoryTreeNode.model_rebuild()


__all__ = [
    "CategoryBase",
    "CategoryCreate",
    "CategoryRead",
    "CategoryTreeNode",
    "CategoryUpdate",
]
