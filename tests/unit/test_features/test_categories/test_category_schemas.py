"""Unit tests for category pydantic schemas."""

from __future__ import annotations

from datetime import UTC, datetime

import pytest
from pydantic import ValidationError

from category_tree.features.categories import (
    Category,
    CategoryCreate,
    CategoryRead,
    CategoryTreeNode,
    CategoryUpdate,
)


@pytest.mark.unit
class TestCategoryCreate:
    def test_defaults_to_top_level(self):
        payload = CategoryCreate(name="Fruit")

        assert payload.parent == 0
        assert payload.summary == ""
        assert payload.cover == ""

    def test_name_is_stripped(self):
        assert CategoryCreate(name="  Citrus\n").name == "Citrus"

    @pytest.mark.parametrize("name", ["", "   ", "\t\n", "x" * 256])
    def test_name_length_bounds(self, name):
        with pytest.raises(ValidationError):
            CategoryCreate(name=name)

    def test_negative_parent_rejected(self):
        with pytest.raises(ValidationError):
            CategoryCreate(name="Fruit", parent=-1)


@pytest.mark.unit
class TestCategoryUpdate:
    def test_only_set_fields_are_dumped(self):
        payload = CategoryUpdate(summary="New summary")

        assert payload.model_dump(exclude_unset=True) == {"summary": "New summary"}

    def test_name_is_stripped_when_given(self):
        assert CategoryUpdate(name=" Lemon ").name == "Lemon"
        assert CategoryUpdate().name is None

    def test_blank_name_rejected(self):
        with pytest.raises(ValidationError):
            CategoryUpdate(name="   ")


@pytest.mark.unit
class TestReadModels:
    @pytest.fixture
    def category(self) -> Category:
        now = datetime(2026, 1, 1, tzinfo=UTC)
        return Category(
            id=5,
            name="Blood Orange",
            summary="Red flesh",
            cover="blood.png",
            created_at=now,
            updated_at=now,
        )

    def test_read_from_orm(self, category):
        read = CategoryRead.model_validate(category)

        assert read.id == 5
        assert read.name == "Blood Orange"
        assert read.created_at == datetime(2026, 1, 1, tzinfo=UTC)

    def test_tree_node_nesting(self, category):
        leaf = CategoryTreeNode.model_validate(category)
        parent = CategoryTreeNode(
            id=4,
            name="Orange",
            summary="",
            cover="",
            created_at=category.created_at,
            updated_at=category.updated_at,
            children=[leaf],
        )

        assert leaf.children == []
        assert parent.model_dump()["children"][0]["name"] == "Blood Orange"
