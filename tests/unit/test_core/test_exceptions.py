"""Unit tests for repository exceptions."""

from __future__ import annotations

import pytest

from category_tree.core.database import InvalidArgumentError, RepositoryError


@pytest.mark.unit
class TestRepositoryError:
    def test_message_only(self):
        error = RepositoryError("boom")

        assert str(error) == "boom"
        assert error.details == {}

    def test_details_rendered(self):
        error = RepositoryError("write failed", {"table": "category_tree", "rows": 0})

        assert str(error) == "write failed (table='category_tree', rows=0)"


@pytest.mark.unit
class TestInvalidArgumentError:
    def test_hierarchy(self):
        error = InvalidArgumentError("bad")

        assert isinstance(error, RepositoryError)
        assert isinstance(error, ValueError)

    def test_argument_details(self):
        error = InvalidArgumentError("id must be a positive number, got 0", argument="id", value=0)

        assert error.details == {"argument": "id", "value": 0}
        assert str(error) == "id must be a positive number, got 0 (argument='id', value=0)"
        assert repr(error) == "InvalidArgumentError('id must be a positive number, got 0', argument='id')"

    def test_value_without_argument_is_not_recorded(self):
        error = InvalidArgumentError("no rows were affected by the write", value=3)

        assert error.details == {}
        assert str(error) == "no rows were affected by the write"

    def test_cause_is_preserved(self):
        original = RuntimeError("constraint failed")

        with pytest.raises(InvalidArgumentError) as exc_info:
            try:
                raise original
            except RuntimeError as exc:
                raise InvalidArgumentError("add rejected by the database") from exc

        assert exc_info.value.__cause__ is original
