"""Argument checks shared by the category tree operations.

Each check raises InvalidArgumentError before any statement is issued,
so a rejected call never leaves partial writes behind.
"""

from __future__ import annotations

from typing import Any

from category_tree.core.database.exceptions import InvalidArgumentError


def check_positive(value: int, name: str) -> int:
    """Require ``value > 0``.

    Args:
        value: Value to check
        name: Argument name used in the error message

    Returns:
        The value unchanged

    Raises:
        InvalidArgumentError: If value is zero or negative
    """
    if value <= 0:
        raise InvalidArgumentError(
            f"{name} must be a positive number, got {value}",
            argument=name,
            value=value,
        )
    return value


def check_not_negative(value: int, name: str) -> int:
    """Require ``value >= 0``.

    Raises:
        InvalidArgumentError: If value is negative
    """
    if value < 0:
        raise InvalidArgumentError(
            f"{name} must not be negative, got {value}",
            argument=name,
            value=value,
        )
    return value


def check_not_none(value: Any, name: str) -> Any:
    """Require a value to be present."""
    if value is None:
        raise InvalidArgumentError(f"{name} must not be None", argument=name)
    return value


def check_effective(rowcount: int) -> int:
    """Require that a write statement affected at least one row.

    Raises:
        InvalidArgumentError: If no row was affected
    """
    if rowcount <= 0:
        raise InvalidArgumentError("no rows were affected by the write")
    return rowcount


__all__ = [
    "check_effective",
    "check_not_negative",
    "check_not_none",
    "check_positive",
]
