"""Argument validators for category tree operations."""

from __future__ import annotations

from .checks import check_effective, check_not_negative, check_not_none, check_positive

__all__ = [
    "check_effective",
    "check_not_negative",
    "check_not_none",
    "check_positive",
]
