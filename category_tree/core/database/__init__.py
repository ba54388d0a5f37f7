"""Core database package: declarative base, mixins, repository and errors.

Base Classes and Mixins:
    - Base: Declarative base with index and constraint naming
    - IntegerPKMixin: Auto-increment integer primary key
    - TimestampMixin: created_at, updated_at tracking
    - TimestampedBase: Integer PK + timestamps

Repository:
    - BaseRepository[T]: Generic persistence primitives with explicit session passing

Exceptions:
    - RepositoryError: Base exception for repository operations
    - InvalidArgumentError: The caller-facing error of the category tree
"""

from __future__ import annotations

from .base import (
    NAMING_CONVENTION,
    Base,
    IntegerPKMixin,
    TimestampedBase,
    TimestampMixin,
)
from .exceptions import InvalidArgumentError, RepositoryError
from .repository import BaseRepository

__all__ = [
    "NAMING_CONVENTION",
    "Base",
    "BaseRepository",
    "IntegerPKMixin",
    "InvalidArgumentError",
    "RepositoryError",
    "TimestampMixin",
    "TimestampedBase",
]
