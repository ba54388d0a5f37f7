"""Errors raised by the persistence layer.

Every fault a caller of the category tree can observe surfaces as
InvalidArgumentError: bad ids, missing nodes, incomplete entities and
storage-level rejections alike.
"""

from __future__ import annotations

from typing import Any


class RepositoryError(Exception):
    """A persistence operation failed.

    ``details`` is a flat mapping rendered after the message and suitable for
    the ``extra`` of a log record.
    """

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = dict(details or {})

    def __str__(self) -> str:
        if not self.details:
            return self.message
        rendered = ", ".join(f"{key}={value!r}" for key, value in self.details.items())
        return f"{self.message} ({rendered})"


class InvalidArgumentError(RepositoryError, ValueError):
    """The category tree refused to act on what it was given.

    Raised for non-positive or negative ids and layers, references to
    categories that do not exist, incomplete entities, and writes rejected
    by the database. Storage faults are chained as ``__cause__``.

    Attributes:
        argument: Name of the offending argument, when known.
        value: The rejected value; only reported in ``details`` together
            with ``argument``.
    """

    def __init__(self, message: str, *, argument: str | None = None, value: Any = None):
        self.argument = argument
        self.value = value
        super().__init__(message, {"argument": argument, "value": value} if argument else None)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.message!r}, argument={self.argument!r})"


__all__ = ["InvalidArgumentError", "RepositoryError"]
