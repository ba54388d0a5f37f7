"""Per-task log context.

Fields bound with ``set_log_context()`` end up on every record logged from
the same asyncio task, so one unit of work can be tagged (an operation id,
the importing job) without passing the value through each tree call.
"""

from __future__ import annotations

import logging
from contextvars import ContextVar
from types import MappingProxyType
from typing import Any

_EMPTY: MappingProxyType[str, Any] = MappingProxyType({})
_bound: ContextVar[MappingProxyType[str, Any]] = ContextVar("category_tree_log_context", default=_EMPTY)


def set_log_context(**fields: Any) -> None:
    """Bind ``fields`` for the rest of the current task.

    Example:
        ```python
        set_log_context(operation_id="op-17", actor="importer")
        logger.info("Category moved")  # record carries operation_id and actor
        ```
    """
    _bound.set(MappingProxyType({**_bound.get(), **fields}))


def get_log_context() -> dict[str, Any]:
    return dict(_bound.get())


def clear_log_context() -> None:
    _bound.set(_EMPTY)


class ContextInjectingFilter(logging.Filter):
    """Copy the bound fields onto records that do not already carry them."""

    def filter(self, record: logging.LogRecord) -> bool:
        for key, value in _bound.get().items():
            record.__dict__.setdefault(key, value)
        return True
