"""Deferred message building for DEBUG logs.

Debug lines in the tree code describe id sets and path rewrites; the
adapter below only calls the message (and any callable argument) once the
level is known to be enabled.
"""

from __future__ import annotations

import logging
from functools import partialmethod
from typing import Any


def _resolve(value: Any) -> Any:
    return value() if callable(value) else value


class LazyLoggerAdapter(logging.LoggerAdapter):
    """LoggerAdapter whose message and arguments may be zero-argument callables.

    Example:
        ```python
        lazy = get_lazy_logger(__name__)
        lazy.debug(lambda: f"descendants of {node}: {sorted(ids)}")
        lazy.debug("moved %s under %s", lambda: node_id, lambda: target)
        ```
    """

    def log(self, level: int, msg: Any, *args: Any, **kwargs: Any) -> None:
        if not self.isEnabledFor(level):
            return
        super().log(level, _resolve(msg), *(_resolve(a) for a in args), **kwargs)

    debug = partialmethod(log, logging.DEBUG)
    info = partialmethod(log, logging.INFO)
    warning = partialmethod(log, logging.WARNING)
    error = partialmethod(log, logging.ERROR)


def get_lazy_logger(name: str, **context: Any) -> LazyLoggerAdapter:
    """Wrap ``logging.getLogger(name)`` in a LazyLoggerAdapter.

    Keyword arguments become the adapter's ``extra`` mapping.
    """
    return LazyLoggerAdapter(logging.getLogger(name), context)
