"""Logging infrastructure.

Basic usage:
    import logging
    from category_tree.infra.logging import get_lazy_logger, set_log_context, setup_logging

    setup_logging()
    logger = logging.getLogger(__name__)
    lazy_logger = get_lazy_logger(__name__)

    set_log_context(operation_id="op-1")
    logger.info("Category deleted", extra={"category_id": 4})
    lazy_logger.debug(lambda: f"path rows: {expensive_dump()}")
"""

from category_tree.infra.logging.config import configure_logging, setup_logging, shutdown
from category_tree.infra.logging.context import (
    ContextInjectingFilter,
    clear_log_context,
    get_log_context,
    set_log_context,
)
from category_tree.infra.logging.formatters import JSONFormatter
from category_tree.infra.logging.lazy import LazyLoggerAdapter, get_lazy_logger

__all__ = [
    "ContextInjectingFilter",
    "JSONFormatter",
    "LazyLoggerAdapter",
    "clear_log_context",
    "configure_logging",
    "get_lazy_logger",
    "get_log_context",
    "set_log_context",
    "setup_logging",
    "shutdown",
]
