"""Root logger wiring.

Records go through a single QueueHandler on the root logger; a
QueueListener thread hands them to the console and rotating-file handlers,
so a slow stream never stalls the event loop running the repository.
"""

from __future__ import annotations

import atexit
import logging
import logging.config
from logging.handlers import QueueHandler, QueueListener, RotatingFileHandler
from pathlib import Path
from queue import SimpleQueue
from typing import TYPE_CHECKING, Any

from category_tree.infra.logging.context import ContextInjectingFilter
from category_tree.infra.logging.formatters import JSONFormatter

if TYPE_CHECKING:
    from category_tree.core.settings.logs import LoggingSettings

logger = logging.getLogger(__name__)

TEXT_FORMAT = "%(asctime)s %(levelname)-8s [%(name)s] %(message)s"
DATE_FORMAT = "%Y-%m-%dT%H:%M:%S"

_listener: QueueListener | None = None
_queue_handler: QueueHandler | None = None
_LOGGING_INITIALIZED = False


def shutdown() -> None:
    """Flush and stop the listener thread, then detach the queue handler."""
    global _listener, _queue_handler

    listener, _listener = _listener, None
    if listener is not None:
        listener.stop()

    handler, _queue_handler = _queue_handler, None
    if handler is not None:
        logging.getLogger().removeHandler(handler)


def setup_logging(
    log_settings: LoggingSettings | None = None,
    *,
    force: bool = False,
    **configure_kwargs: Any,
) -> None:
    """Configure logging from settings unless that already happened.

    Keyword arguments override the matching settings fields.
    """
    global _LOGGING_INITIALIZED

    if _LOGGING_INITIALIZED and not force:
        return

    if log_settings is None:
        from category_tree.core.settings import get_logging_settings

        log_settings = get_logging_settings()

    configure_logging(**(log_settings.to_logging_kwargs() | configure_kwargs))
    _LOGGING_INITIALIZED = True


def configure_logging(
    log_level: str = "INFO",
    json_logs: bool = True,
    console_enabled: bool = True,
    file_path: str | Path | None = None,
    file_max_bytes: int = 10 * 1024 * 1024,
    file_backup_count: int = 5,
    include_context: bool = True,
    service_name: str = "category-tree",
) -> None:
    """(Re)build the root logger configuration.

    Args:
        log_level: Root logger level name.
        json_logs: JSON Lines output instead of plain text.
        console_enabled: Write to stderr.
        file_path: Rotating log file, or None for no file output.
        file_max_bytes: Rotation threshold.
        file_backup_count: Rotated files kept.
        include_context: Copy the bound log context onto each record.
        service_name: ``service`` field of JSON records.
    """
    shutdown()
    level = log_level.upper()
    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "root": {"level": level, "handlers": []},
        }
    )

    formatter = (
        JSONFormatter(static={"service": service_name})
        if json_logs
        else logging.Formatter(TEXT_FORMAT, datefmt=DATE_FORMAT)
    )
    handlers: list[logging.Handler] = []
    if console_enabled:
        handlers.append(logging.StreamHandler())
    if file_path:
        handlers.append(_file_handler(Path(file_path), file_max_bytes, file_backup_count))
    for handler in handlers:
        handler.setFormatter(formatter)

    if handlers:
        _start_queue(handlers, include_context=include_context)

    logger.debug(
        "Logging configured",
        extra={"level": level, "json": json_logs, "handlers": len(handlers)},
    )


def _file_handler(path: Path, max_bytes: int, backup_count: int) -> RotatingFileHandler:
    path.parent.mkdir(parents=True, exist_ok=True)
    return RotatingFileHandler(path, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8")


def _start_queue(handlers: list[logging.Handler], *, include_context: bool) -> None:
    # The context filter goes on the queue handler: filters on the root logger
    # itself never see records propagated from child loggers.
    global _listener, _queue_handler

    queue: SimpleQueue[logging.LogRecord] = SimpleQueue()
    _listener = QueueListener(queue, *handlers, respect_handler_level=True)
    _listener.start()
    atexit.register(shutdown)

    _queue_handler = QueueHandler(queue)
    if include_context:
        _queue_handler.addFilter(ContextInjectingFilter())
    logging.getLogger().addHandler(_queue_handler)
