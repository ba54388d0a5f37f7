"""JSON Lines formatter with OpenTelemetry trace correlation."""

from __future__ import annotations

import json
import logging
from datetime import UTC, datetime
from typing import Any

from opentelemetry import trace

# Attributes every LogRecord carries; anything else on a record came from `extra`
# or from ContextInjectingFilter.
_STANDARD_ATTRS = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime", "taskName"}

_DEFAULT_FIELDS = {
    "level": "levelname",
    "logger": "name",
    "message": "message",
}


def _utc_timestamp(created: float) -> str:
    stamp = datetime.fromtimestamp(created, tz=UTC).isoformat(timespec="milliseconds")
    return stamp.replace("+00:00", "Z")


class JSONFormatter(logging.Formatter):
    """Render each record as one JSON object per line.

    Output holds the mapped record fields, a UTC timestamp, trace_id and
    span_id when a span is recording, the static fields, and every extra
    attribute (category_id, parent, operation, ...).

    Example output:
        {"level": "INFO", "logger": "category_tree.features.categories.repository",
         "message": "Category added", "timestamp": "2026-01-01T00:00:00.123Z",
         "service": "category-tree", "category_id": 7, "parent": 3, "operation": "add"}
    """

    def __init__(
        self,
        fmt_keys: dict[str, str] | None = None,
        static: dict[str, Any] | None = None,
    ) -> None:
        """Initialize JSON formatter.

        Args:
            fmt_keys: Output key -> LogRecord attribute; defaults to level,
                logger and message.
            static: Fields added to every record, e.g. {"service": "category-tree"}.
        """
        super().__init__()
        self.fmt_keys = fmt_keys or dict(_DEFAULT_FIELDS)
        self.static = static or {}

    def format(self, record: logging.LogRecord) -> str:
        record.message = record.getMessage()
        payload: dict[str, Any] = {key: getattr(record, attr, None) for key, attr in self.fmt_keys.items()}
        payload["timestamp"] = _utc_timestamp(record.created)

        span_context = trace.get_current_span().get_span_context()
        if span_context.is_valid:
            payload["trace_id"] = format(span_context.trace_id, "032x")
            payload["span_id"] = format(span_context.span_id, "016x")

        # Newlines escaped so a traceback stays on its line
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info).replace("\n", "\\n")
        if record.stack_info:
            payload["stack_trace"] = record.stack_info.replace("\n", "\\n")

        payload.update(self.static)
        payload.update(
            (key, value)
            for key, value in vars(record).items()
            if key not in _STANDARD_ATTRS and key not in payload
        )
        return json.dumps(payload, ensure_ascii=False, default=str)


__all__ = ["JSONFormatter"]
