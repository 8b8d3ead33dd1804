"""Logging configuration.

All handlers are attached to the root logger through ``dictConfig``;
application loggers (``logging.getLogger(__name__)``) propagate up. Records
are emitted either as JSON Lines for log aggregation or as plain text for
local development. Structured context passed via ``extra={...}`` is kept in
the JSON output.
"""

from __future__ import annotations

import json
import logging
import logging.config
from datetime import UTC, datetime
from typing import Any

logger = logging.getLogger(__name__)

# LogRecord attributes that are not user-supplied ``extra`` fields
_RESERVED_ATTRS = frozenset(
    logging.LogRecord("", 0, "", 0, "", (), None).__dict__.keys()
    | {"message", "asctime", "taskName"}
)


class JSONFormatter(logging.Formatter):
    """Structured JSON Lines (JSONL) formatter with UTC timestamps.

    Example output:
        ```json
        {"timestamp": "2026-01-01T00:00:00.123Z", "level": "DEBUG", "logger": "seekpage.core.pagination.planner", "message": "Planned paginated query", "limit": 5}
        ```
    """

    def __init__(self, static: dict[str, Any] | None = None) -> None:
        """Initialize JSON formatter.

        Args:
            static: Fields included in every record (e.g., {"service": "seekpage"}).
        """
        super().__init__()
        self.static = static or {}

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as a single-line JSON string."""
        data: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC)
            .isoformat(timespec="milliseconds")
            .replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            **self.static,
        }

        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS and not key.startswith("_"):
                data[key] = value

        if record.exc_info:
            data["exception"] = self.formatException(record.exc_info)

        return json.dumps(data, default=str, separators=(",", ":"))


def configure_logging(
    log_level: str = "INFO",
    *,
    json_logs: bool = False,
    service_name: str = "seekpage",
    sqlalchemy_level: str = "WARNING",
) -> None:
    """Configure root logging with a single console handler.

    Args:
        log_level: Root logger level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        json_logs: Emit JSONL instead of human-readable lines.
        service_name: Static ``service`` field added to JSON records.
        sqlalchemy_level: Level for the ``sqlalchemy.engine`` logger. SQL
            echo is controlled by ``DB_ECHO`` instead of this knob.

    Example:
        from seekpage.core.settings import get_app_settings

        configure_logging(get_app_settings().log_level, json_logs=True)
    """
    formatter: dict[str, Any]
    if json_logs:
        formatter = {
            "()": JSONFormatter,
            "static": {"service": service_name},
        }
    else:
        formatter = {
            "format": "%(asctime)s %(levelname)-8s %(name)s: %(message)s",
        }

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {"default": formatter},
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "formatter": "default",
                    "stream": "ext://sys.stderr",
                },
            },
            "loggers": {
                "sqlalchemy.engine": {"level": sqlalchemy_level},
            },
            "root": {"level": log_level, "handlers": ["console"]},
        }
    )
    logging.captureWarnings(True)
    logger.debug("Logging configured", extra={"level": log_level, "json": json_logs})


__all__ = ["JSONFormatter", "configure_logging"]
