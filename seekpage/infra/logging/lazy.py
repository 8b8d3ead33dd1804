"""Lazy evaluation support for logging.

Debug logging of query plans and page contents is useful during development
but rendering SQL or formatting cursors is too costly to pay for on every
request in production. The adapter here only evaluates a message (or its
arguments) when the target level is enabled.
"""

from __future__ import annotations

import logging
from typing import Any


class LazyLoggerAdapter(logging.LoggerAdapter):
    """Logger adapter that evaluates callable messages on demand.

    Example:
        ```python
        logger = get_lazy_logger(__name__)

        # str(statement) only runs when DEBUG is enabled
        logger.debug(lambda: f"Paginated SQL: {statement}")

        # Callable format args are evaluated the same way
        logger.debug("Page size %s", lambda: len(rows))
        ```
    """

    def process(self, msg: Any, kwargs: Any) -> tuple[Any, Any]:
        """Merge bound context into ``extra``."""
        if self.extra:
            kwargs["extra"] = {**self.extra, **kwargs.get("extra", {})}
        return msg, kwargs

    def log(
        self,
        level: int,
        msg: Any,
        *args: Any,
        **kwargs: Any,
    ) -> None:
        """Log message with lazy evaluation support.

        Args:
            level: Numeric log level (e.g., logging.DEBUG).
            msg: Log message or callable returning message.
            *args: Format arguments (may include callables).
            **kwargs: Additional kwargs for logging.
        """
        if not self.isEnabledFor(level):
            return

        if callable(msg):
            msg = msg()

        evaluated_args = tuple(arg() if callable(arg) else arg for arg in args)
        super().log(level, msg, *evaluated_args, **kwargs)

    def debug(self, msg: Any, *args: Any, **kwargs: Any) -> None:
        self.log(logging.DEBUG, msg, *args, **kwargs)

    def info(self, msg: Any, *args: Any, **kwargs: Any) -> None:
        self.log(logging.INFO, msg, *args, **kwargs)

    def warning(self, msg: Any, *args: Any, **kwargs: Any) -> None:
        self.log(logging.WARNING, msg, *args, **kwargs)

    def error(self, msg: Any, *args: Any, **kwargs: Any) -> None:
        self.log(logging.ERROR, msg, *args, **kwargs)


def get_lazy_logger(name: str, **context: Any) -> LazyLoggerAdapter:
    """Get logger with lazy evaluation support.

    Args:
        name: Logger name (usually __name__).
        **context: Optional context bound into every record's ``extra``.

    Returns:
        Logger adapter with lazy evaluation support.

    Example:
        ```python
        lazy = get_lazy_logger(__name__, entity="Group")
        lazy.debug(lambda: f"Fetched {len(items)} groups")
        ```
    """
    return LazyLoggerAdapter(logging.getLogger(name), context)


__all__ = ["LazyLoggerAdapter", "get_lazy_logger"]
