"""Logging infrastructure.

Basic usage:
    import logging

    from seekpage.infra.logging import get_lazy_logger

    # Standard logger for INFO/WARNING/ERROR
    logger = logging.getLogger(__name__)
    logger.info("Groups listed", extra={"count": 10})

    # Lazy logger for DEBUG (zero overhead when DEBUG disabled)
    lazy_logger = get_lazy_logger(__name__)
    lazy_logger.debug(lambda: f"Paginated SQL: {statement}")
"""

from seekpage.infra.logging.config import JSONFormatter, configure_logging
from seekpage.infra.logging.lazy import LazyLoggerAdapter, get_lazy_logger

__all__ = [
    "JSONFormatter",
    "LazyLoggerAdapter",
    "configure_logging",
    "get_lazy_logger",
]
