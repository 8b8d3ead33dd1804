"""FastAPI application factory."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from fastapi import FastAPI

from seekpage.app.exception_handlers import configure_exception_handlers
from seekpage.app.router import setup_routers
from seekpage.core.database import Base
from seekpage.core.settings import get_app_settings
from seekpage.infra.database import close_database, init_database
from seekpage.infra.logging import configure_logging

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Open the database on startup and dispose of it on shutdown."""
    await init_database(Base)
    logger.info("Application started", extra={"title": app.title, "version": app.version})
    try:
        yield
    finally:
        await close_database()
        logger.info("Application stopped")


def create_app() -> FastAPI:
    """Create and configure FastAPI application.

    Settings are loaded once and cached via LRU cache.

    Returns:
        Configured FastAPI application instance.
    """
    app_settings = get_app_settings()
    configure_logging(app_settings.log_level, json_logs=app_settings.json_logs)

    app = FastAPI(
        title=app_settings.title,
        version=app_settings.version,
        debug=app_settings.debug,
        lifespan=lifespan,
    )

    configure_exception_handlers(app)
    setup_routers(app, app_settings)

    return app
