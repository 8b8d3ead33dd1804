"""Router registry and setup."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from seekpage.core.settings import get_app_settings
from seekpage.features.groups.router import router as groups_router
from seekpage.features.runs.router import router as runs_router

if TYPE_CHECKING:
    from fastapi import FastAPI

    from seekpage.core.settings import AppSettings

logger = logging.getLogger(__name__)


def setup_routers(app: FastAPI, app_settings: AppSettings | None = None) -> None:
    """Register all feature routers under the API prefix."""
    settings = app_settings or get_app_settings()
    prefix = settings.api_prefix

    app.include_router(groups_router, prefix=prefix)
    app.include_router(runs_router, prefix=prefix)

    logger.info("Routers configured", extra={"api_prefix": prefix})
