"""Modular Pydantic Settings v2 configuration.

Settings are split by domain (app, db, pagination), read from environment
variables (or a local ``.env`` file), frozen, and served through LRU-cached
loaders:

    from seekpage.core.settings import get_pagination_settings

    settings = get_pagination_settings()
    print(settings.max_page_size)
"""

from __future__ import annotations

from .app import AppSettings
from .database import DatabaseSettings
from .loader import (
    clear_all_caches,
    get_app_settings,
    get_db_settings,
    get_pagination_settings,
)
from .pagination import PaginationSettings

__all__ = [
    "AppSettings",
    "DatabaseSettings",
    "PaginationSettings",
    "clear_all_caches",
    "get_app_settings",
    "get_db_settings",
    "get_pagination_settings",
]
