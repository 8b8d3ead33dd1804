"""Database infrastructure package.

Example:
    from seekpage.infra.database import get_async_session

    async with get_async_session() as session:
        result = await session.execute(...)
"""

from .session import (
    build_engine,
    close_database,
    configure_database,
    get_async_session,
    get_engine,
    get_session_factory,
    init_database,
)

__all__ = [
    "build_engine",
    "close_database",
    "configure_database",
    "get_async_session",
    "get_engine",
    "get_session_factory",
    "init_database",
]
