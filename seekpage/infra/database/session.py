"""Database engine and session management (SQLAlchemy async)."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from seekpage.core.settings import get_app_settings, get_db_settings

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

    from sqlalchemy.orm import DeclarativeBase

logger = logging.getLogger(__name__)

_engine: AsyncEngine | None = None
_session_factory: async_sessionmaker[AsyncSession] | None = None


def build_engine(url: str | None = None) -> AsyncEngine:
    """Create an async engine from ``DatabaseSettings``.

    SQLite URLs get a single shared connection (``StaticPool``) so an
    in-memory database survives across sessions; pool sizing applies to
    server databases only.
    """
    db_settings = get_db_settings()
    app_settings = get_app_settings()
    url = url or db_settings.get_sqlalchemy_url()
    echo = db_settings.echo or app_settings.debug

    if url.startswith("sqlite"):
        return create_async_engine(
            url,
            echo=echo,
            poolclass=StaticPool,
            connect_args={"check_same_thread": False},
        )

    return create_async_engine(
        url,
        pool_size=db_settings.pool_size,
        max_overflow=db_settings.max_overflow,
        pool_timeout=db_settings.pool_timeout,
        pool_recycle=db_settings.pool_recycle,
        pool_pre_ping=db_settings.pool_pre_ping,
        echo=echo,
    )


def get_engine() -> AsyncEngine:
    """Return the process-wide engine, creating it on first use."""
    global _engine
    if _engine is None:
        _engine = build_engine()
    return _engine


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Return the process-wide session factory."""
    global _session_factory
    if _session_factory is None:
        _session_factory = async_sessionmaker(
            get_engine(),
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )
    return _session_factory


@asynccontextmanager
async def get_async_session() -> AsyncGenerator[AsyncSession]:
    """Get async database session.

    Yields:
        Database session that is automatically closed.

    Example:
        async with get_async_session() as session:
            page = await repo.get_groups(session, options=options)
    """
    async with get_session_factory()() as session:
        try:
            yield session
        finally:
            await session.close()


async def init_database(metadata_base: type[DeclarativeBase] | None = None) -> None:
    """Verify connectivity and optionally create tables.

    Args:
        metadata_base: Declarative base whose tables should be created
            (``checkfirst`` keeps this idempotent). Migrations own the schema
            of server databases, so this is mainly for SQLite.

    Raises:
        ConnectionError: If the database cannot be reached.
    """
    db_settings = get_db_settings()
    engine = get_engine()
    try:
        async with engine.begin() as conn:
            await conn.execute(text("SELECT 1"))
            if metadata_base is not None:
                await conn.run_sync(metadata_base.metadata.create_all)
    except Exception as e:
        logger.exception(
            "Failed to connect to database",
            extra={"configured": db_settings.is_configured, "error": str(e)},
        )
        raise ConnectionError("Unable to connect to database") from e

    logger.info(
        "Database connection established successfully",
        extra={"configured": db_settings.is_configured, "dialect": engine.dialect.name},
    )


async def close_database() -> None:
    """Dispose of the engine. Called during application shutdown."""
    global _engine, _session_factory
    if _engine is None:
        return

    logger.info("Closing database connection")
    await _engine.dispose()
    _engine = None
    _session_factory = None
    logger.info("Database connection closed successfully")


def configure_database(engine: AsyncEngine) -> None:
    """Use ``engine`` as the process-wide engine (tests, embedding apps)."""
    global _engine, _session_factory
    _engine = engine
    _session_factory = None


__all__ = [
    "build_engine",
    "close_database",
    "configure_database",
    "get_async_session",
    "get_engine",
    "get_session_factory",
    "init_database",
]