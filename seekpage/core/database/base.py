"""Base database model classes with composable mixins.

Models combine a declarative base with the capabilities they need:

    class Run(Base, UUIDPKMixin, TimestampMixin, ResourceMetadataMixin):
        __tablename__ = "runs"
        status: Mapped[str] = mapped_column(String(32))

``ResourceMetadataMixin`` makes a model usable with the pagination engine by
resolving the keys every resource shares (``id``, ``created_at``,
``updated_at``); models add their own sortable keys on top.
"""

from __future__ import annotations

import uuid
from datetime import UTC, datetime

from sqlalchemy import DateTime, MetaData
from sqlalchemy.orm import DeclarativeBase, Mapped, declared_attr, mapped_column
from sqlalchemy.sql import func

from seekpage.core.pagination.cursor import format_cursor_value
from seekpage.core.pagination.exceptions import InvalidSortError

# Consistent naming convention for database constraints
NAMING_CONVENTION = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}


class Base(DeclarativeBase):
    """Declarative base with constraint naming and automatic table names.

    The automatic table name (lowercased class name) can be overridden by
    setting ``__tablename__`` explicitly on the model class.
    """

    metadata = MetaData(naming_convention=NAMING_CONVENTION)

    @declared_attr.directive
    def __tablename__(cls) -> str:
        return cls.__name__.lower()


def _utcnow() -> datetime:
    return datetime.now(UTC)


class UUIDPKMixin:
    """UUID v4 primary key.

    Provides:
        id: UUID v4 primary key (random). Used as the pagination tiebreaker.
    """

    __allow_unmapped__ = True

    id: Mapped[uuid.UUID] = mapped_column(
        primary_key=True,
        default=uuid.uuid4,
        comment="UUID v4 primary key",
    )


class TimestampMixin:
    """Timestamp tracking for create and update operations.

    Uses both Python-side defaults (so values are known before flush and
    compare consistently on SQLite) and database server defaults (for direct
    SQL inserts).

    Provides:
        created_at: Timestamp of record creation (immutable)
        updated_at: Timestamp of last modification (auto-updates)
    """

    __allow_unmapped__ = True

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=_utcnow,
        server_default=func.now(),
        nullable=False,
        comment="Timestamp of record creation",
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=_utcnow,
        server_default=func.now(),
        onupdate=_utcnow,
        nullable=False,
        comment="Timestamp of last update",
    )


class ResourceMetadataMixin:
    """Cursor metadata shared by every paginated resource.

    Implements ``CursorPaginatable.resolve_metadata`` for ``id``,
    ``created_at`` and ``updated_at``. Models with further sortable fields
    override it and fall back to ``super()``:

        def resolve_metadata(self, key: str) -> str | None:
            match key:
                case "full_path":
                    return self.full_path
                case _:
                    return super().resolve_metadata(key)
    """

    __allow_unmapped__ = True

    def resolve_metadata(self, key: str) -> str | None:
        match key:
            case "id" | "created_at" | "updated_at":
                return format_cursor_value(getattr(self, key))
            case _:
                raise InvalidSortError(
                    f"Unknown metadata key: {key}",
                    extra={"resource": type(self).__name__, "key": key},
                )


__all__ = [
    "NAMING_CONVENTION",
    "Base",
    "ResourceMetadataMixin",
    "TimestampMixin",
    "UUIDPKMixin",
]
