"""SQLAlchemy models for the groups feature."""

from __future__ import annotations

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from seekpage.core.database import Base, ResourceMetadataMixin, TimestampMixin, UUIDPKMixin

PATH_SEPARATOR = "/"


class Group(Base, UUIDPKMixin, TimestampMixin, ResourceMetadataMixin):
    """A node in the group hierarchy, addressed by its slash-separated path.

    ``full_path`` is unique: ``"acme"`` is a root group, ``"acme/platform"``
    one of its children.
    """

    __tablename__ = "groups"

    full_path: Mapped[str] = mapped_column(String(1024), unique=True, nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text(), nullable=True)

    @property
    def parent_path(self) -> str | None:
        parent, sep, _ = self.full_path.rpartition(PATH_SEPARATOR)
        return parent if sep else None

    @property
    def level(self) -> int:
        """Depth in the hierarchy; root groups are level 1."""
        return self.full_path.count(PATH_SEPARATOR) + 1

    def resolve_metadata(self, key: str) -> str | None:
        match key:
            case "full_path" | "group_level":
                # Group level sorts transform the stored path in SQL
                return self.full_path
            case _:
                return super().resolve_metadata(key)

    def __repr__(self) -> str:
        return f"Group(id={self.id!r}, full_path={self.full_path!r})"
