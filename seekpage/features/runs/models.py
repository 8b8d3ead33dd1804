"""SQLAlchemy models for the runs feature."""

from __future__ import annotations

from enum import StrEnum

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from seekpage.core.database import Base, ResourceMetadataMixin, TimestampMixin, UUIDPKMixin
from seekpage.core.pagination import format_cursor_value


class RunStatus(StrEnum):
    """Lifecycle state of a run."""

    PENDING = "pending"
    PLANNING = "planning"
    PLANNED = "planned"
    APPLYING = "applying"
    APPLIED = "applied"
    CANCELED = "canceled"
    ERRORED = "errored"


class Run(Base, UUIDPKMixin, TimestampMixin, ResourceMetadataMixin):
    """One execution within a workspace."""

    __tablename__ = "runs"

    workspace_path: Mapped[str] = mapped_column(String(1024), index=True, nullable=False)
    status: Mapped[str] = mapped_column(String(32), default=RunStatus.PENDING.value, nullable=False)

    def resolve_metadata(self, key: str) -> str | None:
        match key:
            case "status":
                return format_cursor_value(self.status)
            case _:
                return super().resolve_metadata(key)

    def __repr__(self) -> str:
        return f"Run(id={self.id!r}, workspace_path={self.workspace_path!r}, status={self.status!r})"
