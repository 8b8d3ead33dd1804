"""Repository for the runs feature."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING

from sqlalchemy import select

from seekpage.core.database.repository import BaseRepository
from seekpage.core.pagination import FieldDescriptor, SortOption, SortRegistry
from seekpage.features.runs.models import Run, RunStatus

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from seekpage.core.pagination import Page, PaginationOptions


class RunSortableField(StrEnum):
    """Sort keys accepted by ``RunRepository.get_runs``."""

    CREATED_AT_ASC = "CREATED_AT_ASC"
    CREATED_AT_DESC = "CREATED_AT_DESC"
    UPDATED_AT_ASC = "UPDATED_AT_ASC"
    UPDATED_AT_DESC = "UPDATED_AT_DESC"
    STATUS_ASC = "STATUS_ASC"
    STATUS_DESC = "STATUS_DESC"


RUN_CREATED_AT = FieldDescriptor.from_attribute(Run.created_at)
RUN_UPDATED_AT = FieldDescriptor.from_attribute(Run.updated_at)
RUN_STATUS = FieldDescriptor.from_attribute(Run.status)

RUN_SORTS = SortRegistry(
    tiebreaker=FieldDescriptor.from_attribute(Run.id),
    options={
        RunSortableField.CREATED_AT_ASC: SortOption(RUN_CREATED_AT),
        RunSortableField.CREATED_AT_DESC: SortOption(RUN_CREATED_AT),
        RunSortableField.UPDATED_AT_ASC: SortOption(RUN_UPDATED_AT),
        RunSortableField.UPDATED_AT_DESC: SortOption(RUN_UPDATED_AT),
        RunSortableField.STATUS_ASC: SortOption(RUN_STATUS),
        RunSortableField.STATUS_DESC: SortOption(RUN_STATUS),
    },
)


@dataclass(frozen=True, slots=True)
class RunFilter:
    """Filters for listing runs."""

    workspace_path: str | None = None
    status: RunStatus | None = None


class RunRepository(BaseRepository[Run]):
    """Repository for Run model.

    Inherits get, get_or_raise, create, create_many and paginate from
    BaseRepository.
    """

    __slots__ = ("sorts",)

    def __init__(self, sorts: SortRegistry = RUN_SORTS) -> None:
        super().__init__(Run)
        self.sorts = sorts

    async def get_runs(
        self,
        session: AsyncSession,
        *,
        sort: RunSortableField | None = None,
        options: PaginationOptions | None = None,
        filters: RunFilter | None = None,
        include_total: bool | None = None,
    ) -> Page[Run]:
        """List runs one page at a time, optionally scoped to a workspace."""
        stmt = select(Run)
        if filters is not None:
            if filters.workspace_path is not None:
                stmt = stmt.where(Run.workspace_path == filters.workspace_path)
            if filters.status is not None:
                stmt = stmt.where(Run.status == filters.status.value)

        return await self.paginate(
            session,
            stmt,
            options=options,
            sort=self.sorts.resolve(sort),
            tiebreaker=self.sorts.tiebreaker,
            include_total=include_total,
        )


# Factory function for dependency injection
_run_repository: RunRepository | None = None


def get_run_repository() -> RunRepository:
    """Get RunRepository instance."""
    global _run_repository
    if _run_repository is None:
        _run_repository = RunRepository()
    return _run_repository


__all__ = [
    "RUN_SORTS",
    "RunFilter",
    "RunRepository",
    "RunSortableField",
    "get_run_repository",
]
