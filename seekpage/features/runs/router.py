"""API router for the runs feature."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from seekpage.core.dependencies.database import get_db_session
from seekpage.core.dependencies.pagination import PaginationQuery
from seekpage.features.runs.models import RunStatus
from seekpage.features.runs.repository import (
    RunFilter,
    RunRepository,
    RunSortableField,
    get_run_repository,
)
from seekpage.features.runs.schemas import RunConnection, RunResponse

router = APIRouter(prefix="/runs", tags=["runs"])


@router.get(
    "/",
    response_model=RunConnection,
    summary="List runs",
    description="List runs with cursor pagination, newest first with `sort=CREATED_AT_DESC`.",
)
async def list_runs(
    session: Annotated[AsyncSession, Depends(get_db_session)],
    repo: Annotated[RunRepository, Depends(get_run_repository)],
    pagination: PaginationQuery,
    sort: RunSortableField | None = None,
    workspace_path: Annotated[str | None, Query(description="Only runs of this workspace")] = None,
    status: Annotated[RunStatus | None, Query(description="Only runs in this state")] = None,
    include_total: Annotated[bool | None, Query(description="Include total_count")] = None,
) -> RunConnection:
    """List runs one page at a time."""
    page = await repo.get_runs(
        session,
        sort=sort,
        options=pagination,
        filters=RunFilter(workspace_path=workspace_path, status=status),
        include_total=include_total,
    )
    return page.to_connection(RunResponse.model_validate)
