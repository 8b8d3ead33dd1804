"""API router for the groups feature."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from seekpage.core.dependencies.database import get_db_session
from seekpage.core.dependencies.pagination import PaginationQuery
from seekpage.features.groups.repository import (
    GroupFilter,
    GroupRepository,
    GroupSortableField,
    get_group_repository,
)
from seekpage.features.groups.schemas import GroupConnection, GroupResponse
from seekpage.infra.logging import get_lazy_logger

router = APIRouter(prefix="/groups", tags=["groups"])

# Lazy logger for DEBUG (zero overhead when DEBUG disabled)
lazy_logger = get_lazy_logger(__name__)


@router.get(
    "/",
    response_model=GroupConnection,
    summary="List groups",
    description="""
List groups with cursor pagination.

**Usage:**
1. First page: `GET /groups?first=20&sort=FULL_PATH_ASC`
2. Next page: `GET /groups?first=20&sort=FULL_PATH_ASC&after={page_info.end_cursor}`
3. Previous page: `GET /groups?last=20&sort=FULL_PATH_ASC&before={page_info.start_cursor}`

Cursors are opaque and only valid with the `sort` they were issued for.
""",
)
async def list_groups(
    session: Annotated[AsyncSession, Depends(get_db_session)],
    repo: Annotated[GroupRepository, Depends(get_group_repository)],
    pagination: PaginationQuery,
    sort: GroupSortableField | None = None,
    parent_path: Annotated[str | None, Query(description="Only direct children")] = None,
    search: Annotated[str | None, Query(description="Substring of the full path")] = None,
    root_only: Annotated[bool, Query(description="Only top-level groups")] = False,
    include_total: Annotated[bool | None, Query(description="Include total_count")] = None,
) -> GroupConnection:
    """List groups one page at a time."""
    page = await repo.get_groups(
        session,
        sort=sort,
        options=pagination,
        filters=GroupFilter(parent_path=parent_path, search=search, root_only=root_only),
        include_total=include_total,
    )

    lazy_logger.debug(
        lambda: f"groups.list: sort={sort} returned={len(page.items)} next={page.page_info.has_next_page}"
    )
    return page.to_connection(GroupResponse.model_validate)
