"""Cursor pagination parameters for FastAPI routes.

Usage:
    from seekpage.core.dependencies.pagination import PaginationQuery

    @router.get("/groups")
    async def list_groups(pagination: PaginationQuery) -> Connection[GroupResponse]:
        page = await repo.get_groups(session, options=pagination)
        ...

Range checks are left to ``PaginationOptions.verify`` so that every
pagination problem is reported the same way (400 problem details) instead
of FastAPI's 422 validation errors.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Query

from seekpage.core.pagination import PaginationOptions
from seekpage.core.settings import get_pagination_settings


def get_pagination_options(
    first: Annotated[
        int | None,
        Query(description="Number of items to return from the start (or after `after`)"),
    ] = None,
    last: Annotated[
        int | None,
        Query(description="Number of items to return from the end (or before `before`)"),
    ] = None,
    after: Annotated[
        str | None,
        Query(description="Cursor to continue forward from"),
    ] = None,
    before: Annotated[
        str | None,
        Query(description="Cursor to continue backward from"),
    ] = None,
) -> PaginationOptions:
    """Build pagination options from the query string.

    When neither ``first`` nor ``last`` is given the configured default page
    size is applied: as ``last`` when only a ``before`` cursor is present,
    otherwise as ``first``.
    """
    if first is None and last is None:
        default_size = get_pagination_settings().default_page_size
        if before is not None and after is None:
            last = default_size
        else:
            first = default_size

    return PaginationOptions(first=first, last=last, after=after, before=before)


PaginationQuery = Annotated[PaginationOptions, Depends(get_pagination_options)]
"""Annotated dependency for route signatures."""


__all__ = ["PaginationQuery", "get_pagination_options"]
