"""Cursor-based (keyset) pagination engine.

Pagination here is:
- Stable: every sort is made a total order by appending the identifier
- Performant: pages are reached by indexed seeks, never OFFSET scans
- Cheap: one over-fetched row answers "is there another page"

Entity repositories hand a filtered ``select()`` and a resolved ``SortSpec``
to ``BaseRepository.paginate`` (or drive ``PaginatedQueryBuilder`` directly):

    sort = GROUP_SORTS.resolve(GroupSortableField.FULL_PATH_DESC)
    page = await repo.paginate(session, stmt, options=options, sort=sort)
    page.to_connection(GroupResponse.model_validate)

Cursors are opaque URL-safe base64 strings that clients pass back unchanged.
"""

from seekpage.core.pagination.cursor import Cursor, CursorCodec, CursorField, format_cursor_value
from seekpage.core.pagination.exceptions import (
    ErrorCode,
    InvalidCursorError,
    InvalidPaginationError,
    InvalidSortError,
)
from seekpage.core.pagination.options import PaginationOptions
from seekpage.core.pagination.planner import PlannedQuery, SeekOperator, plan_query
from seekpage.core.pagination.protocol import CursorPaginatable
from seekpage.core.pagination.rows import Page, PageInfo, PaginatedQueryBuilder, PaginatedRows
from seekpage.core.pagination.schemas import Connection, ConnectionPageInfo, CursorPage, Edge
from seekpage.core.pagination.sorting import (
    FieldDescriptor,
    SortDirection,
    SortOption,
    SortRegistry,
    SortSpec,
    SortTransform,
)

__all__ = [
    # Response schemas
    "Connection",
    "ConnectionPageInfo",
    # Cursor
    "Cursor",
    "CursorCodec",
    "CursorField",
    "CursorPage",
    "CursorPaginatable",
    "Edge",
    # Errors
    "ErrorCode",
    # Sorting
    "FieldDescriptor",
    "InvalidCursorError",
    "InvalidPaginationError",
    "InvalidSortError",
    # Execution
    "Page",
    "PageInfo",
    "PaginatedQueryBuilder",
    "PaginatedRows",
    "PaginationOptions",
    "PlannedQuery",
    "SeekOperator",
    "SortDirection",
    "SortOption",
    "SortRegistry",
    "SortSpec",
    "SortTransform",
    "format_cursor_value",
    "plan_query",
]
