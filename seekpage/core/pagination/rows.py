"""Paginated query execution and page finalization.

``PaginatedQueryBuilder`` validates the request, plans the over-fetch query
and streams it. ``PaginatedRows`` is the row iterator the caller scans into
its own records; ``finalize`` trims the sentinel row, restores canonical
order and computes the page flags.

Usage:
    builder = PaginatedQueryBuilder(options, GROUP_SORTS.tiebreaker, sort=sort)

    async with await builder.execute(session, stmt) as rows:
        groups = [group async for group in rows.scalars()]

    page = rows.finalize(groups)
    page.items                      # canonical order
    page.page_info.has_next_page
    page.cursor(page.items[-1])     # ``after`` for the next page
"""

from __future__ import annotations

from collections.abc import AsyncIterator, Callable, Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Generic, Self, TypeVar

from sqlalchemy import func, select

from seekpage.core.pagination.cursor import Cursor, CursorCodec, CursorField
from seekpage.core.pagination.exceptions import InvalidPaginationError
from seekpage.core.pagination.options import PaginationOptions
from seekpage.core.pagination.planner import PlannedQuery, plan_query
from seekpage.core.pagination.schemas import Connection, ConnectionPageInfo, CursorPage, Edge
from seekpage.core.pagination.sorting import FieldDescriptor, SortSpec
from seekpage.core.settings import PaginationSettings, get_pagination_settings
from seekpage.infra.logging import get_lazy_logger

if TYPE_CHECKING:
    from types import TracebackType

    from sqlalchemy import Row, Select
    from sqlalchemy.ext.asyncio import AsyncResult, AsyncSession

    from seekpage.core.pagination.protocol import CursorPaginatable

T = TypeVar("T")
N = TypeVar("N")

_lazy = get_lazy_logger(__name__)


@dataclass(slots=True)
class PageInfo:
    """Navigation state of a finalized page.

    Attributes:
        has_next_page: More rows exist after the last item.
        has_previous_page: More rows exist before the first item.
        total_count: Rows matching the filters, when requested.
    """

    has_next_page: bool
    has_previous_page: bool
    total_count: int | None = None
    cursor_func: Callable[[CursorPaginatable], str] | None = field(
        default=None, repr=False, compare=False
    )

    def cursor(self, record: CursorPaginatable) -> str:
        """Encode the cursor pointing at ``record``."""
        if self.cursor_func is None:
            raise InvalidPaginationError("page has no cursor configuration")
        return self.cursor_func(record)


@dataclass(slots=True)
class Page(Generic[T]):
    """Finalized page: records in canonical order plus navigation state."""

    items: list[T]
    page_info: PageInfo

    def cursor(self, record: T) -> str:
        """Encode the cursor pointing at ``record``."""
        return self.page_info.cursor(record)  # type: ignore[arg-type]

    @property
    def start_cursor(self) -> str | None:
        return self.cursor(self.items[0]) if self.items else None

    @property
    def end_cursor(self) -> str | None:
        return self.cursor(self.items[-1]) if self.items else None

    def to_connection(self, node_factory: Callable[[T], N]) -> Connection[N]:
        """Build the Relay-style response schema.

        Args:
            node_factory: Converts a record to its response model,
                e.g. ``GroupResponse.model_validate``.
        """
        edges = [Edge(node=node_factory(item), cursor=self.cursor(item)) for item in self.items]
        return Connection(
            edges=edges,
            page_info=ConnectionPageInfo(
                has_previous_page=self.page_info.has_previous_page,
                has_next_page=self.page_info.has_next_page,
                start_cursor=edges[0].cursor if edges else None,
                end_cursor=edges[-1].cursor if edges else None,
                total_count=self.page_info.total_count,
            ),
        )

    def to_cursor_page(self, node_factory: Callable[[T], N]) -> CursorPage[N]:
        """Build the simple REST-style response schema."""
        return self.to_connection(node_factory).to_cursor_page()


class PaginatedQueryBuilder:
    """Plans and runs one keyset-paginated query.

    Options are verified in the constructor, so an invalid request fails
    before any statement reaches the database.

    Args:
        options: Pagination options; None means an unbounded first page.
        tiebreaker: Unique identifier field of the entity.
        sort: Resolved sort; defaults to ascending by the tiebreaker.
        settings: Pagination settings; defaults to the cached loader.

    Raises:
        InvalidPaginationError: If the options cannot be honoured.
    """

    __slots__ = ("options", "tiebreaker", "sort", "settings")

    def __init__(
        self,
        options: PaginationOptions | None,
        tiebreaker: FieldDescriptor,
        *,
        sort: SortSpec | None = None,
        settings: PaginationSettings | None = None,
    ) -> None:
        self.settings = settings or get_pagination_settings()
        self.options = options or PaginationOptions()
        self.options.verify(max_page_size=self.settings.max_page_size)
        self.tiebreaker = tiebreaker
        self.sort = sort or SortSpec(field=tiebreaker)

    def plan(self, statement: Select[Any]) -> PlannedQuery:
        """Apply seek predicates, ordering and the over-fetch limit."""
        return plan_query(
            statement,
            tiebreaker=self.tiebreaker,
            sort=self.sort,
            options=self.options,
            row_comparison=self.settings.row_comparison,
        )

    async def execute(
        self,
        session: AsyncSession,
        statement: Select[Any],
        *,
        include_total: bool = False,
    ) -> PaginatedRows:
        """Plan ``statement`` and start streaming its rows.

        Args:
            session: Session the query runs in (and its ambient transaction).
            statement: Filtered select without ORDER BY or LIMIT.
            include_total: Also count all rows matching the filters.

        Returns:
            Open row iterator. Close it (or use ``async with``) when done.
        """
        planned = self.plan(statement)

        total_count: int | None = None
        if include_total:
            count_stmt = select(func.count()).select_from(statement.order_by(None).subquery())
            total_count = (await session.execute(count_stmt)).scalar_one()

        result = await session.stream(planned.statement)
        return PaginatedRows(result, planned, self, total_count=total_count)

    def cursor_for(self, record: CursorPaginatable) -> str:
        """Encode the cursor of ``record`` for the configured sort.

        Raises:
            InvalidPaginationError: If the record has no identifier value.
            InvalidSortError: If the record does not know a required key.
        """
        tiebreak_value = record.resolve_metadata(self.tiebreaker.key)
        if tiebreak_value is None:
            raise InvalidPaginationError(
                "cannot build cursor: record has no identifier value",
                extra={"field": self.tiebreaker.key},
            )

        tiebreak_field = CursorField(name=self.tiebreaker.key, value=tiebreak_value)
        if self.sort.is_unique_for(self.tiebreaker):
            return CursorCodec.encode(Cursor(primary=tiebreak_field))

        sort_field = CursorField(
            name=self.sort.field.key,
            value=record.resolve_metadata(self.sort.field.key),
        )
        return CursorCodec.encode(Cursor(primary=sort_field, secondary=tiebreak_field))


class PaginatedRows:
    """Forward-only iterator over the rows of a planned query.

    The engine does not know the entity's column layout: callers iterate rows
    (or ``scalars()``) and build their own records, then pass them to
    ``finalize``.
    """

    __slots__ = ("_result", "planned", "_builder", "total_count", "rows_read", "_closed")

    def __init__(
        self,
        result: AsyncResult[Any],
        planned: PlannedQuery,
        builder: PaginatedQueryBuilder,
        *,
        total_count: int | None = None,
    ) -> None:
        self._result = result
        self.planned = planned
        self._builder = builder
        self.total_count = total_count
        self.rows_read = 0
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def __aiter__(self) -> Self:
        return self

    async def __anext__(self) -> Row[Any]:
        row = await self._result.fetchone()
        if row is None:
            await self.close()
            raise StopAsyncIteration
        self.rows_read += 1
        return row

    async def scalars(self) -> AsyncIterator[Any]:
        """Iterate the first column of each row (ORM entities for ``select(Model)``)."""
        async for row in self:
            yield row[0]

    async def close(self) -> None:
        """Release the underlying cursor. Safe to call more than once."""
        if self._closed:
            return
        self._closed = True
        await self._result.close()

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.close()

    def finalize(self, records: Sequence[T]) -> Page[T]:
        """Trim the sentinel row, restore canonical order and set page flags.

        Args:
            records: Records scanned from this iterator, in fetch order.

        Returns:
            The finalized page.
        """
        limit = self.planned.limit
        options = self._builder.options

        items = list(records)
        more = limit is not None and len(items) > limit
        if more:
            items = items[:limit]

        if self.planned.was_reversed:
            items.reverse()

        if self.planned.was_reversed:
            has_previous_page = more
            has_next_page = options.has_cursor
        else:
            has_next_page = more
            has_previous_page = options.has_cursor

        _lazy.debug(
            lambda: (
                f"pagination.finalize: fetched={len(records)} returned={len(items)} "
                f"next={has_next_page} previous={has_previous_page}"
            )
        )

        return Page(
            items=items,
            page_info=PageInfo(
                has_next_page=has_next_page,
                has_previous_page=has_previous_page,
                total_count=self.total_count,
                cursor_func=self._builder.cursor_for,
            ),
        )


__all__ = ["Page", "PageInfo", "PaginatedQueryBuilder", "PaginatedRows"]
