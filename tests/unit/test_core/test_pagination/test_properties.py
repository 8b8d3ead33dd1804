"""Behavioural tests for keyset pagination against a real SQLite database.

Every test walks complete result sets page by page and compares the
concatenation with the expected total order.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator
from datetime import UTC, datetime, timedelta
from typing import Any
from unittest.mock import AsyncMock

import pytest
from sqlalchemy import Integer, String, select
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from seekpage.core.database.repository import BaseRepository
from seekpage.core.pagination import (
    CursorCodec,
    FieldDescriptor,
    InvalidPaginationError,
    Page,
    PaginationOptions,
    SortDirection,
    SortSpec,
    format_cursor_value,
)
from seekpage.core.settings import clear_all_caches
from seekpage.features.runs.models import Run, RunStatus
from seekpage.features.runs.repository import RUN_SORTS, RunSortableField

BASE_TIME = datetime(2026, 1, 1, tzinfo=UTC)
STATUSES = [RunStatus.APPLIED, RunStatus.PENDING, RunStatus.ERRORED]


# ============================================================================
# Fixtures and helpers
# ============================================================================


@pytest.fixture
async def runs(db_session: AsyncSession) -> list[Run]:
    """Ten runs, one minute apart, with three repeating statuses."""
    repo = BaseRepository(Run)
    return list(
        await repo.create_many(
            db_session,
            [
                Run(
                    workspace_path="acme/infra",
                    status=STATUSES[i % len(STATUSES)].value,
                    created_at=BASE_TIME + timedelta(minutes=i),
                    updated_at=BASE_TIME + timedelta(minutes=i),
                )
                for i in range(10)
            ],
        )
    )


async def _page(
    session: AsyncSession,
    sort: RunSortableField | None,
    **options: Any,
) -> Page[Run]:
    return await BaseRepository(Run).paginate(
        session,
        select(Run),
        options=PaginationOptions(**options),
        sort=RUN_SORTS.resolve(sort),
        tiebreaker=RUN_SORTS.tiebreaker,
    )


async def _walk_forward(
    session: AsyncSession, sort: RunSortableField | None, size: int
) -> list[Page[Run]]:
    pages = [await _page(session, sort, first=size)]
    while pages[-1].page_info.has_next_page:
        pages.append(await _page(session, sort, first=size, after=pages[-1].end_cursor))
    return pages


async def _walk_backward(
    session: AsyncSession, sort: RunSortableField | None, size: int
) -> list[Page[Run]]:
    pages = [await _page(session, sort, last=size)]
    while pages[-1].page_info.has_previous_page:
        pages.append(await _page(session, sort, last=size, before=pages[-1].start_cursor))
    return pages


def _ids(pages: list[Page[Run]]) -> list[Any]:
    return [run.id for page in pages for run in page.items]


def _expected(runs: list[Run], key: str, direction: SortDirection) -> list[Any]:
    ordered = sorted(runs, key=lambda run: (getattr(run, key), run.id))
    if direction is SortDirection.DESC:
        ordered.reverse()
    return [run.id for run in ordered]


# ============================================================================
# Total order and symmetry
# ============================================================================


class TestTotalOrder:
    """Concatenated pages equal the full ordered result set."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("sort", "key", "direction"),
        [
            (None, "id", SortDirection.ASC),
            (RunSortableField.CREATED_AT_ASC, "created_at", SortDirection.ASC),
            (RunSortableField.CREATED_AT_DESC, "created_at", SortDirection.DESC),
            (RunSortableField.STATUS_ASC, "status", SortDirection.ASC),
            (RunSortableField.STATUS_DESC, "status", SortDirection.DESC),
        ],
    )
    @pytest.mark.parametrize("size", [1, 3, 4, 10, 25])
    async def test_forward_walk(self, db_session, runs, sort, key, direction, size):
        pages = await _walk_forward(db_session, sort, size)

        assert _ids(pages) == _expected(runs, key, direction)
        assert all(len(page.items) <= size for page in pages)

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "sort",
        [None, RunSortableField.CREATED_AT_DESC, RunSortableField.STATUS_ASC],
    )
    @pytest.mark.parametrize("size", [1, 3, 4])
    async def test_backward_walk_is_symmetric(self, db_session, runs, sort, size):
        forward = _ids(await _walk_forward(db_session, sort, size))

        backward_pages = await _walk_backward(db_session, sort, size)
        backward = [run.id for page in reversed(backward_pages) for run in page.items]

        assert backward == forward

    @pytest.mark.asyncio
    async def test_tiebreak_is_deterministic(self, db_session):
        repo = BaseRepository(Run)
        created = await repo.create_many(
            db_session,
            [Run(workspace_path="acme/app", status=RunStatus.PLANNED.value) for _ in range(6)],
        )

        pages = await _walk_forward(db_session, RunSortableField.STATUS_ASC, 1)

        assert _ids(pages) == sorted(run.id for run in created)
        assert len(pages) == 6

    @pytest.mark.asyncio
    async def test_row_comparison_disabled_gives_same_pages(
        self, db_session, runs, monkeypatch: pytest.MonkeyPatch
    ):
        with_rows = _ids(await _walk_forward(db_session, RunSortableField.STATUS_DESC, 3))

        monkeypatch.setenv("PAGINATION_ROW_COMPARISON", "false")
        clear_all_caches()
        expanded = _ids(await _walk_forward(db_session, RunSortableField.STATUS_DESC, 3))

        assert expanded == with_rows


# ============================================================================
# Boundary flags
# ============================================================================


class TestBoundaries:
    """Ten runs sorted ascending by creation time, page size 4."""

    @pytest.mark.asyncio
    async def test_forward_pages(self, db_session, runs):
        pages = await _walk_forward(db_session, RunSortableField.CREATED_AT_ASC, 4)

        assert [[run.id for run in page.items] for page in pages] == [
            [run.id for run in runs[0:4]],
            [run.id for run in runs[4:8]],
            [run.id for run in runs[8:10]],
        ]
        assert [(p.page_info.has_previous_page, p.page_info.has_next_page) for p in pages] == [
            (False, True),
            (True, True),
            (True, False),
        ]

    @pytest.mark.asyncio
    async def test_backward_pages(self, db_session, runs):
        pages = await _walk_backward(db_session, RunSortableField.CREATED_AT_ASC, 4)

        assert [[run.id for run in page.items] for page in pages] == [
            [run.id for run in runs[6:10]],
            [run.id for run in runs[2:6]],
            [run.id for run in runs[0:2]],
        ]
        assert [(p.page_info.has_previous_page, p.page_info.has_next_page) for p in pages] == [
            (True, False),
            (True, True),
            (False, True),
        ]

    @pytest.mark.asyncio
    async def test_back_from_second_page(self, db_session, runs):
        first = await _page(db_session, RunSortableField.CREATED_AT_ASC, first=4)
        second = await _page(
            db_session, RunSortableField.CREATED_AT_ASC, first=4, after=first.end_cursor
        )

        previous = await _page(
            db_session, RunSortableField.CREATED_AT_ASC, last=4, before=second.start_cursor
        )

        assert [run.id for run in previous.items] == [run.id for run in first.items]
        assert previous.page_info.has_previous_page is False
        assert previous.page_info.has_next_page is True

    @pytest.mark.asyncio
    async def test_first_before_returns_rows_just_before_cursor(self, db_session, runs):
        sort = RunSortableField.CREATED_AT_ASC
        page = await _page(db_session, sort)
        before = page.cursor(page.items[7])

        preceding = await _page(db_session, sort, first=2, before=before)

        assert [run.id for run in preceding.items] == [run.id for run in runs[5:7]]
        assert preceding.page_info.has_previous_page is True
        assert preceding.page_info.has_next_page is True

    @pytest.mark.asyncio
    async def test_first_before_near_start(self, db_session, runs):
        sort = RunSortableField.CREATED_AT_ASC
        page = await _page(db_session, sort)
        before = page.cursor(page.items[2])

        preceding = await _page(db_session, sort, first=10, before=before)

        assert [run.id for run in preceding.items] == [run.id for run in runs[0:2]]
        assert preceding.page_info.has_previous_page is False
        assert preceding.page_info.has_next_page is True

    @pytest.mark.asyncio
    async def test_unbounded_returns_everything(self, db_session, runs):
        page = await _page(db_session, None)

        assert len(page.items) == 10
        assert page.page_info.has_next_page is False
        assert page.page_info.has_previous_page is False

    @pytest.mark.asyncio
    async def test_empty_table(self, db_session):
        page = await _page(db_session, RunSortableField.CREATED_AT_DESC, first=5)

        assert page.items == []
        assert page.start_cursor is None
        assert page.page_info.has_next_page is False


# ============================================================================
# Cursors
# ============================================================================


class TestCursors:
    """Cursor production and validation."""

    @pytest.mark.asyncio
    async def test_cursor_round_trip(self, db_session, runs):
        page = await _page(db_session, RunSortableField.STATUS_ASC, first=3)
        token = page.end_cursor

        cursor = CursorCodec.decode(token)
        last = page.items[-1]

        assert CursorCodec.encode(cursor) == token
        assert cursor.primary.name == "status"
        assert cursor.primary.value == last.status
        assert cursor.secondary.name == "id"
        assert cursor.secondary.value == format_cursor_value(last.id)

    @pytest.mark.asyncio
    async def test_after_cursor_excludes_its_row(self, db_session, runs):
        page = await _page(db_session, RunSortableField.CREATED_AT_DESC, first=1)

        following = await _page(
            db_session, RunSortableField.CREATED_AT_DESC, first=1, after=page.end_cursor
        )

        assert following.items[0].id != page.items[0].id
        assert following.items[0].created_at < page.items[0].created_at

    @pytest.mark.asyncio
    async def test_cursor_from_other_sort_is_rejected(self, db_session, runs):
        page = await _page(db_session, RunSortableField.CREATED_AT_ASC, first=2)

        with pytest.raises(InvalidPaginationError, match="does not match"):
            await _page(db_session, RunSortableField.STATUS_ASC, first=2, after=page.end_cursor)

    @pytest.mark.asyncio
    async def test_direction_change_keeps_cursor_valid(self, db_session, runs):
        page = await _page(db_session, RunSortableField.CREATED_AT_ASC, first=5)

        descending = await _page(
            db_session, RunSortableField.CREATED_AT_DESC, first=10, after=page.end_cursor
        )

        assert [run.id for run in descending.items] == [run.id for run in reversed(runs[0:4])]


# ============================================================================
# Validation and counting
# ============================================================================


class TestValidation:
    """Invalid requests never reach the database."""

    @pytest.mark.asyncio
    async def test_first_and_last_rejected_before_query(self):
        session = AsyncMock(spec=AsyncSession)

        with pytest.raises(InvalidPaginationError, match="only first or last"):
            await BaseRepository(Run).paginate(
                session, select(Run), options=PaginationOptions(first=1, last=1)
            )

        session.stream.assert_not_called()
        session.execute.assert_not_called()

    @pytest.mark.asyncio
    async def test_after_and_before_rejected_before_query(self):
        session = AsyncMock(spec=AsyncSession)

        with pytest.raises(InvalidPaginationError, match="only before or after"):
            await BaseRepository(Run).paginate(
                session,
                select(Run),
                options=PaginationOptions(first=3, after="x", before="y"),
            )

        session.stream.assert_not_called()
        session.execute.assert_not_called()

    @pytest.mark.asyncio
    async def test_negative_first_rejected(self, db_session):
        with pytest.raises(InvalidPaginationError):
            await _page(db_session, None, first=-1)

    @pytest.mark.asyncio
    async def test_total_count(self, db_session, runs):
        page = await BaseRepository(Run).paginate(
            db_session,
            select(Run).where(Run.status == RunStatus.APPLIED.value),
            options=PaginationOptions(first=1),
            include_total=True,
        )

        assert page.page_info.total_count == 4
        assert len(page.items) == 1

    @pytest.mark.asyncio
    async def test_total_count_omitted_by_default(self, db_session, runs):
        page = await _page(db_session, None, first=1)

        assert page.page_info.total_count is None


# ============================================================================
# Nullable sort columns
# ============================================================================


class _TaskBase(DeclarativeBase):
    pass


class _Task(_TaskBase):
    __tablename__ = "tasks"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    title: Mapped[str] = mapped_column(String(50))
    priority: Mapped[int | None] = mapped_column(Integer, nullable=True)

    def resolve_metadata(self, key: str) -> str | None:
        return format_cursor_value(getattr(self, key))


TASK_PRIORITY = FieldDescriptor.from_attribute(_Task.priority)
PRIORITIES = [3, None, 1, 3, None, 2, 1, None, 2, 3]


@pytest.fixture
async def task_session(db_engine: AsyncEngine) -> AsyncGenerator[AsyncSession]:
    async with db_engine.begin() as conn:
        await conn.run_sync(_TaskBase.metadata.create_all)

    async with async_sessionmaker(db_engine, expire_on_commit=False)() as session:
        session.add_all(
            [
                _Task(id=i + 1, title=f"task-{i + 1}", priority=priority)
                for i, priority in enumerate(PRIORITIES)
            ]
        )
        await session.flush()
        yield session
        await session.rollback()

    async with db_engine.begin() as conn:
        await conn.run_sync(_TaskBase.metadata.drop_all)


def _nulls_greatest(task_id: int) -> tuple[bool, int, int]:
    priority = PRIORITIES[task_id - 1]
    return (priority is None, priority or 0, task_id)


class TestNullableSort:
    """NULL sort values order as the greatest value."""

    async def _walk(self, session: AsyncSession, sort: SortSpec, **options: Any) -> list[int]:
        repo = BaseRepository(_Task)
        backward = "last" in options
        size = options.pop("last", None) or options.pop("first")
        cursor: str | None = None
        pages: list[list[int]] = []
        while True:
            if backward:
                opts = PaginationOptions(last=size, before=cursor)
            else:
                opts = PaginationOptions(first=size, after=cursor)
            page = await repo.paginate(session, select(_Task), options=opts, sort=sort)
            pages.append([task.id for task in page.items])
            more = page.page_info.has_previous_page if backward else page.page_info.has_next_page
            if not more:
                break
            cursor = page.start_cursor if backward else page.end_cursor
        if backward:
            pages.reverse()
        return [task_id for page in pages for task_id in page]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("size", [1, 2, 4])
    async def test_ascending_puts_nulls_last(self, task_session, size):
        sort = SortSpec(field=TASK_PRIORITY, direction=SortDirection.ASC)
        expected = sorted(range(1, 11), key=_nulls_greatest)

        assert await self._walk(task_session, sort, first=size) == expected
        assert await self._walk(task_session, sort, last=size) == expected

    @pytest.mark.asyncio
    @pytest.mark.parametrize("size", [1, 2, 4])
    async def test_descending_puts_nulls_first(self, task_session, size):
        sort = SortSpec(field=TASK_PRIORITY, direction=SortDirection.DESC)
        expected = sorted(range(1, 11), key=_nulls_greatest, reverse=True)

        assert await self._walk(task_session, sort, first=size) == expected
        assert await self._walk(task_session, sort, last=size) == expected

    @pytest.mark.asyncio
    async def test_expanded_predicates_match(self, task_session, monkeypatch):
        sort = SortSpec(field=TASK_PRIORITY, direction=SortDirection.ASC)
        monkeypatch.setenv("PAGINATION_ROW_COMPARISON", "false")
        clear_all_caches()

        assert await self._walk(task_session, sort, first=3) == sorted(
            range(1, 11), key=_nulls_greatest
        )
