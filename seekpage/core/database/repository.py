"""Minimal generic repository for SQLAlchemy models.

Provides lookups, inserts and the cursor-paginated "list" every entity
module delegates to. Sessions are always passed explicitly.

Example:
    class RunRepository(BaseRepository[Run]):
        async def get_runs(self, session, *, sort=None, options=None, filters=None):
            stmt = select(Run)
            if filters and filters.status:
                stmt = stmt.where(Run.status == filters.status)
            return await self.paginate(
                session, stmt, options=options, sort=RUN_SORTS.resolve(sort)
            )

    repo = RunRepository(Run)
    page = await repo.get_runs(session, options=PaginationOptions(first=20))
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Generic, TypeVar, cast

from sqlalchemy import inspect as sa_inspect
from sqlalchemy import select

from seekpage.core.database.exceptions import NotFoundError
from seekpage.infra.logging import get_lazy_logger

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from sqlalchemy import Select
    from sqlalchemy.ext.asyncio import AsyncSession
    from sqlalchemy.orm import InstrumentedAttribute

    from seekpage.core.pagination import FieldDescriptor, Page, PaginationOptions, SortSpec


T = TypeVar("T")


class BaseRepository(Generic[T]):
    """Minimal generic repository.

    Provides:
        - get(session, id) -> T | None
        - get_or_raise(session, id) -> T (raises NotFoundError)
        - create(session, instance) -> T
        - create_many(session, instances) -> Sequence[T]
        - paginate(session, statement, ...) -> Page[T]

    For queries not covered here, use the session directly.
    """

    __slots__ = ("model", "_logger", "_lazy")

    def __init__(self, model: type[T]) -> None:
        """Initialize repository with model class.

        Args:
            model: SQLAlchemy model class (e.g., Group, Run)
        """
        self.model = model
        # Standard logger for INFO/WARNING/ERROR
        self._logger = logging.getLogger(f"repository.{model.__name__}")
        # Lazy logger for DEBUG (zero overhead when DEBUG disabled)
        self._lazy = get_lazy_logger(f"repository.{model.__name__}")

    async def get(
        self,
        session: AsyncSession,
        id: Any,  # noqa: A002
        *,
        options: Iterable[Any] | None = None,
    ) -> T | None:
        """Get entity by primary key.

        Args:
            session: Database session
            id: Primary key value
            options: SQLAlchemy loader options (e.g., selectinload)

        Returns:
            Entity if found, None otherwise
        """
        if options:
            stmt = select(self.model).where(self._pk_attr() == id).options(*options)
            result = await session.execute(stmt)
            instance = result.scalar_one_or_none()
        else:
            instance = await session.get(self.model, id)

        self._lazy.debug(
            lambda: f"db.get: {self.model.__name__}({id}) -> {'found' if instance else 'not found'}"
        )
        return instance

    async def get_or_raise(
        self,
        session: AsyncSession,
        id: Any,  # noqa: A002
        *,
        options: Iterable[Any] | None = None,
    ) -> T:
        """Get entity by primary key or raise NotFoundError.

        Raises:
            NotFoundError: If entity doesn't exist
        """
        instance = await self.get(session, id, options=options)
        if instance is None:
            self._logger.info(
                "Entity not found",
                extra={
                    "entity": self.model.__name__,
                    "id": str(id),
                    "operation": "db.get_or_raise",
                },
            )
            raise NotFoundError(self.model.__name__, {"id": id})
        return instance

    async def create(self, session: AsyncSession, instance: T) -> T:
        """Persist a new entity.

        Adds to session, flushes to get generated values (like id),
        and refreshes to ensure instance is up-to-date.
        """
        session.add(instance)
        await session.flush()
        await session.refresh(instance)

        entity_id = getattr(instance, "id", None)
        self._lazy.debug(lambda: f"db.create: {self.model.__name__}(id={entity_id})")
        return instance

    async def create_many(self, session: AsyncSession, instances: Iterable[T]) -> Sequence[T]:
        """Persist multiple entities."""
        instances_list = list(instances)
        session.add_all(instances_list)
        await session.flush()
        for instance in instances_list:
            await session.refresh(instance)

        self._lazy.debug(
            lambda: f"db.create_many: {self.model.__name__} -> {len(instances_list)} created"
        )
        return instances_list

    async def paginate(
        self,
        session: AsyncSession,
        statement: Select[tuple[T]],
        *,
        options: PaginationOptions | None = None,
        sort: SortSpec | None = None,
        tiebreaker: FieldDescriptor | None = None,
        include_total: bool | None = None,
    ) -> Page[T]:
        """Execute a cursor-paginated query.

        Args:
            session: Database session
            statement: Filtered select of this model (no ORDER BY or LIMIT)
            options: first/last/after/before; None returns every row
            sort: Resolved sort; defaults to ascending by primary key
            tiebreaker: Unique field; defaults to the primary key
            include_total: Also count all matching rows. Defaults to
                ``PaginationSettings.include_total_count``.

        Returns:
            Page with items in canonical order and navigation state

        Raises:
            InvalidPaginationError: If options or cursors are invalid
            InvalidSortError: If a record cannot resolve a sort key

        Example:
            stmt = select(Group).where(Group.full_path.startswith("org/"))
            page = await repo.paginate(
                session,
                stmt,
                options=PaginationOptions(first=20, after=cursor_from_request),
                sort=GROUP_SORTS.resolve(GroupSortableField.FULL_PATH_ASC),
            )
            if page.page_info.has_next_page:
                next_cursor = page.end_cursor
        """
        from seekpage.core.pagination import FieldDescriptor, PaginatedQueryBuilder

        tiebreaker = tiebreaker or FieldDescriptor.from_attribute(self._pk_attr())
        builder = PaginatedQueryBuilder(options, tiebreaker, sort=sort)
        if include_total is None:
            include_total = builder.settings.include_total_count

        async with await builder.execute(session, statement, include_total=include_total) as rows:
            items = [item async for item in rows.scalars()]

        page = rows.finalize(items)
        self._lazy.debug(
            lambda: (
                f"db.paginate: {self.model.__name__}(sort={builder.sort.field.key} "
                f"{builder.sort.direction}) -> {len(page.items)} items, "
                f"next={page.page_info.has_next_page}, previous={page.page_info.has_previous_page}"
            )
        )
        return page

    def _pk_attr(self) -> InstrumentedAttribute[Any]:
        """Get primary key attribute.

        Inspects the model to find the primary key column.
        """
        mapper = sa_inspect(self.model)
        pk_cols = mapper.primary_key
        return cast("InstrumentedAttribute[Any]", getattr(self.model, pk_cols[0].key))


__all__ = ["BaseRepository"]
