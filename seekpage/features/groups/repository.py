"""Repository for the groups feature."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING, Any

from sqlalchemy import ColumnElement, func, select

from seekpage.core.database.repository import BaseRepository
from seekpage.core.pagination import FieldDescriptor, SortOption, SortRegistry
from seekpage.features.groups.models import PATH_SEPARATOR, Group

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from seekpage.core.pagination import Page, PaginationOptions


class GroupSortableField(StrEnum):
    """Sort keys accepted by ``GroupRepository.get_groups``."""

    FULL_PATH_ASC = "FULL_PATH_ASC"
    FULL_PATH_DESC = "FULL_PATH_DESC"
    GROUP_LEVEL_ASC = "GROUP_LEVEL_ASC"
    GROUP_LEVEL_DESC = "GROUP_LEVEL_DESC"
    UPDATED_AT_ASC = "UPDATED_AT_ASC"
    UPDATED_AT_DESC = "UPDATED_AT_DESC"


def path_depth(expr: ColumnElement[Any]) -> ColumnElement[Any]:
    """Number of segments in a slash-separated path expression."""
    separators = func.length(expr) - func.length(func.replace(expr, PATH_SEPARATOR, ""))
    return separators + 1


GROUP_ID = FieldDescriptor.from_attribute(Group.id)
GROUP_FULL_PATH = FieldDescriptor.from_attribute(Group.full_path)
GROUP_LEVEL = FieldDescriptor(
    key="group_level",
    table=Group.__tablename__,
    column="full_path",
    type_=Group.__table__.c.full_path.type,
)
GROUP_UPDATED_AT = FieldDescriptor.from_attribute(Group.updated_at)

GROUP_SORTS = SortRegistry(
    tiebreaker=GROUP_ID,
    options={
        GroupSortableField.FULL_PATH_ASC: SortOption(GROUP_FULL_PATH),
        GroupSortableField.FULL_PATH_DESC: SortOption(GROUP_FULL_PATH),
        GroupSortableField.GROUP_LEVEL_ASC: SortOption(GROUP_LEVEL, transform=path_depth),
        GroupSortableField.GROUP_LEVEL_DESC: SortOption(GROUP_LEVEL, transform=path_depth),
        GroupSortableField.UPDATED_AT_ASC: SortOption(GROUP_UPDATED_AT),
        GroupSortableField.UPDATED_AT_DESC: SortOption(GROUP_UPDATED_AT),
    },
)


@dataclass(frozen=True, slots=True)
class GroupFilter:
    """Filters for listing groups.

    Attributes:
        parent_path: Only direct children of this group.
        search: Case-insensitive substring of the full path.
        root_only: Only top-level groups.
    """

    parent_path: str | None = None
    search: str | None = None
    root_only: bool = False


class GroupRepository(BaseRepository[Group]):
    """Repository for Group model.

    Inherits from BaseRepository:
        - get(session, id) -> Group | None
        - get_or_raise(session, id) -> Group
        - create(session, instance) -> Group
        - create_many(session, instances) -> Sequence[Group]
        - paginate(session, statement, ...) -> Page[Group]

    Feature-specific methods below.
    """

    __slots__ = ("sorts",)

    def __init__(self, sorts: SortRegistry = GROUP_SORTS) -> None:
        """Initialize with Group model and its sort registry."""
        super().__init__(Group)
        self.sorts = sorts

    async def get_by_path(self, session: AsyncSession, full_path: str) -> Group | None:
        """Get a group by its full path."""
        result = await session.execute(select(Group).where(Group.full_path == full_path))
        return result.scalar_one_or_none()

    async def get_groups(
        self,
        session: AsyncSession,
        *,
        sort: GroupSortableField | None = None,
        options: PaginationOptions | None = None,
        filters: GroupFilter | None = None,
        include_total: bool | None = None,
    ) -> Page[Group]:
        """List groups one page at a time.

        Args:
            session: Database session
            sort: Sort key; defaults to ascending by id
            options: first/last/after/before
            filters: Optional parent, search and root-only filters
            include_total: Also count all matching groups

        Returns:
            Page of groups in the requested order
        """
        stmt = select(Group)
        if filters is not None:
            stmt = self._apply_filters(stmt, filters)

        self._lazy.debug(lambda: f"groups.list: sort={sort} filters={filters}")
        return await self.paginate(
            session,
            stmt,
            options=options,
            sort=self.sorts.resolve(sort),
            tiebreaker=self.sorts.tiebreaker,
            include_total=include_total,
        )

    @staticmethod
    def _apply_filters(stmt: Any, filters: GroupFilter) -> Any:
        if filters.parent_path is not None:
            parent = filters.parent_path.strip(PATH_SEPARATOR)
            stmt = stmt.where(
                Group.full_path.startswith(parent + PATH_SEPARATOR, autoescape=True),
                path_depth(Group.full_path) == parent.count(PATH_SEPARATOR) + 2,
            )
        if filters.root_only:
            stmt = stmt.where(~Group.full_path.contains(PATH_SEPARATOR))
        if filters.search:
            stmt = stmt.where(
                func.lower(Group.full_path).contains(filters.search.lower(), autoescape=True)
            )
        return stmt


# Factory function for dependency injection
_group_repository: GroupRepository | None = None


def get_group_repository() -> GroupRepository:
    """Get GroupRepository instance.

    Usage in FastAPI routes:
        @router.get("/")
        async def list_groups(
            session: AsyncSession = Depends(get_db_session),
            repo: GroupRepository = Depends(get_group_repository),
        ):
            return await repo.get_groups(session, options=options)
    """
    global _group_repository
    if _group_repository is None:
        _group_repository = GroupRepository()
    return _group_repository


__all__ = [
    "GROUP_SORTS",
    "GroupFilter",
    "GroupRepository",
    "GroupSortableField",
    "get_group_repository",
    "path_depth",
]
