"""Groups feature package."""

from .repository import (
    GROUP_SORTS,
    GroupFilter,
    GroupRepository,
    GroupSortableField,
    get_group_repository,
)
from .router import router

__all__ = [
    "GROUP_SORTS",
    "GroupFilter",
    "GroupRepository",
    "GroupSortableField",
    "get_group_repository",
    "router",
]
