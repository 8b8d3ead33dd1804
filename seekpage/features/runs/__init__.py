"""Runs feature package."""

from .repository import RUN_SORTS, RunFilter, RunRepository, RunSortableField, get_run_repository
from .router import router

__all__ = [
    "RUN_SORTS",
    "RunFilter",
    "RunRepository",
    "RunSortableField",
    "get_run_repository",
    "router",
]
