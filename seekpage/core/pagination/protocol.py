"""Record capability required to build cursors."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class CursorPaginatable(Protocol):
    """A record that can report its sortable values.

    ``resolve_metadata`` receives a field key registered in the entity's
    ``SortRegistry`` (or the tiebreaker key) and returns the value in its
    cursor string form, or None when the field holds NULL.

    Implementations raise ``InvalidSortError`` for keys they do not know.
    """

    def resolve_metadata(self, key: str) -> str | None: ...


__all__ = ["CursorPaginatable"]
