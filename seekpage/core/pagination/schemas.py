"""Pagination response schemas.

Two response styles are built from the same ``Page``:

1. Connection (Relay style): edges carrying a node and its cursor, plus
   navigation metadata. Every item can be resumed from.
2. CursorPage (REST style): items, next/previous cursors and ``has_more``.
"""

from __future__ import annotations

from typing import Generic, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class ConnectionPageInfo(BaseModel):
    """Navigation metadata of a Connection.

    Attributes:
        has_previous_page: Whether there are items before the current page
        has_next_page: Whether there are items after the current page
        start_cursor: Cursor of the first item in this page
        end_cursor: Cursor of the last item in this page
        total_count: Total number of matching items (only when requested)
    """

    has_previous_page: bool = Field(description="Whether previous items exist")
    has_next_page: bool = Field(description="Whether more items exist")
    start_cursor: str | None = Field(
        default=None,
        description="Cursor of the first item",
    )
    end_cursor: str | None = Field(
        default=None,
        description="Cursor of the last item",
    )
    total_count: int | None = Field(
        default=None,
        description="Total count (optional)",
    )


class Edge(BaseModel, Generic[T]):
    """One item of a Connection together with its cursor."""

    node: T = Field(description="The data item")
    cursor: str = Field(description="Cursor for this item")


class Connection(BaseModel, Generic[T]):
    """Relay-style paginated response.

    Client navigation:
        # First page
        GET /groups?first=10

        # Next page (end_cursor of the previous response)
        GET /groups?first=10&after=WyJpZCIsIjZiMWMuLi4iXQ==

        # Previous page (start_cursor of the current response)
        GET /groups?last=10&before=WyJpZCIsIjZiMWMuLi4iXQ==

    A cursor is only valid together with the ``sort`` it was produced under.
    """

    edges: list[Edge[T]] = Field(
        default_factory=list,
        description="List of edges (items with cursors)",
    )
    page_info: ConnectionPageInfo = Field(description="Pagination metadata")

    @property
    def nodes(self) -> list[T]:
        """Items without their edge wrappers."""
        return [edge.node for edge in self.edges]

    def to_cursor_page(self) -> CursorPage[T]:
        """Convert to the REST-style response."""
        return CursorPage(
            items=self.nodes,
            next_cursor=self.page_info.end_cursor if self.page_info.has_next_page else None,
            prev_cursor=self.page_info.start_cursor if self.page_info.has_previous_page else None,
            has_more=self.page_info.has_next_page,
            total_count=self.page_info.total_count,
        )


class CursorPage(BaseModel, Generic[T]):
    """REST-style paginated response.

    Attributes:
        items: List of data items
        next_cursor: ``after`` value for the next page (None if no more)
        prev_cursor: ``before`` value for the previous page (None at the start)
        has_more: Whether more items exist after this page
        total_count: Total count (optional)
    """

    items: list[T] = Field(default_factory=list, description="List of items")
    next_cursor: str | None = Field(default=None, description="Cursor to fetch next page")
    prev_cursor: str | None = Field(default=None, description="Cursor to fetch previous page")
    has_more: bool = Field(default=False, description="Whether more items exist")
    total_count: int | None = Field(default=None, description="Total count (optional)")


__all__ = [
    "Connection",
    "ConnectionPageInfo",
    "CursorPage",
    "Edge",
]
