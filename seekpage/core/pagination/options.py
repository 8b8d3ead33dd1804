"""Pagination request options."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from seekpage.core.pagination.exceptions import InvalidPaginationError


class PaginationOptions(BaseModel):
    """Cursor pagination options for one list request.

    ``first`` reads forward from the start (or from ``after``); ``last``
    reads backward from the end (or from ``before``). Only one of the two
    may be set, and likewise only one of ``after`` and ``before``. Either
    cursor may be combined with either count: ``first`` with ``before``
    returns the rows immediately preceding the cursor.

    Range checks are performed by ``verify`` rather than field constraints
    so that every problem surfaces as an ``InvalidPaginationError``.
    """

    model_config = ConfigDict(frozen=True)

    first: int | None = Field(default=None, description="Rows to return from the start")
    last: int | None = Field(default=None, description="Rows to return from the end")
    after: str | None = Field(default=None, description="Return rows after this cursor")
    before: str | None = Field(default=None, description="Return rows before this cursor")

    @property
    def limit(self) -> int | None:
        """Requested page size, whichever of first/last is set."""
        return self.first if self.first is not None else self.last

    @property
    def is_backward(self) -> bool:
        """Whether rows are fetched towards the start, nearest the upper edge first.

        True for ``last`` and for ``first`` with ``before``; the finalizer
        restores canonical order.
        """
        return self.last is not None or (self.first is not None and self.before is not None)

    @property
    def has_cursor(self) -> bool:
        """Whether any page boundary was supplied."""
        return self.after is not None or self.before is not None

    def verify(self, *, max_page_size: int) -> None:
        """Raise ``InvalidPaginationError`` if the options cannot be honoured.

        Args:
            max_page_size: Largest accepted first/last value.
        """
        if self.first is not None and self.last is not None:
            raise InvalidPaginationError("only first or last can be defined, not both")
        if self.after is not None and self.before is not None:
            raise InvalidPaginationError("only before or after can be defined, not both")

        for name, value in (("first", self.first), ("last", self.last)):
            if value is None:
                continue
            if value < 0:
                raise InvalidPaginationError(
                    f"{name} must be a non-negative integer",
                    extra={name: value},
                )
            if value > max_page_size:
                raise InvalidPaginationError(
                    f"{name} must not exceed {max_page_size}",
                    extra={name: value, "max_page_size": max_page_size},
                )


__all__ = ["PaginationOptions"]
