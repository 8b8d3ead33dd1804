"""Classified errors raised by the pagination engine.

Errors are classified rather than typed per call site. Every exception
carries an ``ErrorCode``:

- ``INVALID``: the request is wrong (bad cursor, conflicting or
  out-of-range page sizes). Fixable by the caller.
- ``INTERNAL``: the engine and an entity's sort registry disagree
  (unknown sort key, unknown metadata key). Never caused by external input.

Database errors are not wrapped; they propagate unchanged.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from seekpage.core.exceptions import BadRequestException, InternalServerException


class ErrorCode(StrEnum):
    """Classification shared by all pagination errors."""

    INVALID = "INVALID"
    INTERNAL = "INTERNAL"


class InvalidPaginationError(BadRequestException):
    """Pagination options or cursor cannot be honoured."""

    code = ErrorCode.INVALID

    def __init__(
        self,
        detail: str,
        type: str = "invalid-pagination",
        extra: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(detail=detail, type=type, extra={"code": self.code.value, **(extra or {})})


class InvalidCursorError(InvalidPaginationError):
    """Cursor token is malformed or carries an unusable value."""

    def __init__(self, detail: str, extra: dict[str, Any] | None = None) -> None:
        super().__init__(detail=detail, type="invalid-cursor", extra=extra)


class InvalidSortError(InternalServerException):
    """A sort or metadata key is not known to the entity registry."""

    code = ErrorCode.INTERNAL

    def __init__(self, detail: str, extra: dict[str, Any] | None = None) -> None:
        super().__init__(
            detail=detail,
            type="invalid-sort",
            extra={"code": self.code.value, **(extra or {})},
        )


__all__ = [
    "ErrorCode",
    "InvalidCursorError",
    "InvalidPaginationError",
    "InvalidSortError",
]
