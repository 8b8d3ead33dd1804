"""Cursor encoding and decoding for pagination.

Cursors are opaque strings that encode a page boundary: the sort-field value
and the tiebreaker (identifier) value of one row. The next query seeks
directly past that row.

The wire format is an ordered JSON array of strings, URL-safe base64 encoded:

    ["full_path", "org/team", "id", "6b1c..."]   # sort field + tiebreaker
    ["id", "6b1c..."]                            # sorting by the identifier

An array rather than an object keeps tokens short and field order explicit.
Clients persist cursors between requests, so this format must stay stable.
The sort value may be ``null`` when the sort column is nullable; the
identifier value never is.
"""

from __future__ import annotations

import base64
import binascii
import json
from datetime import date, datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from seekpage.core.pagination.exceptions import InvalidCursorError


class CursorField(BaseModel):
    """One ``(name, value)`` pair of a cursor."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1, description="Logical field key")
    value: str | None = Field(description="Field value in its string form")


class Cursor(BaseModel):
    """Decoded cursor.

    Attributes:
        primary: Sort-field value at the page boundary. When sorting by the
            identifier this is the identifier itself.
        secondary: Identifier value at the same row; present whenever the
            sort field is not the identifier.
    """

    model_config = ConfigDict(frozen=True)

    primary: CursorField
    secondary: CursorField | None = None

    @property
    def tiebreak_value(self) -> str | None:
        """Value of the unique identifier carried by this cursor."""
        return self.secondary.value if self.secondary else self.primary.value


class CursorCodec:
    """Encode and decode pagination cursors.

    Usage:
        token = CursorCodec.encode(Cursor(
            primary=CursorField(name="created_at", value="2026-01-15T10:30:00"),
            secondary=CursorField(name="id", value="abc-123"),
        ))

        cursor = CursorCodec.decode(token)
        cursor.primary.value  # "2026-01-15T10:30:00"
    """

    @staticmethod
    def encode(cursor: Cursor) -> str:
        """Encode a cursor to an opaque string.

        Args:
            cursor: Cursor to encode

        Returns:
            URL-safe base64 encoded string
        """
        fields: list[str | None] = [cursor.primary.name, cursor.primary.value]
        if cursor.secondary is not None:
            fields.extend([cursor.secondary.name, cursor.secondary.value])

        json_str = json.dumps(fields, separators=(",", ":"), ensure_ascii=False)
        return base64.urlsafe_b64encode(json_str.encode("utf-8")).decode("ascii")

    @staticmethod
    def decode(token: str) -> Cursor:
        """Decode a cursor string.

        Args:
            token: URL-safe base64 encoded cursor string

        Returns:
            Decoded cursor

        Raises:
            InvalidCursorError: If the token is not base64, not a JSON array,
                has other than 2 or 4 elements, or holds non-string entries.
        """
        try:
            raw = base64.b64decode(token.encode("ascii"), altchars=b"-_", validate=True)
            payload = json.loads(raw.decode("utf-8"))
        except (UnicodeError, binascii.Error, ValueError) as e:
            raise InvalidCursorError(f"Invalid cursor: {e}") from e

        if not isinstance(payload, list) or len(payload) not in (2, 4):
            raise InvalidCursorError(
                "Invalid cursor: expected an array of 2 or 4 elements",
                extra={"elements": len(payload) if isinstance(payload, list) else None},
            )

        names = payload[0::2]
        values = payload[1::2]
        if not all(isinstance(name, str) and name for name in names):
            raise InvalidCursorError("Invalid cursor: field names must be non-empty strings")

        # Only the sort value of a four-element cursor may be null
        nullable = [len(payload) == 4, False]
        for value, allow_null in zip(values, nullable, strict=False):
            if value is None and allow_null:
                continue
            if not isinstance(value, str):
                raise InvalidCursorError("Invalid cursor: field values must be strings")

        primary = CursorField(name=names[0], value=values[0])
        secondary = CursorField(name=names[1], value=values[1]) if len(payload) == 4 else None
        return Cursor(primary=primary, secondary=secondary)


def format_cursor_value(value: Any) -> str | None:
    """Render a record attribute in the string form cursors carry.

    Handles the types sortable columns usually hold. Datetimes use ISO 8601
    so ``datetime.fromisoformat`` restores them exactly.
    """
    if value is None:
        return None
    if isinstance(value, Enum):
        return format_cursor_value(value.value)
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, datetime | date):
        return value.isoformat()
    # UUID, Decimal, int, float
    return str(value)


__all__ = ["Cursor", "CursorCodec", "CursorField", "format_cursor_value"]
