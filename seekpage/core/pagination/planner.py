"""Seek predicate and ordering planner.

Turns a filtered ``select()`` into a keyset-paginated one:

1. ``ORDER BY sort dir, tiebreaker dir``: the identifier is appended in the
   same direction so ``(sort, tiebreaker)`` is a strict total order.
2. ``WHERE (sort, tiebreaker) > (:v, :tv)`` for an ``after`` cursor in
   ascending order (``<`` descending; inverted for ``before``). Without
   native row values the predicate expands to
   ``sort > :v OR (sort = :v AND tiebreaker > :tv)``.
3. ``LIMIT first + 1`` (or ``last + 1``): the extra row tells the finalizer
   whether another page exists without a COUNT query.

For ``last`` (and for ``first`` with ``before``) the ordering is flipped so
the rows nearest the upper edge are fetched first; the finalizer restores
canonical order afterwards.

Nullable sort columns treat NULL as greater than every value: ascending
order is ``NULLS LAST``, descending is ``NULLS FIRST``, and seek predicates
follow the same rule.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from enum import Enum, StrEnum
from typing import TYPE_CHECKING, Any
from uuid import UUID

from sqlalchemy import and_, literal, or_, tuple_

from seekpage.core.pagination.cursor import Cursor, CursorCodec
from seekpage.core.pagination.exceptions import InvalidCursorError, InvalidPaginationError
from seekpage.core.pagination.sorting import FieldDescriptor, SortDirection, SortSpec
from seekpage.infra.logging import get_lazy_logger

if TYPE_CHECKING:
    from sqlalchemy import ColumnElement, Select
    from sqlalchemy.sql.elements import UnaryExpression
    from sqlalchemy.types import TypeEngine

    from seekpage.core.pagination.options import PaginationOptions

_lazy = get_lazy_logger(__name__)


class SeekOperator(StrEnum):
    """Comparison applied to the composite key."""

    GT = "GT"
    LT = "LT"


@dataclass(frozen=True, slots=True)
class PlannedQuery:
    """Result of planning a paginated query.

    Attributes:
        statement: Statement with seek predicates, ORDER BY and LIMIT applied.
        direction: Physical direction the rows are fetched in.
        was_reversed: True when ``direction`` is the opposite of the
            canonical sort direction (``last`` pages).
        limit: Requested page size (without the over-fetch row), or None.
        after: Decoded ``after`` cursor, if any.
        before: Decoded ``before`` cursor, if any.
    """

    statement: Select[Any]
    direction: SortDirection
    was_reversed: bool
    limit: int | None
    after: Cursor | None = None
    before: Cursor | None = None


def plan_query(
    statement: Select[Any],
    *,
    tiebreaker: FieldDescriptor,
    sort: SortSpec | None,
    options: PaginationOptions,
    row_comparison: bool = True,
) -> PlannedQuery:
    """Plan a keyset-paginated query.

    Args:
        statement: Filtered select without ORDER BY or LIMIT.
        tiebreaker: Unique identifier field.
        sort: Resolved sort; defaults to ascending by the tiebreaker.
        options: Pagination options (already verified).
        row_comparison: Use native row-value comparison for seeks.

    Returns:
        The planned query.

    Raises:
        InvalidCursorError: If a cursor cannot be decoded or its values
            cannot be converted to the column types.
        InvalidPaginationError: If a cursor was built for another sort.
    """
    sort = sort or SortSpec(field=tiebreaker)

    after = _decode(options.after, tiebreaker, sort)
    before = _decode(options.before, tiebreaker, sort)

    forward_op = SeekOperator.GT if sort.direction is SortDirection.ASC else SeekOperator.LT
    backward_op = SeekOperator.LT if forward_op is SeekOperator.GT else SeekOperator.GT

    if after is not None:
        statement = statement.where(
            _seek_condition(after, forward_op, tiebreaker, sort, row_comparison)
        )
    if before is not None:
        statement = statement.where(
            _seek_condition(before, backward_op, tiebreaker, sort, row_comparison)
        )

    was_reversed = options.is_backward
    direction = sort.direction.reversed if was_reversed else sort.direction
    statement = statement.order_by(*_order_by(tiebreaker, sort, direction))

    limit = options.limit
    if limit is not None:
        # One extra row signals that another page exists
        statement = statement.limit(limit + 1)

    _lazy.debug(
        lambda: (
            f"pagination.plan: sort={sort.field.key} {sort.direction} "
            f"fetch={direction} limit={limit} after={after is not None} before={before is not None}"
        )
    )

    return PlannedQuery(
        statement=statement,
        direction=direction,
        was_reversed=was_reversed,
        limit=limit,
        after=after,
        before=before,
    )


def _decode(token: str | None, tiebreaker: FieldDescriptor, sort: SortSpec) -> Cursor | None:
    """Decode a cursor and verify it was produced for this sort."""
    if token is None:
        return None

    cursor = CursorCodec.decode(token)

    if sort.is_unique_for(tiebreaker):
        matches = cursor.secondary is None and cursor.primary.name == tiebreaker.key
    else:
        matches = (
            cursor.secondary is not None
            and cursor.primary.name == sort.field.key
            and cursor.secondary.name == tiebreaker.key
        )

    if not matches:
        raise InvalidPaginationError(
            "sort by argument does not match cursor",
            extra={"sort": sort.field.key},
        )

    if cursor.tiebreak_value is None:
        raise InvalidCursorError("Invalid cursor: identifier value cannot be null")

    return cursor


def _order_by(
    tiebreaker: FieldDescriptor,
    sort: SortSpec,
    direction: SortDirection,
) -> list[UnaryExpression[Any]]:
    """Build ORDER BY expressions for the physical fetch direction."""
    expressions: list[UnaryExpression[Any]] = []

    if not sort.is_unique_for(tiebreaker):
        sort_expr = sort.expression()
        if direction is SortDirection.ASC:
            ordered = sort_expr.asc()
            if sort.field.nullable:
                ordered = ordered.nulls_last()
        else:
            ordered = sort_expr.desc()
            if sort.field.nullable:
                ordered = ordered.nulls_first()
        expressions.append(ordered)

    tiebreak_expr = tiebreaker.expression()
    if sort.is_unique_for(tiebreaker):
        tiebreak_expr = sort.apply_transform(tiebreak_expr)
    expressions.append(
        tiebreak_expr.asc() if direction is SortDirection.ASC else tiebreak_expr.desc()
    )
    return expressions


def _seek_condition(
    cursor: Cursor,
    op: SeekOperator,
    tiebreaker: FieldDescriptor,
    sort: SortSpec,
    row_comparison: bool,
) -> ColumnElement[bool]:
    """Build the WHERE condition selecting rows strictly past ``cursor``."""
    tiebreak_expr = tiebreaker.expression()
    tiebreak_value = literal(
        coerce_cursor_value(cursor.tiebreak_value, tiebreaker.type_),
        type_=tiebreaker.type_,
    )

    if sort.is_unique_for(tiebreaker):
        tiebreak_expr = sort.apply_transform(tiebreak_expr)
        tiebreak_value = sort.apply_transform(tiebreak_value)
        return _compare(tiebreak_expr, op, tiebreak_value)

    sort_expr = sort.expression()
    raw_value = cursor.primary.value

    if raw_value is None:
        # NULL sorts after every value
        same_bucket = and_(sort_expr.is_(None), _compare(tiebreak_expr, op, tiebreak_value))
        if op is SeekOperator.GT:
            return same_bucket
        return or_(sort_expr.is_not(None), same_bucket)

    sort_value = sort.apply_transform(
        literal(coerce_cursor_value(raw_value, sort.field.type_), type_=sort.field.type_)
    )

    if row_comparison:
        condition = _compare(
            tuple_(sort_expr, tiebreak_expr),
            op,
            tuple_(sort_value, tiebreak_value),
        )
    else:
        condition = or_(
            _compare(sort_expr, op, sort_value),
            and_(sort_expr == sort_value, _compare(tiebreak_expr, op, tiebreak_value)),
        )

    if sort.field.nullable and op is SeekOperator.GT:
        condition = or_(condition, sort_expr.is_(None))
    return condition


def _compare(left: Any, op: SeekOperator, right: Any) -> ColumnElement[bool]:
    return left > right if op is SeekOperator.GT else left < right


def coerce_cursor_value(value: str | None, type_: TypeEngine[Any] | None) -> Any:
    """Convert a cursor string back to the column's Python type.

    Values stay strings on the wire; they are converted here so the
    database compares them as the column type (timestamps, UUIDs, numbers)
    rather than as text.

    Raises:
        InvalidCursorError: If the string is not a valid value of the type.
    """
    if value is None or type_ is None:
        return value

    try:
        python_type = type_.python_type
    except NotImplementedError:
        return value

    try:
        if python_type is bool:
            if value not in ("true", "false"):
                raise ValueError(f"invalid boolean {value!r}")
            return value == "true"
        if issubclass(python_type, datetime):
            return datetime.fromisoformat(value)
        if issubclass(python_type, date):
            return date.fromisoformat(value)
        if issubclass(python_type, UUID):
            return UUID(value)
        if issubclass(python_type, Enum):
            return python_type(value)
        if issubclass(python_type, int | float | Decimal):
            return python_type(value)
    except (ValueError, InvalidOperation) as e:
        raise InvalidCursorError(
            f"Invalid cursor: value is not a valid {python_type.__name__}",
            extra={"value": value},
        ) from e

    return value


__all__ = ["PlannedQuery", "SeekOperator", "coerce_cursor_value", "plan_query"]
