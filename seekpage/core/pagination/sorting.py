"""Sort specification: logical sort keys mapped to physical columns.

Each entity module declares its closed set of sort keys as a ``StrEnum`` and
registers them in a ``SortRegistry`` together with the entity's tiebreaker
(its unique identifier column). The direction is part of the key's name:

    class GroupSortableField(StrEnum):
        FULL_PATH_ASC = "FULL_PATH_ASC"
        FULL_PATH_DESC = "FULL_PATH_DESC"

    GROUP_SORTS = SortRegistry(
        tiebreaker=FieldDescriptor.from_attribute(Group.id),
        options={
            GroupSortableField.FULL_PATH_ASC: SortOption(FULL_PATH),
            GroupSortableField.FULL_PATH_DESC: SortOption(FULL_PATH),
        },
    )

    sort = GROUP_SORTS.resolve(GroupSortableField.FULL_PATH_DESC)

Registries are ordinary objects handed to the repository that uses them;
there is no process-wide table of sort fields.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING, Any

from sqlalchemy import ColumnElement, literal_column

from seekpage.core.database.validation import qualified_column
from seekpage.core.pagination.exceptions import InvalidSortError

if TYPE_CHECKING:
    from sqlalchemy.orm import InstrumentedAttribute
    from sqlalchemy.types import TypeEngine

SortTransform = Callable[[ColumnElement[Any]], ColumnElement[Any]]
"""Maps a column (or bound cursor value) to the expression actually sorted on."""

DESC_SUFFIX = "_DESC"


class SortDirection(StrEnum):
    """Direction of the composite ``(sort, tiebreaker)`` key."""

    ASC = "ASC"
    DESC = "DESC"

    @property
    def reversed(self) -> SortDirection:
        """The opposite direction."""
        return SortDirection.DESC if self is SortDirection.ASC else SortDirection.ASC

    @classmethod
    def from_key(cls, key: str) -> SortDirection:
        """Derive the direction from a sort key's ``_ASC``/``_DESC`` suffix."""
        return cls.DESC if key.upper().endswith(DESC_SUFFIX) else cls.ASC


@dataclass(frozen=True, slots=True)
class FieldDescriptor:
    """Logical field mapped to a physical ``table.column``.

    Attributes:
        key: Logical name; also the name written into cursors and the key
            records resolve through ``resolve_metadata``.
        table: Table name or alias the column is selected from.
        column: Physical column name.
        type_: Column type, used to turn cursor strings back into values
            the database compares correctly (datetimes, UUIDs, integers).
        nullable: Whether the column may hold NULL. Nullable sort columns
            get explicit NULLS LAST/FIRST ordering and null-aware seeks.
    """

    key: str
    table: str
    column: str
    type_: TypeEngine[Any] | None = field(default=None, compare=False)
    nullable: bool = False

    def __post_init__(self) -> None:
        # Fail at registration time rather than on first query
        qualified_column(self.table, self.column)

    @property
    def full_column_name(self) -> str:
        """Quoted ``"table"."column"`` reference."""
        return qualified_column(self.table, self.column)

    def expression(self) -> ColumnElement[Any]:
        """Column expression for use in ORDER BY and WHERE clauses."""
        return literal_column(self.full_column_name, type_=self.type_)

    @classmethod
    def from_attribute(
        cls,
        attribute: InstrumentedAttribute[Any],
        *,
        key: str | None = None,
    ) -> FieldDescriptor:
        """Build a descriptor from a mapped ORM attribute.

        Example:
            FieldDescriptor.from_attribute(Run.created_at)
            # FieldDescriptor(key="created_at", table="runs", column="created_at", ...)
        """
        column = attribute.expression
        return cls(
            key=key or attribute.key,
            table=column.table.name,
            column=column.name,
            type_=column.type,
            nullable=bool(getattr(column, "nullable", False)),
        )


@dataclass(frozen=True, slots=True)
class SortOption:
    """Registry entry for one sort key.

    Attributes:
        field: Column the key sorts on.
        transform: Optional expression wrapper, e.g. path depth instead of
            the path itself.
    """

    field: FieldDescriptor
    transform: SortTransform | None = None


@dataclass(frozen=True, slots=True)
class SortSpec:
    """Resolved sort for one request."""

    field: FieldDescriptor
    direction: SortDirection = SortDirection.ASC
    transform: SortTransform | None = None

    def expression(self) -> ColumnElement[Any]:
        """The sort column, wrapped by the transform when one is set."""
        return self.apply_transform(self.field.expression())

    def apply_transform(self, expr: ColumnElement[Any]) -> ColumnElement[Any]:
        """Apply the transform (if any) to a column or bound value."""
        return self.transform(expr) if self.transform is not None else expr

    def is_unique_for(self, tiebreaker: FieldDescriptor) -> bool:
        """Whether this sort is already a total order (sorting by the identifier)."""
        return self.field.key == tiebreaker.key


class SortRegistry:
    """Closed set of sort keys accepted by one entity module.

    Args:
        tiebreaker: The entity's unique identifier field.
        options: Mapping of sort key to its ``SortOption``.
    """

    __slots__ = ("tiebreaker", "_options")

    def __init__(self, tiebreaker: FieldDescriptor, options: Mapping[str, SortOption]) -> None:
        self.tiebreaker = tiebreaker
        self._options = {str(key): option for key, option in options.items()}

    @property
    def keys(self) -> frozenset[str]:
        """Registered sort keys."""
        return frozenset(self._options)

    def default(self) -> SortSpec:
        """Ascending by the identifier."""
        return SortSpec(field=self.tiebreaker, direction=SortDirection.ASC)

    def resolve(self, key: str | None) -> SortSpec:
        """Resolve a sort key, or the default sort when ``key`` is None.

        Raises:
            InvalidSortError: If the key is not registered. This means the
                caller and the registry disagree, so it is never silently
                replaced by the default ordering.
        """
        if key is None:
            return self.default()

        option = self._options.get(str(key))
        if option is None:
            raise InvalidSortError(
                f"Unknown sort key: {key}",
                extra={"sort": str(key), "allowed": sorted(self._options)},
            )

        return SortSpec(
            field=option.field,
            direction=SortDirection.from_key(str(key)),
            transform=option.transform,
        )

    def __contains__(self, key: object) -> bool:
        return str(key) in self._options

    def __repr__(self) -> str:
        return f"SortRegistry(tiebreaker={self.tiebreaker.key!r}, keys={sorted(self._options)!r})"


__all__ = [
    "DESC_SUFFIX",
    "FieldDescriptor",
    "SortDirection",
    "SortOption",
    "SortRegistry",
    "SortSpec",
    "SortTransform",
]
