"""Core database package: declarative base, mixins and repository.

Base Classes and Mixins:
    - Base: Declarative base with constraint naming and auto table naming
    - UUIDPKMixin: UUID primary key (the pagination tiebreaker)
    - TimestampMixin: created_at, updated_at tracking
    - ResourceMetadataMixin: cursor metadata for id and timestamps

Repository:
    - BaseRepository[T]: CRUD plus cursor pagination, explicit session passing

Validation:
    - validate_identifier: Validate SQL identifiers against injection
    - qualified_column: Quoted "table"."column" references

Exceptions:
    - RepositoryError: Base exception for repository operations
    - NotFoundError: Entity not found (404-like)
    - IdentifierValidationError: Invalid SQL identifier
"""

from seekpage.core.database.base import (
    NAMING_CONVENTION,
    Base,
    ResourceMetadataMixin,
    TimestampMixin,
    UUIDPKMixin,
)
from seekpage.core.database.exceptions import NotFoundError, RepositoryError
from seekpage.core.database.repository import BaseRepository
from seekpage.core.database.validation import (
    IdentifierValidationError,
    qualified_column,
    validate_identifier,
)

__all__ = [
    "NAMING_CONVENTION",
    "Base",
    "BaseRepository",
    "IdentifierValidationError",
    "NotFoundError",
    "RepositoryError",
    "ResourceMetadataMixin",
    "TimestampMixin",
    "UUIDPKMixin",
    "qualified_column",
    "validate_identifier",
]
