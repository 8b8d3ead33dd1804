"""SQL identifier validation utilities.

Field descriptors name their table and column as plain strings, which end up
inside ORDER BY and WHERE clauses. These helpers validate such identifiers
and render them quoted, so a descriptor can never smuggle SQL into a query.

Example:
    from seekpage.core.database.validation import qualified_column

    qualified_column("groups", "full_path")  # '"groups"."full_path"'
"""

from __future__ import annotations

import re

# PostgreSQL identifier rules:
# - Max 63 characters
# - Start with letter or underscore
# - Contain letters, digits, underscores, dollar signs
VALID_IDENTIFIER = re.compile(r"^[a-zA-Z_][a-zA-Z0-9_$]*$")
MAX_IDENTIFIER_LENGTH = 63


class IdentifierValidationError(ValueError):
    """Invalid SQL identifier."""


def validate_identifier(name: str, *, identifier_type: str = "identifier") -> str:
    """Validate a SQL identifier.

    Args:
        name: The identifier to validate
        identifier_type: Type description for error messages (e.g., "table", "column")

    Returns:
        The validated identifier (unchanged if valid)

    Raises:
        IdentifierValidationError: If the identifier is invalid

    Example:
        >>> validate_identifier("namespaces")
        'namespaces'
        >>> validate_identifier("path; DROP TABLE groups")  # Raises
        IdentifierValidationError: Invalid column name ...
    """
    if not name:
        msg = f"Empty {identifier_type} name not allowed"
        raise IdentifierValidationError(msg)

    if len(name) > MAX_IDENTIFIER_LENGTH:
        msg = f"{identifier_type} name exceeds maximum length of {MAX_IDENTIFIER_LENGTH}"
        raise IdentifierValidationError(msg)

    if not VALID_IDENTIFIER.match(name):
        msg = (
            f"Invalid {identifier_type} name: must start with letter or underscore, "
            "contain only letters, digits, underscores, or dollar signs"
        )
        raise IdentifierValidationError(msg)

    return name


def qualified_column(table: str, column: str) -> str:
    """Return a quoted ``"table"."column"`` reference.

    Raises:
        IdentifierValidationError: If either part is invalid
    """
    validated_table = validate_identifier(table, identifier_type="table")
    validated_column = validate_identifier(column, identifier_type="column")
    return f'"{validated_table}"."{validated_column}"'


__all__ = ["IdentifierValidationError", "qualified_column", "validate_identifier"]
