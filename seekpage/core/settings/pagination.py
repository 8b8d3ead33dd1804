"""Pagination settings for cursor-paginated list operations.

Environment variables use PAGINATION_ prefix.
Example: PAGINATION_MAX_PAGE_SIZE=500, PAGINATION_ROW_COMPARISON=false
"""

from __future__ import annotations

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class PaginationSettings(BaseSettings):
    """Pagination configuration settings.

    Attributes:
        default_page_size: Page size used by the HTTP binding when the
            request sets neither ``first`` nor ``last``.
        max_page_size: Largest accepted ``first``/``last``. Larger requests
            are rejected as invalid rather than clamped.
        row_comparison: Emit native row-value comparisons
            (``(a, b) > (:a, :b)``) for seek predicates. Disable for dialects
            without row-value support to get the expanded OR form.
        include_total_count: Whether list operations run an extra
            ``COUNT(*)`` to report ``total_count``.
    """

    default_page_size: int = Field(
        default=50,
        ge=1,
        le=10000,
        description="Page size when first/last are not provided",
    )
    max_page_size: int = Field(
        default=1000,
        ge=1,
        le=100000,
        description="Maximum allowed first/last value",
    )
    row_comparison: bool = Field(
        default=True,
        description="Use native row-value comparison for seek predicates",
    )
    include_total_count: bool = Field(
        default=False,
        description="Run a COUNT(*) query to populate total_count",
    )

    @model_validator(mode="after")
    def _validate_page_sizes(self) -> PaginationSettings:
        """Ensure default_page_size <= max_page_size."""
        if self.default_page_size > self.max_page_size:
            msg = (
                f"default_page_size ({self.default_page_size}) must be <= "
                f"max_page_size ({self.max_page_size})"
            )
            raise ValueError(msg)
        return self

    model_config = SettingsConfigDict(
        env_prefix="PAGINATION_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        frozen=True,
        extra="ignore",
    )
