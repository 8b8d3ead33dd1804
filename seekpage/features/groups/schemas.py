"""Pydantic schemas for the groups feature."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from seekpage.core.pagination import Connection


class GroupResponse(BaseModel):
    """Group as returned by the API."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    full_path: str = Field(description="Slash-separated path, unique across groups")
    name: str
    description: str | None = None
    parent_path: str | None = Field(default=None, description="Path of the parent group")
    level: int = Field(description="Depth in the hierarchy, 1 for root groups")
    created_at: datetime
    updated_at: datetime


GroupConnection = Connection[GroupResponse]


__all__ = ["GroupConnection", "GroupResponse"]
