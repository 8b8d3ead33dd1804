"""Pydantic schemas for the runs feature."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict

from seekpage.core.pagination import Connection
from seekpage.features.runs.models import RunStatus


class RunResponse(BaseModel):
    """Run as returned by the API."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    workspace_path: str
    status: RunStatus
    created_at: datetime
    updated_at: datetime


RunConnection = Connection[RunResponse]


__all__ = ["RunConnection", "RunResponse"]
