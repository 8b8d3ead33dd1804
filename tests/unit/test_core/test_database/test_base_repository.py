"""Tests for BaseRepository against in-memory SQLite."""

from __future__ import annotations

import uuid
from typing import TYPE_CHECKING

import pytest
from sqlalchemy import select

from seekpage.core.database import BaseRepository, NotFoundError
from seekpage.core.pagination import PaginationOptions
from seekpage.features.groups.models import Group

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession


@pytest.fixture
def repo() -> BaseRepository[Group]:
    return BaseRepository(Group)


@pytest.mark.asyncio
async def test_create_assigns_generated_values(db_session: AsyncSession, repo):
    group = await repo.create(db_session, Group(full_path="acme", name="Acme"))

    assert isinstance(group.id, uuid.UUID)
    assert group.created_at is not None


@pytest.mark.asyncio
async def test_get_returns_entity(db_session: AsyncSession, repo):
    created = await repo.create(db_session, Group(full_path="acme", name="Acme"))

    assert await repo.get(db_session, created.id) is created


@pytest.mark.asyncio
async def test_get_missing_returns_none(db_session: AsyncSession, repo):
    assert await repo.get(db_session, uuid.uuid4()) is None


@pytest.mark.asyncio
async def test_get_or_raise_missing(db_session: AsyncSession, repo):
    missing = uuid.uuid4()

    with pytest.raises(NotFoundError) as exc_info:
        await repo.get_or_raise(db_session, missing)

    assert exc_info.value.model_name == "Group"
    assert exc_info.value.identifier == {"id": missing}
    assert "Group not found" in str(exc_info.value)


@pytest.mark.asyncio
async def test_create_many(db_session: AsyncSession, repo):
    groups = await repo.create_many(
        db_session,
        [Group(full_path=path, name=path) for path in ("a", "b", "c")],
    )

    assert len(groups) == 3
    assert all(group.id is not None for group in groups)


@pytest.mark.asyncio
async def test_paginate_defaults_to_primary_key_order(db_session: AsyncSession, repo):
    groups = await repo.create_many(
        db_session,
        [Group(full_path=f"g{i}", name=f"g{i}") for i in range(5)],
    )

    page = await repo.paginate(db_session, select(Group), options=PaginationOptions(first=2))

    assert [g.id for g in page.items] == sorted(g.id for g in groups)[:2]
    assert page.page_info.has_next_page is True


@pytest.mark.asyncio
async def test_paginate_include_total_from_settings(
    db_session: AsyncSession, repo, monkeypatch: pytest.MonkeyPatch
):
    monkeypatch.setenv("PAGINATION_INCLUDE_TOTAL_COUNT", "true")
    await repo.create_many(db_session, [Group(full_path=f"g{i}", name="g") for i in range(3)])

    page = await repo.paginate(db_session, select(Group), options=PaginationOptions(first=1))

    assert page.page_info.total_count == 3
