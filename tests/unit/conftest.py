"""Shared helpers for unit tests of services and engines.

Repositories are AsyncMocks; entities are MagicMocks carrying the
attributes a service reads plus a ``to_dict`` mirroring them.
"""

import uuid
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from ai_adoption_assessment.core.identity import UserContext


def make_entity(**fields: Any) -> MagicMock:
    """Build an ORM-like mock whose attributes and to_dict() agree."""
    fields.setdefault("id", uuid.uuid4())
    entity = MagicMock()
    for name, value in fields.items():
        setattr(entity, name, value)
    entity.to_dict.return_value = dict(fields)
    return entity


def echo_update(repo: AsyncMock, entity: MagicMock) -> None:
    """Make repo.update return the entity with the changes applied."""

    async def _update(entity_id: uuid.UUID, data: dict[str, Any]) -> MagicMock:
        return make_entity(**{**entity.to_dict(), **data})

    repo.update.side_effect = _update


def echo_create(repo: AsyncMock) -> None:
    """Make repo.create / bulk_create return entities built from their input."""

    async def _create(data: dict[str, Any]) -> MagicMock:
        return make_entity(**data)

    async def _bulk_create(items: list[dict[str, Any]]) -> list[MagicMock]:
        return [make_entity(**item) for item in items]

    repo.create.side_effect = _create
    repo.bulk_create.side_effect = _bulk_create


@pytest.fixture()
def user() -> UserContext:
    return UserContext(email="ada@acme.com", full_name="Ada Lovelace", role="admin")


@pytest.fixture()
def mock_llm() -> AsyncMock:
    return AsyncMock()
