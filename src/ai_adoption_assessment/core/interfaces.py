"""Abstract interfaces (Protocol classes) for the AI Adoption Assessment service.

All services depend on these interfaces, not concrete implementations.
Concrete implementations live in ``adapters/``: the SQLAlchemy entity
repository and the httpx LLM client.
"""

import uuid
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class IEntityRepository(Protocol):
    """Repository interface for one entity type.

    Mirrors the entity API of the hosted backend: list, filter, get,
    create, bulk_create, update and delete.
    """

    async def list_all(
        self,
        sort: str | None = "-created_date",
        limit: int | None = None,
        offset: int = 0,
    ) -> list[Any]:
        """List entities in the given sort order."""
        ...

    async def filter(
        self,
        criteria: dict[str, Any],
        sort: str | None = "-created_date",
        limit: int | None = None,
        offset: int = 0,
    ) -> list[Any]:
        """List entities whose columns equal every value in criteria."""
        ...

    async def get(self, entity_id: uuid.UUID) -> Any:
        """Retrieve an entity by id. Raises NotFoundError when absent."""
        ...

    async def create(self, data: dict[str, Any]) -> Any:
        """Create an entity."""
        ...

    async def bulk_create(self, items: list[dict[str, Any]]) -> list[Any]:
        """Create several entities in one flush."""
        ...

    async def update(self, entity_id: uuid.UUID, data: dict[str, Any]) -> Any:
        """Apply a partial update. Last write wins."""
        ...

    async def delete(self, entity_id: uuid.UUID) -> None:
        """Delete an entity. Raises NotFoundError when absent."""
        ...


@runtime_checkable
class ILLMClient(Protocol):
    """Interface for the structured-output LLM endpoint."""

    async def invoke(
        self,
        prompt: str,
        response_json_schema: dict[str, Any] | None = None,
        add_context_from_internet: bool = False,
    ) -> dict[str, Any]:
        """Send a prompt and return the parsed JSON object.

        The returned object is not validated against the schema.

        Raises:
            LLMInvocationError: When the endpoint fails or returns non-JSON.
        """
        ...
