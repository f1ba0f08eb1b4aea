"""SQLAlchemy implementation of the entity store.

One ``EntityRepository`` class serves every entity type; it is constructed
with the session and the ORM model class. Sorting and equality filters are
restricted to the model's mapped columns. Written values are converted to
the column type, so JSON strings can carry datetimes and UUIDs.
"""

import uuid
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import Select, select
from sqlalchemy.ext.asyncio import AsyncSession

from ai_adoption_assessment.database import EntityModel
from ai_adoption_assessment.errors import NotFoundError, ValidationError
from ai_adoption_assessment.observability import get_logger

logger = get_logger(__name__)

# Columns managed by the store; caller-supplied values are ignored
_READ_ONLY_COLUMNS: frozenset[str] = frozenset({"id", "created_date", "updated_date"})


def coerce_value(model: type[EntityModel], field: str, value: Any) -> Any:
    """Convert a JSON-shaped value to the Python type of a datetime or UUID column.

    ISO strings become datetimes (a trailing Z is UTC) and naive datetimes are
    read as UTC. Strings become UUIDs on UUID columns. Other values pass through.

    Raises:
        ValidationError: If a string cannot be parsed for its column.
    """
    column = model.__table__.columns[field]
    try:
        python_type = column.type.python_type
    except NotImplementedError:
        return value

    try:
        if python_type is datetime:
            if isinstance(value, str):
                value = datetime.fromisoformat(value.replace("Z", "+00:00"))
            if isinstance(value, datetime) and value.tzinfo is None:
                value = value.replace(tzinfo=timezone.utc)
        elif python_type is uuid.UUID and isinstance(value, str):
            value = uuid.UUID(value)
    except ValueError as exc:
        raise ValidationError(f"Invalid value for {field}: {value}") from exc
    return value


class EntityRepository:
    """Entity store for a single ORM model."""

    def __init__(self, session: AsyncSession, model: type[EntityModel]) -> None:
        """Initialise with an async session and the model to persist.

        Args:
            session: SQLAlchemy async session.
            model: EntityModel subclass this repository manages.
        """
        self.session = session
        self.model = model

    @property
    def entity_name(self) -> str:
        return self.model.__name__

    def _check_columns(self, names: set[str] | list[str]) -> None:
        unknown = set(names) - self.model.column_names()
        if unknown:
            raise ValidationError(
                f"Unknown field(s) for {self.entity_name}: {', '.join(sorted(unknown))}"
            )

    def _apply_sort(self, query: Select, sort: str | None) -> Select:
        if not sort:
            return query
        descending = sort.startswith("-")
        field = sort.lstrip("-+")
        self._check_columns([field])
        column = getattr(self.model, field)
        return query.order_by(column.desc() if descending else column.asc())

    def _writable(self, data: dict[str, Any]) -> dict[str, Any]:
        self._check_columns(set(data))
        return {
            key: coerce_value(self.model, key, value)
            for key, value in data.items()
            if key not in _READ_ONLY_COLUMNS
        }

    async def list_all(
        self,
        sort: str | None = "-created_date",
        limit: int | None = None,
        offset: int = 0,
    ) -> list[EntityModel]:
        """List entities in sort order.

        Args:
            sort: Column name, ``-`` prefix for descending.
            limit: Maximum rows, None for all.
            offset: Rows to skip.

        Returns:
            Matching entities.

        Raises:
            ValidationError: If sort names an unknown column.
        """
        return await self.filter({}, sort=sort, limit=limit, offset=offset)

    async def filter(
        self,
        criteria: dict[str, Any],
        sort: str | None = "-created_date",
        limit: int | None = None,
        offset: int = 0,
    ) -> list[EntityModel]:
        """List entities whose columns equal every value in criteria.

        Raises:
            ValidationError: If criteria or sort name an unknown column.
        """
        self._check_columns(set(criteria))
        query = select(self.model)
        for field, value in criteria.items():
            query = query.where(getattr(self.model, field) == coerce_value(self.model, field, value))
        query = self._apply_sort(query, sort)
        if offset:
            query = query.offset(offset)
        if limit is not None:
            query = query.limit(limit)

        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def get(self, entity_id: uuid.UUID) -> EntityModel:
        """Retrieve an entity by id.

        Raises:
            NotFoundError: If no entity has this id.
        """
        entity = await self.session.get(self.model, entity_id)
        if entity is None:
            raise NotFoundError(message=f"{self.entity_name} {entity_id} not found.")
        return entity

    async def create(self, data: dict[str, Any]) -> EntityModel:
        """Create an entity from a field dict.

        Raises:
            ValidationError: If data names an unknown column or carries an
                unparseable datetime or UUID.
        """
        entity = self.model(**self._writable(data))
        self.session.add(entity)
        await self.session.flush()
        await self.session.refresh(entity)

        logger.debug("Entity created", entity=self.entity_name, entity_id=str(entity.id))
        return entity

    async def bulk_create(self, items: list[dict[str, Any]]) -> list[EntityModel]:
        """Create several entities in one flush."""
        entities = [self.model(**self._writable(item)) for item in items]
        if not entities:
            return []
        self.session.add_all(entities)
        await self.session.flush()
        for entity in entities:
            await self.session.refresh(entity)

        logger.debug("Entities created", entity=self.entity_name, count=len(entities))
        return entities

    async def update(self, entity_id: uuid.UUID, data: dict[str, Any]) -> EntityModel:
        """Apply a partial update. Last write wins.

        Raises:
            NotFoundError: If no entity has this id.
            ValidationError: If data names an unknown column.
        """
        changes = self._writable(data)
        entity = await self.get(entity_id)
        for field, value in changes.items():
            setattr(entity, field, value)
        await self.session.flush()
        await self.session.refresh(entity)
        return entity

    async def delete(self, entity_id: uuid.UUID) -> None:
        """Delete an entity.

        Raises:
            NotFoundError: If no entity has this id.
        """
        entity = await self.get(entity_id)
        await self.session.delete(entity)
        await self.session.flush()

        logger.debug("Entity deleted", entity=self.entity_name, entity_id=str(entity_id))
