"""Generic entity store endpoints.

API prefix: /api/v1/entities/{entity_name}

Entity names are the PascalCase model names. Any query parameter other
than sort, limit and offset is an equality filter on that column; values
are converted to the column's type.
"""

import json
import uuid
from typing import Annotated, Any

from fastapi import APIRouter, Body, Depends, Query, Request, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from ai_adoption_assessment.adapters.repositories import EntityRepository, coerce_value
from ai_adoption_assessment.auth import UserContext, get_current_user
from ai_adoption_assessment.core.models import ENTITY_MODELS
from ai_adoption_assessment.database import EntityModel, get_db_session
from ai_adoption_assessment.errors import NotFoundError, ValidationError
from ai_adoption_assessment.settings import Settings, get_settings

router = APIRouter(prefix="/entities", tags=["Entity Store"])

_RESERVED_PARAMS = frozenset({"sort", "limit", "offset"})


def get_entity_repository(
    entity_name: str,
    session: AsyncSession = Depends(get_db_session),
) -> EntityRepository:
    """Resolve the repository for the entity named in the path.

    Raises:
        NotFoundError: If no entity type has this name.
    """
    model = ENTITY_MODELS.get(entity_name)
    if model is None:
        raise NotFoundError(message=f"Unknown entity type '{entity_name}'.")
    return EntityRepository(session, model)


def _coerce(model: type[EntityModel], field: str, raw: str) -> Any:
    column = model.__table__.columns.get(field)
    if column is None:
        raise ValidationError(f"Unknown field for {model.__name__}: {field}")
    try:
        python_type = column.type.python_type
    except NotImplementedError:
        return raw

    try:
        if raw.lower() == "null":
            return None
        if python_type is bool:
            return raw.lower() in ("true", "1", "yes")
        if python_type in (int, float):
            return python_type(raw)
        if python_type in (dict, list):
            return json.loads(raw)
    except ValueError as exc:
        raise ValidationError(f"Invalid value for {field}: {raw}") from exc
    return coerce_value(model, field, raw)


def _criteria(request: Request, model: type[EntityModel]) -> dict[str, Any]:
    return {
        field: _coerce(model, field, value)
        for field, value in request.query_params.items()
        if field not in _RESERVED_PARAMS
    }


@router.get("/{entity_name}")
async def list_entities(
    request: Request,
    user: Annotated[UserContext, Depends(get_current_user)],
    repo: EntityRepository = Depends(get_entity_repository),
    settings: Settings = Depends(get_settings),
    sort: Annotated[str | None, Query()] = "-created_date",
    limit: Annotated[int | None, Query(ge=1)] = None,
    offset: Annotated[int, Query(ge=0)] = 0,
) -> list[dict[str, Any]]:
    """List or filter entities. Column query parameters filter by equality."""
    page_size = min(limit or settings.entity_default_page_size, settings.entity_max_page_size)
    criteria = _criteria(request, repo.model)
    entities = await repo.filter(criteria, sort=sort, limit=page_size, offset=offset)
    return [entity.to_dict() for entity in entities]


@router.post("/{entity_name}", status_code=status.HTTP_201_CREATED)
async def create_entity(
    user: Annotated[UserContext, Depends(get_current_user)],
    data: Annotated[dict[str, Any], Body()],
    repo: EntityRepository = Depends(get_entity_repository),
) -> dict[str, Any]:
    """Create an entity; created_by defaults to the caller."""
    entity = await repo.create({"created_by": user.email, **data})
    return entity.to_dict()


@router.post("/{entity_name}/bulk", status_code=status.HTTP_201_CREATED)
async def bulk_create_entities(
    user: Annotated[UserContext, Depends(get_current_user)],
    items: Annotated[list[dict[str, Any]], Body()],
    repo: EntityRepository = Depends(get_entity_repository),
) -> list[dict[str, Any]]:
    entities = await repo.bulk_create([{"created_by": user.email, **item} for item in items])
    return [entity.to_dict() for entity in entities]


@router.get("/{entity_name}/{entity_id}")
async def get_entity(
    entity_id: uuid.UUID,
    user: Annotated[UserContext, Depends(get_current_user)],
    repo: EntityRepository = Depends(get_entity_repository),
) -> dict[str, Any]:
    entity = await repo.get(entity_id)
    return entity.to_dict()


@router.patch("/{entity_name}/{entity_id}")
async def update_entity(
    entity_id: uuid.UUID,
    user: Annotated[UserContext, Depends(get_current_user)],
    data: Annotated[dict[str, Any], Body()],
    repo: EntityRepository = Depends(get_entity_repository),
) -> dict[str, Any]:
    """Partial update. Last write wins."""
    entity = await repo.update(entity_id, data)
    return entity.to_dict()


@router.delete("/{entity_name}/{entity_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_entity(
    entity_id: uuid.UUID,
    user: Annotated[UserContext, Depends(get_current_user)],
    repo: EntityRepository = Depends(get_entity_repository),
) -> Response:
    await repo.delete(entity_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
