"""AI platform catalogue endpoints.

API prefix: /api/v1/platforms
"""

from typing import Annotated, Any

from fastapi import APIRouter, Depends, Query

from ai_adoption_assessment.api.dependencies import get_catalog_service
from ai_adoption_assessment.api.schemas import PlatformResponse, SearchRequest, SearchResponse
from ai_adoption_assessment.auth import UserContext, get_current_user
from ai_adoption_assessment.core.services import CatalogService

router = APIRouter(prefix="/platforms", tags=["Platforms"])


@router.get("", response_model=list[PlatformResponse])
async def list_platforms(
    user: Annotated[UserContext, Depends(get_current_user)],
    category: Annotated[str | None, Query()] = None,
    limit: Annotated[int | None, Query(ge=1, le=500)] = None,
    service: CatalogService = Depends(get_catalog_service),
) -> list[PlatformResponse]:
    platforms = await service.list_platforms(category=category, limit=limit)
    return [PlatformResponse.model_validate(p, from_attributes=True) for p in platforms]


@router.post("/search", response_model=SearchResponse)
async def search_platforms(
    body: SearchRequest,
    user: Annotated[UserContext, Depends(get_current_user)],
    service: CatalogService = Depends(get_catalog_service),
) -> SearchResponse:
    """Rank catalogue platforms against a natural-language query."""
    return SearchResponse(**await service.search(body.query))


@router.get("/intake-options")
async def intake_options(
    user: Annotated[UserContext, Depends(get_current_user)],
) -> dict[str, Any]:
    """Platforms, departments, compliance standards, integrations and pain points."""
    return CatalogService.intake_options()
