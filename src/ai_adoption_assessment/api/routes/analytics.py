"""Analytics endpoints.

API prefix: /api/v1/analytics
"""

from typing import Annotated, Any

from fastapi import APIRouter, Depends, Query

from ai_adoption_assessment.api.dependencies import get_analytics_service
from ai_adoption_assessment.auth import UserContext, get_current_user
from ai_adoption_assessment.core.services import AnalyticsService

router = APIRouter(prefix="/analytics", tags=["Analytics"])


@router.get("/overview")
async def overview(
    user: Annotated[UserContext, Depends(get_current_user)],
    time_range: Annotated[str, Query(description="30d, 90d, 6m, 1y or all")] = "all",
    service: AnalyticsService = Depends(get_analytics_service),
) -> dict[str, Any]:
    return await service.overview(time_range)
