"""Metric anomaly endpoints.

API prefix: /api/v1/anomalies
"""

import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, Query

from ai_adoption_assessment.api.dependencies import get_anomaly_service
from ai_adoption_assessment.api.schemas import AnomalyResponse
from ai_adoption_assessment.auth import UserContext, get_current_user
from ai_adoption_assessment.core.services import AnomalyService

router = APIRouter(prefix="/anomalies", tags=["Anomalies"])


@router.post("/detect", response_model=list[AnomalyResponse])
async def detect_anomalies(
    user: Annotated[UserContext, Depends(get_current_user)],
    service: AnomalyService = Depends(get_anomaly_service),
) -> list[AnomalyResponse]:
    """Detect and store anomalies in the most recent completed assessments."""
    anomalies = await service.detect(user.email)
    return [AnomalyResponse.model_validate(a, from_attributes=True) for a in anomalies]


@router.get("", response_model=list[AnomalyResponse])
async def list_anomalies(
    user: Annotated[UserContext, Depends(get_current_user)],
    status: Annotated[str | None, Query()] = None,
    limit: Annotated[int, Query(ge=1, le=500)] = 50,
    service: AnomalyService = Depends(get_anomaly_service),
) -> list[AnomalyResponse]:
    anomalies = await service.list_anomalies(status=status, limit=limit)
    return [AnomalyResponse.model_validate(a, from_attributes=True) for a in anomalies]


@router.post("/{anomaly_id}/acknowledge", response_model=AnomalyResponse)
async def acknowledge(
    anomaly_id: uuid.UUID,
    user: Annotated[UserContext, Depends(get_current_user)],
    service: AnomalyService = Depends(get_anomaly_service),
) -> AnomalyResponse:
    anomaly = await service.acknowledge(anomaly_id)
    return AnomalyResponse.model_validate(anomaly, from_attributes=True)


@router.post("/{anomaly_id}/resolve", response_model=AnomalyResponse)
async def resolve(
    anomaly_id: uuid.UUID,
    user: Annotated[UserContext, Depends(get_current_user)],
    service: AnomalyService = Depends(get_anomaly_service),
) -> AnomalyResponse:
    anomaly = await service.resolve(anomaly_id)
    return AnomalyResponse.model_validate(anomaly, from_attributes=True)
