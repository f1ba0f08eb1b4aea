"""Adoption strategy endpoints.

API prefix: /api/v1/strategies
"""

import uuid
from typing import Annotated, Any

from fastapi import APIRouter, Depends, Query

from ai_adoption_assessment.api.dependencies import get_strategy_service
from ai_adoption_assessment.api.schemas import (
    GenerateStrategyRequest,
    MilestoneUpdateRequest,
    MonitorRequest,
    ProgressUpdateRequest,
    StrategyResponse,
    StrategyStatusRequest,
)
from ai_adoption_assessment.auth import UserContext, get_current_user
from ai_adoption_assessment.core.services import StrategyService

router = APIRouter(prefix="/strategies", tags=["Strategies"])


@router.post("", response_model=StrategyResponse, status_code=201)
async def generate_strategy(
    body: GenerateStrategyRequest,
    user: Annotated[UserContext, Depends(get_current_user)],
    service: StrategyService = Depends(get_strategy_service),
) -> StrategyResponse:
    """Generate a draft adoption strategy from a completed assessment."""
    strategy = await service.generate_strategy(body.assessment_id, created_by=user.email)
    return StrategyResponse.model_validate(strategy, from_attributes=True)


@router.get("", response_model=list[StrategyResponse])
async def list_strategies(
    user: Annotated[UserContext, Depends(get_current_user)],
    status: Annotated[str | None, Query()] = None,
    limit: Annotated[int, Query(ge=1, le=500)] = 50,
    offset: Annotated[int, Query(ge=0)] = 0,
    service: StrategyService = Depends(get_strategy_service),
) -> list[StrategyResponse]:
    strategies = await service.list_strategies(status=status, limit=limit, offset=offset)
    return [StrategyResponse.model_validate(s, from_attributes=True) for s in strategies]


@router.get("/{strategy_id}", response_model=StrategyResponse)
async def get_strategy(
    strategy_id: uuid.UUID,
    user: Annotated[UserContext, Depends(get_current_user)],
    service: StrategyService = Depends(get_strategy_service),
) -> StrategyResponse:
    strategy = await service.get_strategy(strategy_id)
    return StrategyResponse.model_validate(strategy, from_attributes=True)


@router.put("/{strategy_id}/status", response_model=StrategyResponse)
async def update_status(
    strategy_id: uuid.UUID,
    body: StrategyStatusRequest,
    user: Annotated[UserContext, Depends(get_current_user)],
    service: StrategyService = Depends(get_strategy_service),
) -> StrategyResponse:
    strategy = await service.update_status(strategy_id, body.status)
    return StrategyResponse.model_validate(strategy, from_attributes=True)


@router.put("/{strategy_id}/milestones", response_model=StrategyResponse)
async def update_milestone(
    strategy_id: uuid.UUID,
    body: MilestoneUpdateRequest,
    user: Annotated[UserContext, Depends(get_current_user)],
    service: StrategyService = Depends(get_strategy_service),
) -> StrategyResponse:
    """Set a milestone's status; overall progress is recomputed."""
    strategy = await service.update_milestone(strategy_id, body.milestone_name, body.status)
    return StrategyResponse.model_validate(strategy, from_attributes=True)


@router.put("/{strategy_id}/progress", response_model=StrategyResponse)
async def update_progress(
    strategy_id: uuid.UUID,
    body: ProgressUpdateRequest,
    user: Annotated[UserContext, Depends(get_current_user)],
    service: StrategyService = Depends(get_strategy_service),
) -> StrategyResponse:
    strategy = await service.update_progress(
        strategy_id,
        current_phase=body.current_phase,
        achievements=body.achievements,
        blockers=body.blockers,
    )
    return StrategyResponse.model_validate(strategy, from_attributes=True)


@router.post("/{strategy_id}/risks", response_model=StrategyResponse)
async def identify_risks(
    strategy_id: uuid.UUID,
    user: Annotated[UserContext, Depends(get_current_user)],
    service: StrategyService = Depends(get_strategy_service),
) -> StrategyResponse:
    strategy = await service.identify_risks(strategy_id)
    return StrategyResponse.model_validate(strategy, from_attributes=True)


@router.post("/{strategy_id}/monitor")
async def monitor(
    strategy_id: uuid.UUID,
    user: Annotated[UserContext, Depends(get_current_user)],
    body: MonitorRequest | None = None,
    service: StrategyService = Depends(get_strategy_service),
) -> dict[str, Any]:
    return await service.monitor(strategy_id, body.recent_activity if body else None)


@router.post("/{strategy_id}/checkpoints", response_model=StrategyResponse)
async def create_checkpoint(
    strategy_id: uuid.UUID,
    user: Annotated[UserContext, Depends(get_current_user)],
    service: StrategyService = Depends(get_strategy_service),
) -> StrategyResponse:
    strategy = await service.create_checkpoint(strategy_id)
    return StrategyResponse.model_validate(strategy, from_attributes=True)
