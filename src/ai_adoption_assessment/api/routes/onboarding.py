"""Onboarding endpoints.

API prefix: /api/v1/onboarding
"""

import uuid
from typing import Annotated, Any

from fastapi import APIRouter, Depends

from ai_adoption_assessment.api.dependencies import get_onboarding_service
from ai_adoption_assessment.api.schemas import (
    CompleteStepRequest,
    GuidanceRequest,
    OnboardingFlowResponse,
    StartOnboardingRequest,
)
from ai_adoption_assessment.auth import UserContext, get_current_user
from ai_adoption_assessment.core.services import OnboardingService
from ai_adoption_assessment.errors import NotFoundError

router = APIRouter(prefix="/onboarding", tags=["Onboarding"])


@router.post("", response_model=OnboardingFlowResponse)
async def start_onboarding(
    user: Annotated[UserContext, Depends(get_current_user)],
    body: StartOnboardingRequest | None = None,
    service: OnboardingService = Depends(get_onboarding_service),
) -> OnboardingFlowResponse:
    """Return the caller's in-progress flow or generate a personalised one."""
    flow = await service.start_flow(
        user,
        assessment_id=body.assessment_id if body else None,
        regenerate=body.regenerate if body else False,
    )
    return OnboardingFlowResponse.model_validate(flow, from_attributes=True)


@router.get("/current", response_model=OnboardingFlowResponse)
async def current_flow(
    user: Annotated[UserContext, Depends(get_current_user)],
    service: OnboardingService = Depends(get_onboarding_service),
) -> OnboardingFlowResponse:
    flow = await service.current_flow(user.email)
    if flow is None:
        raise NotFoundError(message="No onboarding flow for this user.")
    return OnboardingFlowResponse.model_validate(flow, from_attributes=True)


@router.post("/{flow_id}/steps", response_model=OnboardingFlowResponse)
async def complete_step(
    flow_id: uuid.UUID,
    user: Annotated[UserContext, Depends(get_current_user)],
    body: CompleteStepRequest | None = None,
    service: OnboardingService = Depends(get_onboarding_service),
) -> OnboardingFlowResponse:
    flow = await service.complete_step(
        flow_id,
        user.email,
        module=body.module if body else None,
        minutes_spent=body.minutes_spent if body else 0,
    )
    return OnboardingFlowResponse.model_validate(flow, from_attributes=True)


@router.post("/{flow_id}/tips/{tip_id}", response_model=OnboardingFlowResponse)
async def complete_tip(
    flow_id: uuid.UUID,
    tip_id: str,
    user: Annotated[UserContext, Depends(get_current_user)],
    service: OnboardingService = Depends(get_onboarding_service),
) -> OnboardingFlowResponse:
    flow = await service.complete_tip(flow_id, user.email, tip_id)
    return OnboardingFlowResponse.model_validate(flow, from_attributes=True)


@router.post("/{flow_id}/skip", response_model=OnboardingFlowResponse)
async def skip(
    flow_id: uuid.UUID,
    user: Annotated[UserContext, Depends(get_current_user)],
    service: OnboardingService = Depends(get_onboarding_service),
) -> OnboardingFlowResponse:
    flow = await service.skip(flow_id, user.email)
    return OnboardingFlowResponse.model_validate(flow, from_attributes=True)


@router.post("/guidance")
async def guidance(
    body: GuidanceRequest,
    user: Annotated[UserContext, Depends(get_current_user)],
    service: OnboardingService = Depends(get_onboarding_service),
) -> dict[str, Any]:
    """Contextual guidance for the page the caller is viewing."""
    return await service.guidance(body.page, user)
