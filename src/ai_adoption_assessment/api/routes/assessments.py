"""Assessment endpoints.

API prefix: /api/v1/assessments
"""

import uuid
from typing import Annotated, Any

from fastapi import APIRouter, Depends, Query

from ai_adoption_assessment.api.dependencies import get_assessment_service
from ai_adoption_assessment.api.schemas import (
    AssessmentResponse,
    ComparePlatformsRequest,
    CompleteAssessmentRequest,
    ComplianceReportRequest,
    CreateAssessmentRequest,
    ForecastRequest,
    ReadinessScoreRequest,
    ScenarioRequest,
    UpdateAssessmentRequest,
)
from ai_adoption_assessment.auth import UserContext, get_current_user
from ai_adoption_assessment.core.services import AssessmentService

router = APIRouter(prefix="/assessments", tags=["Assessments"])


@router.post("", response_model=AssessmentResponse, status_code=201)
async def create_assessment(
    body: CreateAssessmentRequest,
    user: Annotated[UserContext, Depends(get_current_user)],
    service: AssessmentService = Depends(get_assessment_service),
) -> AssessmentResponse:
    """Create a draft assessment from the intake forms."""
    assessment = await service.create_assessment(body.model_dump(), created_by=user.email)
    return AssessmentResponse.model_validate(assessment, from_attributes=True)


@router.get("", response_model=list[AssessmentResponse])
async def list_assessments(
    user: Annotated[UserContext, Depends(get_current_user)],
    status: Annotated[str | None, Query()] = None,
    limit: Annotated[int, Query(ge=1, le=500)] = 50,
    offset: Annotated[int, Query(ge=0)] = 0,
    service: AssessmentService = Depends(get_assessment_service),
) -> list[AssessmentResponse]:
    assessments = await service.list_assessments(status=status, limit=limit, offset=offset)
    return [AssessmentResponse.model_validate(a, from_attributes=True) for a in assessments]


@router.get("/{assessment_id}", response_model=AssessmentResponse)
async def get_assessment(
    assessment_id: uuid.UUID,
    user: Annotated[UserContext, Depends(get_current_user)],
    service: AssessmentService = Depends(get_assessment_service),
) -> AssessmentResponse:
    assessment = await service.get_assessment(assessment_id)
    return AssessmentResponse.model_validate(assessment, from_attributes=True)


@router.patch("/{assessment_id}", response_model=AssessmentResponse)
async def update_assessment(
    assessment_id: uuid.UUID,
    body: UpdateAssessmentRequest,
    user: Annotated[UserContext, Depends(get_current_user)],
    service: AssessmentService = Depends(get_assessment_service),
) -> AssessmentResponse:
    """Edit a draft's intake fields."""
    assessment = await service.update_assessment(assessment_id, body.model_dump(exclude_unset=True))
    return AssessmentResponse.model_validate(assessment, from_attributes=True)


@router.post("/{assessment_id}/complete", response_model=AssessmentResponse)
async def complete_assessment(
    assessment_id: uuid.UUID,
    user: Annotated[UserContext, Depends(get_current_user)],
    body: CompleteAssessmentRequest | None = None,
    service: AssessmentService = Depends(get_assessment_service),
) -> AssessmentResponse:
    """Score the assessment locally and mark it completed.

    Calling this again with different weights re-ranks the platforms.
    """
    weights = body.scoring_weights.model_dump() if body and body.scoring_weights else None
    assessment = await service.complete_assessment(assessment_id, scoring_weights=weights)
    return AssessmentResponse.model_validate(assessment, from_attributes=True)


@router.post("/{assessment_id}/ai-score", response_model=AssessmentResponse)
async def generate_ai_score(
    assessment_id: uuid.UUID,
    user: Annotated[UserContext, Depends(get_current_user)],
    service: AssessmentService = Depends(get_assessment_service),
) -> AssessmentResponse:
    assessment = await service.generate_ai_score(assessment_id)
    return AssessmentResponse.model_validate(assessment, from_attributes=True)


@router.post("/{assessment_id}/readiness", response_model=AssessmentResponse)
async def generate_readiness_score(
    assessment_id: uuid.UUID,
    user: Annotated[UserContext, Depends(get_current_user)],
    body: ReadinessScoreRequest | None = None,
    service: AssessmentService = Depends(get_assessment_service),
) -> AssessmentResponse:
    assessment = await service.generate_readiness_score(
        assessment_id, infrastructure_score=body.infrastructure_score if body else None
    )
    return AssessmentResponse.model_validate(assessment, from_attributes=True)


@router.post("/{assessment_id}/compliance-analysis", response_model=AssessmentResponse)
async def analyze_compliance(
    assessment_id: uuid.UUID,
    user: Annotated[UserContext, Depends(get_current_user)],
    service: AssessmentService = Depends(get_assessment_service),
) -> AssessmentResponse:
    assessment = await service.analyze_compliance(assessment_id)
    return AssessmentResponse.model_validate(assessment, from_attributes=True)


@router.post("/{assessment_id}/compliance-report")
async def compliance_report(
    assessment_id: uuid.UUID,
    body: ComplianceReportRequest,
    user: Annotated[UserContext, Depends(get_current_user)],
    service: AssessmentService = Depends(get_assessment_service),
) -> dict[str, Any]:
    return await service.compliance_report(assessment_id, body.regulation_code)


@router.post("/{assessment_id}/compliance-flags")
async def flag_compliance_risks(
    assessment_id: uuid.UUID,
    user: Annotated[UserContext, Depends(get_current_user)],
    service: AssessmentService = Depends(get_assessment_service),
) -> dict[str, Any]:
    return await service.flag_compliance_risks(assessment_id)


@router.post("/{assessment_id}/forecast")
async def forecast(
    assessment_id: uuid.UUID,
    body: ForecastRequest,
    user: Annotated[UserContext, Depends(get_current_user)],
    service: AssessmentService = Depends(get_assessment_service),
) -> dict[str, Any]:
    """Predict ROI, risks or the maturity roadmap."""
    return await service.forecast(assessment_id, body.kind, body.market_trends)


@router.get("/{assessment_id}/scenarios")
async def suggest_scenarios(
    assessment_id: uuid.UUID,
    user: Annotated[UserContext, Depends(get_current_user)],
    service: AssessmentService = Depends(get_assessment_service),
) -> list[dict[str, Any]]:
    """Preset what-if scenarios for a completed assessment."""
    return await service.suggest_scenarios(assessment_id)


@router.post("/{assessment_id}/scenarios")
async def run_scenario(
    assessment_id: uuid.UUID,
    body: ScenarioRequest,
    user: Annotated[UserContext, Depends(get_current_user)],
    service: AssessmentService = Depends(get_assessment_service),
) -> dict[str, Any]:
    """Re-score with changed intake fields. The assessment is not modified."""
    changes = body.model_dump(exclude_none=True, exclude={"name", "scoring_weights"})
    weights = body.scoring_weights.model_dump() if body.scoring_weights else None
    return await service.run_scenario(assessment_id, changes, scoring_weights=weights, name=body.name)


@router.post("/{assessment_id}/compare")
async def compare_platforms(
    assessment_id: uuid.UUID,
    body: ComparePlatformsRequest,
    user: Annotated[UserContext, Depends(get_current_user)],
    service: AssessmentService = Depends(get_assessment_service),
) -> dict[str, Any]:
    """Side-by-side metrics and analysis of the chosen platforms."""
    return await service.compare_platforms(assessment_id, body.platforms)
