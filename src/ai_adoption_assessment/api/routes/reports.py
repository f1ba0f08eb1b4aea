"""Report template and automated report endpoints.

API prefix: /api/v1/reports
"""

import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, Query

from ai_adoption_assessment.api.dependencies import get_report_service
from ai_adoption_assessment.api.schemas import (
    CreateTemplateRequest,
    ReportResponse,
    RunDueReportsRequest,
    RunDueReportsResponse,
    ScheduleReportRequest,
    TemplateResponse,
)
from ai_adoption_assessment.auth import UserContext, get_current_user
from ai_adoption_assessment.core.services import ReportService

router = APIRouter(prefix="/reports", tags=["Reports"])


@router.post("/templates", response_model=TemplateResponse, status_code=201)
async def create_template(
    body: CreateTemplateRequest,
    user: Annotated[UserContext, Depends(get_current_user)],
    service: ReportService = Depends(get_report_service),
) -> TemplateResponse:
    template = await service.create_template(
        name=body.name,
        report_type=body.report_type,
        sections=[section.model_dump() for section in body.sections],
        description=body.description,
        created_by=user.email,
    )
    return TemplateResponse.model_validate(template, from_attributes=True)


@router.post("", response_model=ReportResponse, status_code=201)
async def schedule_report(
    body: ScheduleReportRequest,
    user: Annotated[UserContext, Depends(get_current_user)],
    service: ReportService = Depends(get_report_service),
) -> ReportResponse:
    """Schedule a report. Its first run is scheduled_date."""
    report = await service.schedule_report(
        user_email=user.email,
        report_name=body.report_name,
        report_type=body.report_type,
        scheduled_date=body.scheduled_date,
        frequency=body.frequency,
        recipients=body.recipients,
        template_id=body.template_id,
        assessment_id=body.assessment_id,
        strategy_id=body.strategy_id,
    )
    return ReportResponse.model_validate(report, from_attributes=True)


@router.get("", response_model=list[ReportResponse])
async def list_reports(
    user: Annotated[UserContext, Depends(get_current_user)],
    status: Annotated[str | None, Query()] = None,
    service: ReportService = Depends(get_report_service),
) -> list[ReportResponse]:
    reports = await service.list_reports(user.email, status=status)
    return [ReportResponse.model_validate(r, from_attributes=True) for r in reports]


@router.post("/run-due", response_model=RunDueReportsResponse)
async def run_due_reports(
    user: Annotated[UserContext, Depends(get_current_user)],
    body: RunDueReportsRequest | None = None,
    service: ReportService = Depends(get_report_service),
) -> RunDueReportsResponse:
    """Generate every scheduled report whose next run has arrived."""
    outcome = await service.run_due_reports(now=body.now if body else None)
    return RunDueReportsResponse(**outcome)


@router.get("/{report_id}", response_model=ReportResponse)
async def get_report(
    report_id: uuid.UUID,
    user: Annotated[UserContext, Depends(get_current_user)],
    service: ReportService = Depends(get_report_service),
) -> ReportResponse:
    report = await service.get_report(report_id, user.email)
    return ReportResponse.model_validate(report, from_attributes=True)


@router.post("/{report_id}/run", response_model=ReportResponse)
async def run_report(
    report_id: uuid.UUID,
    user: Annotated[UserContext, Depends(get_current_user)],
    service: ReportService = Depends(get_report_service),
) -> ReportResponse:
    """Generate a report immediately and advance its schedule."""
    report = await service.run_report(report_id, user.email)
    return ReportResponse.model_validate(report, from_attributes=True)


@router.post("/{report_id}/pause", response_model=ReportResponse)
async def pause_report(
    report_id: uuid.UUID,
    user: Annotated[UserContext, Depends(get_current_user)],
    service: ReportService = Depends(get_report_service),
) -> ReportResponse:
    report = await service.pause(report_id, user.email)
    return ReportResponse.model_validate(report, from_attributes=True)


@router.post("/{report_id}/resume", response_model=ReportResponse)
async def resume_report(
    report_id: uuid.UUID,
    user: Annotated[UserContext, Depends(get_current_user)],
    service: ReportService = Depends(get_report_service),
) -> ReportResponse:
    report = await service.resume(report_id, user.email)
    return ReportResponse.model_validate(report, from_attributes=True)
