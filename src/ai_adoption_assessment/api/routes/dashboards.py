"""Custom dashboard endpoints, scoped to the caller.

API prefix: /api/v1/dashboards
"""

import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, Response, status

from ai_adoption_assessment.api.dependencies import get_dashboard_service
from ai_adoption_assessment.api.schemas import (
    AddWidgetRequest,
    CreateDashboardRequest,
    DashboardResponse,
    MoveWidgetRequest,
    UpdateDashboardRequest,
)
from ai_adoption_assessment.auth import UserContext, get_current_user
from ai_adoption_assessment.core.dashboards import WIDGET_CATALOG
from ai_adoption_assessment.core.services import DashboardService

router = APIRouter(prefix="/dashboards", tags=["Dashboards"])


@router.get("/widgets")
async def widget_catalog(
    user: Annotated[UserContext, Depends(get_current_user)],
) -> list[dict[str, str]]:
    """Widget types that can be placed on a dashboard."""
    return [
        {"type": widget_type, "title": title, "category": category}
        for widget_type, (title, category) in WIDGET_CATALOG.items()
    ]


@router.post("", response_model=DashboardResponse, status_code=201)
async def create_dashboard(
    body: CreateDashboardRequest,
    user: Annotated[UserContext, Depends(get_current_user)],
    service: DashboardService = Depends(get_dashboard_service),
) -> DashboardResponse:
    dashboard = await service.create_dashboard(
        user.email,
        name=body.name,
        description=body.description,
        widget_types=body.widget_types,
        filters=body.filters,
        is_default=body.is_default,
    )
    return DashboardResponse.model_validate(dashboard, from_attributes=True)


@router.get("", response_model=list[DashboardResponse])
async def list_dashboards(
    user: Annotated[UserContext, Depends(get_current_user)],
    service: DashboardService = Depends(get_dashboard_service),
) -> list[DashboardResponse]:
    dashboards = await service.list_dashboards(user.email)
    return [DashboardResponse.model_validate(d, from_attributes=True) for d in dashboards]


@router.get("/{dashboard_id}", response_model=DashboardResponse)
async def get_dashboard(
    dashboard_id: uuid.UUID,
    user: Annotated[UserContext, Depends(get_current_user)],
    service: DashboardService = Depends(get_dashboard_service),
) -> DashboardResponse:
    dashboard = await service.get_dashboard(dashboard_id, user.email)
    return DashboardResponse.model_validate(dashboard, from_attributes=True)


@router.patch("/{dashboard_id}", response_model=DashboardResponse)
async def update_dashboard(
    dashboard_id: uuid.UUID,
    body: UpdateDashboardRequest,
    user: Annotated[UserContext, Depends(get_current_user)],
    service: DashboardService = Depends(get_dashboard_service),
) -> DashboardResponse:
    """Update dashboard fields. Setting is_default clears the user's other default."""
    dashboard = await service.update_dashboard(
        dashboard_id, user.email, body.model_dump(exclude_unset=True)
    )
    return DashboardResponse.model_validate(dashboard, from_attributes=True)


@router.delete("/{dashboard_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_dashboard(
    dashboard_id: uuid.UUID,
    user: Annotated[UserContext, Depends(get_current_user)],
    service: DashboardService = Depends(get_dashboard_service),
) -> Response:
    await service.delete_dashboard(dashboard_id, user.email)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{dashboard_id}/widgets", response_model=DashboardResponse)
async def add_widget(
    dashboard_id: uuid.UUID,
    body: AddWidgetRequest,
    user: Annotated[UserContext, Depends(get_current_user)],
    service: DashboardService = Depends(get_dashboard_service),
) -> DashboardResponse:
    dashboard = await service.add_widget(
        dashboard_id, user.email, body.widget_type, body.title, body.config
    )
    return DashboardResponse.model_validate(dashboard, from_attributes=True)


@router.delete("/{dashboard_id}/widgets/{widget_id}", response_model=DashboardResponse)
async def remove_widget(
    dashboard_id: uuid.UUID,
    widget_id: str,
    user: Annotated[UserContext, Depends(get_current_user)],
    service: DashboardService = Depends(get_dashboard_service),
) -> DashboardResponse:
    dashboard = await service.remove_widget(dashboard_id, user.email, widget_id)
    return DashboardResponse.model_validate(dashboard, from_attributes=True)


@router.post("/{dashboard_id}/widgets/{widget_id}/move", response_model=DashboardResponse)
async def move_widget(
    dashboard_id: uuid.UUID,
    widget_id: str,
    body: MoveWidgetRequest,
    user: Annotated[UserContext, Depends(get_current_user)],
    service: DashboardService = Depends(get_dashboard_service),
) -> DashboardResponse:
    dashboard = await service.move_widget(dashboard_id, user.email, widget_id, body.direction)
    return DashboardResponse.model_validate(dashboard, from_attributes=True)
