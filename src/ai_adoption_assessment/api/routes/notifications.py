"""Notification and notification-settings endpoints.

API prefix: /api/v1/notifications
"""

import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, Query

from ai_adoption_assessment.api.dependencies import get_notification_service
from ai_adoption_assessment.api.schemas import (
    MarkAllReadResponse,
    NotificationResponse,
    UpdateUserSettingsRequest,
    UserSettingsResponse,
)
from ai_adoption_assessment.auth import UserContext, get_current_user
from ai_adoption_assessment.core.services import NotificationService

router = APIRouter(prefix="/notifications", tags=["Notifications"])


@router.post("/generate", response_model=list[NotificationResponse])
async def generate_notifications(
    user: Annotated[UserContext, Depends(get_current_user)],
    service: NotificationService = Depends(get_notification_service),
) -> list[NotificationResponse]:
    """Generate contextual notifications for the caller and return those created."""
    created = await service.generate_contextual_notifications(user)
    return [NotificationResponse.model_validate(n, from_attributes=True) for n in created]


@router.get("", response_model=list[NotificationResponse])
async def list_notifications(
    user: Annotated[UserContext, Depends(get_current_user)],
    unread_only: Annotated[bool, Query()] = False,
    limit: Annotated[int, Query(ge=1, le=500)] = 50,
    service: NotificationService = Depends(get_notification_service),
) -> list[NotificationResponse]:
    notifications = await service.list_notifications(user.email, unread_only=unread_only, limit=limit)
    return [NotificationResponse.model_validate(n, from_attributes=True) for n in notifications]


@router.post("/read-all", response_model=MarkAllReadResponse)
async def mark_all_read(
    user: Annotated[UserContext, Depends(get_current_user)],
    service: NotificationService = Depends(get_notification_service),
) -> MarkAllReadResponse:
    return MarkAllReadResponse(updated=await service.mark_all_read(user.email))


@router.post("/{notification_id}/read", response_model=NotificationResponse)
async def mark_read(
    notification_id: uuid.UUID,
    user: Annotated[UserContext, Depends(get_current_user)],
    service: NotificationService = Depends(get_notification_service),
) -> NotificationResponse:
    notification = await service.mark_read(notification_id, user.email)
    return NotificationResponse.model_validate(notification, from_attributes=True)


@router.get("/settings", response_model=UserSettingsResponse)
async def get_settings(
    user: Annotated[UserContext, Depends(get_current_user)],
    service: NotificationService = Depends(get_notification_service),
) -> UserSettingsResponse:
    user_settings = await service.get_user_settings(user.email)
    return UserSettingsResponse.model_validate(user_settings, from_attributes=True)


@router.put("/settings", response_model=UserSettingsResponse)
async def update_settings(
    body: UpdateUserSettingsRequest,
    user: Annotated[UserContext, Depends(get_current_user)],
    service: NotificationService = Depends(get_notification_service),
) -> UserSettingsResponse:
    user_settings = await service.update_user_settings(
        user.email,
        enabled_notification_types=body.enabled_notification_types,
        minimum_priority=body.minimum_priority,
    )
    return UserSettingsResponse.model_validate(user_settings, from_attributes=True)
