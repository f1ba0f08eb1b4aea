"""Custom dashboards, scoped to the calling user."""

import uuid
from typing import Any

from ai_adoption_assessment.core import dashboards
from ai_adoption_assessment.core.interfaces import IEntityRepository
from ai_adoption_assessment.core.models import CustomDashboard
from ai_adoption_assessment.errors import NotFoundError, ValidationError
from ai_adoption_assessment.observability import get_logger

logger = get_logger(__name__)

EDITABLE_FIELDS: frozenset[str] = frozenset({"name", "description", "filters", "is_default"})


class DashboardService:
    """Dashboard CRUD and widget layout. Only one default dashboard per user."""

    def __init__(self, dashboard_repo: IEntityRepository) -> None:
        self._dashboards = dashboard_repo

    async def _owned(self, dashboard_id: uuid.UUID, user_email: str) -> CustomDashboard:
        dashboard = await self._dashboards.get(dashboard_id)
        if dashboard.user_email != user_email:
            # Other users' dashboards are reported as missing
            raise NotFoundError(message=f"CustomDashboard {dashboard_id} not found.")
        return dashboard

    async def _clear_default(self, user_email: str, keep: uuid.UUID | None = None) -> None:
        for dashboard in await self._dashboards.filter({"user_email": user_email, "is_default": True}):
            if dashboard.id != keep:
                await self._dashboards.update(dashboard.id, {"is_default": False})

    async def list_dashboards(self, user_email: str) -> list[CustomDashboard]:
        return await self._dashboards.filter({"user_email": user_email})

    async def get_dashboard(self, dashboard_id: uuid.UUID, user_email: str) -> CustomDashboard:
        return await self._owned(dashboard_id, user_email)

    async def create_dashboard(
        self,
        user_email: str,
        name: str,
        description: str | None = None,
        widget_types: list[str] | None = None,
        filters: dict[str, Any] | None = None,
        is_default: bool = False,
    ) -> CustomDashboard:
        """Create a dashboard, optionally pre-populated with catalogue widgets.

        Raises:
            ValidationError: On a blank name or an unknown widget type.
        """
        if not name or not name.strip():
            raise ValidationError("Dashboard name must not be blank.")

        widgets: list[dict[str, Any]] = []
        for widget_type in widget_types or []:
            widgets = dashboards.add_widget(widgets, widget_type)

        if is_default:
            await self._clear_default(user_email)

        dashboard = await self._dashboards.create(
            {
                "user_email": user_email,
                "name": name.strip(),
                "description": description,
                "widgets": widgets,
                "filters": filters or {},
                "is_default": is_default,
                "created_by": user_email,
            }
        )
        logger.info("Dashboard created", dashboard_id=str(dashboard.id), widget_count=len(widgets))
        return dashboard

    async def update_dashboard(
        self,
        dashboard_id: uuid.UUID,
        user_email: str,
        data: dict[str, Any],
    ) -> CustomDashboard:
        unknown = set(data) - EDITABLE_FIELDS
        if unknown:
            raise ValidationError(f"Unknown dashboard field(s): {', '.join(sorted(unknown))}")
        await self._owned(dashboard_id, user_email)
        if data.get("is_default"):
            await self._clear_default(user_email, keep=dashboard_id)
        return await self._dashboards.update(dashboard_id, data)

    async def set_default(self, dashboard_id: uuid.UUID, user_email: str) -> CustomDashboard:
        return await self.update_dashboard(dashboard_id, user_email, {"is_default": True})

    async def delete_dashboard(self, dashboard_id: uuid.UUID, user_email: str) -> None:
        await self._owned(dashboard_id, user_email)
        await self._dashboards.delete(dashboard_id)

    async def add_widget(
        self,
        dashboard_id: uuid.UUID,
        user_email: str,
        widget_type: str,
        title: str | None = None,
        config: dict[str, Any] | None = None,
    ) -> CustomDashboard:
        dashboard = await self._owned(dashboard_id, user_email)
        widgets = dashboards.add_widget(list(dashboard.widgets or []), widget_type, title, config)
        return await self._dashboards.update(dashboard_id, {"widgets": widgets})

    async def remove_widget(self, dashboard_id: uuid.UUID, user_email: str, widget_id: str) -> CustomDashboard:
        dashboard = await self._owned(dashboard_id, user_email)
        widgets = dashboards.remove_widget(list(dashboard.widgets or []), widget_id)
        return await self._dashboards.update(dashboard_id, {"widgets": widgets})

    async def move_widget(
        self,
        dashboard_id: uuid.UUID,
        user_email: str,
        widget_id: str,
        direction: str,
    ) -> CustomDashboard:
        dashboard = await self._owned(dashboard_id, user_email)
        widgets = dashboards.move_widget(list(dashboard.widgets or []), widget_id, direction)
        return await self._dashboards.update(dashboard_id, {"widgets": widgets})
