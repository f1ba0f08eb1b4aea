"""Analytics overview over assessments and strategies."""

from datetime import datetime
from typing import Any

from ai_adoption_assessment.core.analytics import build_dashboard_metrics
from ai_adoption_assessment.core.interfaces import IEntityRepository


class AnalyticsService:
    def __init__(self, assessment_repo: IEntityRepository, strategy_repo: IEntityRepository) -> None:
        self._assessments = assessment_repo
        self._strategies = strategy_repo

    async def overview(self, time_range: str = "all", now: datetime | None = None) -> dict[str, Any]:
        """Headline metrics; unrecognised time ranges cover everything."""
        assessments = await self._assessments.list_all()
        strategies = await self._strategies.list_all()
        return build_dashboard_metrics(
            [a.to_dict() for a in assessments],
            [s.to_dict() for s in strategies],
            time_range,
            now,
        )
