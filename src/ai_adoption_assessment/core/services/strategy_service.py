"""Adoption strategy lifecycle and progress tracking."""

import math
import uuid
from typing import Any

from ai_adoption_assessment.core.engines.strategy import StrategyAutomationEngine
from ai_adoption_assessment.core.interfaces import IEntityRepository
from ai_adoption_assessment.core.models import AdoptionStrategy
from ai_adoption_assessment.errors import ConflictError, ErrorCode, NotFoundError, ValidationError
from ai_adoption_assessment.observability import get_logger

logger = get_logger(__name__)

VALID_STRATEGY_STATUSES: frozenset[str] = frozenset({"draft", "active", "paused", "completed"})
VALID_MILESTONE_STATUSES: frozenset[str] = frozenset(
    {"not_started", "in_progress", "completed", "blocked"}
)


def milestone_progress(milestones: list[dict[str, Any]]) -> int:
    """Percentage of completed milestones, rounded half up. 0 when there are none."""
    if not milestones:
        return 0
    completed = sum(1 for m in milestones if m.get("status") == "completed")
    return math.floor(completed / len(milestones) * 100 + 0.5)


class StrategyService:
    """Generates strategies from assessments and tracks their progress."""

    def __init__(
        self,
        strategy_repo: IEntityRepository,
        assessment_repo: IEntityRepository,
        engine: StrategyAutomationEngine,
    ) -> None:
        self._strategies = strategy_repo
        self._assessments = assessment_repo
        self._engine = engine

    async def generate_strategy(self, assessment_id: uuid.UUID, created_by: str | None) -> AdoptionStrategy:
        """Generate a draft strategy for a completed assessment.

        Raises:
            NotFoundError: If the assessment does not exist.
            ConflictError: If the assessment is not completed.
        """
        assessment = await self._assessments.get(assessment_id)
        if assessment.status != "completed":
            raise ConflictError(
                message=f"Assessment {assessment_id} must be completed before generating a strategy.",
                error_code=ErrorCode.INVALID_OPERATION,
            )

        fields = await self._engine.generate_adoption_strategy(assessment.to_dict())
        strategy = await self._strategies.create({**fields, "created_by": created_by})

        logger.info(
            "Strategy created",
            strategy_id=str(strategy.id),
            assessment_id=str(assessment_id),
            platform=strategy.platform,
        )
        return strategy

    async def get_strategy(self, strategy_id: uuid.UUID) -> AdoptionStrategy:
        return await self._strategies.get(strategy_id)

    async def list_strategies(
        self,
        status: str | None = None,
        limit: int | None = None,
        offset: int = 0,
    ) -> list[AdoptionStrategy]:
        if status is not None and status not in VALID_STRATEGY_STATUSES:
            raise ValidationError(f"Invalid strategy status '{status}'.")
        criteria = {"status": status} if status else {}
        return await self._strategies.filter(criteria, limit=limit, offset=offset)

    async def update_status(self, strategy_id: uuid.UUID, status: str) -> AdoptionStrategy:
        if status not in VALID_STRATEGY_STATUSES:
            raise ValidationError(f"Invalid strategy status '{status}'.")
        await self._strategies.get(strategy_id)
        strategy = await self._strategies.update(strategy_id, {"status": status})
        logger.info("Strategy status changed", strategy_id=str(strategy_id), status=status)
        return strategy

    async def update_milestone(
        self,
        strategy_id: uuid.UUID,
        milestone_name: str,
        status: str,
    ) -> AdoptionStrategy:
        """Set one milestone's status and recompute overall progress.

        Raises:
            ValidationError: If status is not a milestone status.
            NotFoundError: If the strategy has no milestone with this name.
        """
        if status not in VALID_MILESTONE_STATUSES:
            raise ValidationError(f"Invalid milestone status '{status}'.")

        strategy = await self._strategies.get(strategy_id)
        milestones = [dict(m) for m in strategy.milestones or []]
        matched = False
        for milestone in milestones:
            if milestone.get("milestone_name") == milestone_name:
                milestone["status"] = status
                milestone["progress_percentage"] = 100 if status == "completed" else milestone.get(
                    "progress_percentage", 0
                )
                matched = True
        if not matched:
            raise NotFoundError(message=f"Milestone '{milestone_name}' not found on strategy {strategy_id}.")

        return await self._strategies.update(
            strategy_id,
            {
                "milestones": milestones,
                "progress_tracking": {
                    **(strategy.progress_tracking or {}),
                    "overall_progress": milestone_progress(milestones),
                },
            },
        )

    async def update_progress(
        self,
        strategy_id: uuid.UUID,
        current_phase: str | None = None,
        achievements: list[str] | None = None,
        blockers: list[str] | None = None,
    ) -> AdoptionStrategy:
        """Record phase, achievements and blockers; overall progress is recomputed."""
        strategy = await self._strategies.get(strategy_id)
        tracking = dict(strategy.progress_tracking or {})
        if current_phase is not None:
            tracking["current_phase"] = current_phase
        if achievements is not None:
            tracking["achievements"] = achievements
        if blockers is not None:
            tracking["blockers"] = blockers
        tracking["overall_progress"] = milestone_progress(strategy.milestones or [])
        return await self._strategies.update(strategy_id, {"progress_tracking": tracking})

    async def identify_risks(self, strategy_id: uuid.UUID) -> AdoptionStrategy:
        strategy = await self._strategies.get(strategy_id)
        assessment: dict[str, Any] = {"organization_name": strategy.organization_name}
        if strategy.assessment_id is not None:
            assessment = (await self._assessments.get(strategy.assessment_id)).to_dict()

        analysis = await self._engine.identify_risks(assessment, strategy.to_dict())
        logger.info(
            "Strategy risks identified",
            strategy_id=str(strategy_id),
            risk_count=len(analysis.get("identified_risks") or []),
        )
        return await self._strategies.update(strategy_id, {"risk_analysis": analysis})

    async def monitor(self, strategy_id: uuid.UUID, recent_activity: str | None = None) -> dict[str, Any]:
        strategy = await self._strategies.get(strategy_id)
        return await self._engine.monitor_and_recommend(strategy.to_dict(), recent_activity)

    async def create_checkpoint(self, strategy_id: uuid.UUID) -> AdoptionStrategy:
        """Append a progress checkpoint with an LLM performance analysis."""
        strategy = await self._strategies.get(strategy_id)
        checkpoint = await self._engine.create_checkpoint(strategy.to_dict())
        return await self._strategies.update(
            strategy_id,
            {"checkpoints": [*(strategy.checkpoints or []), checkpoint]},
        )
