"""Personalised onboarding flows and their progress."""

import uuid
from typing import Any

from ai_adoption_assessment.core.engines.onboarding import DEFAULT_TOTAL_STEPS, OnboardingEngine
from ai_adoption_assessment.core.identity import UserContext
from ai_adoption_assessment.core.interfaces import IEntityRepository
from ai_adoption_assessment.core.models import OnboardingFlow
from ai_adoption_assessment.errors import ConflictError, ErrorCode, NotFoundError, ValidationError
from ai_adoption_assessment.observability import get_logger

logger = get_logger(__name__)


class OnboardingService:
    def __init__(
        self,
        flow_repo: IEntityRepository,
        assessment_repo: IEntityRepository,
        engine: OnboardingEngine,
    ) -> None:
        self._flows = flow_repo
        self._assessments = assessment_repo
        self._engine = engine

    async def _owned(self, flow_id: uuid.UUID, user_email: str) -> OnboardingFlow:
        flow = await self._flows.get(flow_id)
        if flow.user_email != user_email:
            raise NotFoundError(message=f"OnboardingFlow {flow_id} not found.")
        return flow

    async def current_flow(self, user_email: str) -> OnboardingFlow | None:
        flows = await self._flows.filter({"user_email": user_email}, limit=1)
        return flows[0] if flows else None

    async def start_flow(
        self,
        user: UserContext,
        assessment_id: uuid.UUID | None = None,
        regenerate: bool = False,
    ) -> OnboardingFlow:
        """Return the user's in-progress flow, or generate a new one.

        The flow is personalised with the given assessment, else the user's
        most recent one when they have any.
        """
        if not regenerate:
            existing = await self._flows.filter(
                {"user_email": user.email, "status": "in_progress"}, limit=1
            )
            if existing:
                return existing[0]

        assessment: dict[str, Any] | None = None
        if assessment_id is not None:
            assessment = (await self._assessments.get(assessment_id)).to_dict()
        else:
            recent = await self._assessments.filter({"created_by": user.email}, limit=1)
            assessment = recent[0].to_dict() if recent else None

        fields = await self._engine.generate_flow(user.email, user.full_name, user.role, assessment)
        flow = await self._flows.create({**fields, "created_by": user.email})
        logger.info("Onboarding flow started", flow_id=str(flow.id), user_email=user.email)
        return flow

    async def complete_step(
        self,
        flow_id: uuid.UUID,
        user_email: str,
        module: str | None = None,
        minutes_spent: int = 0,
    ) -> OnboardingFlow:
        """Count one completed step; the flow completes when all steps are done.

        Raises:
            ConflictError: If the flow is no longer in progress.
            ValidationError: If minutes_spent is negative.
        """
        if minutes_spent < 0:
            raise ValidationError("minutes_spent must not be negative.")
        flow = await self._owned(flow_id, user_email)
        if flow.status != "in_progress":
            raise ConflictError(
                message=f"Onboarding flow {flow_id} is {flow.status}.",
                error_code=ErrorCode.INVALID_OPERATION,
            )

        progress = dict(flow.progress or {})
        total = progress.get("total_steps") or DEFAULT_TOTAL_STEPS
        steps = min(progress.get("steps_completed", 0) + 1, total)
        explored = list(progress.get("modules_explored") or [])
        if module and module not in explored:
            explored.append(module)

        progress.update(
            steps_completed=steps,
            total_steps=total,
            modules_explored=explored,
            time_spent_minutes=progress.get("time_spent_minutes", 0) + minutes_spent,
        )
        changes: dict[str, Any] = {"progress": progress}
        if steps >= total:
            changes["status"] = "completed"
            logger.info("Onboarding completed", flow_id=str(flow_id), user_email=user_email)
        return await self._flows.update(flow_id, changes)

    async def complete_tip(self, flow_id: uuid.UUID, user_email: str, tip_id: str) -> OnboardingFlow:
        flow = await self._owned(flow_id, user_email)
        tips = [dict(tip) for tip in flow.interactive_tips or []]
        for tip in tips:
            if tip.get("tip_id") == tip_id:
                tip["completed"] = True
                return await self._flows.update(flow_id, {"interactive_tips": tips})
        raise NotFoundError(message=f"Tip {tip_id} not found.")

    async def skip(self, flow_id: uuid.UUID, user_email: str) -> OnboardingFlow:
        await self._owned(flow_id, user_email)
        return await self._flows.update(flow_id, {"status": "skipped"})

    async def guidance(self, page: str, user: UserContext) -> dict[str, Any]:
        if not page or not page.strip():
            raise ValidationError("Page name must not be blank.")
        flow = await self.current_flow(user.email)
        return await self._engine.contextual_guidance(
            page.strip(), user.role, flow.to_dict() if flow else None
        )
