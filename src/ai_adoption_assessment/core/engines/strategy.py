"""Adoption strategy generation, risk identification, and progress monitoring."""

from datetime import datetime, timezone
from typing import Any

from ai_adoption_assessment.core.engines.schema import (
    PRIORITY,
    array,
    number,
    obj,
    string,
    string_list,
)
from ai_adoption_assessment.core.interfaces import ILLMClient
from ai_adoption_assessment.core.prompting import to_prompt_json
from ai_adoption_assessment.observability import get_logger

logger = get_logger(__name__)

PERFORMANCE_RATINGS = ["excellent", "on_track", "needs_attention", "critical"]

ADOPTION_STRATEGY_SCHEMA: dict[str, Any] = obj(
    roadmap=obj(
        executive_summary=string(),
        vision_statement=string(),
        phases=array(
            obj(
                phase_name=string(),
                duration=string(),
                objectives=string_list(),
                key_activities=string_list(),
                deliverables=string_list(),
                success_metrics=string_list(),
            )
        ),
        quick_wins=string_list(),
        long_term_goals=string_list(),
    ),
    milestones=array(
        obj(
            milestone_name=string(),
            target_date=string(),
            status=string(),
            progress_percentage=number(),
            dependencies=string_list(),
        )
    ),
)

RISK_ANALYSIS_SCHEMA: dict[str, Any] = obj(
    identified_risks=array(
        obj(
            risk_id=string(),
            category=string(),
            description=string(),
            severity=string(PRIORITY),
            probability=string(["very_high", "high", "medium", "low", "very_low"]),
            impact=string(),
            mitigation_plan=obj(
                strategy=string(),
                actions=string_list(),
                responsible_party=string(),
                timeline=string(),
            ),
            status=string(),
        )
    ),
    risk_score=number("Overall risk score 0-100"),
)

MONITORING_SCHEMA: dict[str, Any] = obj(
    performance_rating=string(PERFORMANCE_RATINGS),
    key_insights=string_list(),
    concerns=string_list(),
    recommended_adjustments=string_list(),
    recommendations=array(
        obj(
            type=string(["acceleration", "course_correction", "risk_alert", "optimization"]),
            recommendation=string(),
            rationale=string(),
            priority=string(PRIORITY),
        )
    ),
)


def _active_risks(strategy: dict[str, Any]) -> list[dict[str, Any]]:
    risks = (strategy.get("risk_analysis") or {}).get("identified_risks") or []
    return [risk for risk in risks if risk.get("status") != "resolved"]


def build_strategy_prompt(assessment: dict[str, Any], platform: str | None) -> str:
    ai_score = assessment.get("ai_assessment_score") or {}
    departments = ", ".join(
        f"{d.get('name')} ({d.get('user_count', 0)} users)" for d in assessment.get("departments") or []
    )
    return f"""Create a comprehensive, actionable AI adoption strategy for {assessment.get("organization_name")} implementing {platform}.

Assessment Context:
- Organization: {assessment.get("organization_name")}
- AI Maturity: {ai_score.get("maturity_level") or "beginner"}
- Departments: {departments}
- Business Goals: {", ".join(assessment.get("business_goals") or [])}
- Pain Points: {", ".join(assessment.get("pain_points") or [])}
- Budget: {to_prompt_json(assessment.get("budget_constraints") or {})}
- Compliance: {", ".join(assessment.get("compliance_requirements") or [])}

Generate a strategic roadmap with:
1. Executive summary and vision statement
2. Multi-phase implementation plan with timelines
3. Quick wins to demonstrate value early
4. Long-term transformation goals
5. Detailed activities, deliverables, and success metrics per phase"""


def build_risk_prompt(assessment: dict[str, Any], strategy: dict[str, Any]) -> str:
    progress = strategy.get("progress_tracking") or {}
    return f"""Conduct a comprehensive risk analysis for {assessment.get("organization_name")}'s AI adoption strategy.

Strategy Context:
- Platform: {strategy.get("platform")}
- Current Phase: {progress.get("current_phase")}
- Progress: {progress.get("overall_progress", 0)}%
- Organization Maturity: {(assessment.get("ai_assessment_score") or {}).get("maturity_level")}

Known Context:
- Technical Constraints: {to_prompt_json(assessment.get("technical_constraints") or {})}
- Budget: {to_prompt_json(assessment.get("budget_constraints") or {})}
- Compliance Requirements: {", ".join(assessment.get("compliance_requirements") or [])}
- Existing Blockers: {", ".join(progress.get("blockers") or []) or "None"}

Identify all potential risks across technical, organizational, financial, compliance, and operational categories. For each risk give a description and impact, severity and probability, a mitigation plan with specific actions, and the responsible party and timeline."""


def build_monitoring_prompt(strategy: dict[str, Any], recent_activity: str | None) -> str:
    progress = strategy.get("progress_tracking") or {}
    return f"""Analyze the current progress of {strategy.get("organization_name")}'s AI adoption and provide real-time strategic recommendations.

Current Status:
- Platform: {strategy.get("platform")}
- Overall Progress: {progress.get("overall_progress", 0)}%
- Current Phase: {progress.get("current_phase")}
- Recent Achievements: {", ".join(progress.get("achievements") or []) or "None"}
- Active Blockers: {", ".join(progress.get("blockers") or []) or "None"}
- Active Risks: {len(_active_risks(strategy))}

Recent Activity:
{recent_activity or "No recent updates provided"}

Provide:
1. Performance assessment (excellent/on_track/needs_attention/critical)
2. Key insights about progress and trajectory
3. Concerns or warning signs
4. Specific, actionable recommendations for course correction or acceleration
5. Priority level for each recommendation"""


class StrategyAutomationEngine:
    """Generates and monitors AI adoption strategies."""

    def __init__(self, llm: ILLMClient) -> None:
        self._llm = llm

    async def generate_adoption_strategy(self, assessment: dict[str, Any]) -> dict[str, Any]:
        """Generate a draft strategy for the assessment's top platform.

        Args:
            assessment: Completed assessment dict.

        Returns:
            AdoptionStrategy field dict with status 'draft' and progress
            tracking positioned at the first roadmap phase.
        """
        recommendations = assessment.get("recommended_platforms") or []
        platform = recommendations[0].get("platform_name") if recommendations else None

        response = await self._llm.invoke(
            build_strategy_prompt(assessment, platform),
            response_json_schema=ADOPTION_STRATEGY_SCHEMA,
        )
        roadmap = response.get("roadmap") or {}
        phases = roadmap.get("phases") or []

        logger.info(
            "Adoption strategy generated",
            assessment_id=str(assessment.get("id")),
            platform=platform,
            phase_count=len(phases),
        )
        return {
            "assessment_id": assessment.get("id"),
            "organization_name": assessment.get("organization_name"),
            "platform": platform,
            "roadmap": roadmap,
            "milestones": response.get("milestones") or [],
            "progress_tracking": {
                "overall_progress": 0,
                "current_phase": phases[0].get("phase_name") if phases else None,
                "achievements": [],
                "blockers": [],
            },
            "started_at": datetime.now(tz=timezone.utc),
            "status": "draft",
        }

    async def identify_risks(
        self,
        assessment: dict[str, Any],
        strategy: dict[str, Any],
    ) -> dict[str, Any]:
        """Identify strategy risks. Returns identified_risks and risk_score."""
        return await self._llm.invoke(
            build_risk_prompt(assessment, strategy),
            response_json_schema=RISK_ANALYSIS_SCHEMA,
        )

    async def monitor_and_recommend(
        self,
        strategy: dict[str, Any],
        recent_activity: str | None = None,
    ) -> dict[str, Any]:
        return await self._llm.invoke(
            build_monitoring_prompt(strategy, recent_activity),
            response_json_schema=MONITORING_SCHEMA,
        )

    async def create_checkpoint(self, strategy: dict[str, Any]) -> dict[str, Any]:
        """Snapshot progress and attach an LLM performance analysis.

        Returns:
            Checkpoint dict suitable for appending to AdoptionStrategy.checkpoints.
        """
        completed = [
            m.get("milestone_name")
            for m in strategy.get("milestones") or []
            if m.get("status") == "completed"
        ]
        analysis = await self.monitor_and_recommend(strategy)

        return {
            "strategy_id": str(strategy.get("id")) if strategy.get("id") else None,
            "checkpoint_date": datetime.now(tz=timezone.utc).isoformat(),
            "progress_snapshot": {
                "overall_progress": (strategy.get("progress_tracking") or {}).get("overall_progress", 0),
                "completed_milestones": completed,
                "active_risks": len(_active_risks(strategy)),
                "team_velocity": len(completed),
            },
            "ai_analysis": {
                "performance_rating": analysis.get("performance_rating"),
                "key_insights": analysis.get("key_insights") or [],
                "concerns": analysis.get("concerns") or [],
                "recommended_adjustments": analysis.get("recommended_adjustments") or [],
            },
        }
