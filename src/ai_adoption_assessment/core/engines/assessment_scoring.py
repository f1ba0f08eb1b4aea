"""LLM scoring of a completed assessment.

Two analyses are produced from the assessment's intake and local results:

* the AI assessment score (readiness, risk, maturity level, key risks,
  strengths, improvement areas, best practices), stored on
  ``Assessment.ai_assessment_score``;
* the AI readiness score (per-category readiness with priority actions),
  stored on ``Assessment.ai_readiness_score``.
"""

from typing import Any

from ai_adoption_assessment.core.engines.schema import (
    LEVEL,
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

MATURITY_LEVELS = ["beginner", "intermediate", "advanced", "expert"]
READINESS_LEVELS = ["not_ready", "early_stage", "developing", "ready", "advanced"]

AI_ASSESSMENT_SCORE_SCHEMA: dict[str, Any] = obj(
    overall_score=number("Overall assessment quality score 0-100"),
    readiness_score=number("AI readiness score 0-100"),
    risk_score=number("Risk score 0-100, lower is better"),
    maturity_level=string(MATURITY_LEVELS),
    key_risks=array(
        obj(
            area=string(),
            severity=string(LEVEL),
            description=string(),
            mitigation=string(),
        )
    ),
    strengths=string_list(),
    improvement_areas=array(
        obj(area=string(), priority=string(LEVEL), recommendation=string())
    ),
    best_practices=string_list(),
)

_READINESS_CATEGORY = obj(
    score=number(),
    strengths=string_list(),
    gaps=string_list(),
    actions=string_list(),
)

READINESS_SCORE_SCHEMA: dict[str, Any] = obj(
    overall_readiness_score=number("0-100"),
    category_scores=obj(
        organizational=number(),
        technical=number(),
        team=number(),
        process=number(),
        financial=number(),
    ),
    readiness_level=string(READINESS_LEVELS),
    organizational_readiness=_READINESS_CATEGORY,
    technical_readiness=_READINESS_CATEGORY,
    team_readiness=_READINESS_CATEGORY,
    process_readiness=_READINESS_CATEGORY,
    financial_readiness=_READINESS_CATEGORY,
    priority_actions=array(
        obj(
            action=string(),
            category=string(),
            priority=string(PRIORITY),
            timeline=string(),
            impact=string(),
            effort=string(LEVEL),
        )
    ),
    quick_wins=string_list(),
    long_term_initiatives=string_list(),
    success_metrics=array(obj(metric=string(), target=string(), timeline=string())),
)


def _departments_line(assessment: dict[str, Any]) -> str:
    return ", ".join(
        f"{d.get('name')} ({d.get('user_count', 0)} users)"
        for d in assessment.get("departments") or []
    )


def _top_platform(assessment: dict[str, Any], field: str = "platform_name") -> str:
    recommendations = assessment.get("recommended_platforms") or []
    return recommendations[0].get(field, "N/A") if recommendations else "N/A"


def build_ai_assessment_score_prompt(assessment: dict[str, Any]) -> str:
    return f"""You are an AI adoption assessment expert. Analyze the following enterprise AI assessment and provide a comprehensive scoring.

Organization: {assessment.get("organization_name")}
Departments: {_departments_line(assessment)}
Pain Points: {", ".join(assessment.get("pain_points") or [])}
Compliance Requirements: {", ".join(assessment.get("compliance_requirements") or [])}
Desired Integrations: {", ".join(assessment.get("desired_integrations") or [])}

Top Recommended Platform: {_top_platform(assessment, "platform")}
ROI Summary: {to_prompt_json(assessment.get("roi_calculations") or {})}
Compliance Scores: {to_prompt_json(assessment.get("compliance_scores") or {})}

Based on this assessment, provide:
1. Overall readiness score (0-100) for AI adoption
2. Risk assessment score (0-100), where lower is better
3. Maturity level (beginner/intermediate/advanced/expert)
4. Key risk areas with mitigation strategies
5. Organizational strengths
6. Priority improvement areas with recommendations
7. Best practices specific to this organization

Be specific, actionable, and consider the organization's context."""


def build_readiness_prompt(assessment: dict[str, Any], infrastructure_score: float | None = None) -> str:
    departments = assessment.get("departments") or []
    total_users = sum(d.get("user_count") or 0 for d in departments)
    infrastructure = (
        f"Infrastructure Score: {infrastructure_score}/100\n" if infrastructure_score is not None else ""
    )
    return f"""You are an AI readiness assessment expert. Generate a comprehensive AI Readiness Score with actionable insights.

Assessment Data:
- Organization: {assessment.get("organization_name")}
- Departments: {len(departments)} departments with {total_users} total users
- Pain Points: {", ".join(assessment.get("pain_points") or [])}
- Compliance Requirements: {", ".join(assessment.get("compliance_requirements") or [])}
- Budget: {to_prompt_json(assessment.get("budget_constraints") or {})}
- Top Platform: {_top_platform(assessment)}
{infrastructure}
Generate a detailed AI Readiness Score covering:
1. Overall readiness score (0-100) with breakdown by category
2. Organizational readiness (leadership, culture, change management)
3. Technical readiness (infrastructure, data, security)
4. Team readiness (skills, training, adoption willingness)
5. Process readiness (workflows, governance, compliance)
6. Financial readiness (budget, ROI understanding)
7. Specific actionable insights for improvement in each category
8. Priority action items with timelines
9. Quick wins vs long-term initiatives
10. Success metrics to track progress"""


class AssessmentScoringEngine:
    """Produces the AI assessment score and AI readiness score."""

    def __init__(self, llm: ILLMClient) -> None:
        self._llm = llm

    async def score_assessment(self, assessment: dict[str, Any]) -> dict[str, Any]:
        """Generate the AI assessment score for a completed assessment.

        Args:
            assessment: Assessment dict including local results.

        Returns:
            Parsed LLM response following AI_ASSESSMENT_SCORE_SCHEMA.
        """
        result = await self._llm.invoke(
            build_ai_assessment_score_prompt(assessment),
            response_json_schema=AI_ASSESSMENT_SCORE_SCHEMA,
        )
        logger.info(
            "AI assessment score generated",
            assessment_id=str(assessment.get("id")),
            maturity_level=result.get("maturity_level"),
        )
        return result

    async def score_readiness(
        self,
        assessment: dict[str, Any],
        infrastructure_score: float | None = None,
    ) -> dict[str, Any]:
        """Generate the categorised AI readiness score.

        Args:
            assessment: Assessment dict.
            infrastructure_score: Optional 0-100 infrastructure score to include.

        Returns:
            Parsed LLM response following READINESS_SCORE_SCHEMA.
        """
        result = await self._llm.invoke(
            build_readiness_prompt(assessment, infrastructure_score),
            response_json_schema=READINESS_SCORE_SCHEMA,
        )
        logger.info(
            "AI readiness score generated",
            assessment_id=str(assessment.get("id")),
            readiness_level=result.get("readiness_level"),
        )
        return result
