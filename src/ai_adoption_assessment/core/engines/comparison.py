"""LLM side-by-side comparison of recommended platforms.

The prompt carries the organisation's intake and one metrics row per
platform from ``calculation.comparison_rows``.
"""

from typing import Any

from ai_adoption_assessment.core.engines.schema import LEVEL, array, number, obj, string, string_list
from ai_adoption_assessment.core.interfaces import ILLMClient
from ai_adoption_assessment.core.prompting import to_prompt_json
from ai_adoption_assessment.observability import get_logger

logger = get_logger(__name__)

VALUE_RATINGS = ["excellent", "good", "fair", "poor"]

PLATFORM_COMPARISON_SCHEMA: dict[str, Any] = obj(
    executive_summary=string(),
    platform_rankings=array(
        obj(platform=string(), rank=number(), reasoning=string(), overall_fit_score=number("0-100"))
    ),
    strengths_weaknesses=array(
        obj(platform=string(), top_strengths=string_list(), key_weaknesses=string_list())
    ),
    pricing_analysis=array(
        obj(
            platform=string(),
            value_rating=string(VALUE_RATINGS),
            cost_structure=string(),
            hidden_costs=string_list(),
            scaling_considerations=string(),
        )
    ),
    use_case_suitability=array(
        obj(platform=string(), best_for=string_list(), not_ideal_for=string_list())
    ),
    implementation_comparison=array(
        obj(
            platform=string(),
            complexity=string(LEVEL),
            time_to_value=string(),
            required_resources=string(),
            key_challenges=string_list(),
        )
    ),
    strategic_fit=array(
        obj(
            platform=string(),
            alignment_score=number("0-100"),
            long_term_viability=string(),
            innovation_potential=string(),
            ecosystem_lock_in=string(),
        )
    ),
    final_recommendation=obj(
        recommended_platform=string(),
        justification=string(),
        alternative_consideration=string(),
        implementation_priority=string_list(),
    ),
)


def build_comparison_prompt(assessment: dict[str, Any], rows: list[dict[str, Any]]) -> str:
    budget = assessment.get("budget_constraints") or {}
    departments = ", ".join(d.get("name", "") for d in assessment.get("departments") or [])
    return f"""You are an enterprise AI consultant. Provide a comprehensive side-by-side comparison of these AI platforms for {assessment.get("organization_name")}.

Organization Context:
- Pain Points: {", ".join(assessment.get("pain_points") or []) or "Not specified"}
- Departments: {departments or "Not specified"}
- Compliance Requirements: {", ".join(assessment.get("compliance_requirements") or []) or "None"}
- Desired Integrations: {", ".join(assessment.get("desired_integrations") or []) or "None"}
- Budget: ${budget.get("min_budget", 0)} - ${budget.get("max_budget", 0)}

Platforms to Compare:
{to_prompt_json(rows)}

Provide a detailed comparison analyzing:
1. Overall suitability ranking with reasoning
2. Strengths and weaknesses of each platform
3. Pricing analysis (value for money, hidden costs, scaling considerations)
4. Use case suitability (which scenarios each platform excels in)
5. Implementation complexity comparison
6. Long-term strategic fit
7. Final recommendation with justification"""


class PlatformComparisonEngine:
    def __init__(self, llm: ILLMClient) -> None:
        self._llm = llm

    async def compare(self, assessment: dict[str, Any], rows: list[dict[str, Any]]) -> dict[str, Any]:
        """Compare platforms for the assessed organisation.

        Args:
            assessment: Completed assessment dict.
            rows: Metrics rows, one per platform.

        Returns:
            Parsed LLM response following PLATFORM_COMPARISON_SCHEMA.
        """
        result = await self._llm.invoke(
            build_comparison_prompt(assessment, rows),
            response_json_schema=PLATFORM_COMPARISON_SCHEMA,
        )
        logger.info(
            "Platform comparison generated",
            assessment_id=str(assessment.get("id")),
            platforms=[row["platform"] for row in rows],
        )
        return result
