"""LLM-generated report bodies and AI enhancement of template sections."""

from datetime import datetime, timezone
from typing import Any

from ai_adoption_assessment.core.engines.schema import (
    LEVEL,
    array,
    number,
    obj,
    string,
    string_list,
)
from ai_adoption_assessment.core.interfaces import ILLMClient
from ai_adoption_assessment.core.prompting import to_prompt_json
from ai_adoption_assessment.errors import LLMInvocationError
from ai_adoption_assessment.observability import get_logger

logger = get_logger(__name__)

# Only the most recent assessments are summarised in a performance report
_PERFORMANCE_ASSESSMENT_LIMIT = 5

PERFORMANCE_SUMMARY_SCHEMA: dict[str, Any] = obj(
    executive_summary=string(),
    key_metrics=obj(
        total_strategies=number(),
        average_progress=number(),
        assessments_completed=number(),
        risks_mitigated=number(),
    ),
    progress_analysis=array(
        obj(strategy=string(), progress=number(), status=string(), highlights=string_list())
    ),
    platform_trends=array(obj(platform=string(), adoption_count=number(), trend=string())),
    achievements=string_list(),
    attention_areas=string_list(),
    recommendations=string_list(),
)

PREDICTIVE_SCHEMA: dict[str, Any] = obj(
    roi_forecast=obj(
        month_3=number(),
        month_6=number(),
        month_12=number(),
        confidence_level=string(),
        key_drivers=string_list(),
    ),
    risk_trajectory=obj(
        current_risk_score=number(),
        predicted_score_3m=number(),
        predicted_score_6m=number(),
        trend=string(["improving", "stable", "worsening"]),
    ),
    cost_benefit=obj(
        total_investment=number(),
        projected_savings=number(),
        net_benefit=number(),
        payback_period=string(),
    ),
    success_probability=obj(overall=number(), factors=string_list()),
    key_indicators=string_list(),
    mitigation_forecast=string(),
)

COMPLIANCE_GAP_SCHEMA: dict[str, Any] = obj(
    gap_analysis=array(
        obj(
            requirement=string(),
            current_status=string(),
            gap_severity=string(["critical", *LEVEL[::-1]]),
            details=string(),
        )
    ),
    risk_exposure=obj(
        overall_risk=string(),
        financial_exposure=string(),
        reputational_risk=string(),
    ),
    remediation_plan=array(
        obj(action=string(), priority=string(), timeline=string(), resources=string())
    ),
    compliance_timeline=string(),
    resource_requirements=string_list(),
    regulatory_alerts=string_list(),
)

_DEFAULT_SECTION_SCHEMA: dict[str, Any] = obj(
    insights=string_list(),
    recommendations=string(),
)

SECTION_INSIGHT_SCHEMAS: dict[str, dict[str, Any]] = {
    "overview": obj(key_takeaways=string_list(), strategic_context=string()),
    "recommendations": obj(
        insights=string_list(),
        comparative_analysis=string(),
        decision_factors=string_list(),
    ),
    "roi": obj(
        insights=string_list(),
        payback_assessment=string(),
        sensitivity_factors=string_list(),
    ),
    "compliance": obj(insights=string_list(), gaps=string_list(), remediation=string_list()),
    "risks": obj(
        insights=string_list(),
        mitigations=array(obj(risk=string(), mitigation=string())),
    ),
    "implementation": obj(insights=string_list(), critical_path=string_list()),
}


def _now_iso() -> str:
    return datetime.now(tz=timezone.utc).isoformat()


def build_performance_summary_prompt(
    strategies: list[dict[str, Any]],
    assessments: list[dict[str, Any]],
    date_range: str,
) -> str:
    strategy_lines = "\n".join(
        f"- {s.get('organization_name')}: {s.get('platform')} ({s.get('status')}), "
        f"{(s.get('progress_tracking') or {}).get('overall_progress', 0)}% complete"
        for s in strategies
    )
    assessment_lines = []
    for assessment in assessments[:_PERFORMANCE_ASSESSMENT_LIMIT]:
        recommendations = assessment.get("recommended_platforms") or []
        top = recommendations[0].get("platform_name") if recommendations else "N/A"
        assessment_lines.append(f"- {assessment.get('organization_name')}: top platform {top}")

    return f"""Generate an AI adoption performance summary report for {date_range}.

Active Strategies ({len(strategies)}):
{strategy_lines or "None"}

Recent Assessments ({len(assessments)}):
{chr(10).join(assessment_lines) or "None"}

Provide an executive summary, key metrics, per-strategy progress analysis with highlights, platform adoption trends, notable achievements, areas needing attention, and recommendations."""


def build_predictive_prompt(
    strategy: dict[str, Any],
    assessment: dict[str, Any] | None,
) -> str:
    progress = strategy.get("progress_tracking") or {}
    risks = (strategy.get("risk_analysis") or {}).get("identified_risks") or []
    active_risks = [r for r in risks if r.get("status") != "resolved"]
    roi = (assessment or {}).get("roi_calculations") or {}
    return f"""Generate a predictive analysis report for {strategy.get("organization_name")}'s AI adoption.

Strategy:
- Platform: {strategy.get("platform")}
- Current Phase: {progress.get("current_phase")}
- Progress: {progress.get("overall_progress", 0)}%
- Active Risks: {len(active_risks)}

ROI Calculations:
{to_prompt_json(roi)}

Risk Profile:
{to_prompt_json(active_risks)}

Forecast ROI at 3, 6 and 12 months, the risk trajectory, the cost-benefit position, the probability of success with its driving factors, the key indicators to watch, and how current mitigations are expected to play out."""


def build_compliance_gap_prompt(assessment: dict[str, Any], platform: str | None) -> str:
    return f"""Generate a compliance gap analysis report for {assessment.get("organization_name")}.

Platform: {platform or "Not selected"}
Requirements: {", ".join(assessment.get("compliance_requirements") or []) or "None specified"}

Compliance Scores:
{to_prompt_json(assessment.get("compliance_scores") or {})}

For each requirement give the current status, gap severity and details. Then assess overall risk exposure, lay out a prioritised remediation plan with timelines and resources, a compliance timeline, resource requirements, and any regulatory alerts."""


def build_section_insight_prompt(
    section: dict[str, Any],
    content: dict[str, Any],
    assessment: dict[str, Any],
) -> str:
    return f"""You are writing the "{section.get("title")}" section of an AI adoption report for {assessment.get("organization_name")}.

Section type: {section.get("type")}
Section data:
{to_prompt_json(content, max_string_length=500)}

Provide concise, decision-ready insights for an enterprise audience based only on the data above."""


class AutomatedReportEngine:
    """Generates report bodies through the LLM."""

    def __init__(self, llm: ILLMClient) -> None:
        self._llm = llm

    async def performance_summary(
        self,
        strategies: list[dict[str, Any]],
        assessments: list[dict[str, Any]],
        date_range: str = "the last 30 days",
    ) -> dict[str, Any]:
        response = await self._llm.invoke(
            build_performance_summary_prompt(strategies, assessments, date_range),
            response_json_schema=PERFORMANCE_SUMMARY_SCHEMA,
        )
        return {**response, "report_type": "performance_summary", "generated_at": _now_iso()}

    async def predictive(
        self,
        strategy: dict[str, Any],
        assessment: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        response = await self._llm.invoke(
            build_predictive_prompt(strategy, assessment),
            response_json_schema=PREDICTIVE_SCHEMA,
        )
        return {**response, "report_type": "predictive_analysis", "generated_at": _now_iso()}

    async def compliance_gap(
        self,
        assessment: dict[str, Any],
        platform: str | None = None,
    ) -> dict[str, Any]:
        response = await self._llm.invoke(
            build_compliance_gap_prompt(assessment, platform),
            response_json_schema=COMPLIANCE_GAP_SCHEMA,
        )
        return {**response, "report_type": "compliance_gap", "generated_at": _now_iso()}

    async def enhance_sections(
        self,
        report: dict[str, Any],
        sections: list[dict[str, Any]],
        assessment: dict[str, Any],
    ) -> dict[str, Any]:
        """Attach ``ai_insights`` to every assembled section marked ai_enhanced.

        ``sections`` are the resolved template sections in the same order as
        ``report["sections"]``. A section whose LLM call fails keeps its
        local content and the failure is logged.

        Returns:
            The report dict, updated in place.
        """
        for section, rendered in zip(sections, report.get("sections") or []):
            if not section.get("ai_enhanced"):
                continue
            schema = SECTION_INSIGHT_SCHEMAS.get(section.get("type", ""), _DEFAULT_SECTION_SCHEMA)
            try:
                rendered["ai_insights"] = await self._llm.invoke(
                    build_section_insight_prompt(section, rendered["content"], assessment),
                    response_json_schema=schema,
                )
            except LLMInvocationError as exc:
                logger.warning(
                    "Section enhancement failed",
                    section_type=section.get("type"),
                    error=exc.message,
                )
        return report
