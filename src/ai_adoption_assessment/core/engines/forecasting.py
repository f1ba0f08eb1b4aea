"""Predictive analytics: ROI forecast, risk and compliance outlook, maturity roadmap.

Each prediction combines the current assessment with the user's earlier
assessments as history and, optionally, a market trend summary.
"""

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
from ai_adoption_assessment.core.prompting import to_prompt_json, truncate_to_token_budget

_YEAR_FORECAST = obj(
    roi_percentage=number(),
    savings=number(),
    confidence=string(LEVEL),
    key_drivers=string_list(),
)

ROI_FORECAST_SCHEMA: dict[str, Any] = obj(
    year_1_forecast=_YEAR_FORECAST,
    year_2_forecast=_YEAR_FORECAST,
    year_3_forecast=_YEAR_FORECAST,
    cumulative_value=obj(total_savings=number(), total_roi=number(), payback_months=number()),
    risk_factors=array(obj(factor=string(), impact=string(LEVEL), mitigation=string())),
    growth_assumptions=string_list(),
    recommendation=string(),
)

RISK_FORECAST_SCHEMA: dict[str, Any] = obj(
    predicted_risks=array(
        obj(
            risk_type=string(),
            description=string(),
            likelihood=string(LEVEL),
            severity=string(LEVEL),
            timeline=string(),
            mitigation_strategy=string(),
        )
    ),
    compliance_challenges=array(
        obj(
            regulation=string(),
            challenge=string(),
            deadline=string(),
            effort_required=string(LEVEL),
            action_plan=string(),
        )
    ),
    emerging_threats=array(obj(threat=string(), description=string(), probability=string())),
    overall_risk_trajectory=string(["improving", "stable", "increasing"]),
    recommendations=string_list(),
)

_YEAR_PROJECTION = obj(
    target_level=string(),
    probability=string(LEVEL),
    key_milestones=string_list(),
    required_investments=string_list(),
    success_metrics=string_list(),
)

MATURITY_ROADMAP_SCHEMA: dict[str, Any] = obj(
    current_state=obj(level=string(), strengths=string_list(), gaps=string_list()),
    year_1_projection=_YEAR_PROJECTION,
    year_2_projection=_YEAR_PROJECTION,
    year_3_projection=_YEAR_PROJECTION,
    critical_dependencies=array(obj(dependency=string(), impact=string(), mitigation=string())),
    acceleration_opportunities=string_list(),
    potential_roadblocks=array(obj(roadblock=string(), likelihood=string(), solution=string())),
    overall_trajectory=string(),
)

# Prompt budget for the historical section
_HISTORY_TOKEN_BUDGET = 1500


def _first_roi(assessment: dict[str, Any]) -> dict[str, Any]:
    """ROI of the top recommended platform, else the first one recorded."""
    roi_calculations = assessment.get("roi_calculations") or {}
    recommendations = assessment.get("recommended_platforms") or []
    if recommendations and recommendations[0].get("platform") in roi_calculations:
        return roi_calculations[recommendations[0]["platform"]]
    return next(iter(roi_calculations.values()), {})


def _top_platform_name(assessment: dict[str, Any], default: str = "N/A") -> str:
    recommendations = assessment.get("recommended_platforms") or []
    return recommendations[0].get("platform_name", default) if recommendations else default


def build_roi_history(history: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """Summarise earlier assessments that have ROI results and a recommendation."""
    rows: list[dict[str, Any]] = []
    for past in history:
        if not past.get("roi_calculations") or not past.get("recommended_platforms"):
            continue
        roi = _first_roi(past)
        rows.append(
            {
                "date": past.get("assessment_date"),
                "platform": _top_platform_name(past),
                "roi": roi.get("one_year_roi") or 0,
                "three_year": roi.get("three_year_roi") or 0,
                "org": past.get("organization_name"),
            }
        )
    return rows


def _market_section(market_trends: dict[str, Any] | None, keys: list[str], heading: str) -> str:
    if not market_trends:
        return ""
    selected = {key: market_trends[key] for key in keys if key in market_trends}
    if not selected:
        return ""
    return f"\n{heading}\n{to_prompt_json(selected)}\n"


def build_roi_forecast_prompt(
    assessment: dict[str, Any],
    history: list[dict[str, Any]],
    market_trends: dict[str, Any] | None = None,
) -> str:
    roi = _first_roi(assessment)
    departments = assessment.get("departments") or []
    rows = build_roi_history(history)
    history_json = truncate_to_token_budget(to_prompt_json(rows), _HISTORY_TOKEN_BUDGET)
    return f"""You are a financial analyst specializing in AI ROI projections. Analyze the data and predict future ROI.

Current Assessment:
- Organization: {assessment.get("organization_name")}
- Platform: {_top_platform_name(assessment, "Unknown")}
- Current 1-Year ROI: {(roi.get("one_year_roi") or 0):.1f}%
- Current 3-Year ROI: {(roi.get("three_year_roi") or 0):.1f}%
- Total Annual Savings: ${(roi.get("total_annual_savings") or 0):,.0f}
- Departments: {len(departments)}
- Total Users: {sum(d.get("user_count") or 0 for d in departments)}

Historical Data ({len(rows)} assessments):
{history_json}

Market Context:
- AI adoption growing at 30-40% annually
- Average enterprise AI ROI: 150-200% over 3 years
- Maturity curve: initial 6-12 months show 20-40% gains, accelerating thereafter
{_market_section(market_trends, ["model_releases", "adoption_trends", "pricing_trends", "forecast_implications"], "Real-time Market Intelligence:")}
Provide a detailed ROI forecast for Years 1-3 with realistic projections, confidence levels, and key assumptions."""


def build_risk_forecast_prompt(
    assessment: dict[str, Any],
    market_trends: dict[str, Any] | None = None,
) -> str:
    ai_score = assessment.get("ai_assessment_score") or {}
    return f"""You are a cybersecurity and compliance expert. Predict future risks and compliance challenges for AI deployment.

Current Assessment:
- Organization: {assessment.get("organization_name")}
- Risk Score: {ai_score.get("risk_score", 0)}/100
- Current Risks: {to_prompt_json(ai_score.get("key_risks") or [])}
- Compliance Requirements: {to_prompt_json(assessment.get("compliance_requirements") or [])}
- Platform: {_top_platform_name(assessment)}
- Maturity: {ai_score.get("maturity_level", "beginner")}

Industry Trends:
- AI regulations evolving rapidly (EU AI Act, US Executive Orders)
- Data privacy requirements becoming stricter
- Increased focus on AI ethics and bias
- Growing concern about model security and adversarial attacks
- Supply chain vulnerabilities in AI systems
{_market_section(market_trends, ["regulatory_updates", "competitive_landscape"], "Latest Regulatory Updates:")}
Predict risks and compliance challenges for the next 6-24 months with likelihood and severity."""


def build_maturity_roadmap_prompt(
    assessment: dict[str, Any],
    history: list[dict[str, Any]],
    market_trends: dict[str, Any] | None = None,
) -> str:
    ai_score = assessment.get("ai_assessment_score") or {}
    progression = [
        {
            "date": past.get("assessment_date"),
            "level": (past.get("ai_assessment_score") or {}).get("maturity_level", "beginner"),
            "readiness": (past.get("ai_assessment_score") or {}).get("readiness_score", 0),
        }
        for past in sorted(history, key=lambda a: str(a.get("assessment_date") or ""))
    ]
    return f"""You are an AI transformation consultant. Predict the organization's AI maturity progression over 1-3 years.

Current State:
- Maturity Level: {ai_score.get("maturity_level", "beginner")}
- Readiness Score: {ai_score.get("readiness_score", 0)}/100
- Organization: {assessment.get("organization_name")}
- Platform: {_top_platform_name(assessment)}
- Departments: {len(assessment.get("departments") or [])}

Historical Progression:
{truncate_to_token_budget(to_prompt_json(progression), _HISTORY_TOKEN_BUDGET)}

Maturity Levels:
- Beginner: initial exploration, basic use cases
- Intermediate: scaled deployment, multiple use cases
- Advanced: strategic integration, custom solutions
- Expert: AI-first culture, innovation leadership

Industry Benchmarks:
- Beginner to Intermediate: 6-12 months
- Intermediate to Advanced: 12-18 months
- Advanced to Expert: 18-24 months
{_market_section(market_trends, ["adoption_trends", "model_releases"], "Market Dynamics Affecting Timeline:")}
Create a realistic maturity roadmap with milestones, required investments, and success metrics."""


class ForecastingEngine:
    """ROI, risk and maturity predictions for an assessment."""

    def __init__(self, llm: ILLMClient) -> None:
        self._llm = llm

    async def predict_future_roi(
        self,
        assessment: dict[str, Any],
        history: list[dict[str, Any]] | None = None,
        market_trends: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        return await self._llm.invoke(
            build_roi_forecast_prompt(assessment, history or [], market_trends),
            response_json_schema=ROI_FORECAST_SCHEMA,
        )

    async def predict_risks_and_compliance(
        self,
        assessment: dict[str, Any],
        market_trends: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        return await self._llm.invoke(
            build_risk_forecast_prompt(assessment, market_trends),
            response_json_schema=RISK_FORECAST_SCHEMA,
        )

    async def predict_maturity_roadmap(
        self,
        assessment: dict[str, Any],
        history: list[dict[str, Any]] | None = None,
        market_trends: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        return await self._llm.invoke(
            build_maturity_roadmap_prompt(assessment, history or [], market_trends),
            response_json_schema=MATURITY_ROADMAP_SCHEMA,
        )
