"""Local platform scoring for completed assessments.

Computes, for each of the four benchmarked platforms, the annual ROI of a
rollout across the assessed departments, coverage of the required compliance
standards, support for the desired integrations, and fit with the reported
pain points. These four component scores are combined with configurable
weights into a ranked list of platform recommendations.

This module has no database or network dependencies.
"""

import math
from datetime import datetime, timezone
from typing import Any

from ai_adoption_assessment.core.reference_data import (
    COMPLIANCE_DATA,
    DEFAULT_MONTHLY_PRICE,
    INTEGRATION_SUPPORT,
    INTEGRATION_WEIGHTS,
    PAIN_POINT_SOLUTIONS,
    PLATFORM_IDS,
    PLATFORM_PRICING,
    PLATFORMS_BY_ID,
    ROI_BENCHMARKS,
)
from ai_adoption_assessment.errors import ValidationError
from ai_adoption_assessment.observability import get_logger

logger = get_logger(__name__)

# Working weeks per year, allowing for vacation
WEEKS_PER_YEAR: int = 50

DEFAULT_WEIGHTS: dict[str, float] = {
    "roi_weight": 0.35,
    "compliance_weight": 0.25,
    "integration_weight": 0.25,
    "pain_point_weight": 0.15,
}

# Points awarded to the first, second and third ranked platform for a pain point
_PAIN_POINT_RANK_POINTS: int = 3


def _platform_name(platform_id: str) -> str:
    platform = PLATFORMS_BY_ID.get(platform_id)
    return platform.name if platform else platform_id


def calculate_roi(departments: list[dict[str, Any]], platform: str) -> dict[str, Any]:
    """Compute the annual ROI of rolling out one platform to the given departments.

    Args:
        departments: Department dicts with name, user_count and hourly_rate.
        platform: Platform identifier (e.g. 'anthropic_claude').

    Returns:
        Dict with totals, one- and three-year ROI percentages, and a
        per-department breakdown. ROI is 0 when the total cost is 0.
    """
    total_annual_savings = 0.0
    total_cost = 0.0
    breakdown: list[dict[str, Any]] = []
    monthly_price = PLATFORM_PRICING.get(platform, DEFAULT_MONTHLY_PRICE)

    for dept in departments:
        name = dept.get("name", "")
        user_count = dept.get("user_count") or 0
        hourly_rate = dept.get("hourly_rate") or 0

        hours_per_week = ROI_BENCHMARKS.get(name, {}).get(platform, 0.0)
        annual_hours_saved = hours_per_week * WEEKS_PER_YEAR * user_count
        annual_savings = annual_hours_saved * hourly_rate
        platform_cost = monthly_price * 12 * user_count

        total_annual_savings += annual_savings
        total_cost += platform_cost

        breakdown.append(
            {
                "department": name,
                "user_count": user_count,
                "hours_saved_per_user_per_week": hours_per_week,
                "annual_hours_saved": annual_hours_saved,
                "annual_savings": annual_savings,
                "platform_cost": platform_cost,
                "net_savings": annual_savings - platform_cost,
            }
        )

    net_annual_savings = total_annual_savings - total_cost
    one_year_roi = (net_annual_savings / total_cost) * 100 if total_cost > 0 else 0.0
    three_year_roi = ((net_annual_savings * 3) / total_cost) * 100 if total_cost > 0 else 0.0

    return {
        "platform": platform,
        "total_annual_savings": total_annual_savings,
        "total_cost": total_cost,
        "net_annual_savings": net_annual_savings,
        "one_year_roi": one_year_roi,
        "three_year_roi": three_year_roi,
        "department_breakdown": breakdown,
    }


def calculate_all_roi(departments: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """Compute ROI for every benchmarked platform, in platform order."""
    return [calculate_roi(departments, platform) for platform in PLATFORM_IDS]


def assess_compliance(requirements: list[str]) -> dict[str, dict[str, Any]]:
    """Score each platform's certification coverage of the required standards.

    Only fully certified standards count towards the score; standards the
    reference data does not cover are reported as ``unknown``.

    Args:
        requirements: Compliance standard names (e.g. 'SOC 2', 'HIPAA').

    Returns:
        Platform id -> {compliance_score, certified, in_progress,
        not_certified, status_details}.
    """
    results: dict[str, dict[str, Any]] = {}

    for platform in PLATFORM_IDS:
        counts = {"certified": 0, "in_progress": 0, "not_certified": 0}
        status_details: dict[str, str] = {}

        for requirement in requirements:
            status = COMPLIANCE_DATA.get(platform, {}).get(requirement, "unknown")
            status_details[requirement] = status
            if status in counts:
                counts[status] += 1

        total = len(requirements)
        score = (counts["certified"] / total) * 100 if total > 0 else 0.0

        results[platform] = {
            "compliance_score": score,
            "certified": counts["certified"],
            "in_progress": counts["in_progress"],
            "not_certified": counts["not_certified"],
            "status_details": status_details,
        }

    return results


def assess_integrations(integrations: list[str]) -> dict[str, dict[str, Any]]:
    """Score each platform's support for the desired integrations.

    Support levels weigh native 1.0, api 0.8, limited 0.4; anything else,
    including tools absent from the reference data, counts as not supported.

    Args:
        integrations: Tool names (e.g. 'Salesforce', 'Slack').

    Returns:
        Platform id -> {integration_score, native, api, limited,
        not_supported, integration_details}.
    """
    results: dict[str, dict[str, Any]] = {}

    for platform in PLATFORM_IDS:
        counts = {"native": 0, "api": 0, "limited": 0, "not_supported": 0}
        details: dict[str, str] = {}

        for integration in integrations:
            support = INTEGRATION_SUPPORT.get(platform, {}).get(integration, "not_supported")
            if support not in counts:
                support = "not_supported"
            details[integration] = support
            counts[support] += 1

        total = len(integrations)
        weighted = sum(INTEGRATION_WEIGHTS[level] * count for level, count in counts.items())
        score = (weighted / total) * 100 if total > 0 else 0.0

        results[platform] = {
            "integration_score": score,
            **counts,
            "integration_details": details,
        }

    return results


def assess_pain_points(pain_points: list[str]) -> dict[str, Any]:
    """Award platforms points for each pain point they are ranked against.

    The first ranked platform gets 3 points, the second 2 and the third 1.
    Pain points without a known solution are ignored.

    Returns:
        Dict with platform_scores (platform id -> points) and
        pain_point_mappings (solution and recommended platform names).
    """
    platform_scores: dict[str, int] = {platform: 0 for platform in PLATFORM_IDS}
    mappings: list[dict[str, Any]] = []

    for pain_point in pain_points:
        solution = PAIN_POINT_SOLUTIONS.get(pain_point)
        if solution is None:
            continue

        for rank, platform in enumerate(solution.platforms):
            platform_scores[platform] = platform_scores.get(platform, 0) + (
                _PAIN_POINT_RANK_POINTS - rank
            )

        mappings.append(
            {
                "pain_point": pain_point,
                "solution": solution.solution,
                "recommended_platforms": [_platform_name(p) for p in solution.platforms],
            }
        )

    return {"platform_scores": platform_scores, "pain_point_mappings": mappings}


def normalize_weights(weights: dict[str, float] | None) -> dict[str, float]:
    """Normalise custom scoring weights so they sum to 1.0.

    Accepts either fractions or percentage sliders (e.g. 25/25/25/25).
    Missing keys count as 0.

    Args:
        weights: Mapping of the four weight keys, or None for the defaults.

    Returns:
        Weights with the four standard keys summing to 1.0.

    Raises:
        ValidationError: On unknown keys, negative values, or an all-zero set.
    """
    if weights is None:
        return dict(DEFAULT_WEIGHTS)

    unknown = set(weights) - set(DEFAULT_WEIGHTS)
    if unknown:
        raise ValidationError(f"Unknown scoring weight keys: {sorted(unknown)}")

    values = {key: float(weights.get(key, 0.0)) for key in DEFAULT_WEIGHTS}
    if any(value < 0 for value in values.values()):
        raise ValidationError("Scoring weights must not be negative.")

    total = sum(values.values())
    if total <= 0:
        raise ValidationError("At least one scoring weight must be positive.")

    return {key: value / total for key, value in values.items()}


def generate_recommendations(
    roi_data: list[dict[str, Any]],
    compliance_data: dict[str, dict[str, Any]],
    integration_data: dict[str, dict[str, Any]],
    pain_point_data: dict[str, Any],
    custom_weights: dict[str, float] | None = None,
) -> list[dict[str, Any]]:
    """Combine the component scores into ranked platform recommendations.

    ROI is scaled by dividing the one-year ROI percentage by 10; pain-point
    points are scaled by 10 to a percentage.

    Args:
        roi_data: Output of calculate_all_roi.
        compliance_data: Output of assess_compliance.
        integration_data: Output of assess_integrations.
        pain_point_data: Output of assess_pain_points.
        custom_weights: Optional weights; normalised before use.

    Returns:
        Recommendation dicts sorted by score descending.
    """
    weights = normalize_weights(custom_weights)
    roi_by_platform = {roi["platform"]: roi for roi in roi_data}
    recommendations: list[dict[str, Any]] = []

    for platform_id in PLATFORM_IDS:
        roi = roi_by_platform.get(platform_id)
        compliance = compliance_data.get(platform_id)
        integration = integration_data.get(platform_id)
        pain_points = pain_point_data.get("platform_scores", {}).get(platform_id, 0)

        roi_score = roi["one_year_roi"] / 10 if roi else 0.0
        compliance_score = compliance["compliance_score"] if compliance else 0.0
        integration_score = integration["integration_score"] if integration else 0.0
        pain_score = (pain_points / 10) * 100

        total_score = (
            roi_score * weights["roi_weight"]
            + compliance_score * weights["compliance_weight"]
            + integration_score * weights["integration_weight"]
            + pain_score * weights["pain_point_weight"]
        )

        name = _platform_name(platform_id)
        justification = f"{name} scores {total_score:.1f}/100. "
        if roi and roi["one_year_roi"] > 200:
            justification += f"Strong ROI at {roi['one_year_roi']:.0f}%. "
        if compliance and compliance_score > 80:
            justification += f"Excellent compliance coverage ({compliance_score:.0f}%). "
        if integration and integration_score > 70:
            justification += "Robust integration support. "

        recommendations.append(
            {
                "platform": platform_id,
                "platform_name": name,
                "score": total_score,
                "justification": justification.strip(),
                "roi_score": roi_score,
                "compliance_score": compliance_score,
                "integration_score": integration_score,
                "pain_point_score": pain_score,
            }
        )

    recommendations.sort(key=lambda r: r["score"], reverse=True)
    return recommendations


def generate_executive_summary(
    assessment: dict[str, Any],
    recommendations: list[dict[str, Any]],
) -> str:
    """Render a Markdown executive summary of the top two recommendations.

    Args:
        assessment: Assessment dict with organization_name, departments,
            assessment_date and roi_calculations (platform id -> ROI).
        recommendations: Ranked output of generate_recommendations.

    Returns:
        Markdown text. Empty string if there are no recommendations.
    """
    if not recommendations:
        return ""

    top = recommendations[0]
    runner_up = recommendations[1] if len(recommendations) > 1 else None

    departments = assessment.get("departments") or []
    total_users = sum(d.get("user_count") or 0 for d in departments)
    top_roi = (assessment.get("roi_calculations") or {}).get(top["platform"])

    assessment_date = assessment.get("assessment_date") or datetime.now(tz=timezone.utc)
    if isinstance(assessment_date, str):
        assessment_date = datetime.fromisoformat(assessment_date)

    lines = [
        "# Executive Summary",
        "",
        f"**Organization:** {assessment.get('organization_name', '')}",
        f"**Assessment Date:** {assessment_date:%Y-%m-%d}",
        f"**Total Users Evaluated:** {total_users}",
        "",
        f"## Top Recommendation: {top['platform_name']}",
        "",
        top["justification"],
        "",
    ]

    if top_roi:
        lines += [
            "### Financial Impact",
            f"- **Annual Net Savings:** ${top_roi['net_annual_savings']:,.0f}",
            f"- **1-Year ROI:** {top_roi['one_year_roi']:.0f}%",
            f"- **3-Year ROI:** {top_roi['three_year_roi']:.0f}%",
            "",
        ]

    lines += [
        "### Key Strengths",
        f"- Compliance Score: {top['compliance_score']:.0f}%",
        f"- Integration Compatibility: {top['integration_score']:.0f}%",
        f"- Pain Point Alignment: {top['pain_point_score']:.0f}%",
        "",
    ]

    if runner_up is not None:
        lines += [
            f"## Alternative Option: {runner_up['platform_name']}",
            "",
            runner_up["justification"],
            "",
        ]

    lines += [
        "## Next Steps",
        "",
        f"1. Schedule pilot program with {top['platform_name']}",
        "2. Identify 10-20 early adopters from key departments",
        "3. Establish success metrics and KPIs",
        "4. Plan phased rollout over 6-12 months",
    ]

    return "\n".join(lines) + "\n"


def run_assessment(
    assessment: dict[str, Any],
    custom_weights: dict[str, float] | None = None,
) -> dict[str, Any]:
    """Run the full local scoring pipeline for an assessment.

    Args:
        assessment: Assessment dict with intake fields.
        custom_weights: Optional scoring weights.

    Returns:
        Dict of result fields to store on the Assessment: roi_calculations,
        compliance_scores, integration_scores, pain_point_mappings,
        recommended_platforms, executive_summary.
    """
    departments = assessment.get("departments") or []
    roi_list = calculate_all_roi(departments)
    compliance = assess_compliance(assessment.get("compliance_requirements") or [])
    integrations = assess_integrations(assessment.get("desired_integrations") or [])
    pain_points = assess_pain_points(assessment.get("pain_points") or [])

    recommendations = generate_recommendations(
        roi_list, compliance, integrations, pain_points, custom_weights
    )
    roi_calculations = {roi["platform"]: roi for roi in roi_list}

    summary = generate_executive_summary(
        {**assessment, "roi_calculations": roi_calculations},
        recommendations,
    )

    logger.debug(
        "Assessment scored",
        organization_name=assessment.get("organization_name"),
        top_platform=recommendations[0]["platform"] if recommendations else None,
        department_count=len(departments),
    )

    return {
        "roi_calculations": roi_calculations,
        "compliance_scores": compliance,
        "integration_scores": integrations,
        "pain_point_mappings": pain_points["pain_point_mappings"],
        "recommended_platforms": recommendations,
        "executive_summary": summary,
    }


# Intake fields a what-if scenario may replace
SCENARIO_FIELDS: tuple[str, ...] = (
    "departments",
    "compliance_requirements",
    "desired_integrations",
    "pain_points",
)

# Compliance standards kept by the "minimal compliance" scenario
MINIMAL_COMPLIANCE: list[str] = ["SOC 2", "GDPR"]


def scale_departments(departments: list[dict[str, Any]], factor: float) -> list[dict[str, Any]]:
    """Scale every department's user count, rounding up to whole users."""
    return [
        {**dept, "user_count": math.ceil((dept.get("user_count") or 0) * factor)}
        for dept in departments
    ]


def suggest_scenarios(assessment: dict[str, Any]) -> list[dict[str, Any]]:
    """Preset what-if scenarios derived from an assessment's intake.

    Returns:
        Dicts with name, description and the intake ``changes`` to apply.
    """
    departments = assessment.get("departments") or []
    integrations = assessment.get("desired_integrations") or []
    return [
        {
            "name": "Phased Rollout (50% Users)",
            "description": "Start with half the user base to minimize risk",
            "changes": {"departments": scale_departments(departments, 0.5)},
        },
        {
            "name": "Minimal Compliance",
            "description": "Only essential compliance requirements",
            "changes": {"compliance_requirements": list(MINIMAL_COMPLIANCE)},
        },
        {
            "name": "Essential Integrations Only",
            "description": "Reduce integration complexity",
            "changes": {"desired_integrations": integrations[: math.ceil(len(integrations) * 0.4)]},
        },
        {
            "name": "Aggressive Expansion (150% Users)",
            "description": "Plan for rapid growth",
            "changes": {"departments": scale_departments(departments, 1.5)},
        },
    ]


def run_scenario(
    assessment: dict[str, Any],
    changes: dict[str, Any],
    custom_weights: dict[str, float] | None = None,
) -> dict[str, Any]:
    """Re-score an assessment with some intake fields replaced.

    Platform scores are compared with the assessment's stored
    recommendations; platforms without a stored score compare against 0.

    Args:
        assessment: Completed assessment dict.
        changes: Replacement values for any of SCENARIO_FIELDS.
        custom_weights: Optional scoring weights.

    Returns:
        Dict with the scenario ``inputs``, the scoring results of
        run_assessment and ``score_changes`` per platform, best scenario
        score first.

    Raises:
        ValidationError: If changes name a field outside SCENARIO_FIELDS.
    """
    unknown = set(changes) - set(SCENARIO_FIELDS)
    if unknown:
        raise ValidationError(f"Scenario cannot change: {', '.join(sorted(unknown))}")

    scenario = {**assessment, **changes}
    results = run_assessment(scenario, custom_weights)

    baseline = {
        rec.get("platform"): rec.get("score", 0.0)
        for rec in assessment.get("recommended_platforms") or []
    }
    score_changes = [
        {
            "platform": rec["platform"],
            "platform_name": rec["platform_name"],
            "baseline_score": baseline.get(rec["platform"], 0.0),
            "scenario_score": rec["score"],
            "change": rec["score"] - baseline.get(rec["platform"], 0.0),
        }
        for rec in results["recommended_platforms"]
    ]

    return {
        "inputs": {field: scenario.get(field) or [] for field in SCENARIO_FIELDS},
        **results,
        "score_changes": score_changes,
    }


def comparison_rows(assessment: dict[str, Any], platforms: list[str]) -> list[dict[str, Any]]:
    """Side-by-side metrics for the chosen platforms from a completed assessment.

    Args:
        assessment: Completed assessment dict.
        platforms: Platform ids or display names.

    Returns:
        One row per platform with its score, ROI, cost and component scores.

    Raises:
        ValidationError: If fewer than two platforms are given or one is unknown.
    """
    if len(platforms) < 2:
        raise ValidationError("Select at least two platforms to compare.")

    recommendations = assessment.get("recommended_platforms") or []
    roi = assessment.get("roi_calculations") or {}
    compliance = assessment.get("compliance_scores") or {}
    integration = assessment.get("integration_scores") or {}

    rows: list[dict[str, Any]] = []
    for requested in platforms:
        platform_id = _resolve_platform(requested)
        recommendation = next((r for r in recommendations if r.get("platform") == platform_id), {})
        platform_roi = roi.get(platform_id) or {}
        rows.append(
            {
                "platform": platform_id,
                "platform_name": _platform_name(platform_id),
                "score": recommendation.get("score", 0.0),
                "justification": recommendation.get("justification", ""),
                "roi_1yr": platform_roi.get("one_year_roi", 0.0),
                "roi_3yr": platform_roi.get("three_year_roi", 0.0),
                "annual_savings": platform_roi.get("total_annual_savings", 0.0),
                "platform_cost": platform_roi.get("total_cost", 0.0),
                "compliance_score": (compliance.get(platform_id) or {}).get("compliance_score", 0.0),
                "integration_score": (integration.get(platform_id) or {}).get("integration_score", 0.0),
            }
        )
    return rows


def _resolve_platform(requested: str) -> str:
    if requested in PLATFORMS_BY_ID:
        return requested
    for platform_id, platform in PLATFORMS_BY_ID.items():
        if platform.name.lower() == requested.lower():
            return platform_id
    raise ValidationError(f"Unknown platform '{requested}'.")
