"""Local scoring of catalogue platforms against LLM-extracted search criteria.

Each platform earns points for matching the extracted criteria:
category 30, compliance 25, use case 20, integration 15, deployment 10.
All matching is case-insensitive substring matching. When the LLM also
scored the platform, the higher of the two scores wins and the LLM's match
reasons and concerns are reported.
"""

from typing import Any

CATEGORY_POINTS: int = 30
COMPLIANCE_POINTS: int = 25
USE_CASE_POINTS: int = 20
INTEGRATION_POINTS: int = 15
DEPLOYMENT_POINTS: int = 10

DEFAULT_MIN_SCORE: float = 30.0


def _contains(haystack: str | None, needle: str | None) -> bool:
    if not haystack or not needle:
        return False
    return needle.lower() in haystack.lower()


def _any_contains(haystacks: list[str] | None, needles: list[str] | None) -> bool:
    return any(_contains(h, n) for n in needles or [] for h in haystacks or [])


def _find_llm_score(
    platform_name: str | None,
    platform_scores: list[dict[str, Any]],
) -> dict[str, Any] | None:
    for entry in platform_scores:
        llm_name = entry.get("platform_name")
        if _contains(llm_name, platform_name) or _contains(platform_name, llm_name):
            return entry
    return None


def score_platform(platform: dict[str, Any], criteria: dict[str, Any]) -> tuple[float, list[str]]:
    """Score one platform against extracted criteria.

    Returns:
        Tuple of (score, match reasons).
    """
    score = 0.0
    reasons: list[str] = []

    if any(_contains(platform.get("category"), cat) for cat in criteria.get("categories") or []):
        score += CATEGORY_POINTS
        reasons.append("Category match")

    if _any_contains(
        platform.get("compliance_certifications"), criteria.get("compliance_requirements")
    ):
        score += COMPLIANCE_POINTS
        reasons.append("Compliance certified")

    use_cases = criteria.get("use_cases") or []
    if _any_contains(platform.get("use_cases"), use_cases) or any(
        _contains(platform.get("description"), uc) for uc in use_cases
    ):
        score += USE_CASE_POINTS
        reasons.append("Use case alignment")

    if _any_contains(platform.get("integration_options"), criteria.get("integrations_needed")):
        score += INTEGRATION_POINTS
        reasons.append("Integration support")

    deployment = criteria.get("deployment_preference")
    if deployment and _any_contains(platform.get("deployment_options"), [deployment]):
        score += DEPLOYMENT_POINTS
        reasons.append("Deployment option available")

    return score, reasons


def score_and_filter_platforms(
    platforms: list[dict[str, Any]],
    search_response: dict[str, Any] | None,
    min_score: float = DEFAULT_MIN_SCORE,
) -> list[dict[str, Any]]:
    """Score platforms, keep those above min_score, best first.

    Args:
        platforms: AIPlatform dicts.
        search_response: LLM response with extracted_criteria and platform_scores.
        min_score: Exclusive lower bound on the kept score.

    Returns:
        Platform dicts extended with semantic_score, match_reasons and concerns.
    """
    if not platforms or not search_response:
        return []

    criteria = search_response.get("extracted_criteria") or {}
    llm_scores = search_response.get("platform_scores") or []
    scored: list[dict[str, Any]] = []

    for platform in platforms:
        score, reasons = score_platform(platform, criteria)
        llm_entry = _find_llm_score(platform.get("name"), llm_scores)
        concerns: list[str] = []

        if llm_entry is not None:
            llm_score = llm_entry.get("score") or 0
            score = max(score, float(llm_score))
            reasons = llm_entry.get("match_reasons") or reasons
            concerns = llm_entry.get("concerns") or []

        scored.append(
            {**platform, "semantic_score": score, "match_reasons": reasons, "concerns": concerns}
        )

    kept = [p for p in scored if p["semantic_score"] > min_score]
    kept.sort(key=lambda p: p["semantic_score"], reverse=True)
    return kept
