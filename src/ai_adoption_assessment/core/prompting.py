"""Prompt cost utilities.

Helpers that keep LLM prompts small: a rough token estimate, a hard
truncation to a token budget, context compression, and one-line summaries
of assessments and strategies for embedding in prompts.
"""

import hashlib
import json
import math
from typing import Any

TRUNCATION_MARKER: str = "\n[Truncated for token efficiency]"

# Rough English average
_CHARS_PER_TOKEN: int = 4
_MAX_LIST_ITEMS: int = 10


def estimate_tokens(text: str | None) -> int:
    """Approximate token count at four characters per token."""
    if not text:
        return 0
    return math.ceil(len(text) / _CHARS_PER_TOKEN)


def truncate_to_token_budget(text: str, max_tokens: int = 2000) -> str:
    """Cut text to ``max_tokens * 4`` characters and mark the cut.

    Text already within budget is returned unchanged.
    """
    if estimate_tokens(text) <= max_tokens:
        return text
    return text[: max_tokens * _CHARS_PER_TOKEN] + TRUNCATION_MARKER


def compress_context(obj: Any, max_string_length: int = 200) -> Any:
    """Shrink a JSON-like value for inclusion in a prompt.

    Drops None values and keys starting with ``_``, truncates long strings
    with ``...``, and keeps only the first ten items of each list.
    """
    if obj is None:
        return None
    if isinstance(obj, str):
        if len(obj) > max_string_length:
            return obj[:max_string_length] + "..."
        return obj
    if isinstance(obj, (list, tuple)):
        return [compress_context(item, max_string_length) for item in obj[:_MAX_LIST_ITEMS]]
    if isinstance(obj, dict):
        return {
            key: compress_context(value, max_string_length)
            for key, value in obj.items()
            if value is not None and not str(key).startswith("_")
        }
    return obj


def extract_assessment_essentials(assessment: dict[str, Any] | None) -> dict[str, Any] | None:
    if not assessment:
        return None
    ai_score = assessment.get("ai_assessment_score") or {}
    recommendations = assessment.get("recommended_platforms") or []
    return {
        "org": assessment.get("organization_name"),
        "topPlatform": recommendations[0].get("platform_name") if recommendations else None,
        "maturity": ai_score.get("maturity_level"),
        "readiness": ai_score.get("readiness_score"),
        "riskScore": ai_score.get("risk_score"),
        "keyRisks": [risk.get("description") for risk in (ai_score.get("key_risks") or [])[:3]],
        "compliance": (assessment.get("compliance_requirements") or [])[:5],
    }


def extract_strategy_essentials(strategy: dict[str, Any] | None) -> dict[str, Any] | None:
    if not strategy:
        return None
    progress = strategy.get("progress_tracking") or {}
    risk_analysis = strategy.get("risk_analysis") or {}
    active_risks = [
        risk
        for risk in risk_analysis.get("identified_risks") or []
        if risk.get("status") != "resolved"
    ]
    delayed = [m for m in strategy.get("milestones") or [] if m.get("status") == "delayed"]
    return {
        "org": strategy.get("organization_name"),
        "platform": strategy.get("platform"),
        "phase": progress.get("current_phase"),
        "progress": progress.get("overall_progress"),
        "riskScore": risk_analysis.get("risk_score"),
        "activeRisks": [
            {"desc": risk.get("description"), "severity": risk.get("severity")}
            for risk in active_risks[:5]
        ],
        "delayedMilestones": [m.get("milestone_name") for m in delayed[:3]],
    }


def build_compressed_context(
    strategy: dict[str, Any] | None = None,
    assessment: dict[str, Any] | None = None,
    shared_context: dict[str, Any] | None = None,
) -> str:
    """Render one summary line each for an assessment, strategy and shared note."""
    parts: list[str] = []

    essentials = extract_assessment_essentials(assessment)
    if essentials:
        parts.append(
            f"Assessment: {essentials['org']} | Platform: {essentials['topPlatform']} | "
            f"Maturity: {essentials['maturity']} | Risk: {essentials['riskScore']}"
        )

    strategy_essentials = extract_strategy_essentials(strategy)
    if strategy_essentials:
        parts.append(
            f"Strategy: {strategy_essentials['org']} | Phase: {strategy_essentials['phase']} | "
            f"Progress: {strategy_essentials['progress']}% | "
            f"Risks: {len(strategy_essentials['activeRisks'])}"
        )

    if shared_context and shared_context.get("content"):
        parts.append(f"Shared: {shared_context['content'][:100]}")

    return "\n".join(parts)


def generate_cache_key(prefix: str, data: Any) -> str:
    """Deterministic cache key for a JSON-serialisable payload."""
    payload = json.dumps(data, sort_keys=True, default=str)
    digest = hashlib.sha256(payload.encode("utf-8")).hexdigest()[:16]
    return f"{prefix}_{digest}"


def to_prompt_json(data: Any, max_string_length: int = 200) -> str:
    """Compress a value and serialise it for embedding in a prompt."""
    return json.dumps(compress_context(data, max_string_length), indent=2, default=str)
