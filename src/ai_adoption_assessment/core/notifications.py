"""Contextual notification rules.

Rule-based notifications are derived from the user's strategies and
onboarding state; each rule only fires when its notification type is
enabled in the user's settings. The final list is filtered by the user's
minimum priority before it is persisted.
"""

from typing import Any

PRIORITY_RANK: dict[str, int] = {"low": 1, "medium": 2, "high": 3, "critical": 4}
NOTIFICATION_TYPES: tuple[str, ...] = ("alert", "reminder", "update", "recommendation", "achievement")

_DEFAULT_RANK = PRIORITY_RANK["medium"]

PENDING_MILESTONE_STATUSES = frozenset({"in_progress", "not_started"})


def priority_rank(priority: str | None) -> int:
    """Rank of a priority label; unknown labels rank as medium."""
    return PRIORITY_RANK.get(priority or "", _DEFAULT_RANK)


def _plural(count: int) -> str:
    return "s" if count > 1 else ""


def critical_risks(strategies: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """Unresolved critical risks across the given strategies."""
    found = []
    for strategy in strategies:
        for risk in (strategy.get("risk_analysis") or {}).get("identified_risks") or []:
            if risk.get("severity") == "critical" and risk.get("status") != "resolved":
                found.append(risk)
    return found


def build_rule_notifications(
    user_email: str,
    enabled_types: list[str],
    strategies: list[dict[str, Any]],
    onboarding_flows: list[dict[str, Any]],
) -> list[dict[str, Any]]:
    """Build rule-based notifications for a user.

    Args:
        user_email: Recipient.
        enabled_types: Notification types the user accepts.
        strategies: The user's active AdoptionStrategy dicts.
        onboarding_flows: The user's in-progress OnboardingFlow dicts.

    Returns:
        Notification field dicts, not yet priority-filtered.
    """
    notifications: list[dict[str, Any]] = []

    risks = critical_risks(strategies)
    if risks and "alert" in enabled_types:
        notifications.append(
            {
                "user_email": user_email,
                "type": "alert",
                "priority": "critical",
                "title": f"{len(risks)} Critical Risk{_plural(len(risks))} Detected",
                "message": "Immediate attention required for critical risk alerts",
                "action_url": "/RiskMonitoring",
                "action_label": "View Risks",
            }
        )

    if onboarding_flows and "reminder" in enabled_types:
        progress = onboarding_flows[0].get("progress") or {}
        notifications.append(
            {
                "user_email": user_email,
                "type": "reminder",
                "priority": "medium",
                "title": "Continue Your Onboarding",
                "message": (
                    f"You have completed {progress.get('steps_completed', 0)} of "
                    f"{progress.get('total_steps', 0)} onboarding steps"
                ),
                "action_url": "/Onboarding",
                "action_label": "Continue",
            }
        )

    if "update" in enabled_types:
        for strategy in strategies:
            pending = [
                m
                for m in strategy.get("milestones") or []
                if m.get("status") in PENDING_MILESTONE_STATUSES
            ]
            if pending:
                notifications.append(
                    {
                        "user_email": user_email,
                        "type": "update",
                        "priority": "medium",
                        "title": "Strategy Milestone Update",
                        "message": (
                            f"{len(pending)} milestone{_plural(len(pending))} pending "
                            f"for {strategy.get('organization_name')}"
                        ),
                        "action_url": "/StrategyAutomation",
                        "action_label": "View Strategy",
                    }
                )

    return notifications


def filter_by_priority(
    notifications: list[dict[str, Any]],
    minimum_priority: str | None,
) -> list[dict[str, Any]]:
    """Keep notifications at or above the minimum priority."""
    threshold = priority_rank(minimum_priority)
    return [n for n in notifications if priority_rank(n.get("priority")) >= threshold]
