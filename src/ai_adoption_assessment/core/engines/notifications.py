"""Personalised notification recommendations."""

from typing import Any

from ai_adoption_assessment.core.engines.schema import PRIORITY, array, obj, string
from ai_adoption_assessment.core.interfaces import ILLMClient

NOTIFICATION_RECOMMENDATIONS_SCHEMA: dict[str, Any] = obj(
    recommendations=array(
        obj(
            title=string(),
            message=string(),
            priority=string(PRIORITY),
            action_label=string(),
        )
    )
)


def build_recommendation_prompt(
    role: str,
    active_strategies: int,
    critical_risks: int,
    onboarding_in_progress: int,
) -> str:
    return f"""As an AI assistant for enterprise AI adoption, analyze the user's current context and generate 1-2 highly relevant, actionable recommendations.

User Role: {role}
Active Strategies: {active_strategies}
Critical Risks: {critical_risks}
Onboarding In Progress: {onboarding_in_progress}

Generate specific, personalized recommendations that would help this user succeed in their AI adoption journey. Focus on immediate, high-impact actions."""


class NotificationRecommendationEngine:
    def __init__(self, llm: ILLMClient, max_recommendations: int = 2) -> None:
        self._llm = llm
        self._max = max_recommendations

    async def recommend(
        self,
        user_email: str,
        role: str,
        active_strategies: int,
        critical_risks: int,
        onboarding_in_progress: int,
    ) -> list[dict[str, Any]]:
        """Ask the LLM for recommendations and shape them as notifications.

        Returns:
            At most ``max_recommendations`` Notification field dicts of
            type 'recommendation'. Missing priorities default to medium.
        """
        response = await self._llm.invoke(
            build_recommendation_prompt(role, active_strategies, critical_risks, onboarding_in_progress),
            response_json_schema=NOTIFICATION_RECOMMENDATIONS_SCHEMA,
            add_context_from_internet=False,
        )
        return [
            {
                "user_email": user_email,
                "type": "recommendation",
                "priority": rec.get("priority") or "medium",
                "title": rec.get("title") or "Recommendation",
                "message": rec.get("message") or "",
                "action_label": rec.get("action_label"),
            }
            for rec in (response.get("recommendations") or [])[: self._max]
        ]
