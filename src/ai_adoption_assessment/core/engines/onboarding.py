"""Personalised onboarding flows and page guidance."""

from typing import Any

from ai_adoption_assessment.core.engines.schema import LEVEL, array, obj, string, string_list
from ai_adoption_assessment.core.interfaces import ILLMClient
from ai_adoption_assessment.observability import get_logger

logger = get_logger(__name__)

# Used when the flow has no first steps to count
DEFAULT_TOTAL_STEPS = 5

PLATFORM_FEATURES: list[tuple[str, str]] = [
    ("Assessment", "AI-powered needs assessment wizard"),
    ("Strategy Automation", "Automated roadmap and risk management"),
    ("Training", "Personalized AI training modules"),
    ("Platform Comparison", "Side-by-side AI platform analysis"),
    ("Predictive Analytics", "ROI forecasting and risk prediction"),
    ("Reports", "Custom report generation"),
    ("Executive Dashboard", "High-level metrics"),
]

ONBOARDING_FLOW_SCHEMA: dict[str, Any] = obj(
    personalized_path=obj(
        welcome_message=string(),
        priority_goals=string_list(),
        recommended_first_steps=array(
            obj(
                step=string(),
                description=string(),
                feature=string(),
                priority=string(LEVEL[::-1]),
            )
        ),
    ),
    suggested_modules=array(
        obj(module_name=string(), page=string(), relevance=string(), description=string())
    ),
    interactive_tips=array(
        obj(tip_id=string(), page=string(), element=string(), message=string())
    ),
)

GUIDANCE_SCHEMA: dict[str, Any] = obj(
    page_overview=string(),
    key_actions=string_list(),
    pro_tips=string_list(),
    next_step=obj(page=string(), reason=string()),
)


def build_onboarding_prompt(
    email: str,
    full_name: str,
    role: str,
    assessment: dict[str, Any] | None,
) -> str:
    if assessment:
        recommendations = assessment.get("recommended_platforms") or []
        context = f"""Assessment Context:
- Organization: {assessment.get("organization_name")}
- Recommended Platform: {recommendations[0].get("platform_name") if recommendations else "N/A"}
- Departments: {", ".join(d.get("name", "") for d in assessment.get("departments") or [])}
- Business Goals: {", ".join(assessment.get("business_goals") or [])}
- Pain Points: {", ".join(assessment.get("pain_points") or [])}
- Maturity Level: {(assessment.get("ai_assessment_score") or {}).get("maturity_level")}"""
    else:
        context = "No assessment data available yet."

    features = "\n".join(
        f"{index}. {name} - {description}"
        for index, (name, description) in enumerate(PLATFORM_FEATURES, start=1)
    )
    return f"""Create a personalized onboarding flow for a new user of an Enterprise AI Decision Platform.

User Profile:
- Name: {full_name}
- Email: {email}
- Role: {role}

{context}

Available Platform Features:
{features}

Create a personalized onboarding experience with:
1. A warm, role-appropriate welcome message
2. Priority goals based on their role and context
3. Recommended first steps (features to explore first)
4. Suggested modules in order of relevance
5. Interactive tips for key features"""


def build_guidance_prompt(page: str, role: str, flow: dict[str, Any] | None) -> str:
    progress = (flow or {}).get("progress") or {}
    return f"""Provide contextual guidance for a {role} user viewing the "{page}" page.

User's Onboarding Status:
- Steps Completed: {progress.get("steps_completed", 0)}/{progress.get("total_steps", DEFAULT_TOTAL_STEPS)}
- Modules Explored: {", ".join(progress.get("modules_explored") or []) or "None yet"}

Current Page: {page}

Provide:
1. A brief explanation of what this page offers
2. 3 key actions they should take
3. Pro tips specific to their role
4. Next recommended step after this page"""


class OnboardingEngine:
    def __init__(self, llm: ILLMClient) -> None:
        self._llm = llm

    async def generate_flow(
        self,
        email: str,
        full_name: str,
        role: str,
        assessment: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Generate a personalised onboarding flow.

        Returns:
            OnboardingFlow field dict with status 'in_progress', tips marked
            incomplete, and zeroed progress counters.
        """
        response = await self._llm.invoke(
            build_onboarding_prompt(email, full_name, role, assessment),
            response_json_schema=ONBOARDING_FLOW_SCHEMA,
        )
        path = response.get("personalized_path") or {}
        first_steps = path.get("recommended_first_steps") or []

        logger.info("Onboarding flow generated", user_email=email, step_count=len(first_steps))
        return {
            "user_email": email,
            "user_role": role,
            "assessment_id": assessment.get("id") if assessment else None,
            "status": "in_progress",
            "personalized_path": path,
            "suggested_modules": response.get("suggested_modules") or [],
            "interactive_tips": [
                {**tip, "completed": False} for tip in response.get("interactive_tips") or []
            ],
            "progress": {
                "steps_completed": 0,
                "total_steps": len(first_steps) or DEFAULT_TOTAL_STEPS,
                "modules_explored": [],
                "time_spent_minutes": 0,
            },
        }

    async def contextual_guidance(
        self,
        page: str,
        role: str,
        flow: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        return await self._llm.invoke(
            build_guidance_prompt(page, role, flow),
            response_json_schema=GUIDANCE_SCHEMA,
        )
