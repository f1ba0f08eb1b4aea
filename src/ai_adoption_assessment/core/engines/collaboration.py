"""LLM support for collaborative strategy sessions.

Suggestions for an ongoing discussion, a session summary, and an impact
analysis of a proposed roadmap edit.
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
from ai_adoption_assessment.core.prompting import to_prompt_json

# Only the latest discussion points are sent with a suggestions request
_RECENT_DISCUSSION_LIMIT = 10

SUGGESTIONS_SCHEMA: dict[str, Any] = obj(
    suggestions=array(
        obj(
            suggestion=string(),
            rationale=string(),
            category=string(
                ["risk_mitigation", "optimization", "compromise", "opportunity", "clarification"]
            ),
            priority=string(LEVEL[::-1]),
            addresses_concern=string(),
        )
    ),
    consensus_opportunities=string_list(),
    potential_conflicts=string_list(),
)

SESSION_SUMMARY_SCHEMA: dict[str, Any] = obj(
    key_decisions=string_list(),
    action_items=array(
        obj(action=string(), owner=string(), deadline=string(), priority=string())
    ),
    open_questions=string_list(),
    consensus_areas=string_list(),
    disagreement_areas=string_list(),
    next_steps=string_list(),
    session_effectiveness_score=number(),
    improvement_suggestions=string_list(),
)

ROADMAP_EDIT_ANALYSIS_SCHEMA: dict[str, Any] = obj(
    recommendation=string(
        ["approve", "approve_with_modifications", "request_clarification", "reject"]
    ),
    timeline_impact=string(),
    budget_impact=string(),
    risk_assessment=string(),
    affected_dependencies=string_list(),
    suggested_modifications=string_list(),
    rationale=string(),
)


def net_votes(point: dict[str, Any]) -> int:
    votes = point.get("votes") or {}
    return len(votes.get("up") or []) - len(votes.get("down") or [])


def build_suggestions_prompt(
    strategy: dict[str, Any],
    discussion_points: list[dict[str, Any]],
    current_topic: str | None,
) -> str:
    recent = "\n".join(
        f"{p.get('author_name')} ({p.get('type')}): {p.get('content')}"
        for p in discussion_points[-_RECENT_DISCUSSION_LIMIT:]
    )
    progress = strategy.get("progress_tracking") or {}
    return f"""As a strategic AI advisor, analyze the ongoing strategy discussion and provide suggestions.

Strategy Context:
- Organization: {strategy.get("organization_name")}
- Platform: {strategy.get("platform")}
- Current Phase: {progress.get("current_phase")}

Current Discussion Topic: {current_topic or "General strategy refinement"}

Recent Discussion Points:
{recent or "No prior discussion"}

Provide actionable suggestions that:
1. Address concerns raised by participants
2. Identify potential compromises for disagreements
3. Highlight risks or opportunities not yet discussed
4. Suggest concrete next steps"""


def build_summary_prompt(session: dict[str, Any], strategy: dict[str, Any]) -> str:
    discussions = [
        {
            "type": p.get("type"),
            "author": p.get("author_name"),
            "content": p.get("content"),
            "votes": net_votes(p),
            "resolved": p.get("resolved", False),
            "replies": len(p.get("replies") or []),
        }
        for p in session.get("discussion_points") or []
    ]
    edits = "\n".join(
        f"{e.get('editor_name')}: {e.get('change_description')} ({e.get('status')})"
        for e in session.get("roadmap_edits") or []
    )
    participants = ", ".join(p.get("name") or p.get("email", "") for p in session.get("participants") or [])
    return f"""Summarize this collaborative strategy session for {strategy.get("organization_name")}.

Session: {session.get("session_name")}
Participants: {participants}
Duration: {session.get("started_at")} to {session.get("ended_at") or "ongoing"}

Discussion Points:
{to_prompt_json(discussions, max_string_length=500)}

Roadmap Edits Proposed:
{edits or "None"}

Provide:
1. Key decisions made (items marked as decisions or highly upvoted)
2. Action items with owners and deadlines
3. Open questions requiring follow-up
4. Areas of consensus
5. Areas of disagreement needing resolution
6. Recommended next steps"""


def build_roadmap_edit_prompt(strategy: dict[str, Any], edit: dict[str, Any]) -> str:
    return f"""Analyze this proposed roadmap edit for {strategy.get("organization_name")}'s AI adoption strategy.

Current Roadmap Phase: {edit.get("phase")}
Proposed Change: {edit.get("change_description")}
Proposed by: {edit.get("editor_name")}

Evaluate:
1. Impact on overall timeline
2. Budget implications
3. Risk changes
4. Dependencies affected
5. Recommendation to approve or request modifications"""


class CollaborativeStrategyEngine:
    def __init__(self, llm: ILLMClient) -> None:
        self._llm = llm

    async def generate_suggestions(
        self,
        strategy: dict[str, Any],
        discussion_points: list[dict[str, Any]],
        current_topic: str | None = None,
    ) -> dict[str, Any]:
        return await self._llm.invoke(
            build_suggestions_prompt(strategy, discussion_points, current_topic),
            response_json_schema=SUGGESTIONS_SCHEMA,
        )

    async def summarize_session(
        self,
        session: dict[str, Any],
        strategy: dict[str, Any],
    ) -> dict[str, Any]:
        return await self._llm.invoke(
            build_summary_prompt(session, strategy),
            response_json_schema=SESSION_SUMMARY_SCHEMA,
        )

    async def analyze_roadmap_edit(
        self,
        strategy: dict[str, Any],
        edit: dict[str, Any],
    ) -> dict[str, Any]:
        return await self._llm.invoke(
            build_roadmap_edit_prompt(strategy, edit),
            response_json_schema=ROADMAP_EDIT_ANALYSIS_SCHEMA,
        )
