"""Collaborative strategy sessions.

Discussion points, votes and roadmap edits are stored as JSON lists on the
session row and rewritten whole on every change, so concurrent edits are
last-write-wins.
"""

import uuid
from datetime import datetime, timezone
from typing import Any

from ai_adoption_assessment.core.engines.collaboration import CollaborativeStrategyEngine
from ai_adoption_assessment.core.identity import UserContext
from ai_adoption_assessment.core.interfaces import IEntityRepository
from ai_adoption_assessment.core.models import StrategySession
from ai_adoption_assessment.errors import ConflictError, ErrorCode, NotFoundError, ValidationError
from ai_adoption_assessment.observability import get_logger

logger = get_logger(__name__)

DISCUSSION_POINT_TYPES: frozenset[str] = frozenset(
    {"comment", "suggestion", "decision", "question", "action_item"}
)
VOTE_DIRECTIONS: frozenset[str] = frozenset({"up", "down"})
EDIT_REVIEW_STATUSES: frozenset[str] = frozenset({"approved", "rejected"})


def _now() -> datetime:
    return datetime.now(tz=timezone.utc)


def apply_vote(point: dict[str, Any], email: str, direction: str) -> dict[str, Any]:
    """Toggle a user's vote on a discussion point.

    Voting the same way twice withdraws the vote; voting the other way
    moves it. Returns a new point dict.
    """
    opposite = "down" if direction == "up" else "up"
    votes = point.get("votes") or {}
    same = list(votes.get(direction) or [])
    other = list(votes.get(opposite) or [])

    if email in same:
        same.remove(email)
    else:
        same.append(email)
        other = [voter for voter in other if voter != email]

    return {**point, "votes": {direction: same, opposite: other}}


def _participant(user: UserContext, role: str) -> dict[str, Any]:
    return {
        "email": user.email,
        "name": user.full_name,
        "role": role,
        "joined_at": _now().isoformat(),
    }


class CollaborationService:
    """Runs strategy sessions and their LLM assistance."""

    def __init__(
        self,
        session_repo: IEntityRepository,
        strategy_repo: IEntityRepository,
        engine: CollaborativeStrategyEngine,
    ) -> None:
        self._sessions = session_repo
        self._strategies = strategy_repo
        self._engine = engine

    async def _active(self, session_id: uuid.UUID) -> StrategySession:
        session = await self._sessions.get(session_id)
        if session.status != "active":
            raise ConflictError(
                message=f"Session {session_id} has ended.",
                error_code=ErrorCode.INVALID_OPERATION,
            )
        return session

    async def start_session(
        self,
        strategy_id: uuid.UUID,
        user: UserContext,
        session_name: str | None = None,
    ) -> StrategySession:
        """Open a session on a strategy with the caller as facilitator."""
        await self._strategies.get(strategy_id)
        started = _now()
        session = await self._sessions.create(
            {
                "strategy_id": strategy_id,
                "session_name": session_name or f"Strategy Session - {started.date().isoformat()}",
                "status": "active",
                "participants": [_participant(user, "facilitator")],
                "discussion_points": [],
                "roadmap_edits": [],
                "started_at": started,
                "created_by": user.email,
            }
        )
        logger.info("Strategy session started", session_id=str(session.id), strategy_id=str(strategy_id))
        return session

    async def list_sessions(self, strategy_id: uuid.UUID) -> list[StrategySession]:
        return await self._sessions.filter({"strategy_id": strategy_id})

    async def get_session(self, session_id: uuid.UUID) -> StrategySession:
        return await self._sessions.get(session_id)

    async def join_session(self, session_id: uuid.UUID, user: UserContext) -> StrategySession:
        session = await self._active(session_id)
        participants = list(session.participants or [])
        if any(p.get("email") == user.email for p in participants):
            return session
        participants.append(_participant(user, "participant"))
        return await self._sessions.update(session_id, {"participants": participants})

    async def add_discussion_point(
        self,
        session_id: uuid.UUID,
        user: UserContext,
        content: str,
        point_type: str = "comment",
    ) -> StrategySession:
        """Append a discussion point.

        Raises:
            ValidationError: On blank content or an unknown point type.
            ConflictError: If the session has ended.
        """
        if not content or not content.strip():
            raise ValidationError("Discussion point content must not be blank.")
        if point_type not in DISCUSSION_POINT_TYPES:
            raise ValidationError(f"Invalid discussion point type '{point_type}'.")

        session = await self._active(session_id)
        point = {
            "id": f"dp_{uuid.uuid4().hex[:12]}",
            "author_email": user.email,
            "author_name": user.full_name,
            "content": content.strip(),
            "type": point_type,
            "timestamp": _now().isoformat(),
            "replies": [],
            "votes": {"up": [], "down": []},
            "resolved": False,
        }
        return await self._sessions.update(
            session_id,
            {"discussion_points": [*(session.discussion_points or []), point]},
        )

    async def _update_point(
        self,
        session_id: uuid.UUID,
        point_id: str,
        change: Any,
    ) -> StrategySession:
        session = await self._active(session_id)
        points = list(session.discussion_points or [])
        for index, point in enumerate(points):
            if point.get("id") == point_id:
                points[index] = change(point)
                return await self._sessions.update(session_id, {"discussion_points": points})
        raise NotFoundError(message=f"Discussion point {point_id} not found.")

    async def vote(
        self,
        session_id: uuid.UUID,
        point_id: str,
        user: UserContext,
        direction: str,
    ) -> StrategySession:
        if direction not in VOTE_DIRECTIONS:
            raise ValidationError(f"Invalid vote direction '{direction}'.")
        return await self._update_point(
            session_id, point_id, lambda point: apply_vote(point, user.email, direction)
        )

    async def reply(
        self,
        session_id: uuid.UUID,
        point_id: str,
        user: UserContext,
        content: str,
    ) -> StrategySession:
        if not content or not content.strip():
            raise ValidationError("Reply content must not be blank.")
        reply = {
            "author_email": user.email,
            "author_name": user.full_name,
            "content": content.strip(),
            "timestamp": _now().isoformat(),
        }
        return await self._update_point(
            session_id,
            point_id,
            lambda point: {**point, "replies": [*(point.get("replies") or []), reply]},
        )

    async def resolve_point(self, session_id: uuid.UUID, point_id: str) -> StrategySession:
        return await self._update_point(session_id, point_id, lambda point: {**point, "resolved": True})

    async def propose_roadmap_edit(
        self,
        session_id: uuid.UUID,
        user: UserContext,
        phase: str,
        change_description: str,
        analyze: bool = True,
    ) -> StrategySession:
        """Record a proposed roadmap change, optionally with an LLM impact analysis."""
        if not change_description or not change_description.strip():
            raise ValidationError("Roadmap edit description must not be blank.")

        session = await self._active(session_id)
        edit: dict[str, Any] = {
            "id": f"edit_{uuid.uuid4().hex[:12]}",
            "editor_email": user.email,
            "editor_name": user.full_name,
            "phase": phase,
            "change_description": change_description.strip(),
            "status": "proposed",
            "timestamp": _now().isoformat(),
        }
        if analyze:
            strategy = await self._strategies.get(session.strategy_id)
            edit["ai_analysis"] = await self._engine.analyze_roadmap_edit(strategy.to_dict(), edit)

        return await self._sessions.update(
            session_id,
            {"roadmap_edits": [*(session.roadmap_edits or []), edit]},
        )

    async def review_roadmap_edit(
        self,
        session_id: uuid.UUID,
        edit_id: str,
        status: str,
    ) -> StrategySession:
        if status not in EDIT_REVIEW_STATUSES:
            raise ValidationError(f"Invalid roadmap edit status '{status}'.")
        session = await self._active(session_id)
        edits = list(session.roadmap_edits or [])
        for index, edit in enumerate(edits):
            if edit.get("id") == edit_id:
                edits[index] = {**edit, "status": status}
                return await self._sessions.update(session_id, {"roadmap_edits": edits})
        raise NotFoundError(message=f"Roadmap edit {edit_id} not found.")

    async def suggestions(self, session_id: uuid.UUID, current_topic: str | None = None) -> dict[str, Any]:
        session = await self._sessions.get(session_id)
        strategy = await self._strategies.get(session.strategy_id)
        return await self._engine.generate_suggestions(
            strategy.to_dict(), list(session.discussion_points or []), current_topic
        )

    async def end_session(self, session_id: uuid.UUID) -> StrategySession:
        await self._active(session_id)
        session = await self._sessions.update(session_id, {"status": "ended", "ended_at": _now()})
        logger.info("Strategy session ended", session_id=str(session_id))
        return session

    async def summarize_session(self, session_id: uuid.UUID) -> StrategySession:
        """Summarise the session through the LLM and store the summary."""
        session = await self._sessions.get(session_id)
        strategy = await self._strategies.get(session.strategy_id)
        summary = await self._engine.summarize_session(session.to_dict(), strategy.to_dict())
        return await self._sessions.update(session_id, {"summary": summary})
