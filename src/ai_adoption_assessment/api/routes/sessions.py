"""Collaborative strategy session endpoints.

API prefix: /api/v1/sessions
"""

import uuid
from typing import Annotated, Any

from fastapi import APIRouter, Depends, Query

from ai_adoption_assessment.api.dependencies import get_collaboration_service
from ai_adoption_assessment.api.schemas import (
    DiscussionPointRequest,
    ReplyRequest,
    ReviewEditRequest,
    RoadmapEditRequest,
    SessionResponse,
    StartSessionRequest,
    SuggestionsRequest,
    VoteRequest,
)
from ai_adoption_assessment.auth import UserContext, get_current_user
from ai_adoption_assessment.core.services import CollaborationService

router = APIRouter(prefix="/sessions", tags=["Strategy Sessions"])


def _session(session: Any) -> SessionResponse:
    return SessionResponse.model_validate(session, from_attributes=True)


@router.post("", response_model=SessionResponse, status_code=201)
async def start_session(
    body: StartSessionRequest,
    user: Annotated[UserContext, Depends(get_current_user)],
    service: CollaborationService = Depends(get_collaboration_service),
) -> SessionResponse:
    return _session(await service.start_session(body.strategy_id, user, body.session_name))


@router.get("", response_model=list[SessionResponse])
async def list_sessions(
    strategy_id: Annotated[uuid.UUID, Query()],
    user: Annotated[UserContext, Depends(get_current_user)],
    service: CollaborationService = Depends(get_collaboration_service),
) -> list[SessionResponse]:
    return [_session(s) for s in await service.list_sessions(strategy_id)]


@router.get("/{session_id}", response_model=SessionResponse)
async def get_session(
    session_id: uuid.UUID,
    user: Annotated[UserContext, Depends(get_current_user)],
    service: CollaborationService = Depends(get_collaboration_service),
) -> SessionResponse:
    return _session(await service.get_session(session_id))


@router.post("/{session_id}/join", response_model=SessionResponse)
async def join_session(
    session_id: uuid.UUID,
    user: Annotated[UserContext, Depends(get_current_user)],
    service: CollaborationService = Depends(get_collaboration_service),
) -> SessionResponse:
    return _session(await service.join_session(session_id, user))


@router.post("/{session_id}/points", response_model=SessionResponse)
async def add_discussion_point(
    session_id: uuid.UUID,
    body: DiscussionPointRequest,
    user: Annotated[UserContext, Depends(get_current_user)],
    service: CollaborationService = Depends(get_collaboration_service),
) -> SessionResponse:
    return _session(await service.add_discussion_point(session_id, user, body.content, body.type))


@router.post("/{session_id}/points/{point_id}/vote", response_model=SessionResponse)
async def vote(
    session_id: uuid.UUID,
    point_id: str,
    body: VoteRequest,
    user: Annotated[UserContext, Depends(get_current_user)],
    service: CollaborationService = Depends(get_collaboration_service),
) -> SessionResponse:
    """Vote on a point. Repeating a vote withdraws it."""
    return _session(await service.vote(session_id, point_id, user, body.direction))


@router.post("/{session_id}/points/{point_id}/replies", response_model=SessionResponse)
async def reply(
    session_id: uuid.UUID,
    point_id: str,
    body: ReplyRequest,
    user: Annotated[UserContext, Depends(get_current_user)],
    service: CollaborationService = Depends(get_collaboration_service),
) -> SessionResponse:
    return _session(await service.reply(session_id, point_id, user, body.content))


@router.post("/{session_id}/points/{point_id}/resolve", response_model=SessionResponse)
async def resolve_point(
    session_id: uuid.UUID,
    point_id: str,
    user: Annotated[UserContext, Depends(get_current_user)],
    service: CollaborationService = Depends(get_collaboration_service),
) -> SessionResponse:
    return _session(await service.resolve_point(session_id, point_id))


@router.post("/{session_id}/roadmap-edits", response_model=SessionResponse)
async def propose_roadmap_edit(
    session_id: uuid.UUID,
    body: RoadmapEditRequest,
    user: Annotated[UserContext, Depends(get_current_user)],
    service: CollaborationService = Depends(get_collaboration_service),
) -> SessionResponse:
    return _session(
        await service.propose_roadmap_edit(
            session_id, user, body.phase, body.change_description, analyze=body.analyze
        )
    )


@router.put("/{session_id}/roadmap-edits/{edit_id}", response_model=SessionResponse)
async def review_roadmap_edit(
    session_id: uuid.UUID,
    edit_id: str,
    body: ReviewEditRequest,
    user: Annotated[UserContext, Depends(get_current_user)],
    service: CollaborationService = Depends(get_collaboration_service),
) -> SessionResponse:
    return _session(await service.review_roadmap_edit(session_id, edit_id, body.status))


@router.post("/{session_id}/suggestions")
async def suggestions(
    session_id: uuid.UUID,
    user: Annotated[UserContext, Depends(get_current_user)],
    body: SuggestionsRequest | None = None,
    service: CollaborationService = Depends(get_collaboration_service),
) -> dict[str, Any]:
    return await service.suggestions(session_id, body.current_topic if body else None)


@router.post("/{session_id}/end", response_model=SessionResponse)
async def end_session(
    session_id: uuid.UUID,
    user: Annotated[UserContext, Depends(get_current_user)],
    service: CollaborationService = Depends(get_collaboration_service),
) -> SessionResponse:
    return _session(await service.end_session(session_id))


@router.post("/{session_id}/summary", response_model=SessionResponse)
async def summarize_session(
    session_id: uuid.UUID,
    user: Annotated[UserContext, Depends(get_current_user)],
    service: CollaborationService = Depends(get_collaboration_service),
) -> SessionResponse:
    return _session(await service.summarize_session(session_id))
