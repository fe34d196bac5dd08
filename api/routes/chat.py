"""
Conversation Routes - session lifecycle, messages and mode toggle.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException

from api.dependencies import get_registry
from api.schemas import (
    Coordinates,
    MessageOut,
    MessagesResponse,
    ModeRequest,
    SessionCreateRequest,
    SessionResponse,
    UserMessageRequest,
)
from assistant.conversation import ConversationOrchestrator
from assistant.errors import ConversationBusyError, LocationAlreadySetError, SessionNotFoundError
from assistant.models import Coordinate, Message
from assistant.sessions import SessionRegistry

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/sessions", tags=["conversation"])


def _out(messages) -> list[MessageOut]:
    return [MessageOut(**m.to_dict()) for m in messages]


def _lookup(registry: SessionRegistry, session_id: str) -> ConversationOrchestrator:
    try:
        return registry.get(session_id)
    except SessionNotFoundError:
        raise HTTPException(status_code=404, detail=f"Unknown session {session_id}") from None


@router.post("", response_model=SessionResponse, status_code=201)
async def create_session(
    req: SessionCreateRequest,
    registry: SessionRegistry = Depends(get_registry),
):
    """Open a conversation. Omit lat/lon when the user's location is unavailable."""
    if (req.lat is None) != (req.lon is None):
        raise HTTPException(status_code=422, detail="lat and lon must be given together")
    location = Coordinate(req.lat, req.lon) if req.lat is not None else None
    session_id, convo = registry.create(location=location, mode=req.mode)
    return SessionResponse(
        session_id=session_id,
        mode=convo.mode,
        location_available=convo.location is not None,
        messages=_out(convo.history),
    )


@router.get("/{session_id}/messages", response_model=MessagesResponse)
async def list_messages(session_id: str, registry: SessionRegistry = Depends(get_registry)):
    convo = _lookup(registry, session_id)
    return MessagesResponse(session_id=session_id, mode=convo.mode, messages=_out(convo.history))


@router.post("/{session_id}/messages", response_model=MessagesResponse)
async def post_message(
    session_id: str,
    req: UserMessageRequest,
    registry: SessionRegistry = Depends(get_registry),
):
    """Send a user message; returns only the bot messages it produced."""
    convo = _lookup(registry, session_id)
    try:
        replies: list[Message] = await convo.handle(req.text)
    except ConversationBusyError:
        raise HTTPException(
            status_code=409, detail="Still working on the previous message",
        ) from None
    return MessagesResponse(session_id=session_id, mode=convo.mode, messages=_out(replies))


@router.put("/{session_id}/mode", response_model=MessagesResponse)
async def switch_mode(
    session_id: str,
    req: ModeRequest,
    registry: SessionRegistry = Depends(get_registry),
):
    convo = _lookup(registry, session_id)
    confirmation = convo.switch_mode(req.mode)
    return MessagesResponse(session_id=session_id, mode=convo.mode, messages=_out([confirmation]))


@router.put("/{session_id}/location", status_code=204)
async def set_location(
    session_id: str,
    req: Coordinates,
    registry: SessionRegistry = Depends(get_registry),
):
    convo = _lookup(registry, session_id)
    try:
        convo.set_location(Coordinate(req.lat, req.lon))
    except LocationAlreadySetError:
        raise HTTPException(
            status_code=409, detail="Location is already set for this session",
        ) from None
    logger.info("Session %s location updated", session_id)


@router.delete("/{session_id}", status_code=204)
async def close_session(session_id: str, registry: SessionRegistry = Depends(get_registry)):
    try:
        registry.drop(session_id)
    except SessionNotFoundError:
        raise HTTPException(status_code=404, detail=f"Unknown session {session_id}") from None
