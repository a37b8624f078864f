# src/xplore/api/endpoints/club_messages.py
"""Club chat: history for members and admins, member posting, and a live WebSocket feed."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from fastapi import APIRouter, Query, Response, WebSocket, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from starlette.websockets import WebSocketState

from xplore.api.dependencies import CurrentActorDep, SessionDep
from xplore.core.errors import ConflictError, ForbiddenError, InvalidTokenError
from xplore.core.security import decode_access_token
from xplore.models import Club, ClubMember, ClubMessage
from xplore.schemas.club_message import ClubMessageCreate, ClubMessageResponse
from xplore.services.identity import Actor, resolve_actor
from xplore.services.realtime import MessageFeed, get_club_message_bus

from .clubs import get_club_or_404

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/clubs", tags=["clubs", "chat"])

HISTORY_LIMIT = 200


def _is_member(db: Session, club_id: str, actor: Actor) -> bool:
    return db.get(ClubMember, (club_id, actor.id)) is not None


def _can_read(db: Session, club_id: str, actor: Actor) -> bool:
    """Members read their club's channel; platform admins read every channel."""
    return actor.is_admin or _is_member(db, club_id, actor)


def _history(db: Session, club_id: str, limit: int) -> list[ClubMessage]:
    rows = (
        db.query(ClubMessage)
        .filter(ClubMessage.club_id == club_id)
        .order_by(ClubMessage.created_at.desc())
        .limit(limit)
        .all()
    )
    return list(reversed(rows))


def _serialize(message: ClubMessage) -> dict[str, Any]:
    return ClubMessageResponse.model_validate(message).model_dump(mode="json")


@router.get("/{club_id}/messages", response_model=list[ClubMessageResponse])
async def list_club_messages(
    club_id: str,
    actor: CurrentActorDep,
    db: SessionDep,
    limit: int = Query(50, ge=1, le=HISTORY_LIMIT),
) -> list[ClubMessage]:
    """Return recent chat messages, oldest first (members and admins)."""
    get_club_or_404(db, club_id)
    if not _can_read(db, club_id, actor):
        raise ForbiddenError("You must be a member to read messages in this club")
    return _history(db, club_id, limit)


@router.post(
    "/{club_id}/messages",
    response_model=ClubMessageResponse,
    status_code=status.HTTP_201_CREATED,
)
async def post_club_message(
    club_id: str,
    payload: ClubMessageCreate,
    actor: CurrentActorDep,
    db: SessionDep,
    response: Response,
) -> ClubMessage:
    """Post a chat message (members only).

    Re-posting a message id the same author already used returns the stored
    message with 200 instead of inserting it twice.
    """
    get_club_or_404(db, club_id)
    if not _is_member(db, club_id, actor):
        raise ForbiddenError("You must be a member to send messages in this club")

    if payload.id is not None:
        existing = db.get(ClubMessage, payload.id)
        if existing is not None:
            if existing.club_id != club_id or existing.user_id != actor.id:
                raise ConflictError("Message id already in use")
            response.status_code = status.HTTP_200_OK
            return existing

    message = ClubMessage(club_id=club_id, user_id=actor.id, content=payload.content)
    if payload.id is not None:
        message.id = payload.id
    db.add(message)
    try:
        db.commit()
    except IntegrityError as err:
        db.rollback()
        raise ConflictError("Message id already in use") from err
    db.refresh(message)

    get_club_message_bus().publish(club_id, _serialize(message))
    return message


@router.websocket("/{club_id}/messages/ws")
async def stream_club_messages(
    websocket: WebSocket,
    club_id: str,
    db: SessionDep,
    token: str | None = None,
) -> None:
    """Send recent history, then every newly inserted message, to a reader.

    Readers are the same as for the history route: club members and platform
    admins. The bearer token travels as the ``token`` query parameter because
    browsers cannot set headers on WebSocket handshakes. If the feed fails
    the socket is closed with 1011 so the client can reconnect.
    """
    if not token:
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return
    try:
        claims = decode_access_token(token)
    except InvalidTokenError:
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return
    actor = resolve_actor(db, claims)
    if db.get(Club, club_id) is None or not _can_read(db, club_id, actor):
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    bus = get_club_message_bus()
    await websocket.accept()
    # Subscribe before reading history so nothing committed in between is lost;
    # the feed drops the overlap.
    subscription = bus.subscribe(club_id)
    feed = MessageFeed()

    async def pump() -> None:
        for message in _history(db, club_id, HISTORY_LIMIT):
            payload = _serialize(message)
            feed.apply(payload)
            await websocket.send_json(payload)
        while True:
            payload = await subscription.get()
            if feed.apply(payload):
                await websocket.send_json(payload)

    async def drain() -> None:
        # Client frames carry nothing; only the disconnect matters.
        while True:
            incoming = await websocket.receive()
            if incoming["type"] == "websocket.disconnect":
                return

    pump_task = asyncio.create_task(pump())
    drain_task = asyncio.create_task(drain())
    try:
        done, _ = await asyncio.wait(
            {pump_task, drain_task},
            return_when=asyncio.FIRST_COMPLETED,
        )
        if pump_task in done:
            error = pump_task.exception()
            logger.error("Chat feed for club %s failed", club_id, exc_info=error)
            if websocket.client_state is WebSocketState.CONNECTED:
                await websocket.close(code=status.WS_1011_INTERNAL_ERROR)
    finally:
        pump_task.cancel()
        drain_task.cancel()
        await asyncio.gather(pump_task, drain_task, return_exceptions=True)
        subscription.close()
        logger.debug("Chat subscriber for club %s disconnected", club_id)
