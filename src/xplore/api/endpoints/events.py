# src/xplore/api/endpoints/events.py
"""Event endpoints: public listing, admin moderation and attendance."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Query, Response, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from xplore.api.dependencies import (
    AdminDep,
    CurrentActorDep,
    OptionalActorDep,
    SessionDep,
    visible_status,
)
from xplore.core.errors import ConflictError, NotFoundError
from xplore.models import Club, Event, EventAttendee, EventStatus, NotificationType
from xplore.schemas.event import EventCreate, EventDetailResponse, EventResponse, EventUpdate
from xplore.services.authz import can_mutate, ensure_can_mutate
from xplore.services.notifications import create_notification

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/events", tags=["events"])


def _get_event_or_404(db: Session, event_id: str) -> Event:
    event = db.get(Event, event_id)
    if event is None:
        raise NotFoundError("Event not found")
    return event


def _set_status(db: Session, event: Event, new_status: EventStatus) -> Event:
    """Apply an admin moderation decision and notify the event owner."""
    event.status = new_status.value
    if new_status is EventStatus.APPROVED:
        message = f'Your event "{event.title}" has been approved.'
        kind = NotificationType.SUCCESS
    else:
        message = f'Your event "{event.title}" has been rejected.'
        kind = NotificationType.ERROR
    create_notification(db, event.user_id, message, kind, commit=False)
    db.commit()
    db.refresh(event)
    return event


@router.get("", response_model=list[EventResponse])
async def list_events(
    actor: OptionalActorDep,
    db: SessionDep,
    requested_status: EventStatus | None = Query(None, alias="status"),
) -> list[Event]:
    """List events ordered by date.

    Anyone but an admin only ever sees APPROVED events; admins may pass
    ``?status=`` or omit it to see everything.
    """
    effective = visible_status(
        actor,
        requested_status.value if requested_status else None,
        EventStatus.APPROVED.value,
    )
    query = db.query(Event)
    if effective is not None:
        query = query.filter(Event.status == effective)
    return query.order_by(Event.date).all()


@router.post("", response_model=EventResponse, status_code=status.HTTP_201_CREATED)
async def create_event(payload: EventCreate, admin: AdminDep, db: SessionDep) -> Event:
    """Create an event (admin only). Admin-created events are approved at once."""
    if payload.club_id is not None and db.get(Club, payload.club_id) is None:
        raise NotFoundError("Club not found")

    event = Event(
        title=payload.title,
        description=payload.description,
        content=payload.content,
        date=payload.date,
        location=payload.location,
        image=payload.image,
        club_id=payload.club_id,
        user_id=admin.id,
        status=EventStatus.APPROVED.value,
    )
    db.add(event)
    db.commit()
    db.refresh(event)
    logger.info("Admin %s created event %s", admin.id, event.id)
    return event


@router.get("/{event_id}", response_model=EventDetailResponse)
async def get_event(event_id: str, actor: OptionalActorDep, db: SessionDep) -> Event:
    """Read one event with its attendees.

    Events that are not APPROVED are only visible to their owner and admins.
    """
    event = _get_event_or_404(db, event_id)
    if event.status != EventStatus.APPROVED.value and (
        actor is None or not can_mutate(actor, event)
    ):
        raise NotFoundError("Event not found")
    return event


@router.put("/{event_id}", response_model=EventResponse)
async def update_event(
    event_id: str,
    payload: EventUpdate,
    actor: CurrentActorDep,
    db: SessionDep,
) -> Event:
    """Update an event (owner or admin)."""
    event = _get_event_or_404(db, event_id)
    ensure_can_mutate(actor, event, "Not authorized to update this event")

    for field, value in payload.model_dump(exclude_unset=True).items():
        if value is None and field in {"title", "description", "date", "location"}:
            continue
        setattr(event, field, value)
    db.commit()
    db.refresh(event)
    return event


@router.delete(
    "/{event_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
)
async def delete_event(event_id: str, actor: CurrentActorDep, db: SessionDep) -> Response:
    """Delete an event (owner or admin)."""
    event = _get_event_or_404(db, event_id)
    ensure_can_mutate(actor, event, "Not authorized to delete this event")
    db.delete(event)
    db.commit()
    logger.info("User %s deleted event %s", actor.id, event_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{event_id}/approve", response_model=EventResponse)
async def approve_event(event_id: str, admin: AdminDep, db: SessionDep) -> Event:
    """Approve an event and notify its owner (admin only)."""
    event = _get_event_or_404(db, event_id)
    logger.info("Admin %s approved event %s", admin.id, event_id)
    return _set_status(db, event, EventStatus.APPROVED)


@router.post("/{event_id}/reject", response_model=EventResponse)
async def reject_event(event_id: str, admin: AdminDep, db: SessionDep) -> Event:
    """Reject an event and notify its owner (admin only)."""
    event = _get_event_or_404(db, event_id)
    logger.info("Admin %s rejected event %s", admin.id, event_id)
    return _set_status(db, event, EventStatus.REJECTED)


@router.post("/{event_id}/join", status_code=status.HTTP_201_CREATED)
async def join_event(event_id: str, actor: CurrentActorDep, db: SessionDep) -> dict[str, str]:
    """Register the caller as an attendee of an approved event."""
    event = _get_event_or_404(db, event_id)
    if event.status != EventStatus.APPROVED.value:
        raise ConflictError("Event is not approved yet")

    existing = db.get(EventAttendee, (event_id, actor.id))
    if existing is not None:
        raise ConflictError("Already joined this event")

    db.add(EventAttendee(event_id=event_id, user_id=actor.id))
    try:
        db.commit()
    except IntegrityError as err:
        # A concurrent join for the same pair got in first.
        db.rollback()
        raise ConflictError("Already joined this event") from err
    db.expire(event, ["attendees"])
    return {"message": "Joined event successfully"}


@router.delete(
    "/{event_id}/join",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
)
async def leave_event(event_id: str, actor: CurrentActorDep, db: SessionDep) -> Response:
    """Remove the caller from an event's attendees."""
    attendance = db.get(EventAttendee, (event_id, actor.id))
    if attendance is None:
        raise NotFoundError("Not joined this event")
    db.delete(attendance)
    db.commit()
    event = db.get(Event, event_id)
    if event is not None:
        db.expire(event, ["attendees"])
    return Response(status_code=status.HTTP_204_NO_CONTENT)
