# src/xplore/api/endpoints/notifications.py
"""Notification inbox endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Query

from xplore.api.dependencies import CurrentActorDep, SessionDep
from xplore.core.errors import ForbiddenError, NotFoundError
from xplore.models import Notification
from xplore.schemas.notification import NotificationResponse
from xplore.services.notifications import list_notifications, mark_notification_as_read

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("", response_model=list[NotificationResponse])
async def list_my_notifications(
    actor: CurrentActorDep,
    db: SessionDep,
    limit: int = Query(50, ge=1, le=200),
) -> list[Notification]:
    """Return the caller's notifications, newest first."""
    return list(list_notifications(db, actor.id, limit=limit))


@router.put("/{notification_id}/read", response_model=NotificationResponse)
@router.post("/{notification_id}/read", response_model=NotificationResponse)
async def mark_read(
    notification_id: str,
    actor: CurrentActorDep,
    db: SessionDep,
) -> Notification:
    """Mark one of the caller's notifications as read. Accepts PUT and POST."""
    notification = db.get(Notification, notification_id)
    if notification is None:
        raise NotFoundError("Notification not found")
    if notification.user_id != actor.id:
        raise ForbiddenError("Not your notification")
    return mark_notification_as_read(db, notification)
