"""Notification helpers used by moderation and membership flows."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from sqlalchemy import desc
from sqlalchemy.orm import Session

from xplore.models import Notification, NotificationType, User

logger = logging.getLogger(__name__)


def create_notification(
    db: Session,
    user_id: str,
    message: str,
    type_: NotificationType = NotificationType.INFO,
    *,
    commit: bool = True,
) -> Notification:
    """Persist a notification for ``user_id``."""
    notification = Notification(user_id=user_id, message=message, type=type_.value)
    db.add(notification)
    if commit:
        db.commit()
        db.refresh(notification)
    return notification


def create_activity_notification(
    db: Session,
    *,
    actor_id: str,
    target_user_id: str,
    action: str,
    target_type: str,
    target_name: str,
) -> Notification | None:
    """Tell ``target_user_id`` that ``actor_id`` did something to their resource.

    Self-activity and unknown actors produce no notification.
    """
    if actor_id == target_user_id:
        return None
    actor = db.get(User, actor_id)
    if actor is None:
        return None
    message = f'{actor.name or actor.email or "Someone"} {action} {target_type} "{target_name}"'
    return create_notification(db, target_user_id, message, NotificationType.INFO)


def list_notifications(db: Session, user_id: str, limit: int = 50) -> Sequence[Notification]:
    """Return the newest notifications addressed to ``user_id``."""
    return (
        db.query(Notification)
        .filter(Notification.user_id == user_id)
        .order_by(desc(Notification.created_at))
        .limit(limit)
        .all()
    )


def mark_notification_as_read(db: Session, notification: Notification) -> Notification:
    """Flip the read flag; the only mutation a notification ever sees."""
    if not notification.read:
        notification.read = True
        db.commit()
        db.refresh(notification)
        logger.debug("Notification %s marked as read", notification.id)
    return notification
