"""Notification Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict

from xplore.models.notification import NotificationType


class NotificationResponse(BaseModel):
    """Notification as shown to its recipient."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    message: str
    type: NotificationType
    read: bool
    created_at: datetime
