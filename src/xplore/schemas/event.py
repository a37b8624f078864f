"""Event-related Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from xplore.models.event import EventStatus

from .user import UserSummary


class EventCreate(BaseModel):
    """Schema for creating a new event."""

    title: str = Field(..., min_length=1, max_length=255)
    description: str
    content: str | None = None
    date: datetime
    location: str = Field(..., min_length=1, max_length=255)
    image: str | None = None
    club_id: str | None = None


class EventUpdate(BaseModel):
    """Partial update applied by the owner or an admin."""

    title: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = None
    content: str | None = None
    date: datetime | None = None
    location: str | None = Field(None, min_length=1, max_length=255)
    image: str | None = None


class EventResponse(BaseModel):
    """Schema for event information returned by the API."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    description: str
    content: str | None
    date: datetime
    location: str
    image: str | None
    status: EventStatus
    user_id: str
    club_id: str | None
    created_at: datetime
    created_by: UserSummary


class AttendeeResponse(BaseModel):
    """Attendance row with the attending identity."""

    model_config = ConfigDict(from_attributes=True)

    user_id: str
    joined_at: datetime
    user: UserSummary


class EventDetailResponse(EventResponse):
    """Event with its attendee list."""

    attendees: list[AttendeeResponse]
