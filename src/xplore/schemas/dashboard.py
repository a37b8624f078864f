"""Admin dashboard Pydantic schemas."""

from pydantic import BaseModel

from .event import EventResponse
from .user import UserResponse


class DashboardStats(BaseModel):
    """Aggregate counts shown on the admin dashboard."""

    user_count: int
    event_count: int
    club_count: int
    pending_events: int


class DashboardResponse(BaseModel):
    """Counts plus the most recently created users and events."""

    stats: DashboardStats
    recent_users: list[UserResponse]
    recent_events: list[EventResponse]
