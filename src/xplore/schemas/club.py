"""Club-related Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from xplore.models.club import ClubMemberRole, ClubStatus

from .event import EventResponse
from .user import UserSummary


class ClubCreate(BaseModel):
    """Schema for creating a new club."""

    name: str = Field(..., min_length=1, max_length=255)
    description: str
    content: str | None = None
    image: str | None = None


class ClubUpdate(BaseModel):
    """Partial update applied by an admin."""

    name: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = None
    content: str | None = None
    image: str | None = None
    status: ClubStatus | None = None


class ClubResponse(BaseModel):
    """Schema for club information returned by the API."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    description: str
    content: str | None
    image: str | None
    status: ClubStatus
    user_id: str
    created_at: datetime
    created_by: UserSummary
    member_count: int = 0


class ClubMemberResponse(BaseModel):
    """Membership row returned when joining or listing a club."""

    model_config = ConfigDict(from_attributes=True)

    club_id: str
    user_id: str
    role: ClubMemberRole
    joined_at: datetime
    user: UserSummary


class ClubDetailResponse(ClubResponse):
    """Club with members and its approved events."""

    members: list[ClubMemberResponse]
    events: list[EventResponse]
