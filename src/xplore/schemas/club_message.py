"""Club chat Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from .user import UserSummary


class ClubMessageCreate(BaseModel):
    """Message posted to a club channel.

    ``id`` lets optimistic clients pick the identifier up front so a retried
    submission resolves to the same row.
    """

    id: str | None = Field(None, min_length=1, max_length=64)
    content: str = Field(..., min_length=1, max_length=4000)


class ClubMessageResponse(BaseModel):
    """Stored chat message."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    club_id: str
    user_id: str
    content: str
    created_at: datetime
    user: UserSummary
