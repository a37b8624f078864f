# src/xplore/schemas/__init__.py
"""
Pydantic schemas for API request/response models.

These schemas define the structure of API data for serialization and validation.
"""

from .club import (
    ClubCreate,
    ClubDetailResponse,
    ClubMemberResponse,
    ClubResponse,
    ClubUpdate,
)
from .club_message import ClubMessageCreate, ClubMessageResponse
from .dashboard import DashboardResponse, DashboardStats
from .event import EventCreate, EventDetailResponse, EventResponse, EventUpdate
from .notification import NotificationResponse
from .user import (
    AuthResponse,
    AvatarUpdate,
    LoginRequest,
    SignupRequest,
    UserResponse,
    UserSummary,
    UserUpdate,
)

__all__ = [
    "ClubCreate", "ClubDetailResponse", "ClubMemberResponse", "ClubResponse", "ClubUpdate",
    "ClubMessageCreate", "ClubMessageResponse",
    "DashboardResponse", "DashboardStats",
    "EventCreate", "EventDetailResponse", "EventResponse", "EventUpdate",
    "NotificationResponse",
    "AuthResponse", "AvatarUpdate", "LoginRequest", "SignupRequest",
    "UserResponse", "UserSummary", "UserUpdate",
]
