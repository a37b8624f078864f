# src/xplore/models/__init__.py
"""SQLAlchemy models for the Xplore application."""

from .club import Club, ClubMember, ClubMemberRole, ClubStatus
from .club_message import ClubMessage
from .event import Event, EventAttendee, EventStatus
from .notification import Notification, NotificationType
from .user import Role, User

__all__ = [
    "Club", "ClubMember", "ClubMemberRole", "ClubStatus",
    "ClubMessage",
    "Event", "EventAttendee", "EventStatus",
    "Notification", "NotificationType",
    "Role", "User",
]
