# src/xplore/api/endpoints/__init__.py
"""API endpoint modules."""

from .admin import router as admin_router
from .auth import router as auth_router
from .club_messages import router as club_messages_router
from .clubs import router as clubs_router
from .events import router as events_router
from .notifications import router as notifications_router
from .system import router as system_router
from .users import router as users_router

__all__ = [
    "admin_router",
    "auth_router",
    "club_messages_router",
    "clubs_router",
    "events_router",
    "notifications_router",
    "system_router",
    "users_router",
]
