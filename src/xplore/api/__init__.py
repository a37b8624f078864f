# src/xplore/api/__init__.py
"""HTTP API for Xplore."""

from .endpoints import (
    admin_router,
    auth_router,
    club_messages_router,
    clubs_router,
    events_router,
    notifications_router,
    system_router,
    users_router,
)

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
