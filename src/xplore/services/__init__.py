# src/xplore/services/__init__.py
"""Business logic services for the Xplore application."""

from .dashboard import DashboardCache
from .identity import Actor
from .realtime import ClubMessageBus, MessageFeed

__all__ = [
    "Actor",
    "ClubMessageBus",
    "DashboardCache",
    "MessageFeed",
]
