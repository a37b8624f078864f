"""Admin dashboard aggregation with a short-lived in-memory cache.

The cache only ever holds statistics. It is consulted after the admin guard
has already passed and plays no part in authorization.
"""

from __future__ import annotations

import threading
import time
from collections.abc import Callable

from sqlalchemy import desc, func
from sqlalchemy.orm import Session

from xplore.core.settings import settings
from xplore.models import Club, Event, EventStatus, User
from xplore.schemas.dashboard import DashboardResponse, DashboardStats
from xplore.schemas.event import EventResponse
from xplore.schemas.user import UserResponse

RECENT_LIMIT = 5


class DashboardCache:
    """Single-slot TTL cache for the dashboard payload."""

    def __init__(
        self,
        ttl_seconds: float,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._lock = threading.Lock()
        self._value: DashboardResponse | None = None
        self._stored_at = 0.0

    def get_or_compute(self, compute: Callable[[], DashboardResponse]) -> DashboardResponse:
        """Return the cached payload, recomputing it once it is ``ttl_seconds`` old."""
        with self._lock:
            now = self._clock()
            if self._value is not None and now - self._stored_at < self.ttl_seconds:
                return self._value
        value = compute()
        with self._lock:
            self._value = value
            self._stored_at = self._clock()
        return value

    def clear(self) -> None:
        with self._lock:
            self._value = None
            self._stored_at = 0.0


def collect_dashboard(db: Session) -> DashboardResponse:
    """Query counts and the most recent users and events."""

    def _count(model: type) -> int:
        return int(db.query(func.count()).select_from(model).scalar() or 0)

    pending_events = (
        db.query(func.count())
        .select_from(Event)
        .filter(Event.status == EventStatus.PENDING.value)
        .scalar()
        or 0
    )
    recent_users = db.query(User).order_by(desc(User.created_at)).limit(RECENT_LIMIT).all()
    recent_events = db.query(Event).order_by(desc(Event.created_at)).limit(RECENT_LIMIT).all()

    return DashboardResponse(
        stats=DashboardStats(
            user_count=_count(User),
            event_count=_count(Event),
            club_count=_count(Club),
            pending_events=int(pending_events),
        ),
        recent_users=[UserResponse.model_validate(user) for user in recent_users],
        recent_events=[EventResponse.model_validate(event) for event in recent_events],
    )


_dashboard_cache = DashboardCache(settings.dashboard_cache_seconds)


def get_dashboard_cache() -> DashboardCache:
    """Return the process-wide dashboard cache."""
    return _dashboard_cache
