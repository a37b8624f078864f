"""In-process event bus for club chat inserts.

Publishers push a serialized message after it is committed; each subscriber
owns an asyncio queue bound to the event loop it subscribed from, so
publishing is safe from any thread. Delivery is best effort: the database is
the source of truth and clients reconcile through :class:`MessageFeed`.
"""

from __future__ import annotations

import asyncio
import logging
import threading
from collections import defaultdict
from collections.abc import Iterable, Mapping
from typing import Any

logger = logging.getLogger(__name__)


class Subscription:
    """Queue of message payloads for one club, consumed by one listener."""

    def __init__(self, bus: ClubMessageBus, club_id: str) -> None:
        self.bus = bus
        self.club_id = club_id
        self.loop = asyncio.get_running_loop()
        self.queue: asyncio.Queue[dict[str, Any]] = asyncio.Queue()

    async def get(self) -> dict[str, Any]:
        """Wait for the next published payload."""
        return await self.queue.get()

    def deliver(self, payload: dict[str, Any]) -> None:
        self.loop.call_soon_threadsafe(self.queue.put_nowait, payload)

    def close(self) -> None:
        self.bus.unsubscribe(self)


class ClubMessageBus:
    """Fan-out of inserted club messages to live subscribers."""

    def __init__(self) -> None:
        self._subscribers: dict[str, set[Subscription]] = defaultdict(set)
        self._lock = threading.Lock()

    def subscribe(self, club_id: str) -> Subscription:
        """Register a listener for ``club_id``; must be called inside a running loop."""
        subscription = Subscription(self, club_id)
        with self._lock:
            self._subscribers[club_id].add(subscription)
        return subscription

    def unsubscribe(self, subscription: Subscription) -> None:
        with self._lock:
            listeners = self._subscribers.get(subscription.club_id)
            if listeners is None:
                return
            listeners.discard(subscription)
            if not listeners:
                del self._subscribers[subscription.club_id]

    def subscriber_count(self, club_id: str) -> int:
        with self._lock:
            return len(self._subscribers.get(club_id, ()))

    def publish(self, club_id: str, payload: dict[str, Any]) -> int:
        """Deliver ``payload`` to every listener of ``club_id``; returns the count."""
        with self._lock:
            listeners = list(self._subscribers.get(club_id, ()))
        delivered = 0
        for subscription in listeners:
            try:
                subscription.deliver(payload)
            except RuntimeError:
                # Listener's event loop is gone.
                logger.info("Dropping closed subscriber for club %s", club_id)
                self.unsubscribe(subscription)
                continue
            delivered += 1
        return delivered


class MessageFeed:
    """Ordered local view of a channel that applies inserts idempotently.

    A message whose id is already present is ignored, so an echo of a
    message the client sent (or one already loaded from history) is never
    shown twice.
    """

    def __init__(self, messages: Iterable[Mapping[str, Any]] = ()) -> None:
        self._messages: dict[str, Mapping[str, Any]] = {}
        for message in messages:
            self.apply(message)

    def apply(self, message: Mapping[str, Any]) -> bool:
        """Insert ``message`` unless its id is known. Returns True if inserted."""
        message_id = str(message["id"])
        if message_id in self._messages:
            return False
        self._messages[message_id] = message
        return True

    def __contains__(self, message_id: object) -> bool:
        return message_id in self._messages

    def __len__(self) -> int:
        return len(self._messages)

    @property
    def messages(self) -> list[Mapping[str, Any]]:
        return list(self._messages.values())


_club_message_bus = ClubMessageBus()


def get_club_message_bus() -> ClubMessageBus:
    """Return the process-wide club message bus."""
    return _club_message_bus
