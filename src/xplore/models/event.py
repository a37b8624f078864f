# src/xplore/models/event.py
"""SQLAlchemy models for campus events and their attendees."""

from __future__ import annotations

from datetime import datetime
from enum import StrEnum

from sqlalchemy import DateTime, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from xplore.db.session import Base
from xplore.db.time import utcnow

from .user import User, new_id


class EventStatus(StrEnum):
    """Moderation status of an event; only APPROVED events are public."""

    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    CANCELLED = "CANCELLED"


class Event(Base):
    """A dated campus event owned by the identity that created it."""

    __tablename__ = "events"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=new_id)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    content: Mapped[str | None] = mapped_column(Text, nullable=True)
    date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    location: Mapped[str] = mapped_column(String(255), nullable=False)
    image: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(
        String(16), nullable=False, default=EventStatus.PENDING.value, index=True
    )
    user_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    club_id: Mapped[str | None] = mapped_column(
        String(64), ForeignKey("clubs.id", ondelete="SET NULL"), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

    created_by: Mapped[User] = relationship("User")
    attendees: Mapped[list[EventAttendee]] = relationship(
        "EventAttendee",
        cascade="all, delete-orphan",
    )

    @property
    def owner_id(self) -> str:
        """Identity that owns the event for mutation checks."""
        return self.user_id


class EventAttendee(Base):
    """Join table mapping identities onto events they attend."""

    __tablename__ = "event_attendees"

    # Composite key makes a second join by the same identity fail at the store.
    event_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("events.id", ondelete="CASCADE"), primary_key=True
    )
    user_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("users.id", ondelete="CASCADE"), primary_key=True
    )
    joined_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

    user: Mapped[User] = relationship("User")
