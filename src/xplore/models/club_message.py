# src/xplore/models/club_message.py
"""SQLAlchemy model for club chat messages."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from xplore.db.session import Base
from xplore.db.time import utcnow

from .user import User, new_id


class ClubMessage(Base):
    """Chat line posted by a member into a club's channel."""

    __tablename__ = "club_messages"

    # Clients may supply the id so a resubmitted message is recognised.
    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=new_id)
    club_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("clubs.id", ondelete="CASCADE"), nullable=False, index=True
    )
    user_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    content: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

    user: Mapped[User] = relationship("User")
