# src/xplore/models/club.py
"""SQLAlchemy models for clubs and club membership."""

from __future__ import annotations

from datetime import datetime
from enum import StrEnum

from sqlalchemy import DateTime, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from xplore.db.session import Base
from xplore.db.time import utcnow

from .user import User, new_id


class ClubStatus(StrEnum):
    """Lifecycle status of a club; only ACTIVE clubs are public."""

    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    PENDING = "PENDING"
    REJECTED = "REJECTED"


class ClubMemberRole(StrEnum):
    """Club-scoped role, independent of the platform role."""

    ADMIN = "ADMIN"
    MEMBER = "MEMBER"


class Club(Base):
    """Student club owned by the identity that created it."""

    __tablename__ = "clubs"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    content: Mapped[str | None] = mapped_column(Text, nullable=True)
    image: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(
        String(16), nullable=False, default=ClubStatus.PENDING.value, index=True
    )
    user_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

    created_by: Mapped[User] = relationship("User")
    members: Mapped[list[ClubMember]] = relationship(
        "ClubMember",
        cascade="all, delete-orphan",
    )

    @property
    def owner_id(self) -> str:
        """Identity that owns the club for mutation checks."""
        return self.user_id

    @property
    def member_count(self) -> int:
        """Number of membership rows, including the creator."""
        return len(self.members)


class ClubMember(Base):
    """Membership row; at most one per (club, user) pair."""

    __tablename__ = "club_members"

    club_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("clubs.id", ondelete="CASCADE"), primary_key=True
    )
    user_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("users.id", ondelete="CASCADE"), primary_key=True
    )
    role: Mapped[str] = mapped_column(
        String(16), nullable=False, default=ClubMemberRole.MEMBER.value
    )
    joined_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

    user: Mapped[User] = relationship("User")
