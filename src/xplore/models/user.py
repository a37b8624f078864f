# src/xplore/models/user.py
"""SQLAlchemy model for platform identities."""

from __future__ import annotations

import uuid
from datetime import datetime
from enum import StrEnum

from sqlalchemy import DateTime, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from xplore.db.session import Base
from xplore.db.time import utcnow


class Role(StrEnum):
    """Platform-wide authorization level."""

    USER = "USER"
    MODERATOR = "MODERATOR"
    ADMIN = "ADMIN"


def new_id() -> str:
    """Return a fresh string identifier for a row."""
    return str(uuid.uuid4())


class User(Base):
    """Identity record keyed by the token subject id.

    Rows are created by signup (with a password hash) or provisioned on the
    first authenticated request from an unknown subject (without one).
    """

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=new_id)
    # Nullable so provisioned subjects without an email claim can coexist.
    email: Mapped[str | None] = mapped_column(String(320), unique=True, nullable=True)
    name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    password_hash: Mapped[str | None] = mapped_column(Text, nullable=True)
    role: Mapped[str] = mapped_column(String(16), nullable=False, default=Role.USER.value)
    avatar: Mapped[str | None] = mapped_column(Text, nullable=True)
    bio: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

    @property
    def is_admin(self) -> bool:
        """Return True when the stored role is ADMIN."""
        return self.role == Role.ADMIN.value
