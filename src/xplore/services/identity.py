"""Identity provisioning and role resolution for authenticated requests."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy import Insert, insert
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from xplore.core.security import TokenClaims
from xplore.models import Role, User

logger = logging.getLogger(__name__)

__all__ = [
    "Actor",
    "coerce_role",
    "provision_identity",
    "resolve_actor",
    "resolve_role",
]


@dataclass(frozen=True)
class Actor:
    """Caller identity attached to a request after token verification.

    ``role`` always comes from the store, never from the token.
    """

    id: str
    email: str | None
    role: Role

    @property
    def is_admin(self) -> bool:
        return self.role is Role.ADMIN


def coerce_role(value: str | None) -> Role:
    """Map a stored role string onto :class:`Role`, defaulting to USER."""
    try:
        return Role(value) if value else Role.USER
    except ValueError:
        logger.warning("Unknown stored role %r; treating as USER", value)
        return Role.USER


def _conditional_insert(db: Session, values: dict[str, object]) -> Insert:
    """Build an insert that silently skips rows violating a unique constraint."""
    dialect = db.get_bind().dialect.name
    if dialect == "postgresql":
        return pg_insert(User).values(**values).on_conflict_do_nothing()
    if dialect == "sqlite":
        return sqlite_insert(User).values(**values).on_conflict_do_nothing()
    return insert(User).values(**values)


def _insert_if_missing(db: Session, values: dict[str, object]) -> None:
    try:
        with db.begin_nested():
            db.execute(_conditional_insert(db, values))
    except IntegrityError:
        # Dialects without ON CONFLICT support: another request won the race.
        logger.info("Concurrent provisioning detected for subject %s", values["id"])


def provision_identity(db: Session, subject: str, email: str | None) -> User:
    """Return the identity for ``subject``, creating it with role USER if absent.

    The insert is conditional at the store layer and keyed by subject id, so
    two concurrent first requests for the same subject end up with one row
    and neither fails. If the email claim already belongs to a different
    identity the row is provisioned without an email.
    """
    user = db.get(User, subject)
    if user is not None:
        return user

    logger.info("Provisioning identity for new subject %s", subject)
    _insert_if_missing(db, {"id": subject, "email": email, "role": Role.USER.value})
    user = db.get(User, subject)
    if user is None and email is not None:
        logger.warning("Email claim for subject %s is taken; provisioning without it", subject)
        _insert_if_missing(db, {"id": subject, "email": None, "role": Role.USER.value})
        user = db.get(User, subject)
    db.commit()

    if user is None:  # pragma: no cover - store refused both inserts
        raise IntegrityError("provision identity", {"id": subject}, Exception("not inserted"))
    return user


def resolve_role(db: Session, claims: TokenClaims) -> Role:
    """Return the authoritative role for the token subject.

    Store I/O failures degrade to USER instead of failing the request so that
    read paths stay available while the store is unhealthy.
    """
    try:
        user = provision_identity(db, claims.subject, claims.email)
    except SQLAlchemyError:
        logger.exception("Role lookup failed for subject %s; defaulting to USER", claims.subject)
        db.rollback()
        return Role.USER
    return coerce_role(user.role)


def resolve_actor(db: Session, claims: TokenClaims) -> Actor:
    """Build the request :class:`Actor` from verified claims."""
    return Actor(id=claims.subject, email=claims.email, role=resolve_role(db, claims))
