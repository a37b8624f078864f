"""CRUD-style helpers for managing users."""
from __future__ import annotations

from typing import Sequence

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from xplore.core import security
from xplore.core.errors import ConflictError
from xplore.models import Role, User
from xplore.schemas.user import SignupRequest

__all__ = [
    "get_user",
    "get_user_by_email",
    "get_users",
    "create_user",
    "authenticate",
    "update_user",
    "delete_user",
]


def get_user(db: Session, user_id: str) -> User | None:
    """Return a single user by primary key."""
    return db.get(User, user_id)


def get_user_by_email(db: Session, email: str) -> User | None:
    """Return the user registered under ``email``."""
    return db.query(User).filter(User.email == email).first()


def get_users(db: Session, skip: int = 0, limit: int = 100) -> Sequence[User]:
    """Return users with simple offset-based pagination."""
    return db.query(User).order_by(User.created_at).offset(skip).limit(limit).all()


def create_user(db: Session, payload: SignupRequest) -> User:
    """Persist a new USER with a hashed password.

    Raises:
        ConflictError: if the email is already registered, including when a
            concurrent signup wins the race on the unique email constraint.
    """
    if get_user_by_email(db, payload.email) is not None:
        raise ConflictError("User already exists")

    db_user = User(
        email=payload.email,
        name=payload.name,
        password_hash=security.hash_password(payload.password),
        role=Role.USER.value,
    )
    db.add(db_user)
    try:
        db.commit()
    except IntegrityError as err:
        db.rollback()
        raise ConflictError("User already exists") from err
    db.refresh(db_user)
    return db_user


def authenticate(db: Session, email: str, password: str) -> User | None:
    """Return the user if ``password`` matches the stored hash."""
    user = get_user_by_email(db, email)
    if user is None or not security.verify_password(user.password_hash, password):
        return None
    return user


def update_user(db: Session, db_user: User, update_data: dict[str, object]) -> User:
    """Apply partial updates to an existing user."""
    for key, value in update_data.items():
        setattr(db_user, key, value)

    db.add(db_user)
    db.commit()
    db.refresh(db_user)
    return db_user


def delete_user(db: Session, db_user: User) -> User:
    """Remove a user from the database and return the deleted instance."""
    db.delete(db_user)
    db.commit()
    # ON DELETE cascades removed owned rows the session may still hold.
    db.expire_all()
    return db_user
