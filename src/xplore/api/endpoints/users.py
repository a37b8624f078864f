# src/xplore/api/endpoints/users.py
"""User management endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, Query, status
from sqlalchemy.orm import Session

from xplore.api.dependencies import AdminDep, CurrentActorDep, SessionDep
from xplore.core.errors import ForbiddenError, NotFoundError
from xplore.core.settings import settings
from xplore.models import User
from xplore.schemas.user import AvatarUpdate, UserResponse, UserUpdate
from xplore.services import user_service
from xplore.services.authz import can_act_as

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["users"])

AVATAR_PREFIX = "data:image/"


def _get_user_or_404(db: Session, user_id: str) -> User:
    user = user_service.get_user(db, user_id)
    if user is None:
        raise NotFoundError("User not found")
    return user


@router.get("", response_model=list[UserResponse])
async def list_users(
    _admin: AdminDep,
    db: SessionDep,
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
) -> list[User]:
    """List all users (admin only)."""
    return list(user_service.get_users(db, skip=skip, limit=limit))


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(user_id: str, _actor: CurrentActorDep, db: SessionDep) -> User:
    """Read one user's profile."""
    return _get_user_or_404(db, user_id)


@router.put("/{user_id}", response_model=UserResponse)
async def update_user(
    user_id: str,
    payload: UserUpdate,
    actor: CurrentActorDep,
    db: SessionDep,
) -> User:
    """Update a profile. Users edit themselves; only admins may change roles."""
    if payload.role is not None and not actor.is_admin:
        raise ForbiddenError("Only admins can update roles")
    if not can_act_as(actor, user_id):
        raise ForbiddenError("You can only update your own profile")

    user = _get_user_or_404(db, user_id)
    changes: dict[str, object] = {}
    if payload.name is not None:
        changes["name"] = payload.name
    if payload.bio is not None:
        changes["bio"] = payload.bio
    if payload.role is not None:
        changes["role"] = payload.role.value
        logger.info("User %s set role of %s to %s", actor.id, user_id, payload.role.value)
    return user_service.update_user(db, user, changes)


@router.put("/{user_id}/avatar", response_model=UserResponse)
async def update_avatar(
    user_id: str,
    payload: AvatarUpdate,
    actor: CurrentActorDep,
    db: SessionDep,
) -> User:
    """Replace a user's avatar with an inline ``data:image/`` URI."""
    if not can_act_as(actor, user_id):
        raise ForbiddenError("You can only update your own avatar")
    if not payload.avatar.startswith(AVATAR_PREFIX):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid avatar format",
        )
    if len(payload.avatar) > settings.max_avatar_bytes:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Avatar is too large",
        )

    user = _get_user_or_404(db, user_id)
    return user_service.update_user(db, user, {"avatar": payload.avatar})


@router.delete("/{user_id}")
async def delete_user(user_id: str, admin: AdminDep, db: SessionDep) -> dict[str, str]:
    """Delete a user (admin only)."""
    user = _get_user_or_404(db, user_id)
    user_service.delete_user(db, user)
    logger.info("Admin %s deleted user %s", admin.id, user_id)
    return {"message": "User deleted successfully"}
