# src/xplore/api/endpoints/auth.py
"""Authentication endpoints for the Xplore API."""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, status

from xplore.api.dependencies import CurrentActorDep, SessionDep
from xplore.core.errors import NotFoundError
from xplore.core.security import create_access_token
from xplore.models import User
from xplore.schemas.user import AuthResponse, LoginRequest, SignupRequest, UserResponse
from xplore.services import user_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["authentication"])


def issue_token_for(user: User) -> str:
    """Issue a bearer token embedding the user's id, email and current role."""
    return create_access_token(user.id, user.email, user.role)


@router.post(
    "/signup",
    summary="Create a password-backed account",
    status_code=status.HTTP_201_CREATED,
    response_model=AuthResponse,
)
async def signup(payload: SignupRequest, db: SessionDep) -> AuthResponse:
    """Register a new USER and return a token for it."""
    user = user_service.create_user(db, payload)
    logger.info("Created account %s", user.id)
    return AuthResponse(token=issue_token_for(user), user=UserResponse.model_validate(user))


@router.post(
    "/login",
    summary="Exchange email and password for a bearer token",
    response_model=AuthResponse,
)
async def login(payload: LoginRequest, db: SessionDep) -> AuthResponse:
    """Authenticate with email and password."""
    user = user_service.authenticate(db, payload.email, payload.password)
    if user is None:
        logger.info("Login failed for %s", payload.email)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
        )
    return AuthResponse(token=issue_token_for(user), user=UserResponse.model_validate(user))


@router.get("/me", response_model=UserResponse)
async def read_current_user(actor: CurrentActorDep, db: SessionDep) -> User:
    """Return the caller's identity record."""
    user = user_service.get_user(db, actor.id)
    if user is None:
        raise NotFoundError("User not found")
    return user
