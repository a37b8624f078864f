# src/xplore/api/endpoints/clubs.py
"""Club endpoints: public listing, creation, admin management and membership."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Query, Response, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from xplore.api.dependencies import (
    AdminDep,
    CurrentActorDep,
    OptionalActorDep,
    SessionDep,
    visible_status,
)
from xplore.core.errors import ConflictError, NotFoundError
from xplore.models import Club, ClubMember, ClubMemberRole, ClubStatus, Event, EventStatus
from xplore.schemas.club import (
    ClubCreate,
    ClubDetailResponse,
    ClubMemberResponse,
    ClubResponse,
    ClubUpdate,
)
from xplore.schemas.event import EventResponse
from xplore.services.authz import can_mutate
from xplore.services.identity import Actor
from xplore.services.notifications import create_activity_notification

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/clubs", tags=["clubs"])


def get_club_or_404(db: Session, club_id: str) -> Club:
    """Return the club or raise NotFound."""
    club = db.get(Club, club_id)
    if club is None:
        raise NotFoundError("Club not found")
    return club


def get_visible_club_or_404(db: Session, club_id: str, actor: Actor | None) -> Club:
    """Return the club if ``actor`` may see it; inactive clubs look missing."""
    club = get_club_or_404(db, club_id)
    if club.status != ClubStatus.ACTIVE.value and (
        actor is None or not can_mutate(actor, club)
    ):
        raise NotFoundError("Club not found")
    return club


@router.get("", response_model=list[ClubResponse])
async def list_clubs(
    actor: OptionalActorDep,
    db: SessionDep,
    requested_status: ClubStatus | None = Query(None, alias="status"),
) -> list[Club]:
    """List clubs. Non-admins only ever see ACTIVE clubs."""
    effective = visible_status(
        actor,
        requested_status.value if requested_status else None,
        ClubStatus.ACTIVE.value,
    )
    query = db.query(Club)
    if effective is not None:
        query = query.filter(Club.status == effective)
    return query.order_by(Club.name).all()


@router.post("", response_model=ClubResponse, status_code=status.HTTP_201_CREATED)
async def create_club(payload: ClubCreate, actor: CurrentActorDep, db: SessionDep) -> Club:
    """Create a club; the creator becomes its club-scoped ADMIN.

    Clubs created by platform admins are ACTIVE immediately, all others start
    PENDING until an admin activates them.
    """
    club = Club(
        name=payload.name,
        description=payload.description,
        content=payload.content,
        image=payload.image,
        user_id=actor.id,
        status=(ClubStatus.ACTIVE if actor.is_admin else ClubStatus.PENDING).value,
    )
    club.members.append(ClubMember(user_id=actor.id, role=ClubMemberRole.ADMIN.value))
    db.add(club)
    db.commit()
    db.refresh(club)
    logger.info("User %s created club %s (%s)", actor.id, club.id, club.status)
    return club


@router.get("/{club_id}", response_model=ClubDetailResponse)
async def get_club(club_id: str, actor: OptionalActorDep, db: SessionDep) -> ClubDetailResponse:
    """Read one club with its members and approved events."""
    club = get_visible_club_or_404(db, club_id, actor)
    events = (
        db.query(Event)
        .filter(Event.club_id == club_id, Event.status == EventStatus.APPROVED.value)
        .order_by(Event.date)
        .all()
    )
    base = ClubResponse.model_validate(club)
    return ClubDetailResponse(
        **base.model_dump(),
        members=[ClubMemberResponse.model_validate(member) for member in club.members],
        events=[EventResponse.model_validate(event) for event in events],
    )


@router.put("/{club_id}", response_model=ClubResponse)
async def update_club(
    club_id: str,
    payload: ClubUpdate,
    admin: AdminDep,
    db: SessionDep,
) -> Club:
    """Update a club, including its status (admin only)."""
    club = get_club_or_404(db, club_id)
    for field, value in payload.model_dump(exclude_unset=True).items():
        if value is None and field in {"name", "description", "status"}:
            continue
        setattr(club, field, value.value if isinstance(value, ClubStatus) else value)
    db.commit()
    db.refresh(club)
    logger.info("Admin %s updated club %s", admin.id, club_id)
    return club


@router.delete("/{club_id}")
async def delete_club(club_id: str, admin: AdminDep, db: SessionDep) -> dict[str, str]:
    """Delete a club (admin only)."""
    club = get_club_or_404(db, club_id)
    db.delete(club)
    db.commit()
    logger.info("Admin %s deleted club %s", admin.id, club_id)
    return {"message": "Club deleted successfully"}


@router.post(
    "/{club_id}/join",
    response_model=ClubMemberResponse,
    status_code=status.HTTP_201_CREATED,
)
async def join_club(club_id: str, actor: CurrentActorDep, db: SessionDep) -> ClubMember:
    """Join a club as a MEMBER. A second join by the same user is rejected."""
    club = get_visible_club_or_404(db, club_id, actor)

    if db.get(ClubMember, (club_id, actor.id)) is not None:
        raise ConflictError("You are already a member of this club")

    member = ClubMember(club_id=club_id, user_id=actor.id, role=ClubMemberRole.MEMBER.value)
    db.add(member)
    try:
        db.commit()
    except IntegrityError as err:
        # The composite key rejected a concurrent duplicate.
        db.rollback()
        raise ConflictError("You are already a member of this club") from err
    db.refresh(member)
    db.expire(club, ["members"])

    create_activity_notification(
        db,
        actor_id=actor.id,
        target_user_id=club.user_id,
        action="joined",
        target_type="club",
        target_name=club.name,
    )
    return member


@router.delete(
    "/{club_id}/join",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
)
async def leave_club(club_id: str, actor: CurrentActorDep, db: SessionDep) -> Response:
    """Leave a club."""
    membership = db.get(ClubMember, (club_id, actor.id))
    if membership is None:
        raise NotFoundError("Not a member of this club")
    db.delete(membership)
    db.commit()
    club = db.get(Club, club_id)
    if club is not None:
        db.expire(club, ["members"])
    return Response(status_code=status.HTTP_204_NO_CONTENT)
