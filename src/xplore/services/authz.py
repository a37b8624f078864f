"""Ownership-or-role predicates shared by every mutating handler."""

from __future__ import annotations

from typing import Protocol

from xplore.core.errors import ForbiddenError
from xplore.services.identity import Actor


class Owned(Protocol):
    """Anything with an owning identity id."""

    @property
    def owner_id(self) -> str: ...


def can_mutate(actor: Actor, resource: Owned) -> bool:
    """Return True if ``actor`` owns ``resource`` or is an admin."""
    return actor.id == resource.owner_id or actor.is_admin


def ensure_can_mutate(actor: Actor, resource: Owned, detail: str) -> None:
    """Raise :class:`ForbiddenError` unless :func:`can_mutate` holds."""
    if not can_mutate(actor, resource):
        raise ForbiddenError(detail)


def can_act_as(actor: Actor, user_id: str) -> bool:
    """Return True if ``actor`` may act on the identity ``user_id``."""
    return actor.id == user_id or actor.is_admin
