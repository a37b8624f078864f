"""Shared API dependencies: the bearer-token guard chain.

Guards run in a fixed order and stop at the first failure:

1. token present            -> 401 NoCredentials
2. token verified           -> 403 InvalidToken
3. role resolved from store -> never fails (falls back to USER)
4. admin required           -> role re-read from the store, 403 Forbidden
5. ownership required       -> checked by handlers through ``services.authz``
"""

import logging
from typing import Annotated

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from xplore.core.errors import ForbiddenError, InvalidTokenError, NoCredentialsError
from xplore.core.security import TokenClaims, decode_access_token
from xplore.db.session import get_db
from xplore.models import Role, User
from xplore.services.identity import Actor, coerce_role, resolve_actor

logger = logging.getLogger(__name__)

# HTTP Bearer scheme; missing credentials are reported by ``get_bearer_token``.
bearer_scheme = HTTPBearer(auto_error=False)

# Type alias for database session dependency
SessionDep = Annotated[Session, Depends(get_db)]
CredentialsDep = Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)]


def get_bearer_token(credentials: CredentialsDep) -> str:
    """Return the raw bearer token or raise NoCredentials."""
    if credentials is None or not credentials.credentials:
        logger.info("Authentication failed: no token provided")
        raise NoCredentialsError()
    return credentials.credentials


def get_token_claims(token: Annotated[str, Depends(get_bearer_token)]) -> TokenClaims:
    """Verify the bearer token and return its claims."""
    try:
        return decode_access_token(token)
    except InvalidTokenError as err:
        logger.info("Authentication failed: %s", err.detail)
        raise


def get_current_actor(
    claims: Annotated[TokenClaims, Depends(get_token_claims)],
    db: SessionDep,
) -> Actor:
    """Resolve the caller's authoritative role, provisioning unknown subjects."""
    return resolve_actor(db, claims)


CurrentActorDep = Annotated[Actor, Depends(get_current_actor)]


def get_optional_actor(credentials: CredentialsDep, db: SessionDep) -> Actor | None:
    """Actor for public routes; anonymous when no usable token is supplied."""
    if credentials is None or not credentials.credentials:
        return None
    try:
        claims = decode_access_token(credentials.credentials)
    except InvalidTokenError:
        return None
    return resolve_actor(db, claims)


OptionalActorDep = Annotated[Actor | None, Depends(get_optional_actor)]


def require_admin(actor: CurrentActorDep, db: SessionDep) -> Actor:
    """Allow only identities whose stored role is ADMIN.

    The row is reloaded from the store, overwriting any copy already held by
    the session, so a demotion committed elsewhere after the actor was
    resolved is honoured.
    """
    user = db.get(User, actor.id, populate_existing=True)
    role = coerce_role(user.role) if user is not None else None
    if role is not Role.ADMIN:
        logger.info("Admin check failed for user %s with role %s", actor.id, role)
        raise ForbiddenError("Forbidden: Admin access required")
    return Actor(id=actor.id, email=actor.email, role=Role.ADMIN)


AdminDep = Annotated[Actor, Depends(require_admin)]


def visible_status(
    actor: Actor | None,
    requested: str | None,
    public_status: str,
) -> str | None:
    """Return the status a public listing is filtered by.

    Non-admins always see ``public_status``. Admins get the requested status,
    or every status when none is requested.
    """
    if actor is not None and actor.is_admin:
        return requested
    return public_status
