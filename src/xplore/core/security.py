"""Credential primitives: password hashing and bearer token issue/verify."""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError
from jose import ExpiredSignatureError, JWTError, jwt

from xplore.core.errors import InvalidTokenError
from xplore.core.settings import settings

PASSWORD_HASHER = PasswordHasher()

TOKEN_SEGMENTS = 3


@dataclass(frozen=True)
class TokenClaims:
    """Claims carried by a verified bearer token.

    ``role`` is informational only; authorization always re-reads the role
    from the store.
    """

    subject: str
    email: str | None
    role: str | None
    issued_at: int | None
    expires_at: int


def hash_password(password: str) -> str:
    """Hash a password with Argon2id."""
    return PASSWORD_HASHER.hash(password)


def verify_password(password_hash: str | None, password: str) -> bool:
    """Return True if ``password`` matches ``password_hash``."""
    if not password_hash:
        return False
    try:
        return PASSWORD_HASHER.verify(password_hash, password)
    except (VerificationError, InvalidHashError):
        return False


def create_access_token(
    subject: str,
    email: str | None,
    role: str,
    expires_delta: timedelta | None = None,
) -> str:
    """Create a signed JWT for the given identity.

    Every token carries a fresh ``jti`` so two tokens issued to the same
    identity within the same second still differ.
    """
    issued_at = datetime.now(UTC)
    lifetime = expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    to_encode: dict[str, object] = {
        "sub": subject,
        "email": email,
        "role": role,
        "iat": issued_at,
        "exp": issued_at + lifetime,
        "jti": uuid.uuid4().hex,
    }
    encoded_jwt: str = jwt.encode(
        to_encode,
        settings.secret_key,
        algorithm=settings.jwt_algorithm,
    )
    return encoded_jwt


def decode_access_token(token: str) -> TokenClaims:
    """Verify a bearer token and return its claims.

    Raises:
        InvalidTokenError: "Invalid token format" when the token is not three
            dot-separated segments with a JSON claims segment, "Invalid token"
            when the signature, expiry or subject claim does not check out.
    """
    if token.count(".") != TOKEN_SEGMENTS - 1:
        raise InvalidTokenError("Invalid token format")
    try:
        jwt.get_unverified_claims(token)
    except JWTError as err:
        raise InvalidTokenError("Invalid token format") from err

    try:
        payload = jwt.decode(
            token,
            settings.secret_key,
            algorithms=[settings.jwt_algorithm],
            options={"require_exp": True, "require_sub": True},
        )
    except ExpiredSignatureError as err:
        raise InvalidTokenError("Token has expired") from err
    except JWTError as err:
        raise InvalidTokenError("Invalid token") from err

    subject = payload.get("sub")
    if not isinstance(subject, str) or not subject:
        raise InvalidTokenError("Invalid token")

    email = payload.get("email")
    role = payload.get("role")
    return TokenClaims(
        subject=subject,
        email=email if isinstance(email, str) else None,
        role=role if isinstance(role, str) else None,
        issued_at=payload.get("iat"),
        expires_at=int(payload["exp"]),
    )
