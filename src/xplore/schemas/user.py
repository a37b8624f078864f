"""User-related Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from xplore.models.user import Role


class SignupRequest(BaseModel):
    """Payload for creating a password-backed account."""

    email: str = Field(..., min_length=3, max_length=320, description="Login email address")
    password: str = Field(..., min_length=6, max_length=256)
    name: str = Field(..., min_length=1, max_length=255, description="Display name")

    @field_validator("email")
    @classmethod
    def normalize_email(cls, value: str) -> str:
        value = value.strip().lower()
        if "@" not in value:
            raise ValueError("Invalid email address")
        return value


class LoginRequest(BaseModel):
    """Email and password presented at login."""

    email: str
    password: str

    @field_validator("email")
    @classmethod
    def normalize_email(cls, value: str) -> str:
        return value.strip().lower()


class UserSummary(BaseModel):
    """Minimal identity projection embedded in other resources."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str | None


class UserResponse(BaseModel):
    """Identity projection returned by the API; never includes the hash."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    email: str | None
    name: str | None
    role: Role
    avatar: str | None = None
    bio: str | None = None
    created_at: datetime


class AuthResponse(BaseModel):
    """Bearer token and the identity it was issued for."""

    token: str
    user: UserResponse


class UserUpdate(BaseModel):
    """Partial profile update. ``role`` is honoured for admins only."""

    name: str | None = Field(None, min_length=1, max_length=255)
    bio: str | None = None
    role: Role | None = None


class AvatarUpdate(BaseModel):
    """Inline avatar supplied as a ``data:image/...`` URI."""

    avatar: str
