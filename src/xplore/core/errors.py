"""HTTP error taxonomy shared by guards and resource handlers.

Every authorization failure surfaces to the client as one of these types so
callers (and tests) can tell a missing credential apart from a bad one or
from an insufficient role.
"""

from __future__ import annotations

from fastapi import HTTPException, status


class NoCredentialsError(HTTPException):
    """Raised when a protected route is called without a bearer token."""

    def __init__(self, detail: str = "Unauthorized - No token provided") -> None:
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            headers={"WWW-Authenticate": "Bearer"},
        )


class InvalidTokenError(HTTPException):
    """Raised when the bearer token is malformed, expired or wrongly signed."""

    def __init__(self, detail: str = "Invalid token") -> None:
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


class ForbiddenError(HTTPException):
    """Raised when the caller is authenticated but lacks role or ownership."""

    def __init__(self, detail: str = "Forbidden") -> None:
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


class NotFoundError(HTTPException):
    """Raised when a resource id cannot be resolved."""

    def __init__(self, detail: str = "Not found") -> None:
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class ConflictError(HTTPException):
    """Raised on duplicate accounts, memberships and attendance rows."""

    def __init__(self, detail: str) -> None:
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


UPSTREAM_FAILURE_DETAIL = "Internal server error"
