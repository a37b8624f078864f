# tests/api/test_guards.py
"""Tests for the bearer-token guard chain shared by every protected route."""

from __future__ import annotations

from datetime import timedelta

import pytest
from fastapi import status
from fastapi.testclient import TestClient
from sqlalchemy import text
from sqlalchemy.orm import Session

from tests.conftest import bearer
from xplore.api.dependencies import require_admin
from xplore.core.errors import ForbiddenError
from xplore.core.security import create_access_token
from xplore.models import Role, User
from xplore.services.identity import Actor

PROTECTED_ROUTES = [
    ("get", "/api/auth/me"),
    ("get", "/api/users"),
    ("get", "/api/users/some-id"),
    ("put", "/api/users/some-id"),
    ("post", "/api/events"),
    ("put", "/api/events/some-id"),
    ("delete", "/api/events/some-id"),
    ("post", "/api/events/some-id/approve"),
    ("post", "/api/events/some-id/join"),
    ("post", "/api/clubs"),
    ("delete", "/api/clubs/some-id"),
    ("post", "/api/clubs/some-id/join"),
    ("get", "/api/clubs/some-id/messages"),
    ("get", "/api/notifications"),
    ("get", "/api/admin/dashboard"),
]


@pytest.mark.parametrize(("method", "path"), PROTECTED_ROUTES)
def test_missing_token_is_401_without_store_access(
    client: TestClient,
    sql_statements: list[str],
    method: str,
    path: str,
) -> None:
    sql_statements.clear()
    response = client.request(method, path, json={})
    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert response.json()["detail"] == "Unauthorized - No token provided"
    assert response.headers["www-authenticate"] == "Bearer"
    assert sql_statements == []


def test_non_bearer_scheme_is_treated_as_missing(client: TestClient) -> None:
    response = client.get("/api/auth/me", headers={"Authorization": "Basic dXNlcjpwYXNz"})
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


def test_malformed_token_is_403_without_store_access(
    client: TestClient,
    sql_statements: list[str],
) -> None:
    sql_statements.clear()
    response = client.get("/api/auth/me", headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == status.HTTP_403_FORBIDDEN
    assert response.json()["detail"] == "Invalid token format"
    assert sql_statements == []


def test_expired_token_is_403(client: TestClient, test_user: User) -> None:
    token = create_access_token(
        test_user.id, test_user.email, test_user.role, expires_delta=timedelta(minutes=-1)
    )
    response = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == status.HTTP_403_FORBIDDEN
    assert response.json()["detail"] == "Token has expired"


def test_embedded_admin_role_is_not_trusted(client: TestClient, test_user: User) -> None:
    """A validly signed token claiming ADMIN for a stored USER gets no admin access."""
    response = client.get("/api/users", headers=bearer(test_user, role="ADMIN"))
    assert response.status_code == status.HTTP_403_FORBIDDEN
    assert response.json()["detail"] == "Forbidden: Admin access required"


def test_demoted_admin_loses_access_with_old_token(
    client: TestClient,
    db_session: Session,
    admin_user: User,
    admin_token: dict[str, str],
) -> None:
    assert client.get("/api/users", headers=admin_token).status_code == status.HTTP_200_OK

    admin_user.role = Role.USER.value
    db_session.commit()

    response = client.get("/api/users", headers=admin_token)
    assert response.status_code == status.HTTP_403_FORBIDDEN


def test_promoted_user_gains_access_with_old_token(
    client: TestClient,
    db_session: Session,
    test_user: User,
    auth_token: dict[str, str],
) -> None:
    assert client.get("/api/users", headers=auth_token).status_code == status.HTTP_403_FORBIDDEN

    test_user.role = Role.ADMIN.value
    db_session.commit()

    assert client.get("/api/users", headers=auth_token).status_code == status.HTTP_200_OK


def test_unknown_subject_is_provisioned_as_user(client: TestClient, db_session: Session) -> None:
    token = create_access_token("external-subject-1", "external@campus.test", "ADMIN")
    headers = {"Authorization": f"Bearer {token}"}

    response = client.get("/api/auth/me", headers=headers)
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["id"] == "external-subject-1"
    assert response.json()["role"] == "USER"

    # The embedded ADMIN claim never grants anything.
    assert client.get("/api/users", headers=headers).status_code == status.HTTP_403_FORBIDDEN

    rows = db_session.query(User).filter(User.id == "external-subject-1").all()
    assert len(rows) == 1


def test_unknown_subject_with_taken_email_is_provisioned_without_it(
    client: TestClient,
    db_session: Session,
    test_user: User,
) -> None:
    token = create_access_token("external-subject-2", test_user.email, "USER")
    response = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["email"] is None

    provisioned = db_session.get(User, "external-subject-2")
    assert provisioned is not None
    assert db_session.get(User, test_user.id).email == test_user.email


def test_repeated_first_requests_provision_once(client: TestClient, db_session: Session) -> None:
    token = create_access_token("external-subject-3", None, "USER")
    headers = {"Authorization": f"Bearer {token}"}

    for _ in range(3):
        assert client.get("/api/auth/me", headers=headers).status_code == status.HTTP_200_OK

    assert db_session.query(User).filter(User.id == "external-subject-3").count() == 1


def test_admin_check_rereads_role_over_session_copy(
    db_session: Session,
    admin_user: User,
) -> None:
    """A demotion written outside the ORM is seen even though the session holds the row."""
    actor = Actor(id=admin_user.id, email=admin_user.email, role=Role.ADMIN)
    assert require_admin(actor, db_session).is_admin

    db_session.connection().execute(
        text("UPDATE users SET role = 'USER' WHERE id = :id"),
        {"id": admin_user.id},
    )
    assert admin_user.role == Role.ADMIN.value

    with pytest.raises(ForbiddenError) as exc_info:
        require_admin(actor, db_session)
    assert exc_info.value.detail == "Forbidden: Admin access required"
    assert admin_user.role == Role.USER.value
