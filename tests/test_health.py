# tests/test_health.py
from __future__ import annotations

from fastapi import status
from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session


def test_root_responds(client: TestClient) -> None:
    """The root endpoint describes the service."""
    r = client.get("/")
    assert r.status_code == status.HTTP_200_OK
    assert r.json()["name"] == "Xplore"


def test_health(client: TestClient) -> None:
    r = client.get("/api/health")
    assert r.status_code == status.HTTP_200_OK
    assert r.json() == {"status": "ok"}


def test_database_health(client: TestClient) -> None:
    r = client.get("/api/health/db")
    assert r.status_code == status.HTTP_200_OK
    assert r.json()["status"] == "ok"


def test_database_health_reports_unavailable_store(
    client: TestClient,
    db_session: Session,
    mocker,
) -> None:
    mocker.patch.object(
        db_session,
        "execute",
        side_effect=OperationalError("SELECT 1", {}, Exception("connection refused")),
    )
    r = client.get("/api/health/db")
    assert r.status_code == status.HTTP_503_SERVICE_UNAVAILABLE
    assert r.json() == {"status": "unavailable"}


def test_store_failure_becomes_generic_500(
    client: TestClient,
    db_session: Session,
    mocker,
) -> None:
    mocker.patch.object(
        db_session,
        "query",
        side_effect=OperationalError("SELECT", {}, Exception("disk I/O error")),
    )
    r = client.get("/api/events")
    assert r.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
    assert r.json() == {"detail": "Internal server error"}
