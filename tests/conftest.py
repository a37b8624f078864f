# tests/conftest.py
from __future__ import annotations

import os
from collections.abc import Callable, Generator, Iterator
from datetime import UTC, datetime, timedelta
from itertools import count

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

os.environ.setdefault("SECRET_KEY", "test-secret-key-not-for-production")
os.environ.setdefault("DATABASE_URL", "sqlite://")

from xplore.core.security import create_access_token, hash_password
from xplore.db.session import Base, enable_sqlite_foreign_keys
from xplore.db.session import get_db as app_get_session
from xplore.main import app as fastapi_app
from xplore.models import (
    Club,
    ClubMember,
    ClubMemberRole,
    ClubStatus,
    Event,
    EventStatus,
    Role,
    User,
)
from xplore.services.dashboard import get_dashboard_cache

TEST_DB_URL = "sqlite://"
TEST_PASSWORD = "correct horse"

_USER_COUNTER = count(1)


@pytest.fixture(scope="session")
def engine() -> Generator[Engine, None, None]:
    engine = create_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    # pysqlite defers BEGIN on its own; take over so SAVEPOINTs behave.
    @event.listens_for(engine, "connect")
    def _disable_pysqlite_transactions(dbapi_connection, connection_record) -> None:
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _emit_begin(conn) -> None:
        conn.exec_driver_sql("BEGIN")

    event.listen(engine, "connect", enable_sqlite_foreign_keys)

    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def db_session(engine: Engine) -> Iterator[Session]:
    connection = engine.connect()
    transaction = connection.begin()
    # Commits and rollbacks issued by the code under test stay inside a
    # SAVEPOINT of the outer transaction, which is discarded afterwards.
    SessionLocal = sessionmaker(
        bind=connection,
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
        join_transaction_mode="create_savepoint",
    )
    session = SessionLocal()

    try:
        yield session
    finally:
        session.close()

        if transaction.is_active:
            transaction.rollback()
        connection.close()

        # Ensure each test sees a clean database even if commits occurred.
        with engine.begin() as cleanup_conn:
            for table in reversed(Base.metadata.sorted_tables):
                cleanup_conn.execute(table.delete())


@pytest.fixture(scope="session")
def app() -> FastAPI:
    return fastapi_app


@pytest.fixture(autouse=True)
def override_session_dependency(app: FastAPI, db_session: Session) -> Iterator[None]:
    def _get_session_override() -> Generator[Session, None, None]:
        yield db_session

    app.dependency_overrides[app_get_session] = _get_session_override
    try:
        yield
    finally:
        app.dependency_overrides.pop(app_get_session, None)


@pytest.fixture(autouse=True)
def clear_dashboard_cache() -> Iterator[None]:
    get_dashboard_cache().clear()
    yield
    get_dashboard_cache().clear()


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client


@pytest.fixture()
def sql_statements(engine: Engine) -> Iterator[list[str]]:
    """Record every SQL statement sent to the test database."""
    statements: list[str] = []

    def _record(conn, cursor, statement, parameters, context, executemany) -> None:
        statements.append(statement)

    event.listen(engine, "before_cursor_execute", _record)
    try:
        yield statements
    finally:
        event.remove(engine, "before_cursor_execute", _record)


def bearer(user: User, role: str | None = None) -> dict[str, str]:
    """Authorization headers for ``user``; ``role`` overrides the embedded claim."""
    token = create_access_token(user.id, user.email, role or user.role)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def make_user(db_session: Session) -> Callable[..., User]:
    """Factory persisting users with a known password."""

    def _make_user(role: Role = Role.USER, name: str | None = None) -> User:
        n = next(_USER_COUNTER)
        user = User(
            email=f"user{n}@campus.test",
            name=name or f"User {n}",
            password_hash=hash_password(TEST_PASSWORD),
            role=role.value,
        )
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user

    return _make_user


@pytest.fixture()
def test_user(make_user: Callable[..., User]) -> User:
    """Create and return a persisted USER."""
    return make_user(name="Test User")


@pytest.fixture()
def other_user(make_user: Callable[..., User]) -> User:
    """Create and return a second persisted USER."""
    return make_user(name="Other User")


@pytest.fixture()
def admin_user(make_user: Callable[..., User]) -> User:
    """Create and return a persisted ADMIN."""
    return make_user(Role.ADMIN, name="Admin User")


@pytest.fixture()
def auth_token(test_user: User) -> dict[str, str]:
    """Return authorization headers for the primary test user."""
    return bearer(test_user)


@pytest.fixture()
def other_auth_token(other_user: User) -> dict[str, str]:
    """Return authorization headers for the secondary test user."""
    return bearer(other_user)


@pytest.fixture()
def admin_token(admin_user: User) -> dict[str, str]:
    """Return authorization headers for the admin."""
    return bearer(admin_user)


@pytest.fixture()
def make_event(db_session: Session) -> Callable[..., Event]:
    """Factory persisting events owned by ``owner``."""

    def _make_event(
        owner: User,
        status: EventStatus = EventStatus.APPROVED,
        title: str = "Welcome Week",
        days_ahead: int = 7,
        club: Club | None = None,
    ) -> Event:
        event_row = Event(
            title=title,
            description="Meet the campus",
            date=datetime.now(UTC) + timedelta(days=days_ahead),
            location="Main Hall",
            status=status.value,
            user_id=owner.id,
            club_id=club.id if club is not None else None,
        )
        db_session.add(event_row)
        db_session.commit()
        db_session.refresh(event_row)
        return event_row

    return _make_event


@pytest.fixture()
def make_club(db_session: Session) -> Callable[..., Club]:
    """Factory persisting clubs with their owner as club ADMIN."""

    def _make_club(
        owner: User,
        status: ClubStatus = ClubStatus.ACTIVE,
        name: str = "Chess Club",
    ) -> Club:
        club = Club(
            name=name,
            description="Weekly games",
            status=status.value,
            user_id=owner.id,
        )
        club.members.append(ClubMember(user_id=owner.id, role=ClubMemberRole.ADMIN.value))
        db_session.add(club)
        db_session.commit()
        db_session.refresh(club)
        return club

    return _make_club


@pytest.fixture()
def approved_event(make_event: Callable[..., Event], admin_user: User) -> Event:
    return make_event(admin_user)


@pytest.fixture()
def pending_event(make_event: Callable[..., Event], test_user: User) -> Event:
    return make_event(test_user, EventStatus.PENDING, title="Pending Mixer")


@pytest.fixture()
def active_club(make_club: Callable[..., Club], test_user: User) -> Club:
    return make_club(test_user)
