# tests/services/test_scripts.py
from __future__ import annotations

from sqlalchemy.orm import Session

from xplore.models import Role, User
from xplore.scripts import init_db, promote_admin


def test_set_role_promotes_by_email(db_session: Session, test_user: User) -> None:
    updated = promote_admin.set_role(db_session, f"  {test_user.email.upper()} ", Role.ADMIN)
    assert updated is not None
    assert updated.id == test_user.id
    assert updated.role == "ADMIN"


def test_set_role_demotes(db_session: Session, admin_user: User) -> None:
    updated = promote_admin.set_role(db_session, admin_user.email, Role.USER)
    assert updated is not None
    assert updated.role == "USER"


def test_set_role_unknown_email(db_session: Session) -> None:
    assert promote_admin.set_role(db_session, "ghost@campus.test", Role.ADMIN) is None


def test_main_uses_session_and_reports(
    db_session: Session,
    test_user: User,
    mocker,
    capsys,
) -> None:
    mocker.patch.object(promote_admin, "SessionLocal", return_value=db_session)
    mocker.patch.object(db_session, "close")

    assert promote_admin.main([test_user.email, "--yes"]) == 0
    assert f"{test_user.email} is now ADMIN" in capsys.readouterr().out
    assert db_session.get(User, test_user.id).role == "ADMIN"


def test_main_aborts_without_confirmation(test_user: User, mocker, capsys) -> None:
    mocker.patch("builtins.input", return_value="n")
    session_factory = mocker.patch.object(promote_admin, "SessionLocal")

    assert promote_admin.main([test_user.email]) == 1
    assert "Aborted" in capsys.readouterr().out
    session_factory.assert_not_called()


def test_main_unknown_user(db_session: Session, mocker, capsys) -> None:
    mocker.patch.object(promote_admin, "SessionLocal", return_value=db_session)
    mocker.patch.object(db_session, "close")

    assert promote_admin.main(["ghost@campus.test", "--yes"]) == 1
    assert "not found" in capsys.readouterr().out


def test_init_db_creates_tables(mocker) -> None:
    create_tables = mocker.patch.object(init_db, "create_tables")
    init_db.init_db()
    create_tables.assert_called_once_with()
