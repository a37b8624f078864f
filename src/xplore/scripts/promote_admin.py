"""Grant or revoke the ADMIN role for a registered account.

Usage:
    python -m xplore.scripts.promote_admin someone@example.edu
    python -m xplore.scripts.promote_admin someone@example.edu --role USER
"""
from __future__ import annotations

import argparse
import sys

from sqlalchemy.orm import Session

from xplore.db.session import SessionLocal
from xplore.models import Role, User


def set_role(db: Session, email: str, role: Role) -> User | None:
    """Set the role of the user registered under ``email``.

    Returns the updated user, or None if no such user exists.
    """
    user = db.query(User).filter(User.email == email.strip().lower()).first()
    if user is None:
        return None
    user.role = role.value
    db.commit()
    db.refresh(user)
    return user


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("email", help="Email of the account to update")
    parser.add_argument(
        "--role",
        choices=[role.value for role in Role],
        default=Role.ADMIN.value,
        help="Role to assign (default: ADMIN)",
    )
    parser.add_argument("--yes", action="store_true", help="Skip the confirmation prompt")
    args = parser.parse_args(argv)

    if not args.yes:
        answer = input(f"Set role of {args.email} to {args.role}? (y/n): ")
        if answer.strip().lower() != "y":
            print("Aborted")
            return 1

    db = SessionLocal()
    try:
        user = set_role(db, args.email, Role(args.role))
    finally:
        db.close()

    if user is None:
        print(f"User with email {args.email} not found. Make sure the user has registered.")
        return 1
    print(f"{args.email} is now {user.role}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
