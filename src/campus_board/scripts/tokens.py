# src/campus_board/scripts/tokens.py
"""
Mint bearer tokens for local development and smoke testing.

Looks a profile up by id or email, optionally creating it with a given role,
and prints a JWT the API will accept for it.
"""

from __future__ import annotations

import argparse
import sys

from sqlalchemy.orm import Session

from campus_board.core.roles import Role
from campus_board.core.security import create_access_token
from campus_board.db.session import SessionLocal
from campus_board.models import Profile


def find_profile(db: Session, identifier: str) -> Profile | None:
    """Return the profile matching ``identifier`` as an id or an email."""
    profile = db.get(Profile, identifier)
    if profile is not None:
        return profile
    return db.query(Profile).filter(Profile.email == identifier).first()


def ensure_profile(db: Session, email: str, role: Role, display_name: str | None) -> Profile:
    """Create a profile for ``email`` unless one exists; update its role."""
    profile = find_profile(db, email)
    if profile is None:
        profile = Profile(email=email, display_name=display_name or email.split("@")[0])
        db.add(profile)
    profile.role = role
    db.commit()
    db.refresh(profile)
    return profile


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("identifier", help="Profile id or email")
    parser.add_argument(
        "--create",
        action="store_true",
        help="Create the profile (identifier must be an email) if it is missing",
    )
    parser.add_argument(
        "--role",
        choices=[role.value for role in Role],
        default=Role.MEMBER.value,
        help="Role assigned when --create is given",
    )
    parser.add_argument("--display-name", default=None)
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    with SessionLocal() as db:
        if args.create:
            profile = ensure_profile(db, args.identifier, Role(args.role), args.display_name)
        else:
            profile = find_profile(db, args.identifier)
        if profile is None:
            print(f"No profile matches {args.identifier!r}", file=sys.stderr)
            return 1
        print(create_access_token(profile.id))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
