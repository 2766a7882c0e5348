"""
Create a login user for the marketing API.

Usage:
    python -m script.create_user --email admin@example.com --password secret --role admin
"""
from __future__ import annotations

import argparse
import logging
import sys

from sqlalchemy.exc import IntegrityError

import database.base  # noqa: F401
from core import config
from crud.account.user import create_user, get_user_by_email
from database.session import SessionLocal

log = logging.getLogger(__name__)


def _parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Create a marketing API user")
    parser.add_argument("--email", required=True)
    parser.add_argument("--password", required=True)
    parser.add_argument("--role", choices=sorted(config.ROLE_LEVELS), default="member")
    parser.add_argument("--name", default=None)
    parser.add_argument("--department", default=None)
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = _parse_args(argv)
    db = SessionLocal()
    try:
        if get_user_by_email(db, args.email) is not None:
            log.error("user already exists: %s", args.email)
            return 1
        user = create_user(
            db,
            email=args.email,
            password=args.password,
            role=args.role,
            name=args.name,
            department=args.department,
        )
        log.info("created user id=%s email=%s role=%s", user.id, user.email, user.role)
        return 0
    except IntegrityError:
        db.rollback()
        log.exception("failed to create user %s", args.email)
        return 1
    finally:
        db.close()


if __name__ == "__main__":
    logging.basicConfig(
        level=config.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    sys.exit(main())
