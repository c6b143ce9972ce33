"""
Create a user (e.g. the first site admin). Run from project root:
  python -m newcloud_auth.scripts.create_user USERNAME PASSWORD FIRST_NAME LAST_NAME [--email E] [--role R]
Example:
  python -m newcloud_auth.scripts.create_user admin your-secure-password Ada Admin --role site_admin
"""
import argparse
import logging
import sys

from newcloud_auth.core.config import get_settings
from newcloud_auth.core.database import SessionLocal
from newcloud_auth.core.errors import AppError
from newcloud_auth.core.logging import configure_logging
from newcloud_auth.models.user import ROLE_NAMES, ROLE_USER
from newcloud_auth.services.accounts import create_user

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create a NewCloud user without going through /auth/register.")
    parser.add_argument("username", help="Username (1-255 chars)")
    parser.add_argument("password", help="Password (1-128 chars)")
    parser.add_argument("first_name", help="First name")
    parser.add_argument("last_name", help="Last name")
    parser.add_argument("--email", default=None, help="Optional unique email")
    parser.add_argument("--timezone", default=None, help="IANA timezone (defaults to DEFAULT_TIMEZONE)")
    parser.add_argument("--role", default=ROLE_USER, choices=ROLE_NAMES)
    args = parser.parse_args(argv)

    configure_logging(get_settings().LOG_LEVEL)

    db = SessionLocal()
    try:
        user = create_user(
            db,
            username=args.username,
            password=args.password,
            first_name=args.first_name,
            last_name=args.last_name,
            email=args.email,
            timezone=args.timezone,
            role=args.role,
        )
    except AppError as e:
        print(e.message, file=sys.stderr)
        return 1
    finally:
        db.close()
    logger.info("Created user '%s' (id=%s) with role '%s'.", user.username, user.id, args.role)
    return 0


if __name__ == "__main__":
    sys.exit(main())
