"""
Create a user (e.g. the first admin) without going through the HTTP API. Run from project root:
  python -m roster.scripts.create_user USERNAME PASSWORD [role]
Example:
  python -m roster.scripts.create_user admin your-secure-password admin
"""
import argparse
import sys

from roster.core.config import get_settings
from roster.core.database import create_db_engine, create_session_factory
from roster.core.errors import AuthError, ValidationError
from roster.schemas.auth import DEFAULT_ROLE, ROLE_VALUES
from roster.services.credentials import CredentialStore


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create a roster user.")
    parser.add_argument("username", help="Username (3-30 letters or digits)")
    parser.add_argument("password", help="Password (8-128 chars)")
    parser.add_argument("role", nargs="?", default=DEFAULT_ROLE, choices=sorted(ROLE_VALUES))
    args = parser.parse_args(argv)

    settings = get_settings()
    db = create_session_factory(create_db_engine(settings))()
    try:
        result = CredentialStore(db, rounds=settings.BCRYPT_ROUNDS).register(
            args.username.strip(), args.password, args.role
        )
    finally:
        db.close()

    if isinstance(result, ValidationError):
        print(f"Invalid input: {result}", file=sys.stderr)
        return 1
    if isinstance(result, AuthError):
        print(f"User '{args.username}' already exists.", file=sys.stderr)
        return 1
    print(f"Created user '{result.username}' with role '{result.role}'.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
