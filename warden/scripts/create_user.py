"""
Create a user (e.g. first admin). Run from project root:
  python -m warden.scripts.create_user NAME EMAIL PASSWORD [role]
Example:
  python -m warden.scripts.create_user "Ann Lee" ann@example.com 'Sup3r$ecret' admin
"""
import argparse
import logging
import sys

from pydantic import ValidationError

from warden.core.database import SessionLocal
from warden.schemas.admin import AdminCreateUserRequest
from warden.services.users import EmailConflictError, create_user

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create a Warden user (bypasses self-registration).")
    parser.add_argument("name", help="Display name (2-60 chars)")
    parser.add_argument("email", help="Login email")
    parser.add_argument("password", help="Password (8+ chars, upper, lower, number, symbol)")
    parser.add_argument("role", nargs="?", default="user", choices=["user", "admin"])
    args = parser.parse_args(argv)

    try:
        data = AdminCreateUserRequest(
            name=args.name, email=args.email, password=args.password, role=args.role
        )
    except ValidationError as e:
        for err in e.errors():
            field = ".".join(str(p) for p in err["loc"]) or "input"
            print(f"{field}: {err['msg'].removeprefix('Value error, ')}", file=sys.stderr)
        return 1

    db = SessionLocal()
    try:
        user = create_user(
            db, name=data.name, email=data.email, password=data.password, role=data.role
        )
    except EmailConflictError:
        print(f"User '{data.email}' already exists.", file=sys.stderr)
        return 1
    finally:
        db.close()
    print(f"Created user '{user.email}' with role '{user.role}' (id {user.id}).")
    return 0


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s %(message)s")
    sys.exit(main())
