"""
Create a user (e.g. the first admin). Registration over HTTP always creates
role 'user', so admins are bootstrapped here. Run from project root:
  python -m panelauth.scripts.create_user NAME EMAIL [--password PASSWORD] [--role admin]
Example:
  python -m panelauth.scripts.create_user "Ann Admin" ann@example.com --role admin
A password is generated and printed when --password is omitted.
"""
import argparse
import sys

from pydantic import validate_email
from pydantic_core import PydanticCustomError

from panelauth.core.config import get_settings
from panelauth.core.database import Database
from panelauth.core.errors import PanelAuthError
from panelauth.core.logging_config import configure_logging
from panelauth.models.user import Role
from panelauth.repositories.users import UserStore
from panelauth.services.accounts import create_user_as_admin


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Create a panel user (bootstrap admins here).")
    parser.add_argument("name", help="Display name (2-60 chars)")
    parser.add_argument("email", help="Login email")
    parser.add_argument("--password", default=None, help="Password (8-128 chars); generated if omitted")
    parser.add_argument("--role", default="user", choices=[r.value for r in Role])
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    name = args.name.strip()
    if not (2 <= len(name) <= 60):
        print("Name must be 2-60 characters.", file=sys.stderr)
        return 1
    try:
        _, email = validate_email(args.email)
    except PydanticCustomError:
        print("Invalid email address.", file=sys.stderr)
        return 1
    if args.password is not None and not (8 <= len(args.password) <= 128):
        print("Password must be 8-128 characters.", file=sys.stderr)
        return 1

    settings = get_settings()
    configure_logging(settings.LOG_LEVEL)
    database = Database.from_settings(settings)
    db = database.session()
    try:
        user, generated = create_user_as_admin(
            UserStore(db),
            settings,
            name,
            email,
            args.password,
            Role(args.role),
        )
    except PanelAuthError as e:
        print(f"Could not create user: {e.detail}", file=sys.stderr)
        return 1
    finally:
        db.close()
        database.dispose()

    print(f"Created user '{user.email}' with role '{user.role}' (id {user.id}).")
    if generated:
        print(f"Generated password: {generated}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
