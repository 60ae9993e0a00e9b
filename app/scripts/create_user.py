"""
Create a user (e.g. the first admin). Run from project root:
  python -m app.scripts.create_user EMAIL PASSWORD NAME [role]
Example:
  python -m app.scripts.create_user mom@example.com your-secure-password Mom ADMIN
"""
import argparse
import sys

from pydantic import EmailStr, TypeAdapter, ValidationError

from app.core.config import get_settings
from app.core.database import SessionLocal
from app.core.security import (
    EMAIL_MAX_LEN,
    NAME_MAX_LEN,
    NAME_MIN_LEN,
    PASSWORD_MAX_LEN,
    PASSWORD_MIN_LEN,
    build_password_hasher,
)
from app.models.user import User, UserRole
from app.repositories.users import UserRepository


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create an account without going through /auth/register.")
    parser.add_argument("email", help=f"Email (1-{EMAIL_MAX_LEN} chars)")
    parser.add_argument("password", help=f"Password ({PASSWORD_MIN_LEN}-{PASSWORD_MAX_LEN} chars)")
    parser.add_argument("name", help=f"Display name ({NAME_MIN_LEN}-{NAME_MAX_LEN} chars)")
    parser.add_argument(
        "role",
        nargs="?",
        default=UserRole.VIEWER.value,
        choices=[r.value for r in UserRole],
    )
    args = parser.parse_args(argv)

    name = args.name.strip()
    try:
        email = TypeAdapter(EmailStr).validate_python(args.email.strip())
    except ValidationError:
        print("Invalid email.", file=sys.stderr)
        return 1
    if len(email) > EMAIL_MAX_LEN:
        print("Invalid email.", file=sys.stderr)
        return 1
    if not (PASSWORD_MIN_LEN <= len(args.password) <= PASSWORD_MAX_LEN):
        print(f"Password must be {PASSWORD_MIN_LEN}-{PASSWORD_MAX_LEN} characters.", file=sys.stderr)
        return 1
    if not (NAME_MIN_LEN <= len(name) <= NAME_MAX_LEN):
        print(f"Name must be {NAME_MIN_LEN}-{NAME_MAX_LEN} characters.", file=sys.stderr)
        return 1

    hasher = build_password_hasher(get_settings())
    db = SessionLocal()
    try:
        users = UserRepository(db)
        if users.exists_by_email(email):
            print(f"User '{email}' already exists.", file=sys.stderr)
            return 1
        user = users.save(
            User(
                email=email,
                password_hash=hasher.hash(args.password),
                name=name,
                role=UserRole(args.role),
            )
        )
        db.commit()
        print(f"Created user '{email}' ({user.id}) with role '{args.role}'.")
        return 0
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
