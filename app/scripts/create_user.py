"""
Create a user with a given role. Roles must be seeded first. Run from project root:
  python -m app.scripts.create_user USERNAME EMAIL PASSWORD FIRST_NAME LAST_NAME [role]
Example:
  python -m app.scripts.create_user jdoe jdoe@example.com your-secure-password Jane Doe manager
"""
import argparse
import sys

from pydantic import ValidationError

from app.core.database import SessionLocal
from app.core.exceptions import CRMError
from app.models import RoleName
from app.repositories import SqlRoleRegistry, SqlUserStore
from app.schemas.users import UserCreate
from app.services.users import UserService


def main() -> int:
    parser = argparse.ArgumentParser(description="Create a CRM user.")
    parser.add_argument("username", help="Username (1-50 chars)")
    parser.add_argument("email", help="Email address")
    parser.add_argument("password", help="Password (6-128 chars)")
    parser.add_argument("first_name")
    parser.add_argument("last_name")
    parser.add_argument(
        "role",
        nargs="?",
        default=RoleName.CUSTOMER.value,
        choices=[r.value for r in RoleName],
    )
    args = parser.parse_args()

    db = SessionLocal()
    try:
        roles = SqlRoleRegistry(db)
        role = roles.find_by_name(args.role)
        if role is None:
            print(f"Role '{args.role}' not found; run python -m app.scripts.seed first.", file=sys.stderr)
            return 1
        try:
            data = UserCreate(
                username=args.username.strip(),
                email=args.email,
                password=args.password,
                first_name=args.first_name,
                last_name=args.last_name,
                role_id=role.id,
            )
        except ValidationError as e:
            print(f"Invalid input: {e}", file=sys.stderr)
            return 1
        try:
            UserService(SqlUserStore(db), roles).create_user(data)
        except CRMError as e:
            print(e.message, file=sys.stderr)
            return 1
        print(f"Created user '{data.username}' with role '{args.role}'.")
        return 0
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
