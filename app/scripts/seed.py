"""
Seed the roles table (and optionally a first admin). Safe to re-run. From project root:
  python -m app.scripts.seed
  python -m app.scripts.seed --admin-email admin@example.com --admin-password your-secure-password
"""
import argparse
import logging
import sys

from pydantic import ValidationError
from sqlalchemy.orm import Session

from app.core.config import get_settings
from app.core.database import SessionLocal
from app.core.exceptions import ConfigurationError, CRMError
from app.core.logging_config import configure_logging
from app.models import Role, RoleName, User
from app.models.enums import ROLE_DESCRIPTIONS
from app.repositories import SqlRoleRegistry, SqlUserStore
from app.schemas.users import UserCreate
from app.services.users import UserService

logger = logging.getLogger(__name__)


def seed_roles(db: Session) -> list[Role]:
    """Create any missing seed role; existing roles are left as they are. Returns created roles."""
    registry = SqlRoleRegistry(db)
    created: list[Role] = []
    for name in RoleName:
        if registry.find_by_name(name.value) is None:
            role = Role(name=name.value, description=ROLE_DESCRIPTIONS[name])
            db.add(role)
            created.append(role)
    db.commit()
    return created


def seed_admin(db: Session, username: str, email: str, password: str) -> User | None:
    """
    Create the first admin unless a user with that email exists. Returns the new user or None.

    The email is validated and normalized before the existence check, so re-running
    with a differently-cased domain finds the same account.
    """
    users = SqlUserStore(db)
    roles = SqlRoleRegistry(db)
    admin_role = roles.find_by_name(RoleName.ADMIN.value)
    if admin_role is None:
        raise ConfigurationError(f"Role '{RoleName.ADMIN.value}' not found")
    data = UserCreate(
        username=username,
        email=email,
        password=password,
        first_name="Admin",
        last_name="User",
        role_id=admin_role.id,
    )
    if users.find_by_email(data.email) is not None:
        logger.info("Admin %s already exists; skipping.", data.email)
        return None
    return UserService(users, roles).create_user(data)


def main() -> int:
    parser = argparse.ArgumentParser(description="Seed CRM roles and an optional admin user.")
    parser.add_argument("--admin-username", default="admin")
    parser.add_argument("--admin-email", help="Create an admin with this email if none exists")
    parser.add_argument("--admin-password", help="Password for the seeded admin (6-128 chars)")
    args = parser.parse_args()

    configure_logging(get_settings().LOG_LEVEL)
    if bool(args.admin_email) != bool(args.admin_password):
        print("--admin-email and --admin-password must be given together.", file=sys.stderr)
        return 1

    db = SessionLocal()
    try:
        created = seed_roles(db)
        logger.info("Seeded roles: %s", ", ".join(r.name for r in created) or "none missing")
        if args.admin_email:
            user = seed_admin(db, args.admin_username, args.admin_email, args.admin_password)
            if user is not None:
                logger.info("Created admin user id=%s", user.id)
        return 0
    except ValidationError as e:
        logger.error("Invalid admin details: %s", e)
        return 1
    except CRMError as e:
        logger.error("Seeding failed: %s", e.message)
        return 1
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
