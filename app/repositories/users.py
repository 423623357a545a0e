"""
Credential store: user lookups and writes.

Uniqueness of username and email is enforced by the database. A constraint
violation on write is reported as ConflictError, the same outcome as a
service-level duplicate pre-check, because the pre-check alone is racy.
Other integrity failures, such as a role_id with no matching role, propagate
unchanged.
"""

import logging
from typing import Any, Protocol

from sqlalchemy import func, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.database import is_unique_violation
from app.core.exceptions import ConflictError
from app.models import Customer, User

logger = logging.getLogger(__name__)

DUPLICATE_USER_MESSAGE = "User already exists with this email or username"


class CredentialStore(Protocol):
    def find_by_identifier(self, username: str, email: str) -> User | None: ...

    def find_by_email(self, email: str) -> User | None: ...

    def find_by_username(self, username: str) -> User | None: ...

    def find_by_id(self, user_id: int) -> User | None: ...

    def create(self, **fields: Any) -> User: ...

    def update(self, user: User, **fields: Any) -> User: ...

    def delete(self, user: User) -> None: ...

    def list(self) -> list[User]: ...

    def count_customers(self, user: User) -> int: ...


class SqlUserStore:
    """CredentialStore backed by the users table."""

    def __init__(self, db: Session) -> None:
        self.db = db

    def find_by_identifier(self, username: str, email: str) -> User | None:
        """Return a user whose username OR email matches, if any."""
        return (
            self.db.query(User)
            .filter(or_(User.username == username, User.email == email))
            .first()
        )

    def find_by_email(self, email: str) -> User | None:
        return self.db.query(User).filter(User.email == email).first()

    def find_by_username(self, username: str) -> User | None:
        return self.db.query(User).filter(User.username == username).first()

    def find_by_id(self, user_id: int) -> User | None:
        return self.db.get(User, user_id)

    def create(self, **fields: Any) -> User:
        user = User(**fields)
        self.db.add(user)
        self._commit()
        self.db.refresh(user)
        return user

    def update(self, user: User, **fields: Any) -> User:
        for key, value in fields.items():
            setattr(user, key, value)
        self._commit()
        self.db.refresh(user)
        return user

    def delete(self, user: User) -> None:
        self.db.delete(user)
        self.db.commit()

    def list(self) -> list[User]:
        return self.db.query(User).order_by(User.created_at.desc(), User.id.desc()).all()

    def count_customers(self, user: User) -> int:
        return (
            self.db.query(func.count(Customer.id))
            .filter(Customer.created_by == user.id)
            .scalar()
        ) or 0

    def _commit(self) -> None:
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            if not is_unique_violation(e):
                raise
            logger.info("User write rejected by unique constraint")
            raise ConflictError(DUPLICATE_USER_MESSAGE) from e
