"""Shared test helpers: in-memory stores for the auth service and an API test case on SQLite."""

import unittest
from datetime import timedelta
from typing import Any

from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.api.v1.auth import get_token_codec
from app.core.database import build_engine, get_db
from app.core.exceptions import ConflictError
from app.core.security import hash_password
from app.core.tokens import TokenCodec, TokenConfig
from app.main import app
from app.models import Base, Customer, Role, RoleName, User
from app.repositories import SqlRoleRegistry
from app.scripts.seed import seed_roles

TEST_SECRET = "unit-test-secret"
DEFAULT_PASSWORD = "secret123"


def make_codec(secret: str = TEST_SECRET, **kwargs: Any) -> TokenCodec:
    return TokenCodec(TokenConfig(secret=secret, **kwargs))


class FakeRoleRegistry:
    """RoleRegistry over a dict; roles are transient ORM objects."""

    def __init__(self, names: tuple[str, ...] = ("admin", "manager", "customer")) -> None:
        self.roles: dict[int, Role] = {}
        for i, name in enumerate(names, start=1):
            self.roles[i] = Role(id=i, name=name, description=f"{name} role")

    def find_by_name(self, name: str) -> Role | None:
        return next((r for r in self.roles.values() if r.name == name), None)

    def find_by_id(self, role_id: int) -> Role | None:
        return self.roles.get(role_id)


class FakeUserStore:
    """CredentialStore over a dict with the same uniqueness rules as the users table."""

    def __init__(self, roles: FakeRoleRegistry) -> None:
        self.roles = roles
        self.users: dict[int, User] = {}
        self.next_id = 1
        # Simulates a concurrent writer winning the race between pre-check and insert.
        self.fail_next_create_with_conflict = False

    def find_by_identifier(self, username: str, email: str) -> User | None:
        return next(
            (u for u in self.users.values() if u.username == username or u.email == email),
            None,
        )

    def find_by_email(self, email: str) -> User | None:
        return next((u for u in self.users.values() if u.email == email), None)

    def find_by_username(self, username: str) -> User | None:
        return next((u for u in self.users.values() if u.username == username), None)

    def find_by_id(self, user_id: int) -> User | None:
        return self.users.get(user_id)

    def create(self, **fields: Any) -> User:
        if self.fail_next_create_with_conflict:
            self.fail_next_create_with_conflict = False
            raise ConflictError("User already exists with this email or username")
        if self.find_by_identifier(fields["username"], fields["email"]) is not None:
            raise ConflictError("User already exists with this email or username")
        user = User(id=self.next_id, **fields)
        user.role = self.roles.find_by_id(fields["role_id"])
        self.users[user.id] = user
        self.next_id += 1
        return user

    def update(self, user: User, **fields: Any) -> User:
        for key, value in fields.items():
            setattr(user, key, value)
        if "role_id" in fields:
            user.role = self.roles.find_by_id(fields["role_id"])
        return user

    def delete(self, user: User) -> None:
        self.users.pop(user.id, None)

    def list(self) -> list[User]:
        return list(self.users.values())

    def count_customers(self, user: User) -> int:
        return 0


class ApiTestCase(unittest.TestCase):
    """Runs the FastAPI app against a fresh in-memory SQLite database with seeded roles."""

    def setUp(self) -> None:
        self.engine = build_engine("sqlite://", poolclass=StaticPool)
        Base.metadata.create_all(self.engine)
        self.SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)
        self.db = self.SessionLocal()
        seed_roles(self.db)
        self.codec = make_codec()

        def override_get_db():
            db = self.SessionLocal()
            try:
                yield db
            finally:
                db.close()

        app.dependency_overrides[get_db] = override_get_db
        app.dependency_overrides[get_token_codec] = lambda: self.codec
        self.client = TestClient(app)

    def tearDown(self) -> None:
        app.dependency_overrides.clear()
        self.db.close()
        Base.metadata.drop_all(self.engine)
        self.engine.dispose()

    def role(self, name: RoleName) -> Role:
        return SqlRoleRegistry(self.db).find_by_name(name.value)

    def create_user(
        self,
        username: str,
        role: RoleName = RoleName.CUSTOMER,
        password: str = DEFAULT_PASSWORD,
        email: str | None = None,
    ) -> User:
        user = User(
            username=username,
            email=email or f"{username}@example.com",
            password_hash=hash_password(password),
            first_name=username.title(),
            last_name="Tester",
            role_id=self.role(role).id,
        )
        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)
        return user

    def create_customer(self, owner: User, email: str = "acme@example.com", **fields: Any) -> Customer:
        values = {
            "first_name": "Ann",
            "last_name": "Perera",
            "email": email,
            "phone": "0771234567",
            "business_name": "Acme Traders",
            "created_by": owner.id,
        }
        values.update(fields)
        customer = Customer(**values)
        self.db.add(customer)
        self.db.commit()
        self.db.refresh(customer)
        return customer

    def headers_for(self, user: User, window: timedelta | None = None) -> dict[str, str]:
        token = self.codec.issue(user.id, user.role.name, validity_window=window)
        return {"Authorization": f"Bearer {token}"}
