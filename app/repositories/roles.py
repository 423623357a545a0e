"""Role registry: read access to seeded roles."""

from typing import Protocol

from sqlalchemy.orm import Session

from app.models import Role


class RoleRegistry(Protocol):
    def find_by_name(self, name: str) -> Role | None: ...

    def find_by_id(self, role_id: int) -> Role | None: ...


class SqlRoleRegistry:
    """RoleRegistry backed by the roles table."""

    def __init__(self, db: Session) -> None:
        self.db = db

    def find_by_name(self, name: str) -> Role | None:
        return self.db.query(Role).filter(Role.name == name).first()

    def find_by_id(self, role_id: int) -> Role | None:
        return self.db.get(Role, role_id)
