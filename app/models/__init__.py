"""SQLAlchemy ORM models."""

from app.models.base import Base
from app.models.customer import Customer, CustomerDocument
from app.models.enums import RoleName
from app.models.role import Role
from app.models.user import User

__all__ = ["Base", "Customer", "CustomerDocument", "Role", "RoleName", "User"]
