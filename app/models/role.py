"""ORM model for roles (named permission buckets referenced by users)."""

from sqlalchemy import Column, DateTime, Integer, String, Text
from sqlalchemy.orm import relationship

from app.models.base import Base, utcnow


class Role(Base):
    """Seeded role such as 'admin', 'manager' or 'customer'."""

    __tablename__ = "roles"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(50), nullable=False, unique=True, index=True)
    description = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    users = relationship("User", back_populates="role", passive_deletes="all")
