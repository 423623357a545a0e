"""ORM models for customers and their uploaded document metadata."""

from sqlalchemy import BigInteger, Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from app.models.base import Base, utcnow

DEFAULT_COUNTRY = "Sri Lanka"


class Customer(Base):
    """Business customer record owned by the user who created it."""

    __tablename__ = "customers"

    id = Column(Integer, primary_key=True, autoincrement=True)
    first_name = Column(String(50), nullable=False)
    last_name = Column(String(50), nullable=False)
    email = Column(String(100), nullable=False, unique=True, index=True)
    phone = Column(String(20), nullable=False)
    address = Column(Text, nullable=True)
    city = Column(String(50), nullable=True)
    state = Column(String(50), nullable=True)
    postal_code = Column(String(20), nullable=True)
    country = Column(String(50), nullable=False, default=DEFAULT_COUNTRY)
    business_name = Column(String(100), nullable=False)
    business_type = Column(String(50), nullable=True)
    business_reg_number = Column(String(50), nullable=True)
    tin_number = Column(String(50), nullable=True)
    vat_number = Column(String(50), nullable=True)
    activities = Column(Text, nullable=True)
    created_by = Column(
        Integer,
        ForeignKey("users.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow
    )

    creator = relationship("User", back_populates="customers")
    documents = relationship(
        "CustomerDocument",
        back_populates="customer",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="CustomerDocument.id",
    )


class CustomerDocument(Base):
    """Metadata for a file attached to a customer (profile image, ID proof, ...)."""

    __tablename__ = "customer_documents"

    id = Column(Integer, primary_key=True, autoincrement=True)
    customer_id = Column(
        Integer,
        ForeignKey("customers.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    document_type = Column(String(50), nullable=False)
    file_name = Column(String(255), nullable=False)
    file_path = Column(String(1024), nullable=False)
    file_size = Column(BigInteger, nullable=True)
    file_type = Column(String(100), nullable=True)
    uploaded_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    customer = relationship("Customer", back_populates="documents")
