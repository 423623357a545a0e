"""Customer and customer-document persistence."""

from typing import Any

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.database import is_unique_violation
from app.core.exceptions import ConflictError
from app.models import Customer, CustomerDocument

DUPLICATE_CUSTOMER_MESSAGE = "Customer with this email already exists"


class SqlCustomerRepository:
    def __init__(self, db: Session) -> None:
        self.db = db

    def find_by_id(self, customer_id: int) -> Customer | None:
        return self.db.get(Customer, customer_id)

    def find_by_email(self, email: str) -> Customer | None:
        return self.db.query(Customer).filter(Customer.email == email).first()

    def list(self, created_by: int | None = None) -> list[Customer]:
        """All customers newest first, optionally only those created by one user."""
        query = self.db.query(Customer)
        if created_by is not None:
            query = query.filter(Customer.created_by == created_by)
        return query.order_by(Customer.created_at.desc(), Customer.id.desc()).all()

    def create(self, **fields: Any) -> Customer:
        customer = Customer(**fields)
        self.db.add(customer)
        self._commit()
        self.db.refresh(customer)
        return customer

    def update(self, customer: Customer, **fields: Any) -> Customer:
        for key, value in fields.items():
            setattr(customer, key, value)
        self._commit()
        self.db.refresh(customer)
        return customer

    def delete(self, customer: Customer) -> None:
        self.db.delete(customer)
        self.db.commit()

    def find_document(self, document_id: int) -> CustomerDocument | None:
        return self.db.get(CustomerDocument, document_id)

    def delete_document(self, document: CustomerDocument) -> None:
        self.db.delete(document)
        self.db.commit()

    def _commit(self) -> None:
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            if not is_unique_violation(e):
                raise
            raise ConflictError(DUPLICATE_CUSTOMER_MESSAGE) from e
