"""Customer CRUD with per-owner visibility: non-admins only see their own customers."""

import logging

from app.core.exceptions import ConflictError, ForbiddenError, NotFoundError
from app.models import Customer, CustomerDocument, RoleName, User
from app.models.customer import DEFAULT_COUNTRY
from app.repositories.customers import DUPLICATE_CUSTOMER_MESSAGE, SqlCustomerRepository
from app.schemas.customers import CustomerCreate, CustomerUpdate
from app.services.auth import authorize

logger = logging.getLogger(__name__)

# Roles that see every customer regardless of creator.
UNRESTRICTED_ROLES = (RoleName.ADMIN,)


def can_access(user: User, customer: Customer) -> bool:
    return authorize(user, UNRESTRICTED_ROLES) or customer.created_by == user.id


class CustomerService:
    def __init__(self, customers: SqlCustomerRepository) -> None:
        self.customers = customers

    def list_customers(self, user: User) -> list[Customer]:
        if authorize(user, UNRESTRICTED_ROLES):
            return self.customers.list()
        return self.customers.list(created_by=user.id)

    def get_customer(self, customer_id: int, user: User, action: str = "view") -> Customer:
        customer = self.customers.find_by_id(customer_id)
        if customer is None:
            raise NotFoundError("Customer not found")
        if not can_access(user, customer):
            raise ForbiddenError(f"Not authorized to {action} this customer")
        return customer

    def create_customer(self, data: CustomerCreate, user: User) -> Customer:
        if self.customers.find_by_email(data.email) is not None:
            raise ConflictError(DUPLICATE_CUSTOMER_MESSAGE)
        fields = data.model_dump()
        fields["country"] = fields.get("country") or DEFAULT_COUNTRY
        customer = self.customers.create(created_by=user.id, **fields)
        logger.info(
            "Customer created", extra={"customer_id": customer.id, "user_id": user.id}
        )
        return customer

    def update_customer(self, customer_id: int, data: CustomerUpdate, user: User) -> Customer:
        customer = self.get_customer(customer_id, user, action="update")
        changes = data.model_dump(exclude_unset=True)
        new_email = changes.get("email")
        if new_email and new_email != customer.email:
            if self.customers.find_by_email(new_email) is not None:
                raise ConflictError("Email already in use by another customer")
        if not changes:
            return customer
        return self.customers.update(customer, **changes)

    def delete_customer(self, customer_id: int, user: User) -> None:
        customer = self.get_customer(customer_id, user, action="delete")
        self.customers.delete(customer)
        logger.info("Customer deleted", extra={"customer_id": customer_id, "user_id": user.id})

    def delete_document(self, document_id: int, user: User) -> None:
        """Remove a document's metadata; the stored file itself is not touched here."""
        document: CustomerDocument | None = self.customers.find_document(document_id)
        if document is None:
            raise NotFoundError("Document not found")
        if not can_access(user, document.customer):
            raise ForbiddenError("Not authorized to delete this document")
        self.customers.delete_document(document)
