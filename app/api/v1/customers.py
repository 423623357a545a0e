"""Customer CRUD. Any authenticated user; non-admins only reach customers they created."""

from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.api.v1.auth import get_current_user
from app.core.database import get_db
from app.models import Customer, User
from app.repositories import SqlCustomerRepository
from app.schemas.customers import (
    CustomerCreate,
    CustomerOut,
    CustomersListResponse,
    CustomerUpdate,
)
from app.schemas.users import MessageResponse
from app.services.customers import CustomerService

router = APIRouter()


def get_customer_service(db: Annotated[Session, Depends(get_db)]) -> CustomerService:
    return CustomerService(SqlCustomerRepository(db))


@router.get("", response_model=CustomersListResponse)
def list_customers(
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[CustomerService, Depends(get_customer_service)],
) -> CustomersListResponse:
    customers = service.list_customers(current_user)
    return CustomersListResponse(
        total=len(customers),
        customers=[CustomerOut.model_validate(c) for c in customers],
    )


@router.get("/{customer_id}", response_model=CustomerOut)
def get_customer(
    customer_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[CustomerService, Depends(get_customer_service)],
) -> Customer:
    return service.get_customer(customer_id, current_user)


@router.post("", response_model=CustomerOut, status_code=status.HTTP_201_CREATED)
def create_customer(
    body: CustomerCreate,
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[CustomerService, Depends(get_customer_service)],
) -> Customer:
    return service.create_customer(body, current_user)


@router.put("/{customer_id}", response_model=CustomerOut)
def update_customer(
    customer_id: int,
    body: CustomerUpdate,
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[CustomerService, Depends(get_customer_service)],
) -> Customer:
    return service.update_customer(customer_id, body, current_user)


@router.delete("/documents/{document_id}", response_model=MessageResponse)
def delete_document(
    document_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[CustomerService, Depends(get_customer_service)],
) -> MessageResponse:
    service.delete_document(document_id, current_user)
    return MessageResponse(message="Document removed")


@router.delete("/{customer_id}", response_model=MessageResponse)
def delete_customer(
    customer_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[CustomerService, Depends(get_customer_service)],
) -> MessageResponse:
    service.delete_customer(customer_id, current_user)
    return MessageResponse(message="Customer removed")
