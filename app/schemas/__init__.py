"""Pydantic request/response schemas."""

from app.schemas.auth import AuthResponse, LoginRequest, RegisterRequest, UserSummary
from app.schemas.customers import (
    CustomerCreate,
    CustomerOut,
    CustomersListResponse,
    CustomerUpdate,
)
from app.schemas.health import ErrorResponse, HealthResponse
from app.schemas.users import (
    MessageResponse,
    ProfileUpdate,
    RoleOut,
    UserCreate,
    UserOut,
    UsersListResponse,
    UserUpdate,
)

__all__ = [
    "AuthResponse",
    "CustomerCreate",
    "CustomerOut",
    "CustomersListResponse",
    "CustomerUpdate",
    "ErrorResponse",
    "HealthResponse",
    "LoginRequest",
    "MessageResponse",
    "ProfileUpdate",
    "RegisterRequest",
    "RoleOut",
    "UserCreate",
    "UserOut",
    "UsersListResponse",
    "UserSummary",
    "UserUpdate",
]
