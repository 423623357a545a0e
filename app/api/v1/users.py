"""User management (admin only) and self-service profile update."""

from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.api.v1.auth import get_current_user, require_roles
from app.core.database import get_db
from app.models import RoleName, User
from app.repositories import SqlRoleRegistry, SqlUserStore
from app.schemas.users import (
    MessageResponse,
    ProfileUpdate,
    UserCreate,
    UserOut,
    UsersListResponse,
    UserUpdate,
)
from app.services.users import UserService

router = APIRouter()

require_admin = require_roles(RoleName.ADMIN)


def get_user_service(db: Annotated[Session, Depends(get_db)]) -> UserService:
    return UserService(SqlUserStore(db), SqlRoleRegistry(db))


# Declared before /{user_id} so "profile" is not parsed as an id.
@router.put("/profile", response_model=UserOut)
def update_profile(
    body: ProfileUpdate,
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[UserService, Depends(get_user_service)],
) -> User:
    """Update own email/name; changing password requires the current password."""
    return service.update_profile(current_user, body)


@router.get("", response_model=UsersListResponse)
def list_users(
    _admin: Annotated[User, Depends(require_admin)],
    service: Annotated[UserService, Depends(get_user_service)],
) -> UsersListResponse:
    users = service.list_users()
    return UsersListResponse(
        total=len(users), users=[UserOut.model_validate(u) for u in users]
    )


@router.get("/{user_id}", response_model=UserOut)
def get_user(
    user_id: int,
    _admin: Annotated[User, Depends(require_admin)],
    service: Annotated[UserService, Depends(get_user_service)],
) -> User:
    return service.get_user(user_id)


@router.post("", response_model=UserOut, status_code=status.HTTP_201_CREATED)
def create_user(
    body: UserCreate,
    _admin: Annotated[User, Depends(require_admin)],
    service: Annotated[UserService, Depends(get_user_service)],
) -> User:
    return service.create_user(body)


@router.put("/{user_id}", response_model=UserOut)
def update_user(
    user_id: int,
    body: UserUpdate,
    _admin: Annotated[User, Depends(require_admin)],
    service: Annotated[UserService, Depends(get_user_service)],
) -> User:
    return service.update_user(user_id, body)


@router.delete("/{user_id}", response_model=MessageResponse)
def delete_user(
    user_id: int,
    admin: Annotated[User, Depends(require_admin)],
    service: Annotated[UserService, Depends(get_user_service)],
) -> MessageResponse:
    """Delete a user. Refuses the caller's own account and users that own customers."""
    service.delete_user(user_id, acting_user=admin)
    return MessageResponse(message="User removed")
