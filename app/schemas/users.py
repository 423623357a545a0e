"""Schemas for admin user management and profile updates."""

from datetime import datetime

from pydantic import BaseModel, EmailStr, Field, model_validator

from app.core.security import (
    NAME_MAX_LEN,
    PASSWORD_MAX_LEN,
    PASSWORD_MIN_LEN,
    USERNAME_MAX_LEN,
    USERNAME_MIN_LEN,
)


class RoleOut(BaseModel):
    id: int
    name: str
    description: str | None = None

    class Config:
        from_attributes = True


class UserOut(BaseModel):
    """User with nested role (no password hash)."""

    id: int
    username: str
    email: str
    first_name: str
    last_name: str
    role: RoleOut
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class UsersListResponse(BaseModel):
    """Response for GET /users (admin only)."""

    total: int
    users: list[UserOut]


class UserCreate(BaseModel):
    username: str = Field(..., min_length=USERNAME_MIN_LEN, max_length=USERNAME_MAX_LEN)
    email: EmailStr
    password: str = Field(..., min_length=PASSWORD_MIN_LEN, max_length=PASSWORD_MAX_LEN)
    first_name: str = Field(..., min_length=1, max_length=NAME_MAX_LEN)
    last_name: str = Field(..., min_length=1, max_length=NAME_MAX_LEN)
    role_id: int


class UserUpdate(BaseModel):
    """Partial admin update; omitted fields keep their current value."""

    username: str | None = Field(None, min_length=USERNAME_MIN_LEN, max_length=USERNAME_MAX_LEN)
    email: EmailStr | None = None
    password: str | None = Field(None, min_length=PASSWORD_MIN_LEN, max_length=PASSWORD_MAX_LEN)
    first_name: str | None = Field(None, min_length=1, max_length=NAME_MAX_LEN)
    last_name: str | None = Field(None, min_length=1, max_length=NAME_MAX_LEN)
    role_id: int | None = None


class ProfileUpdate(BaseModel):
    """Self-service profile update. Changing password needs the current one."""

    email: EmailStr | None = None
    first_name: str | None = Field(None, min_length=1, max_length=NAME_MAX_LEN)
    last_name: str | None = Field(None, min_length=1, max_length=NAME_MAX_LEN)
    current_password: str | None = Field(None, max_length=PASSWORD_MAX_LEN)
    new_password: str | None = Field(None, min_length=PASSWORD_MIN_LEN, max_length=PASSWORD_MAX_LEN)

    @model_validator(mode="after")
    def check_password_pair(self) -> "ProfileUpdate":
        if self.new_password and not self.current_password:
            raise ValueError("Current password is required when changing password")
        return self


class MessageResponse(BaseModel):
    message: str
