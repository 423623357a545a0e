"""Request/response schemas for auth endpoints."""

from pydantic import BaseModel, EmailStr, Field, field_validator

from app.core.security import (
    NAME_MAX_LEN,
    PASSWORD_MAX_LEN,
    PASSWORD_MIN_LEN,
    USERNAME_MAX_LEN,
    USERNAME_MIN_LEN,
)


class RegisterRequest(BaseModel):
    """Self-registration payload; new users get the default role."""

    username: str = Field(
        ..., min_length=USERNAME_MIN_LEN, max_length=USERNAME_MAX_LEN, description="Username"
    )
    email: EmailStr = Field(..., description="Email address")
    password: str = Field(
        ..., min_length=PASSWORD_MIN_LEN, max_length=PASSWORD_MAX_LEN, description="Password"
    )
    first_name: str = Field(..., min_length=1, max_length=NAME_MAX_LEN)
    last_name: str = Field(..., min_length=1, max_length=NAME_MAX_LEN)

    @field_validator("username", "first_name", "last_name")
    @classmethod
    def strip_required(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be empty")
        return v


class LoginRequest(BaseModel):
    """Credentials for login."""

    email: EmailStr = Field(..., description="Email address")
    password: str = Field(..., min_length=1, max_length=PASSWORD_MAX_LEN, description="Password")


class UserSummary(BaseModel):
    """Redacted user returned by auth endpoints (never includes the password hash)."""

    id: int
    username: str
    email: str
    first_name: str
    last_name: str
    role: str


class AuthResponse(BaseModel):
    """JWT returned after register/login, plus who it was issued for."""

    token: str = Field(..., description="JWT bearer token")
    token_type: str = Field(default="bearer", description="Token type")
    user: UserSummary
