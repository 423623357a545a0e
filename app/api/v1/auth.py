"""Register/login endpoints and the auth dependencies (get_current_user, require_roles)."""

from collections.abc import Callable
from functools import lru_cache
from typing import Annotated

from fastapi import APIRouter, Depends, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from app.core.config import get_settings
from app.core.database import get_db
from app.core.exceptions import MissingTokenError
from app.core.tokens import TokenCodec, TokenConfig
from app.models import RoleName, User
from app.repositories import SqlRoleRegistry, SqlUserStore
from app.schemas.auth import AuthResponse, LoginRequest, RegisterRequest, UserSummary
from app.services.auth import AuthService, to_summary

router = APIRouter()
security = HTTPBearer(auto_error=False)


@lru_cache
def get_token_codec() -> TokenCodec:
    """Dependency: codec configured from settings (overridable in tests)."""
    return TokenCodec(TokenConfig.from_settings(get_settings()))


def get_auth_service(
    db: Annotated[Session, Depends(get_db)],
    codec: Annotated[TokenCodec, Depends(get_token_codec)],
) -> AuthService:
    return AuthService(
        users=SqlUserStore(db),
        roles=SqlRoleRegistry(db),
        codec=codec,
        default_role=get_settings().DEFAULT_ROLE,
    )


def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    auth: Annotated[AuthService, Depends(get_auth_service)],
) -> User:
    """Dependency: require a valid Bearer JWT and return the live user. Raises 401 otherwise."""
    if credentials is None:
        raise MissingTokenError()
    return auth.resolve_session(credentials.credentials)


def require_roles(*roles: RoleName) -> Callable[..., User]:
    """Dependency factory: require an authenticated user whose role is one of roles (403 otherwise)."""
    allowed = tuple(RoleName.parse(r) for r in roles)

    def dependency(
        current_user: Annotated[User, Depends(get_current_user)],
        auth: Annotated[AuthService, Depends(get_auth_service)],
    ) -> User:
        return auth.require_role(current_user, allowed)

    return dependency


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(
    body: RegisterRequest,
    auth: Annotated[AuthService, Depends(get_auth_service)],
) -> AuthResponse:
    """Create an account with the default role and return a JWT for it."""
    result = auth.register(
        username=body.username,
        email=body.email,
        password=body.password,
        first_name=body.first_name,
        last_name=body.last_name,
    )
    return AuthResponse(token=result.token, user=result.user)


@router.post("/login", response_model=AuthResponse)
def login(
    body: LoginRequest,
    auth: Annotated[AuthService, Depends(get_auth_service)],
) -> AuthResponse:
    """
    Authenticate with email and password; returns a JWT.
    Include the token in the Authorization header as: Bearer <token>
    """
    result = auth.login(body.email, body.password)
    return AuthResponse(token=result.token, user=result.user)


@router.get("/me", response_model=UserSummary)
def me(current_user: Annotated[User, Depends(get_current_user)]) -> UserSummary:
    """Current user's profile, with the role as it is now (not as embedded in the token)."""
    return to_summary(current_user)
