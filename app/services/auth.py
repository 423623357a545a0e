"""
Authentication and authorization core.

Registration, login, bearer-token session resolution and role checks. The
service talks to persistence only through the CredentialStore and RoleRegistry
protocols and to tokens only through an injected TokenCodec.
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from email_validator import EmailNotValidError, validate_email

from app.core.exceptions import (
    ConfigurationError,
    ConflictError,
    InvalidCredentialsError,
    ForbiddenError,
    InvalidTokenError,
    ValidationError,
)
from app.core.security import (
    DUMMY_PASSWORD_HASH,
    PASSWORD_MAX_LEN,
    PASSWORD_MIN_LEN,
    hash_password,
    verify_password,
)
from app.core.tokens import TokenCodec
from app.models import RoleName, User
from app.repositories.roles import RoleRegistry
from app.repositories.users import DUPLICATE_USER_MESSAGE, CredentialStore
from app.schemas.auth import UserSummary

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AuthResult:
    """Token plus redacted summary of the user it was issued for."""

    token: str
    user: UserSummary


def to_summary(user: User) -> UserSummary:
    return UserSummary(
        id=user.id,
        username=user.username,
        email=user.email,
        first_name=user.first_name,
        last_name=user.last_name,
        role=user.role.name,
    )


def authorize(user: User, allowed_roles: Iterable[RoleName | str]) -> bool:
    """
    True if and only if the user's current role name is in allowed_roles.

    Names compare exactly (case-sensitive). Entries of allowed_roles must be
    known role names; an unknown entry raises ValueError rather than silently
    denying everyone.
    """
    allowed = {RoleName.parse(r).value for r in allowed_roles}
    return user.role is not None and user.role.name in allowed


class AuthService:
    """Orchestrates credential checks, token issuance and session resolution."""

    def __init__(
        self,
        users: CredentialStore,
        roles: RoleRegistry,
        codec: TokenCodec,
        default_role: RoleName | str = RoleName.CUSTOMER,
    ) -> None:
        self.users = users
        self.roles = roles
        self.codec = codec
        self.default_role = RoleName.parse(default_role)

    def issue_token(self, user: User) -> str:
        return self.codec.issue(user.id, user.role.name)

    def register(
        self,
        username: str,
        email: str,
        password: str,
        first_name: str,
        last_name: str,
    ) -> AuthResult:
        """
        Create a user with the default role and return a session token for it.

        Raises ValidationError for bad input, ConflictError when the username
        or email is taken (including a concurrent registration caught by the
        store's unique constraint), ConfigurationError when the default role
        has not been seeded.
        """
        username = (username or "").strip()
        first_name = (first_name or "").strip()
        last_name = (last_name or "").strip()
        email = _normalize_email(email)
        _validate_password(password)
        if not username:
            raise ValidationError("Username is required", details={"field": "username"})
        if not first_name:
            raise ValidationError("First name is required", details={"field": "first_name"})
        if not last_name:
            raise ValidationError("Last name is required", details={"field": "last_name"})

        if self.users.find_by_identifier(username, email) is not None:
            raise ConflictError(DUPLICATE_USER_MESSAGE)

        role = self.roles.find_by_name(self.default_role.value)
        if role is None:
            logger.critical(
                "Default role is missing; run the seed script",
                extra={"role": self.default_role.value},
            )
            raise ConfigurationError(f"Role '{self.default_role.value}' not found")

        password_hash = hash_password(password)
        user = self.users.create(
            username=username,
            email=email,
            password_hash=password_hash,
            first_name=first_name,
            last_name=last_name,
            role_id=role.id,
        )
        logger.info("User registered", extra={"user_id": user.id, "role": role.name})
        return AuthResult(token=self.issue_token(user), user=to_summary(user))

    def login(self, email: str, password: str) -> AuthResult:
        """
        Check email/password and return a session token.

        An unknown email and a wrong password raise the same
        InvalidCredentialsError; bcrypt runs in both cases.
        """
        try:
            email = _normalize_email(email)
        except ValidationError:
            email = (email or "").strip()
        user = self.users.find_by_email(email)
        if user is None:
            verify_password(password or "", DUMMY_PASSWORD_HASH)
            logger.warning("Login failed: invalid credentials")
            raise InvalidCredentialsError()
        if not verify_password(password or "", user.password_hash):
            logger.warning("Login failed: invalid credentials")
            raise InvalidCredentialsError()
        logger.info("User logged in", extra={"user_id": user.id})
        return AuthResult(token=self.issue_token(user), user=to_summary(user))

    def resolve_session(self, token: str) -> User:
        """
        Verify a bearer token and return the live user it refers to.

        The returned record carries the user's current role, not the role
        embedded in the token at issue time. Raises InvalidTokenError or
        ExpiredTokenError.
        """
        claims = self.codec.verify(token)
        user = self.users.find_by_id(claims.subject_id)
        if user is None:
            raise InvalidTokenError()
        return user

    def authorize(self, user: User, allowed_roles: Iterable[RoleName | str]) -> bool:
        return authorize(user, allowed_roles)

    def require_role(self, user: User, allowed_roles: Iterable[RoleName | str]) -> User:
        """Return user if authorized, else raise ForbiddenError."""
        if not authorize(user, allowed_roles):
            role_name = user.role.name if user.role is not None else None
            raise ForbiddenError(
                f"User role {role_name} is not authorized to access this route",
                details={"role": role_name},
            )
        return user


def _normalize_email(email: str) -> str:
    try:
        return validate_email(email or "", check_deliverability=False).normalized
    except EmailNotValidError as e:
        raise ValidationError("Please include a valid email", details={"field": "email"}) from e


def _validate_password(password: str) -> None:
    if not password or not (PASSWORD_MIN_LEN <= len(password) <= PASSWORD_MAX_LEN):
        raise ValidationError(
            f"Please enter a password with {PASSWORD_MIN_LEN} or more characters",
            details={"field": "password"},
        )
