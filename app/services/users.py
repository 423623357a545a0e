"""Admin user management and self-service profile updates."""

import logging

from app.core.exceptions import BadRequestError, ConflictError, NotFoundError
from app.core.security import hash_password, verify_password
from app.models import User
from app.repositories.roles import RoleRegistry
from app.repositories.users import DUPLICATE_USER_MESSAGE, CredentialStore
from app.schemas.users import ProfileUpdate, UserCreate, UserUpdate

logger = logging.getLogger(__name__)


class UserService:
    def __init__(self, users: CredentialStore, roles: RoleRegistry) -> None:
        self.users = users
        self.roles = roles

    def list_users(self) -> list[User]:
        return self.users.list()

    def get_user(self, user_id: int) -> User:
        user = self.users.find_by_id(user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user

    def create_user(self, data: UserCreate) -> User:
        """Admin-initiated creation with an explicit role."""
        if self.users.find_by_identifier(data.username, data.email) is not None:
            raise ConflictError(DUPLICATE_USER_MESSAGE)
        self._require_role_id(data.role_id)
        user = self.users.create(
            username=data.username,
            email=data.email,
            password_hash=hash_password(data.password),
            first_name=data.first_name,
            last_name=data.last_name,
            role_id=data.role_id,
        )
        logger.info("User created by admin", extra={"user_id": user.id})
        return user

    def update_user(self, user_id: int, data: UserUpdate) -> User:
        """Partial update; a new password replaces the stored hash."""
        user = self.get_user(user_id)
        changes: dict = {}
        if data.email and data.email != user.email:
            self._ensure_email_free(data.email)
            changes["email"] = data.email
        if data.username and data.username != user.username:
            if self.users.find_by_username(data.username) is not None:
                raise ConflictError("Username already in use by another user")
            changes["username"] = data.username
        if data.role_id is not None and data.role_id != user.role_id:
            self._require_role_id(data.role_id)
            changes["role_id"] = data.role_id
        if data.password:
            changes["password_hash"] = hash_password(data.password)
        if data.first_name:
            changes["first_name"] = data.first_name
        if data.last_name:
            changes["last_name"] = data.last_name
        if not changes:
            return user
        return self.users.update(user, **changes)

    def delete_user(self, user_id: int, acting_user: User) -> None:
        """Delete a user who owns no customers. Admins cannot delete themselves."""
        user = self.get_user(user_id)
        if user.id == acting_user.id:
            raise BadRequestError("Cannot delete your own account")
        if self.users.count_customers(user) > 0:
            raise BadRequestError(
                "Cannot delete user with associated customers. "
                "Please reassign or delete the customers first."
            )
        self.users.delete(user)
        logger.info("User deleted", extra={"user_id": user_id})

    def update_profile(self, user: User, data: ProfileUpdate) -> User:
        changes: dict = {}
        if data.email and data.email != user.email:
            self._ensure_email_free(data.email)
            changes["email"] = data.email
        if data.current_password and data.new_password:
            if not verify_password(data.current_password, user.password_hash):
                raise BadRequestError("Current password is incorrect")
            changes["password_hash"] = hash_password(data.new_password)
        if data.first_name:
            changes["first_name"] = data.first_name
        if data.last_name:
            changes["last_name"] = data.last_name
        if not changes:
            return user
        return self.users.update(user, **changes)

    def _ensure_email_free(self, email: str) -> None:
        if self.users.find_by_email(email) is not None:
            raise ConflictError("Email already in use by another user")

    def _require_role_id(self, role_id: int) -> None:
        if self.roles.find_by_id(role_id) is None:
            raise BadRequestError("Invalid role ID", details={"role_id": role_id})
