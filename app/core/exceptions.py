"""
Application error taxonomy.

Services raise these; the HTTP layer turns them into JSON error responses
using ``status_code`` and ``to_dict()``. Client errors are recoverable by the
caller; ConfigurationError marks a setup defect and is never shown verbatim.
"""

from typing import Any


class CRMError(Exception):
    """Base class for all application errors."""

    status_code: int = 500
    default_code: str = "ERROR"

    def __init__(
        self,
        message: str,
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to a dictionary for API responses."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


class ConflictError(CRMError):
    """Duplicate identity or unique field already in use."""

    status_code = 409
    default_code = "CONFLICT"


class InvalidCredentialsError(CRMError):
    """Login failed. Same message whether the email or the password was wrong."""

    status_code = 401
    default_code = "INVALID_CREDENTIALS"

    def __init__(self, message: str = "Invalid credentials") -> None:
        super().__init__(message)


class AuthenticationError(CRMError):
    """Bearer token missing, invalid or expired."""

    status_code = 401
    default_code = "UNAUTHENTICATED"


class MissingTokenError(AuthenticationError):
    default_code = "MISSING_TOKEN"

    def __init__(self, message: str = "No token, authorization denied") -> None:
        super().__init__(message)


class InvalidTokenError(AuthenticationError):
    """Malformed, badly signed, wrong-purpose, or subject no longer exists."""

    default_code = "INVALID_TOKEN"

    def __init__(self, message: str = "Token is not valid") -> None:
        super().__init__(message)


class ExpiredTokenError(AuthenticationError):
    """Signature checks out but the validity window has passed."""

    default_code = "TOKEN_EXPIRED"

    def __init__(self, message: str = "Token has expired") -> None:
        super().__init__(message)


class ForbiddenError(CRMError):
    status_code = 403
    default_code = "FORBIDDEN"


class NotFoundError(CRMError):
    status_code = 404
    default_code = "NOT_FOUND"


class ValidationError(CRMError):
    """Input failed validation (missing field, bad email, short password)."""

    status_code = 422
    default_code = "VALIDATION_ERROR"


class BadRequestError(CRMError):
    """Request is well-formed but refused by a business rule."""

    status_code = 400
    default_code = "BAD_REQUEST"


class ConfigurationError(CRMError):
    """System is not set up correctly (e.g. seed role missing). Not retryable."""

    status_code = 500
    default_code = "CONFIGURATION_ERROR"
