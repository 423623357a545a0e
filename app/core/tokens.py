"""
Signed, time-bounded bearer tokens (JWT).

TokenCodec packs a claim set (sub, role, iat, exp, jti, type) and signs it with
a shared HMAC secret. Verification pins the configured algorithm, so a token
whose header names another algorithm (or "none") is rejected outright.

Tokens are stateless: there is no revocation list. The jti claim identifies a
single token should a denylist be added; until then a token stays valid until
it expires or the secret is rotated.
"""

import logging
import math
import time
import uuid
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from enum import Enum
from typing import TYPE_CHECKING, Any

import jwt

from app.core.exceptions import ExpiredTokenError, InvalidTokenError

if TYPE_CHECKING:
    from app.core.config import Settings

logger = logging.getLogger(__name__)

REQUIRED_CLAIMS = ["sub", "iat", "exp", "jti"]


class TokenType(str, Enum):
    """Purpose of a token; a token issued for one purpose never verifies for another."""

    ACCESS = "access"
    RESET_PASSWORD = "reset_password"
    EMAIL_VERIFICATION = "email_verification"


@dataclass(frozen=True)
class TokenConfig:
    """Signing secret, algorithm and validity windows for a TokenCodec."""

    secret: str
    algorithm: str = "HS256"
    default_window: timedelta = timedelta(days=7)
    short_lived_window: timedelta = timedelta(hours=24)

    def __post_init__(self) -> None:
        if not self.secret:
            raise ValueError("Token secret must be non-empty")
        if self.default_window <= timedelta(0) or self.short_lived_window <= timedelta(0):
            raise ValueError("Token validity windows must be positive")

    @classmethod
    def from_settings(cls, settings: "Settings") -> "TokenConfig":
        return cls(
            secret=settings.JWT_SECRET.get_secret_value(),
            algorithm=settings.JWT_ALGORITHM,
            default_window=timedelta(minutes=settings.JWT_EXPIRE_MINUTES),
            short_lived_window=timedelta(minutes=settings.JWT_SHORT_LIVED_MINUTES),
        )


@dataclass(frozen=True)
class ClaimSet:
    """Decoded contents of a verified token."""

    subject_id: int
    role_name: str | None
    issued_at: datetime
    expires_at: datetime
    token_id: str
    token_type: TokenType
    extra: dict[str, Any]


class TokenCodec:
    """Issue and verify signed tokens with an injected TokenConfig."""

    def __init__(self, config: TokenConfig) -> None:
        self.config = config

    def window_for(self, token_type: TokenType) -> timedelta:
        if token_type is TokenType.ACCESS:
            return self.config.default_window
        return self.config.short_lived_window

    def issue(
        self,
        subject_id: int,
        role_name: str | None,
        validity_window: timedelta | None = None,
        token_type: TokenType = TokenType.ACCESS,
        extra: dict[str, Any] | None = None,
    ) -> str:
        """
        Sign a claim set for subject_id valid for validity_window (default depends on token_type).

        Expiry is rounded up to the next whole second, so the token stays valid
        for at least validity_window and at most one second longer.
        """
        window = validity_window if validity_window is not None else self.window_for(token_type)
        if window <= timedelta(0):
            raise ValueError("validity_window must be greater than zero")
        now = time.time()
        payload: dict[str, Any] = dict(extra or {})
        payload.update(
            {
                "sub": str(subject_id),
                "role": role_name,
                "iat": math.floor(now),
                "exp": math.ceil(now + window.total_seconds()),
                "jti": uuid.uuid4().hex,
                "type": token_type.value,
            }
        )
        return jwt.encode(payload, self.config.secret, algorithm=self.config.algorithm)

    def verify(self, token: str, expected_type: TokenType = TokenType.ACCESS) -> ClaimSet:
        """
        Check signature, expiry and purpose; return the claim set.

        Raises ExpiredTokenError when the token verifies but is past exp, and
        InvalidTokenError for anything else (bad signature, other algorithm,
        malformed or missing claims, wrong token type).
        """
        if not token or not isinstance(token, str):
            raise InvalidTokenError()
        try:
            payload = jwt.decode(
                token,
                self.config.secret,
                algorithms=[self.config.algorithm],
                options={"require": REQUIRED_CLAIMS},
            )
        except jwt.ExpiredSignatureError as e:
            raise ExpiredTokenError() from e
        except jwt.PyJWTError as e:
            logger.debug("Token rejected: %s", type(e).__name__)
            raise InvalidTokenError() from e

        if payload.get("type") != expected_type.value:
            raise InvalidTokenError()
        try:
            subject_id = int(payload["sub"])
            issued_at = datetime.fromtimestamp(int(payload["iat"]), UTC)
            expires_at = datetime.fromtimestamp(int(payload["exp"]), UTC)
        except (TypeError, ValueError) as e:
            raise InvalidTokenError() from e
        if expires_at <= issued_at:
            raise InvalidTokenError()
        role = payload.get("role")
        if role is not None and not isinstance(role, str):
            raise InvalidTokenError()

        reserved = {"sub", "role", "iat", "exp", "jti", "type"}
        return ClaimSet(
            subject_id=subject_id,
            role_name=role,
            issued_at=issued_at,
            expires_at=expires_at,
            token_id=str(payload["jti"]),
            token_type=expected_type,
            extra={k: v for k, v in payload.items() if k not in reserved},
        )
