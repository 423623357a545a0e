"""Password hashing and verification for user credentials."""

import bcrypt

from app.core.config import settings

# Min/max lengths for username, password and name validation.
USERNAME_MIN_LEN = 1
USERNAME_MAX_LEN = 50
PASSWORD_MIN_LEN = 6
PASSWORD_MAX_LEN = 128
NAME_MAX_LEN = 50
EMAIL_MAX_LEN = 100


def hash_password(plain_password: str, rounds: int | None = None) -> str:
    """Hash a plain-text password for storage. Do not store plain passwords."""
    # bcrypt has a 72-byte limit; truncate to avoid errors (validation already limits length).
    pw_bytes = plain_password.encode("utf-8")[:72]
    salt = bcrypt.gensalt(rounds=rounds or settings.BCRYPT_ROUNDS)
    return bcrypt.hashpw(pw_bytes, salt).decode("utf-8")


def verify_password(plain_password: str, hashed: str) -> bool:
    """Verify a plain password against a stored hash."""
    pw_bytes = plain_password.encode("utf-8")[:72]
    try:
        return bcrypt.checkpw(pw_bytes, hashed.encode("utf-8"))
    except (ValueError, TypeError):
        return False


# Checked against when the login email is unknown so both failure paths cost one bcrypt round.
DUMMY_PASSWORD_HASH = hash_password("crm-timing-equalizer")
