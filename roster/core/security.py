"""Password hashing and credential format rules."""

import re

import bcrypt

# Default bcrypt cost; overridden by settings.BCRYPT_ROUNDS.
BCRYPT_ROUNDS = 12

USERNAME_MIN_LEN = 3
USERNAME_MAX_LEN = 30
PASSWORD_MIN_LEN = 8
PASSWORD_MAX_LEN = 128

_USERNAME_RE = re.compile(r"[A-Za-z0-9]+")


def is_valid_username(username: str) -> bool:
    """3-30 ASCII letters or digits."""
    return (
        USERNAME_MIN_LEN <= len(username) <= USERNAME_MAX_LEN
        and _USERNAME_RE.fullmatch(username) is not None
    )


def is_valid_password(password: str) -> bool:
    return PASSWORD_MIN_LEN <= len(password) <= PASSWORD_MAX_LEN


def hash_password(plain_password: str, rounds: int = BCRYPT_ROUNDS) -> str:
    """Hash a plain-text password for storage. Do not store plain passwords."""
    # bcrypt has a 72-byte limit; truncate to avoid errors (validation already limits length).
    pw_bytes = plain_password.encode("utf-8")[:72]
    return bcrypt.hashpw(pw_bytes, bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def verify_password(plain_password: str, hashed: str) -> bool:
    """Verify a plain password against a stored hash."""
    pw_bytes = plain_password.encode("utf-8")[:72]
    try:
        return bcrypt.checkpw(pw_bytes, hashed.encode("utf-8"))
    except (ValueError, TypeError):
        return False
