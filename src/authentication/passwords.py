"""Password hashing, verification, and strength policy."""

import logging
import re
from typing import NamedTuple

import bcrypt
from django.conf import settings

logger = logging.getLogger(__name__)

MIN_LENGTH = 8
MAX_LENGTH = 128
# bcrypt only consumes the first 72 bytes of its input.
BCRYPT_MAX_BYTES = 72

SYMBOLS = "!@#$%^&*()_+-=[]{};':\"\\|,.<>/?"
COMMON_PATTERNS = ("123456", "password", "qwerty", "admin", "letmein")

_UPPER = re.compile(r"[A-Z]")
_LOWER = re.compile(r"[a-z]")
_DIGIT = re.compile(r"\d")
_SYMBOL = re.compile("[" + re.escape(SYMBOLS) + "]")


class HashingError(Exception):
    """Raised when the hashing backend fails unexpectedly."""


class VerificationError(Exception):
    """Raised when a stored hash cannot be checked (not on a mismatch)."""


class PasswordStrength(NamedTuple):
    valid: bool
    violations: list[str]


def _encode(password: str) -> bytes:
    return password.encode("utf-8")[:BCRYPT_MAX_BYTES]


def hash_password(password: str) -> str:
    """Hash a raw password with bcrypt using ``settings.BCRYPT_ROUNDS``."""
    try:
        salt = bcrypt.gensalt(rounds=settings.BCRYPT_ROUNDS)
        return bcrypt.hashpw(_encode(password), salt).decode("utf-8")
    except (ValueError, TypeError) as exc:
        logger.error("Password hashing failed", exc_info=exc)
        raise HashingError("Failed to hash password") from exc


def verify_password(password: str, password_hash: str) -> bool:
    """Return True when ``password`` matches ``password_hash``.

    A mismatch is ``False``; only an unusable stored hash raises.
    """
    if not password_hash:
        return False
    try:
        return bcrypt.checkpw(_encode(password), password_hash.encode("utf-8"))
    except (ValueError, TypeError) as exc:
        logger.error("Password verification failed", exc_info=exc)
        raise VerificationError("Failed to compare password") from exc


def check_strength(password: str) -> PasswordStrength:
    """Evaluate every strength rule and report all violations at once."""
    violations: list[str] = []

    if len(password) < MIN_LENGTH:
        violations.append(f"Password must be at least {MIN_LENGTH} characters long")
    if len(password) > MAX_LENGTH:
        violations.append(f"Password must be at most {MAX_LENGTH} characters long")
    if not _UPPER.search(password):
        violations.append("Password must contain at least one uppercase letter")
    if not _LOWER.search(password):
        violations.append("Password must contain at least one lowercase letter")
    if not _DIGIT.search(password):
        violations.append("Password must contain at least one number")
    if not _SYMBOL.search(password):
        violations.append("Password must contain at least one special character")

    lowered = password.lower()
    if any(pattern in lowered for pattern in COMMON_PATTERNS):
        violations.append("Password contains common patterns and is not secure")

    return PasswordStrength(valid=not violations, violations=violations)


__all__ = [
    "HashingError",
    "VerificationError",
    "PasswordStrength",
    "hash_password",
    "verify_password",
    "check_strength",
]
