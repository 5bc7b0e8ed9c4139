"""Password hashing, JWT and verification-token utilities."""

import secrets
from datetime import datetime, timedelta, timezone

import bcrypt
from jose import JWTError, jwt

from lms.config import settings

# ── Password hashing ──────────────────────────────────────────────────────────


def hash_password(plain: str) -> str:
    """Return bcrypt hash of *plain* password.

    Args:
        plain: Plain text password

    Returns:
        Bcrypt hash of the password (str)

    Raises:
        ValueError: If password is longer than 72 bytes
    """
    encoded = plain.encode("utf-8")
    if len(encoded) > 72:
        raise ValueError(
            f"Password is {len(encoded)} bytes, but bcrypt has a "
            f"72-byte limit. Please use a shorter password."
        )
    return bcrypt.hashpw(encoded, bcrypt.gensalt()).decode("utf-8")


def verify_password(plain: str, hashed: str) -> bool:
    """Check *plain* against *hashed* password."""
    try:
        return bcrypt.checkpw(plain.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        # malformed hash
        return False


# ── JWT tokens ────────────────────────────────────────────────────────────────


def create_access_token(
    data: dict,
    expires_delta: timedelta | None = None,
) -> str:
    """Create a signed JWT access token."""
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_access_token(token: str) -> dict | None:
    """Decode and validate a JWT. Returns payload dict or None on failure."""
    try:
        return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        return None


# ── Email verification ────────────────────────────────────────────────────────


def new_verification_token() -> tuple[str, datetime]:
    """Return a fresh email-verification token and its expiry."""
    expiry = datetime.now(timezone.utc) + timedelta(
        hours=settings.EMAIL_VERIFICATION_TTL_HOURS
    )
    return secrets.token_urlsafe(32), expiry
