"""Password hashing and JWT creation/verification for authentication."""

import secrets
import string
import uuid
from datetime import UTC, datetime, timedelta
from functools import lru_cache
from typing import Any

import bcrypt
import jwt

from panelauth.core.config import Settings
from panelauth.core.errors import ExpiredTokenError, InvalidTokenError

# Bcrypt only looks at the first 72 bytes; cut the same way on hash and verify.
BCRYPT_MAX_BYTES = 72

# Min/max lengths for input validation.
NAME_MIN_LEN = 2
NAME_MAX_LEN = 60
PASSWORD_MIN_LEN = 8
PASSWORD_MAX_LEN = 128

PASSWORD_SYMBOLS = "!@#$%^&*"


def _pw_bytes(plain_password: str) -> bytes:
    return plain_password.encode("utf-8")[:BCRYPT_MAX_BYTES]


def hash_password(plain_password: str, rounds: int) -> str:
    """Hash a plain-text password for storage. Each call uses a fresh salt; rounds comes from settings."""
    return bcrypt.hashpw(_pw_bytes(plain_password), bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def verify_password(plain_password: str, hashed: str) -> bool:
    """Verify a plain password against a stored hash (constant-time compare inside bcrypt)."""
    try:
        return bcrypt.checkpw(_pw_bytes(plain_password), hashed.encode("utf-8"))
    except (ValueError, TypeError):
        return False


@lru_cache(maxsize=4)
def _dummy_hash(rounds: int) -> str:
    return hash_password(secrets.token_urlsafe(16), rounds=rounds)


def burn_password_check(plain_password: str, rounds: int) -> None:
    """
    Spend the same bcrypt work as a real verification against an unknown account,
    so a login for a missing email takes as long as one with a wrong password.
    """
    verify_password(plain_password, _dummy_hash(rounds))


def generate_secure_password(length: int = 12) -> str:
    """Random password with at least one upper, lower, digit and symbol character."""
    if length < 4:
        raise ValueError("length must be at least 4")
    pools = [string.ascii_uppercase, string.ascii_lowercase, string.digits, PASSWORD_SYMBOLS]
    alphabet = "".join(pools)
    chars = [secrets.choice(pool) for pool in pools]
    chars += [secrets.choice(alphabet) for _ in range(length - len(chars))]
    secrets.SystemRandom().shuffle(chars)
    return "".join(chars)


def create_access_token(
    settings: Settings,
    sub: str,
    email: str,
    expires_delta: timedelta | None = None,
) -> str:
    """Create a signed JWT with sub (user id), email, iat, exp and a unique jti."""
    now = datetime.now(UTC)
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.JWT_EXPIRE_MINUTES)
    payload: dict[str, Any] = {
        "sub": str(sub),
        "email": email,
        "iat": now,
        "exp": now + expires_delta,
        "jti": uuid.uuid4().hex,
    }
    return jwt.encode(
        payload,
        settings.JWT_SECRET.get_secret_value(),
        algorithm=settings.JWT_ALGORITHM,
    )


def decode_access_token(settings: Settings, token: str) -> dict[str, Any]:
    """
    Decode and validate a JWT; return its claims.

    The signature is checked before expiry, so a tampered token is always
    InvalidTokenError even when it is also past its exp.
    Raises ExpiredTokenError or InvalidTokenError.
    """
    try:
        payload = jwt.decode(
            token,
            settings.JWT_SECRET.get_secret_value(),
            algorithms=[settings.JWT_ALGORITHM],
            options={"require": ["sub", "exp", "iat"]},
        )
    except jwt.ExpiredSignatureError as e:
        raise ExpiredTokenError("token expired") from e
    except jwt.PyJWTError as e:
        raise InvalidTokenError("token invalid") from e
    if not isinstance(payload.get("sub"), str) or not payload["sub"]:
        raise InvalidTokenError("token has no subject")
    return payload
