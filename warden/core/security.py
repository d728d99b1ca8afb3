"""Password hashing and session token creation/verification."""

from datetime import UTC, datetime
from typing import Any

import bcrypt
import jwt

from warden.core.config import settings
from warden.core.password_policy import PASSWORD_MAX_BYTES, fits_hasher
from warden.schemas.auth import IdentityClaim

# Bcrypt cost (rounds); never below 12.
BCRYPT_ROUNDS = 12


class TokenError(Exception):
    """Base class for session token verification failures."""

    reason = "invalid"

    def __init__(self, message: str = "Invalid token") -> None:
        self.message = message
        super().__init__(message)


class TokenMalformedError(TokenError):
    """Token is not a structurally valid signed token or lacks required claims."""

    reason = "malformed"


class TokenSignatureError(TokenError):
    """Token signature does not match its contents (tampered or foreign key)."""

    reason = "signature"


class TokenExpiredError(TokenError):
    """Token was valid but its expiry instant has passed."""

    reason = "expired"

    def __init__(self, expired_at: datetime) -> None:
        self.expired_at = expired_at
        super().__init__("Token expired")


def hash_password(plain_password: str) -> str:
    """
    Hash a plain-text password for storage. Do not store plain passwords.

    Secrets over PASSWORD_MAX_BYTES raise ValueError instead of being truncated.
    """
    if not fits_hasher(plain_password):
        raise ValueError(f"Password exceeds {PASSWORD_MAX_BYTES} bytes")
    return bcrypt.hashpw(
        plain_password.encode("utf-8"), bcrypt.gensalt(rounds=BCRYPT_ROUNDS)
    ).decode("utf-8")


def verify_password(plain_password: str, hashed: str) -> bool:
    """
    Verify a plain password against a stored hash.

    bcrypt compares digests in constant time. A digest that is not a bcrypt
    hash is a broken precondition and raises ValueError. A secret over
    PASSWORD_MAX_BYTES can never have been stored, so it never matches.
    """
    if not fits_hasher(plain_password):
        return False
    try:
        return bcrypt.checkpw(plain_password.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError as e:
        raise ValueError("Stored password digest is malformed") from e


def is_password_hash(value: str) -> bool:
    """True when value has the shape of a bcrypt digest ($2a$/$2b$/$2y$, cost, 53 chars)."""
    return (
        len(value) == 60
        and value[:4] in ("$2a$", "$2b$", "$2y$")
        and value[4:6].isdigit()
        and value[6] == "$"
    )


# Checked when a login names an unknown email so the response time matches a
# real password check and does not reveal which emails are registered.
_DUMMY_HASH = hash_password("warden-timing-equalisation")


def verify_dummy_password(plain_password: str) -> bool:
    """Burn one bcrypt verification; always False."""
    verify_password(plain_password, _DUMMY_HASH)
    return False


def create_access_token(user_id: str, *, now: datetime | None = None) -> str:
    """
    Create a signed session token carrying only the subject and its lifetime.

    The role is deliberately absent: authorization re-reads it from the store.
    """
    issued_at = now or datetime.now(UTC)
    payload: dict[str, Any] = {
        "sub": str(user_id),
        "iat": issued_at,
        "exp": issued_at + settings.token_ttl,
    }
    return jwt.encode(
        payload,
        settings.JWT_SECRET.get_secret_value(),
        algorithm=settings.JWT_ALGORITHM,
    )


def decode_access_token(token: str, *, now: datetime | None = None) -> IdentityClaim:
    """
    Verify a session token and return the identity it carries.

    Raises TokenSignatureError, TokenMalformedError or TokenExpiredError.
    The signature is checked before expiry, so a tampered token is never
    reported as expired. Expiry is strict (no leeway) against `now`.
    """
    try:
        payload = jwt.decode(
            token,
            settings.JWT_SECRET.get_secret_value(),
            algorithms=[settings.JWT_ALGORITHM],
            options={
                "require": ["sub", "exp", "iat"],
                "verify_exp": False,
                "verify_iat": False,
                "verify_nbf": False,
            },
        )
    except jwt.InvalidSignatureError as e:
        raise TokenSignatureError("Token signature is invalid") from e
    except jwt.PyJWTError as e:
        raise TokenMalformedError("Token is malformed") from e

    sub = payload.get("sub")
    exp = payload.get("exp")
    if not isinstance(sub, str) or not sub:
        raise TokenMalformedError("Token subject is missing")
    if isinstance(exp, bool) or not isinstance(exp, (int, float)):
        raise TokenMalformedError("Token expiry is not a timestamp")

    expires_at = datetime.fromtimestamp(exp, UTC)
    current = now or datetime.now(UTC)
    if current >= expires_at:
        raise TokenExpiredError(expires_at)
    return IdentityClaim(user_id=sub, expires_at=expires_at)
