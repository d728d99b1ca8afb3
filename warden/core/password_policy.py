"""
Password strength rules applied before a plaintext reaches the hasher.

Two rules exist on purpose: self-registration only enforces the minimum
length, while administrative creation, administrative resets and
self-service password changes enforce the full strong rule.
"""

import enum
import re

PASSWORD_MIN_LEN = 8
PASSWORD_MAX_LEN = 128
# bcrypt reads at most 72 bytes; longer secrets would collide on their prefix.
PASSWORD_MAX_BYTES = 72

_LOWER_RE = re.compile(r"[a-z]")
_UPPER_RE = re.compile(r"[A-Z]")
_DIGIT_RE = re.compile(r"[0-9]")
_SYMBOL_RE = re.compile(r"[^A-Za-z0-9]")


def fits_hasher(plain_password: str) -> bool:
    return len(plain_password.encode("utf-8")) <= PASSWORD_MAX_BYTES


class PasswordPolicy(enum.Enum):
    """Which rule set a password-setting entry point applies."""

    MINIMAL = "minimal"
    STRONG = "strong"


def validate_password(plain_password: str, policy: PasswordPolicy) -> list[str]:
    """
    Return one human-readable reason per failed clause; empty list means ok.

    Reasons never include the password itself.
    """
    violations: list[str] = []
    if len(plain_password) < PASSWORD_MIN_LEN:
        violations.append(f"Must be at least {PASSWORD_MIN_LEN} characters")
    if len(plain_password) > PASSWORD_MAX_LEN:
        violations.append(f"Must be at most {PASSWORD_MAX_LEN} characters")
    elif not fits_hasher(plain_password):
        violations.append(f"Must be at most {PASSWORD_MAX_BYTES} bytes")
    if policy is PasswordPolicy.MINIMAL:
        return violations

    if not _LOWER_RE.search(plain_password):
        violations.append("Must contain a lowercase letter")
    if not _UPPER_RE.search(plain_password):
        violations.append("Must contain an uppercase letter")
    if not _DIGIT_RE.search(plain_password):
        violations.append("Must contain a number")
    if not _SYMBOL_RE.search(plain_password):
        violations.append("Must contain a special character")
    return violations


def check_password(plain_password: str, policy: PasswordPolicy) -> str:
    """Pydantic-friendly wrapper: return the password or raise ValueError listing violations."""
    violations = validate_password(plain_password, policy)
    if violations:
        raise ValueError("; ".join(violations))
    return plain_password


def check_password_size(plain_password: str) -> str:
    """Reject a submitted secret the hasher could only compare by its prefix."""
    if not fits_hasher(plain_password):
        raise ValueError(f"Must be at most {PASSWORD_MAX_BYTES} bytes")
    return plain_password
