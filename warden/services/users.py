"""
User record lifecycle: creation, profile updates, password changes and login.

Every path that stores a password goes through _apply_password, which enforces
the password policy and hashes before anything reaches the session. The ORM
model additionally refuses any password_hash value that is not a bcrypt digest.
"""

import logging
from dataclasses import dataclass

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from warden.core.password_policy import PasswordPolicy, validate_password
from warden.core.security import hash_password, verify_dummy_password, verify_password
from warden.models import User

logger = logging.getLogger(__name__)


class UserServiceError(Exception):
    """Base for expected user lifecycle failures; message is safe to show to the caller."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class EmailConflictError(UserServiceError):
    """Raised when an email is already registered to another user."""

    def __init__(self, message: str = "Email already in use") -> None:
        super().__init__(message)


class UserNotFoundError(UserServiceError):
    """Raised when a user id does not resolve to a stored user."""

    def __init__(self, message: str = "User not found") -> None:
        super().__init__(message)


class InvalidCredentialsError(UserServiceError):
    """Raised on any login failure; does not say whether the email exists."""

    def __init__(self, message: str = "Invalid credentials") -> None:
        super().__init__(message)


class IncorrectPasswordError(UserServiceError):
    """Raised when the current password given for a change does not match."""

    def __init__(self, message: str = "Current password is incorrect") -> None:
        super().__init__(message)


class PasswordPolicyError(UserServiceError):
    """Raised when a new password breaks the policy; violations lists each failed clause."""

    def __init__(self, violations: list[str], field: str = "password") -> None:
        self.violations = violations
        self.field = field
        super().__init__("; ".join(violations))


@dataclass(frozen=True)
class ProfileChanges:
    """Partial update of non-secret fields. None means leave unchanged."""

    name: str | None = None
    email: str | None = None
    role: str | None = None


def _normalize_email(email: str) -> str:
    return email.strip().lower()


def _apply_password(user: User, plain_password: str, policy: PasswordPolicy) -> None:
    """Validate and hash a new password onto the user. The only password write path."""
    violations = validate_password(plain_password, policy)
    if violations:
        raise PasswordPolicyError(violations)
    user.password_hash = hash_password(plain_password)


def _commit(db: Session) -> None:
    """Commit, turning a unique-email violation into EmailConflictError."""
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise EmailConflictError() from e


def _ensure_email_available(db: Session, email: str, exclude_id: str | None = None) -> None:
    query = db.query(User.id).filter(User.email == email)
    if exclude_id is not None:
        query = query.filter(User.id != exclude_id)
    if query.first() is not None:
        raise EmailConflictError()


def get_user_by_email(db: Session, email: str) -> User | None:
    """Case-insensitive lookup by email."""
    return db.query(User).filter(User.email == _normalize_email(email)).first()


def get_user_by_id(db: Session, user_id: str) -> User | None:
    return db.get(User, user_id)


def create_user(
    db: Session,
    *,
    name: str,
    email: str,
    password: str,
    role: str = "user",
    policy: PasswordPolicy = PasswordPolicy.STRONG,
) -> User:
    """Create and persist a user. Raises EmailConflictError or PasswordPolicyError."""
    email = _normalize_email(email)
    _ensure_email_available(db, email)

    user = User(name=name.strip(), email=email, role=role)
    _apply_password(user, password, policy)
    db.add(user)
    _commit(db)
    db.refresh(user)
    logger.info("User created", extra={"user_id": user.id, "role": user.role})
    return user


def update_user(
    db: Session,
    user_id: str,
    changes: ProfileChanges,
    *,
    new_password: str | None = None,
) -> User:
    """
    Apply a partial update; new_password (administrative reset) is hashed like any other write.

    Raises UserNotFoundError, EmailConflictError or PasswordPolicyError.
    """
    user = get_user_by_id(db, user_id)
    if user is None:
        raise UserNotFoundError()

    if new_password is not None:
        _apply_password(user, new_password, PasswordPolicy.STRONG)
    if changes.email is not None:
        email = _normalize_email(changes.email)
        _ensure_email_available(db, email, exclude_id=user.id)
        user.email = email
    if changes.name is not None:
        user.name = changes.name.strip()
    if changes.role is not None:
        user.role = changes.role

    _commit(db)
    db.refresh(user)
    logger.info(
        "User updated",
        extra={"user_id": user.id, "password_reset": new_password is not None},
    )
    return user


def change_password(
    db: Session, user_id: str, current_password: str, new_password: str
) -> User:
    """
    Self-service change: the current password must match and differ from the new one.

    Raises UserNotFoundError, IncorrectPasswordError or PasswordPolicyError.
    """
    if new_password == current_password:
        raise PasswordPolicyError(
            ["New password must be different from current"], field="newPassword"
        )
    user = get_user_by_id(db, user_id)
    if user is None:
        raise UserNotFoundError()
    if not verify_password(current_password, user.password_hash):
        logger.info("Password change rejected", extra={"user_id": user.id})
        raise IncorrectPasswordError()

    _apply_password(user, new_password, PasswordPolicy.STRONG)
    _commit(db)
    db.refresh(user)
    logger.info("Password changed", extra={"user_id": user.id})
    return user


def authenticate(db: Session, email: str, password: str) -> User:
    """
    Return the user owning these credentials or raise InvalidCredentialsError.

    An unknown email still costs one bcrypt check so timing does not reveal
    which emails are registered.
    """
    user = get_user_by_email(db, email)
    if user is None:
        verify_dummy_password(password)
        logger.info("Login failed", extra={"reason": "unknown_email"})
        raise InvalidCredentialsError()
    if not verify_password(password, user.password_hash):
        logger.info("Login failed", extra={"reason": "bad_password", "user_id": user.id})
        raise InvalidCredentialsError()
    return user


def list_users(
    db: Session, *, page: int = 1, limit: int = 10, q: str | None = None
) -> tuple[list[User], int]:
    """Return one page of users (newest first) and the total matching count."""
    query = db.query(User)
    if q:
        query = query.filter(
            or_(
                User.name.icontains(q, autoescape=True),
                User.email.icontains(q, autoescape=True),
            )
        )
    total = query.count()
    users = (
        query.order_by(User.created_at.desc(), User.id)
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    return users, total
