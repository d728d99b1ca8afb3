"""ORM model for application users (auth and RBAC)."""

import uuid
from datetime import UTC, datetime

from sqlalchemy import CheckConstraint, Column, DateTime, String
from sqlalchemy.orm import validates

from warden.core.security import is_password_hash
from warden.models.base import Base


def _new_id() -> str:
    return uuid.uuid4().hex


def _utcnow() -> datetime:
    return datetime.now(UTC)


class User(Base):
    """
    User account for cookie session authentication and role-based access control.

    email: stored trimmed and lower-cased so the unique index is case-insensitive.
    password_hash: bcrypt digest only; plaintext assignment raises ValueError.
    role: 'admin' or 'user'
    """

    __tablename__ = "users"
    __table_args__ = (CheckConstraint("role IN ('user', 'admin')", name="role"),)

    id = Column(String(32), primary_key=True, default=_new_id)
    name = Column(String(60), nullable=False)
    email = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    role = Column(String(32), nullable=False, default="user")
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at = Column(
        DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow
    )

    @validates("password_hash")
    def _validate_password_hash(self, _key: str, value: str) -> str:
        if not isinstance(value, str) or not is_password_hash(value):
            raise ValueError("password_hash only accepts a bcrypt digest")
        return value

    @validates("email")
    def _validate_email(self, _key: str, value: str) -> str:
        return value.strip().lower()

    @validates("role")
    def _validate_role(self, _key: str, value: str) -> str:
        if value not in ("user", "admin"):
            raise ValueError(f"Unknown role: {value!r}")
        return value

    def __repr__(self) -> str:
        return f"<User id={self.id} email={self.email} role={self.role}>"
