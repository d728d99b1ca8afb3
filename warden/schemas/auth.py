"""Request/response schemas for auth endpoints and the per-request auth context."""

import re
from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from warden.core.password_policy import (
    PASSWORD_MAX_LEN,
    PasswordPolicy,
    check_password,
    check_password_size,
)

Role = Literal["user", "admin"]
ROLES: tuple[str, ...] = ("user", "admin")

NAME_MIN_LEN = 2
NAME_MAX_LEN = 60
EMAIL_MAX_LEN = 255

EMAIL_RE = re.compile(r"^\S+@\S+\.\S+$")


def normalize_email(value: str) -> str:
    """Trim and lower-case an email; raise ValueError when it does not look like one."""
    email = value.strip().lower()
    if len(email) > EMAIL_MAX_LEN or not EMAIL_RE.match(email):
        raise ValueError("Please provide a valid email")
    return email


def normalize_name(value: str) -> str:
    name = value.strip()
    if not (NAME_MIN_LEN <= len(name) <= NAME_MAX_LEN):
        raise ValueError(
            f"Name must be between {NAME_MIN_LEN} and {NAME_MAX_LEN} characters"
        )
    return name


class CamelModel(BaseModel):
    """Base for API payloads: camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class IdentityClaim(BaseModel):
    """Identity recovered from a verified session token. Never persisted."""

    model_config = ConfigDict(frozen=True)

    user_id: str
    expires_at: datetime


class AuthContext(BaseModel):
    """Identity plus the role freshly read from the store for this request."""

    model_config = ConfigDict(frozen=True)

    user_id: str
    role: Role


class RegisterRequest(CamelModel):
    """Self-registration; only the minimum password length is enforced."""

    name: str
    email: str
    password: str

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return normalize_name(v)

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        return normalize_email(v)

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: str) -> str:
        return check_password(v, PasswordPolicy.MINIMAL)


class LoginRequest(CamelModel):
    """Credentials for login."""

    email: str
    password: str = Field(..., min_length=1, max_length=PASSWORD_MAX_LEN)

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        return normalize_email(v)

    @field_validator("password")
    @classmethod
    def validate_password_size(cls, v: str) -> str:
        return check_password_size(v)


class UserPublic(CamelModel):
    """User as exposed by the API; the password digest is never part of it."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    email: str
    role: Role
    created_at: datetime
    updated_at: datetime


class UserResponse(BaseModel):
    """Envelope for endpoints returning a single user."""

    ok: bool = True
    user: UserPublic


class MessageResponse(BaseModel):
    """Envelope for endpoints that only acknowledge."""

    ok: bool = True
    message: str
