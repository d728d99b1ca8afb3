"""Request/response schemas for administrative user management."""

from pydantic import BaseModel, field_validator, model_validator

from warden.core.password_policy import PasswordPolicy, check_password
from warden.schemas.auth import CamelModel, Role, UserPublic, normalize_email, normalize_name


class AdminCreateUserRequest(CamelModel):
    """Administrative creation; enforces the strong password rule."""

    name: str
    email: str
    password: str
    role: Role = "user"

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
        return check_password(v, PasswordPolicy.STRONG)


class AdminUpdateUserRequest(CamelModel):
    """Partial administrative update; a password here is a reset and is hashed before storage."""

    name: str | None = None
    email: str | None = None
    role: Role | None = None
    password: str | None = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str | None) -> str | None:
        return None if v is None else normalize_name(v)

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str | None) -> str | None:
        return None if v is None else normalize_email(v)

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: str | None) -> str | None:
        return None if v is None else check_password(v, PasswordPolicy.STRONG)

    @model_validator(mode="after")
    def require_changes(self) -> "AdminUpdateUserRequest":
        if not self.model_dump(exclude_none=True):
            raise ValueError("Nothing to update")
        return self


class ListMeta(BaseModel):
    """Pagination metadata for list responses."""

    page: int
    limit: int
    total: int
    pages: int


class UsersListResponse(BaseModel):
    """Response for GET /admin/users."""

    ok: bool = True
    meta: ListMeta
    users: list[UserPublic]
