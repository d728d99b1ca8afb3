"""Request schemas for self-service profile endpoints."""

from pydantic import Field, ValidationInfo, field_validator, model_validator

from warden.core.password_policy import (
    PASSWORD_MAX_LEN,
    PasswordPolicy,
    check_password,
    check_password_size,
)
from warden.schemas.auth import CamelModel, normalize_email, normalize_name


class UpdateMeRequest(CamelModel):
    """Partial profile update; at least one field must be given."""

    name: str | None = None
    email: str | None = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str | None) -> str | None:
        return None if v is None else normalize_name(v)

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str | None) -> str | None:
        return None if v is None else normalize_email(v)

    @model_validator(mode="after")
    def require_changes(self) -> "UpdateMeRequest":
        if not self.model_dump(exclude_none=True):
            raise ValueError("Nothing to update")
        return self


class ChangePasswordRequest(CamelModel):
    """Self-service password change: prove the current password, pick a strong new one."""

    current_password: str = Field(
        ..., min_length=1, max_length=PASSWORD_MAX_LEN, description="Current password"
    )
    new_password: str = Field(..., description="New password (strong rule)")

    @field_validator("current_password")
    @classmethod
    def validate_current_password(cls, v: str) -> str:
        return check_password_size(v)

    @field_validator("new_password")
    @classmethod
    def validate_new_password(cls, v: str, info: ValidationInfo) -> str:
        check_password(v, PasswordPolicy.STRONG)
        if v == info.data.get("current_password"):
            raise ValueError("New password must be different from current")
        return v
