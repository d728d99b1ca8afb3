"""Pydantic request/response schemas."""

from warden.schemas.admin import (
    AdminCreateUserRequest,
    AdminUpdateUserRequest,
    ListMeta,
    UsersListResponse,
)
from warden.schemas.auth import (
    AuthContext,
    IdentityClaim,
    LoginRequest,
    MessageResponse,
    RegisterRequest,
    UserPublic,
    UserResponse,
)
from warden.schemas.health import HealthResponse
from warden.schemas.users import ChangePasswordRequest, UpdateMeRequest

__all__ = [
    "AdminCreateUserRequest",
    "AdminUpdateUserRequest",
    "AuthContext",
    "ChangePasswordRequest",
    "HealthResponse",
    "IdentityClaim",
    "ListMeta",
    "LoginRequest",
    "MessageResponse",
    "RegisterRequest",
    "UpdateMeRequest",
    "UserPublic",
    "UserResponse",
    "UsersListResponse",
]
