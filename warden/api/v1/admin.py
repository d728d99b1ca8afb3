"""Administrative user management. Every route here requires the 'admin' role."""

import logging
import math
import re
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from warden.api.v1.dependencies import require_admin
from warden.core.database import get_db
from warden.core.errors import api_error
from warden.schemas.admin import (
    AdminCreateUserRequest,
    AdminUpdateUserRequest,
    ListMeta,
    UsersListResponse,
)
from warden.schemas.auth import AuthContext, UserPublic, UserResponse
from warden.services.users import (
    EmailConflictError,
    PasswordPolicyError,
    ProfileChanges,
    UserNotFoundError,
    create_user,
    list_users,
    update_user,
)

logger = logging.getLogger(__name__)

router = APIRouter()

USER_ID_RE = re.compile(r"^[0-9a-f]{32}$")


def _password_issue(e: PasswordPolicyError) -> HTTPException:
    return api_error(
        status.HTTP_400_BAD_REQUEST,
        "validation_error",
        "Invalid input",
        issues=[{"path": ["password"], "message": e.message}],
    )


@router.get("/users", response_model=UsersListResponse)
def get_users(
    db: Annotated[Session, Depends(get_db)],
    page: Annotated[int, Query(ge=1)] = 1,
    limit: Annotated[int, Query(ge=1, le=100)] = 10,
    q: Annotated[str | None, Query(max_length=100)] = None,
) -> UsersListResponse:
    """List users newest first; q filters by name or email substring (case-insensitive)."""
    users, total = list_users(db, page=page, limit=limit, q=(q or "").strip() or None)
    return UsersListResponse(
        meta=ListMeta(
            page=page,
            limit=limit,
            total=total,
            pages=max(1, math.ceil(total / limit)),
        ),
        users=[UserPublic.model_validate(u) for u in users],
    )


@router.post("/users", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def post_user(
    body: AdminCreateUserRequest,
    db: Annotated[Session, Depends(get_db)],
    admin: Annotated[AuthContext, Depends(require_admin)],
) -> UserResponse:
    """Create a user with any role. Does not touch the caller's session."""
    try:
        user = create_user(
            db,
            name=body.name,
            email=body.email,
            password=body.password,
            role=body.role,
        )
    except EmailConflictError as e:
        raise api_error(status.HTTP_409_CONFLICT, "conflict", e.message) from e
    except PasswordPolicyError as e:
        raise _password_issue(e) from e
    logger.info(
        "Admin created user",
        extra={"admin_id": admin.user_id, "user_id": user.id, "role": user.role},
    )
    return UserResponse(user=UserPublic.model_validate(user))


@router.put("/users/{user_id}", response_model=UserResponse)
def put_user(
    user_id: str,
    body: AdminUpdateUserRequest,
    db: Annotated[Session, Depends(get_db)],
    admin: Annotated[AuthContext, Depends(require_admin)],
) -> UserResponse:
    """
    Update name, email or role; a password in the body resets it.

    A role change applies to the user's next request without reissuing tokens.
    """
    if not USER_ID_RE.match(user_id):
        raise api_error(status.HTTP_400_BAD_REQUEST, "validation_error", "Invalid user id")
    try:
        user = update_user(
            db,
            user_id,
            ProfileChanges(name=body.name, email=body.email, role=body.role),
            new_password=body.password,
        )
    except UserNotFoundError as e:
        raise api_error(status.HTTP_404_NOT_FOUND, "not_found", e.message) from e
    except EmailConflictError as e:
        raise api_error(status.HTTP_409_CONFLICT, "conflict", e.message) from e
    except PasswordPolicyError as e:
        raise _password_issue(e) from e
    logger.info(
        "Admin updated user",
        extra={"admin_id": admin.user_id, "user_id": user.id, "role": user.role},
    )
    return UserResponse(user=UserPublic.model_validate(user))
