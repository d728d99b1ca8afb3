"""Self-service profile endpoints for the authenticated user."""

from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from warden.api.v1.dependencies import get_current_user_id
from warden.core.database import get_db
from warden.core.errors import AuthenticationError, api_error
from warden.schemas.auth import MessageResponse, UserPublic, UserResponse
from warden.schemas.users import ChangePasswordRequest, UpdateMeRequest
from warden.services.users import (
    EmailConflictError,
    IncorrectPasswordError,
    PasswordPolicyError,
    ProfileChanges,
    UserNotFoundError,
    change_password,
    get_user_by_id,
    update_user,
)

router = APIRouter()


@router.get("/me", response_model=UserResponse)
def get_me(
    user_id: Annotated[str, Depends(get_current_user_id)],
    db: Annotated[Session, Depends(get_db)],
) -> UserResponse:
    """Return the caller's profile."""
    user = get_user_by_id(db, user_id)
    if user is None:
        raise AuthenticationError.user_not_found()
    return UserResponse(user=UserPublic.model_validate(user))


@router.put("/me", response_model=UserResponse)
def update_me(
    body: UpdateMeRequest,
    user_id: Annotated[str, Depends(get_current_user_id)],
    db: Annotated[Session, Depends(get_db)],
) -> UserResponse:
    """Update the caller's name and/or email. Role and password are not editable here."""
    try:
        user = update_user(db, user_id, ProfileChanges(name=body.name, email=body.email))
    except UserNotFoundError:
        raise AuthenticationError.user_not_found() from None
    except EmailConflictError as e:
        raise api_error(status.HTTP_409_CONFLICT, "conflict", e.message) from e
    return UserResponse(user=UserPublic.model_validate(user))


@router.put("/me/password", response_model=MessageResponse)
def change_my_password(
    body: ChangePasswordRequest,
    user_id: Annotated[str, Depends(get_current_user_id)],
    db: Annotated[Session, Depends(get_db)],
) -> MessageResponse:
    """
    Change the caller's password.

    The current password must match the stored digest; the new one must pass
    the strong rule and differ from the current one. The session stays valid.
    """
    try:
        change_password(db, user_id, body.current_password, body.new_password)
    except UserNotFoundError:
        raise AuthenticationError.user_not_found() from None
    except IncorrectPasswordError as e:
        raise api_error(status.HTTP_400_BAD_REQUEST, "incorrect_password", e.message) from e
    except PasswordPolicyError as e:
        raise api_error(
            status.HTTP_400_BAD_REQUEST,
            "validation_error",
            "Invalid input",
            issues=[{"path": ["newPassword"], "message": e.message}],
        ) from e
    return MessageResponse(message="Password updated")
