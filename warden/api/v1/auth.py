"""Registration, login, logout and current-user endpoints (cookie sessions)."""

from typing import Annotated

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from warden.api.v1.dependencies import get_current_user_id
from warden.core.cookies import clear_auth_cookie, set_auth_cookie
from warden.core.database import get_db
from warden.core.errors import AuthenticationError, api_error
from warden.core.password_policy import PasswordPolicy
from warden.core.security import create_access_token
from warden.schemas.auth import (
    LoginRequest,
    MessageResponse,
    RegisterRequest,
    UserPublic,
    UserResponse,
)
from warden.services.users import (
    EmailConflictError,
    InvalidCredentialsError,
    PasswordPolicyError,
    authenticate,
    create_user,
    get_user_by_id,
)

router = APIRouter()


def _start_session(response: Response, user_id: str) -> None:
    set_auth_cookie(response, create_access_token(user_id))
    response.headers["Cache-Control"] = "no-store"


@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def register(
    body: RegisterRequest,
    response: Response,
    db: Annotated[Session, Depends(get_db)],
) -> UserResponse:
    """Create an account (role 'user') and log it in right away."""
    try:
        user = create_user(
            db,
            name=body.name,
            email=body.email,
            password=body.password,
            policy=PasswordPolicy.MINIMAL,
        )
    except EmailConflictError as e:
        raise api_error(status.HTTP_409_CONFLICT, "conflict", e.message) from e
    except PasswordPolicyError as e:
        raise api_error(
            status.HTTP_400_BAD_REQUEST,
            "validation_error",
            "Invalid input",
            issues=[{"path": [e.field], "message": e.message}],
        ) from e

    _start_session(response, user.id)
    return UserResponse(user=UserPublic.model_validate(user))


@router.post("/login", response_model=UserResponse)
def login(
    body: LoginRequest,
    response: Response,
    db: Annotated[Session, Depends(get_db)],
) -> UserResponse:
    """
    Authenticate with email and password; sets the session cookie.

    Unknown email and wrong password produce the same 401 response.
    """
    try:
        user = authenticate(db, body.email, body.password)
    except InvalidCredentialsError as e:
        raise api_error(
            status.HTTP_401_UNAUTHORIZED, "invalid_credentials", e.message
        ) from e

    _start_session(response, user.id)
    return UserResponse(user=UserPublic.model_validate(user))


@router.post("/logout", response_model=MessageResponse)
def logout(response: Response) -> MessageResponse:
    """Clear the session cookie. Needs no prior authentication."""
    clear_auth_cookie(response)
    return MessageResponse(message="Logged out")


@router.get("/me", response_model=UserResponse)
def me(
    user_id: Annotated[str, Depends(get_current_user_id)],
    db: Annotated[Session, Depends(get_db)],
) -> UserResponse:
    """Return the authenticated user."""
    user = get_user_by_id(db, user_id)
    if user is None:
        raise AuthenticationError.user_not_found()
    return UserResponse(user=UserPublic.model_validate(user))
