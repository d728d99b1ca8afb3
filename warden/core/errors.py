"""Access-denial outcomes produced by the authentication and authorization dependencies."""

import enum

from fastapi import HTTPException, status


class AccessDeniedCode(str, enum.Enum):
    """Machine-checkable category carried in every access-denial response."""

    NOT_AUTHENTICATED = "not_authenticated"
    SESSION_EXPIRED = "session_expired"
    INVALID_TOKEN = "invalid_token"
    NOT_FOUND = "not_found"
    FORBIDDEN = "forbidden"


class AccessDeniedError(Exception):
    """Base for requests rejected before reaching a protected operation."""

    status_code = status.HTTP_401_UNAUTHORIZED

    def __init__(self, code: AccessDeniedCode, message: str) -> None:
        self.code = code
        self.message = message
        super().__init__(message)


class AuthenticationError(AccessDeniedError):
    """The caller's identity could not be established (401)."""

    status_code = status.HTTP_401_UNAUTHORIZED

    @classmethod
    def not_authenticated(cls) -> "AuthenticationError":
        return cls(AccessDeniedCode.NOT_AUTHENTICATED, "Not authenticated")

    @classmethod
    def session_expired(cls) -> "AuthenticationError":
        return cls(AccessDeniedCode.SESSION_EXPIRED, "Session expired")

    @classmethod
    def invalid_token(cls) -> "AuthenticationError":
        return cls(AccessDeniedCode.INVALID_TOKEN, "Invalid token")

    @classmethod
    def user_not_found(cls) -> "AuthenticationError":
        return cls(AccessDeniedCode.NOT_FOUND, "User not found")


class AuthorizationError(AccessDeniedError):
    """The caller is known but its role is not allowed here (403)."""

    status_code = status.HTTP_403_FORBIDDEN

    def __init__(self, message: str = "Forbidden") -> None:
        super().__init__(AccessDeniedCode.FORBIDDEN, message)


def api_error(status_code: int, code: str, message: str, **extra: object) -> HTTPException:
    """HTTPException whose detail renders as the standard error envelope."""
    return HTTPException(
        status_code=status_code,
        detail={"code": code, "message": message, **extra},
    )
