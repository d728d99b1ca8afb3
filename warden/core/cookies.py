"""Session cookie transport: the token crosses the network only inside this cookie."""

from typing import Any

from starlette.requests import Request
from starlette.responses import Response

from warden.core.config import settings

COOKIE_NAME = "access_token"


def _cookie_attributes() -> dict[str, Any]:
    """Attributes shared by set and clear; a mismatch would leave the cookie behind."""
    return {
        "path": "/",
        "domain": settings.COOKIE_DOMAIN,
        "secure": settings.is_production,
        "httponly": True,
        "samesite": "lax",
    }


def set_auth_cookie(response: Response, token: str) -> None:
    """Attach the session token; max-age follows the same TTL as the token expiry."""
    response.set_cookie(
        COOKIE_NAME,
        token,
        max_age=int(settings.token_ttl.total_seconds()),
        **_cookie_attributes(),
    )


def clear_auth_cookie(response: Response) -> None:
    """Expire the session cookie in the browser."""
    response.delete_cookie(COOKIE_NAME, **_cookie_attributes())


def extract_token(request: Request) -> str | None:
    """Return the session token from the request cookie, or None when absent or empty."""
    token = request.cookies.get(COOKIE_NAME)
    return token or None
