"""
Auth dependencies composed in front of protected routes.

authenticate: cookie -> verified IdentityClaim. Pure computation, no store access.
require_role(*roles): IdentityClaim -> AuthContext with the role read fresh from
the store on every request, so a role change applies to the very next request.
"""

import logging
from collections.abc import Callable
from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from warden.core.cookies import extract_token
from warden.core.database import get_db
from warden.core.errors import AuthenticationError, AuthorizationError
from warden.core.security import TokenError, TokenExpiredError, decode_access_token
from warden.schemas.auth import ROLES, AuthContext, IdentityClaim
from warden.services.users import get_user_by_id

logger = logging.getLogger(__name__)


def authenticate(request: Request) -> IdentityClaim:
    """Dependency: require a valid session cookie. Raises AuthenticationError (401)."""
    token = extract_token(request)
    if token is None:
        raise AuthenticationError.not_authenticated()
    try:
        return decode_access_token(token)
    except TokenExpiredError:
        logger.debug("Session token rejected", extra={"reason": "expired"})
        raise AuthenticationError.session_expired() from None
    except TokenError as e:
        logger.debug("Session token rejected", extra={"reason": e.reason})
        raise AuthenticationError.invalid_token() from None


def get_current_user_id(
    identity: Annotated[IdentityClaim | None, Depends(authenticate)],
) -> str:
    """Dependency: id of the authenticated caller."""
    if identity is None:
        raise AuthenticationError.not_authenticated()
    return identity.user_id


def require_role(*allowed: str) -> Callable[..., AuthContext]:
    """
    Build a dependency that admits only callers whose stored role is in `allowed`.

    Unknown user id -> AuthenticationError(not_found); role outside the set ->
    AuthorizationError (403), a separate category from authentication failures.
    """
    unknown = set(allowed) - set(ROLES)
    if not allowed or unknown:
        raise ValueError(f"require_role needs roles from {ROLES}, got {allowed!r}")
    allowed_roles = frozenset(allowed)

    def dependency(
        user_id: Annotated[str, Depends(get_current_user_id)],
        db: Annotated[Session, Depends(get_db)],
    ) -> AuthContext:
        user = get_user_by_id(db, user_id)
        if user is None:
            raise AuthenticationError.user_not_found()
        if user.role not in allowed_roles:
            logger.info(
                "Authorization denied",
                extra={"user_id": user.id, "role": user.role},
            )
            raise AuthorizationError()
        return AuthContext(user_id=user.id, role=user.role)

    return dependency


require_admin = require_role("admin")
