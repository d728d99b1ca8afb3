"""Unit tests for the authentication and authorization dependencies."""

import unittest
from datetime import UTC, datetime, timedelta

from starlette.requests import Request

from warden.api.v1.dependencies import (
    authenticate,
    get_current_user_id,
    require_admin,
    require_role,
)
from warden.core.config import settings
from warden.core.cookies import COOKIE_NAME
from warden.core.errors import (
    AccessDeniedCode,
    AuthenticationError,
    AuthorizationError,
)
from warden.core.security import create_access_token
from warden.schemas.auth import AuthContext
from warden.services.users import ProfileChanges, create_user, update_user
from tests.support import STRONG_PASSWORD, make_session_factory


def _request(token: str | None) -> Request:
    headers = []
    if token is not None:
        headers.append((b"cookie", f"{COOKIE_NAME}={token}".encode("latin-1")))
    return Request({"type": "http", "method": "GET", "path": "/", "headers": headers})


class TestAuthenticate(unittest.TestCase):
    """authenticate: cookie -> IdentityClaim or a categorised 401."""

    def test_missing_cookie(self) -> None:
        with self.assertRaises(AuthenticationError) as ctx:
            authenticate(_request(None))
        self.assertEqual(ctx.exception.code, AccessDeniedCode.NOT_AUTHENTICATED)
        self.assertEqual(ctx.exception.message, "Not authenticated")

    def test_valid_token(self) -> None:
        claim = authenticate(_request(create_access_token("u1")))
        self.assertEqual(claim.user_id, "u1")

    def test_expired_token(self) -> None:
        issued = datetime.now(UTC) - settings.token_ttl - timedelta(seconds=5)
        with self.assertRaises(AuthenticationError) as ctx:
            authenticate(_request(create_access_token("u1", now=issued)))
        self.assertEqual(ctx.exception.code, AccessDeniedCode.SESSION_EXPIRED)
        self.assertEqual(ctx.exception.message, "Session expired")

    def test_malformed_token(self) -> None:
        with self.assertRaises(AuthenticationError) as ctx:
            authenticate(_request("garbage"))
        self.assertEqual(ctx.exception.code, AccessDeniedCode.INVALID_TOKEN)

    def test_tampered_token(self) -> None:
        token = create_access_token("u1")
        tampered = token[:-4] + ("AAAA" if not token.endswith("AAAA") else "BBBB")
        with self.assertRaises(AuthenticationError) as ctx:
            authenticate(_request(tampered))
        self.assertEqual(ctx.exception.code, AccessDeniedCode.INVALID_TOKEN)

    def test_current_user_id_requires_identity(self) -> None:
        with self.assertRaises(AuthenticationError) as ctx:
            get_current_user_id(None)
        self.assertEqual(ctx.exception.code, AccessDeniedCode.NOT_AUTHENTICATED)


class TestRequireRole(unittest.TestCase):
    """require_role re-reads the role from the store on every call."""

    def setUp(self) -> None:
        self.db = make_session_factory()()
        self.addCleanup(self.db.close)
        self.user = create_user(
            self.db, name="Ann Lee", email="ann@example.com", password=STRONG_PASSWORD
        )

    def test_role_outside_set_is_forbidden(self) -> None:
        with self.assertRaises(AuthorizationError) as ctx:
            require_admin(user_id=self.user.id, db=self.db)
        self.assertEqual(ctx.exception.code, AccessDeniedCode.FORBIDDEN)
        self.assertEqual(ctx.exception.status_code, 403)

    def test_forbidden_is_not_an_authentication_failure(self) -> None:
        self.assertFalse(issubclass(AuthorizationError, AuthenticationError))
        self.assertEqual(AuthenticationError.status_code, 401)

    def test_allowed_role_binds_context(self) -> None:
        context = require_role("user", "admin")(user_id=self.user.id, db=self.db)
        self.assertEqual(context, AuthContext(user_id=self.user.id, role="user"))

    def test_role_change_applies_on_next_call(self) -> None:
        with self.assertRaises(AuthorizationError):
            require_admin(user_id=self.user.id, db=self.db)
        update_user(self.db, self.user.id, ProfileChanges(role="admin"))
        self.assertEqual(require_admin(user_id=self.user.id, db=self.db).role, "admin")
        update_user(self.db, self.user.id, ProfileChanges(role="user"))
        with self.assertRaises(AuthorizationError):
            require_admin(user_id=self.user.id, db=self.db)

    def test_unknown_user_is_authentication_failure(self) -> None:
        with self.assertRaises(AuthenticationError) as ctx:
            require_admin(user_id="0" * 32, db=self.db)
        self.assertEqual(ctx.exception.code, AccessDeniedCode.NOT_FOUND)
        self.assertEqual(ctx.exception.message, "User not found")

    def test_unknown_role_name_is_rejected_at_definition(self) -> None:
        with self.assertRaises(ValueError):
            require_role("superuser")
        with self.assertRaises(ValueError):
            require_role()

    def test_context_is_immutable(self) -> None:
        context = require_role("user")(user_id=self.user.id, db=self.db)
        with self.assertRaises(Exception):
            context.role = "admin"


if __name__ == "__main__":
    unittest.main()
