"""Unit tests for warden.core.cookies: session cookie attributes and extraction."""

import unittest
from unittest.mock import patch

from pydantic import SecretStr
from starlette.requests import Request
from starlette.responses import Response

from warden.core.config import Settings, settings
from warden.core.cookies import COOKIE_NAME, clear_auth_cookie, extract_token, set_auth_cookie


def _set_cookie_header(response: Response) -> str:
    headers = [v.decode("latin-1") for k, v in response.raw_headers if k == b"set-cookie"]
    assert len(headers) == 1, headers
    return headers[0]


def _attributes(header: str) -> set[str]:
    """Cookie attributes other than value, max-age and expires (lower-cased)."""
    parts = [p.strip().lower() for p in header.split(";")[1:]]
    return {p for p in parts if not p.startswith(("max-age", "expires"))}


def _request_with_cookie(cookie: str | None) -> Request:
    headers = [(b"cookie", cookie.encode("latin-1"))] if cookie is not None else []
    return Request({"type": "http", "method": "GET", "path": "/", "headers": headers})


class TestSetAuthCookie(unittest.TestCase):
    """set_auth_cookie attributes in development mode."""

    def test_attributes(self) -> None:
        response = Response()
        set_auth_cookie(response, "tok")
        header = _set_cookie_header(response)
        self.assertTrue(header.startswith(f"{COOKIE_NAME}=tok"))
        attrs = _attributes(header)
        self.assertIn("httponly", attrs)
        self.assertIn("path=/", attrs)
        self.assertIn("samesite=lax", attrs)
        self.assertNotIn("secure", attrs)

    def test_max_age_matches_token_ttl(self) -> None:
        response = Response()
        set_auth_cookie(response, "tok")
        header = _set_cookie_header(response).lower()
        self.assertIn(f"max-age={int(settings.token_ttl.total_seconds())}", header)


class TestProductionCookie(unittest.TestCase):
    """Production mode adds Secure; the configured domain is applied to set and clear."""

    def setUp(self) -> None:
        prod = Settings(
            APP_ENV="prod",
            JWT_SECRET=SecretStr("prod-secret-0123456789-abcdefghijkl"),
            JWT_EXPIRES="7d",
            COOKIE_DOMAIN="example.com",
        )
        patcher = patch("warden.core.cookies.settings", prod)
        patcher.start()
        self.addCleanup(patcher.stop)

    def test_secure_and_domain(self) -> None:
        response = Response()
        set_auth_cookie(response, "tok")
        header = _set_cookie_header(response).lower()
        self.assertIn("secure", _attributes(header))
        self.assertIn("domain=example.com", _attributes(header))
        self.assertIn("max-age=604800", header)

    def test_clear_uses_identical_attributes(self) -> None:
        set_response = Response()
        set_auth_cookie(set_response, "tok")
        clear_response = Response()
        clear_auth_cookie(clear_response)
        self.assertEqual(
            _attributes(_set_cookie_header(set_response)),
            _attributes(_set_cookie_header(clear_response)),
        )


class TestClearAuthCookie(unittest.TestCase):
    """clear_auth_cookie expires the cookie with the same attributes it was set with."""

    def test_clear_expires_cookie(self) -> None:
        response = Response()
        clear_auth_cookie(response)
        header = _set_cookie_header(response).lower()
        self.assertTrue(header.startswith(COOKIE_NAME))
        self.assertIn("max-age=0", header)

    def test_clear_matches_set_attributes(self) -> None:
        set_response = Response()
        set_auth_cookie(set_response, "tok")
        clear_response = Response()
        clear_auth_cookie(clear_response)
        self.assertEqual(
            _attributes(_set_cookie_header(set_response)),
            _attributes(_set_cookie_header(clear_response)),
        )


class TestExtractToken(unittest.TestCase):
    """extract_token reads only the session cookie."""

    def test_present(self) -> None:
        self.assertEqual(extract_token(_request_with_cookie(f"{COOKIE_NAME}=abc")), "abc")

    def test_absent(self) -> None:
        self.assertIsNone(extract_token(_request_with_cookie(None)))
        self.assertIsNone(extract_token(_request_with_cookie("other=abc")))

    def test_empty_value_is_absent(self) -> None:
        self.assertIsNone(extract_token(_request_with_cookie(f"{COOKIE_NAME}=")))


if __name__ == "__main__":
    unittest.main()
