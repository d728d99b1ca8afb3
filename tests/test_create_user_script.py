"""Tests for the create_user bootstrap CLI."""

import io
import unittest
from contextlib import redirect_stderr, redirect_stdout
from unittest.mock import patch

from warden.core.security import verify_password
from warden.scripts.create_user import main
from warden.services.users import get_user_by_email
from tests.support import STRONG_PASSWORD, make_session_factory


class TestCreateUserScript(unittest.TestCase):
    """main() validates with the administrative rule and writes through the lifecycle service."""

    def setUp(self) -> None:
        self.session_factory = make_session_factory()
        patcher = patch("warden.scripts.create_user.SessionLocal", self.session_factory)
        patcher.start()
        self.addCleanup(patcher.stop)

    def _run(self, *argv: str) -> tuple[int, str, str]:
        out, err = io.StringIO(), io.StringIO()
        with redirect_stdout(out), redirect_stderr(err):
            code = main(list(argv))
        return code, out.getvalue(), err.getvalue()

    def test_creates_admin(self) -> None:
        code, out, _ = self._run("Ada Admin", "Ada@Example.com", STRONG_PASSWORD, "admin")
        self.assertEqual(code, 0)
        self.assertIn("ada@example.com", out)
        self.assertNotIn(STRONG_PASSWORD, out)
        with self.session_factory() as db:
            user = get_user_by_email(db, "ada@example.com")
            self.assertEqual(user.role, "admin")
            self.assertTrue(verify_password(STRONG_PASSWORD, user.password_hash))

    def test_weak_password(self) -> None:
        code, _, err = self._run("Ada Admin", "ada@example.com", "alllowercase")
        self.assertEqual(code, 1)
        self.assertIn("password", err)
        with self.session_factory() as db:
            self.assertIsNone(get_user_by_email(db, "ada@example.com"))

    def test_duplicate(self) -> None:
        self.assertEqual(self._run("Ada Admin", "ada@example.com", STRONG_PASSWORD)[0], 0)
        code, _, err = self._run("Ada Again", "ADA@example.com", STRONG_PASSWORD)
        self.assertEqual(code, 1)
        self.assertIn("already exists", err)


if __name__ == "__main__":
    unittest.main()
