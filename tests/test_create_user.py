"""Tests for the app.scripts.create_user bootstrap CLI."""

import unittest
from unittest.mock import MagicMock, patch

from sqlalchemy import select

from app.models import User, UserRole
from app.scripts import create_user
from tests.support import TEST_BCRYPT_ROUNDS, make_session_factory


class TestCreateUser(unittest.TestCase):
    def setUp(self) -> None:
        self.session_factory = make_session_factory()
        settings = MagicMock()
        settings.BCRYPT_ROUNDS = TEST_BCRYPT_ROUNDS
        self.patches = [
            patch.object(create_user, "SessionLocal", self.session_factory),
            patch.object(create_user, "get_settings", return_value=settings),
        ]
        for p in self.patches:
            p.start()

    def tearDown(self) -> None:
        for p in self.patches:
            p.stop()

    def _users(self) -> list[User]:
        db = self.session_factory()
        try:
            return list(db.scalars(select(User)))
        finally:
            db.close()

    def test_creates_admin(self) -> None:
        code = create_user.main(["mom@x.com", "password1", "Mom", "ADMIN"])
        self.assertEqual(code, 0)
        users = self._users()
        self.assertEqual(len(users), 1)
        self.assertEqual(users[0].role, UserRole.ADMIN)
        self.assertNotEqual(users[0].password_hash, "password1")

    def test_defaults_to_viewer(self) -> None:
        self.assertEqual(create_user.main(["kid@x.com", "password1", "Kid"]), 0)
        self.assertEqual(self._users()[0].role, UserRole.VIEWER)

    def test_rejects_duplicate_and_bad_input(self) -> None:
        self.assertEqual(create_user.main(["mom@x.com", "password1", "Mom"]), 0)
        self.assertEqual(create_user.main(["mom@x.com", "password1", "Mom"]), 1)
        self.assertEqual(create_user.main(["no-at-sign", "password1", "Mom"]), 1)
        self.assertEqual(create_user.main(["dad@x.com", "short", "Dad"]), 1)
        self.assertEqual(create_user.main(["dad@x.com", "password1", "D"]), 1)
        self.assertEqual(len(self._users()), 1)

    def test_rejects_malformed_email(self) -> None:
        for email in ("a@", "x@@y", "@x.com", "mom@"):
            self.assertEqual(create_user.main([email, "password1", "Mom"]), 1)
        self.assertEqual(self._users(), [])

    def test_stores_normalized_email(self) -> None:
        self.assertEqual(create_user.main(["Mom@X.COM", "password1", "Mom"]), 0)
        self.assertEqual(self._users()[0].email, "Mom@x.com")


if __name__ == "__main__":
    unittest.main()
