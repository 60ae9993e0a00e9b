"""Storage tests for UserRepository and RefreshTokenRepository against in-memory SQLite."""

import unittest
from datetime import UTC, datetime, timedelta

from app.models import RefreshToken, User, UserRole
from app.repositories import RefreshTokenRepository, UserRepository
from tests.support import make_session_factory


class RepositoryTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self.db = make_session_factory()()
        self.users = UserRepository(self.db)
        self.tokens = RefreshTokenRepository(self.db)
        self.now = datetime.now(UTC)

    def tearDown(self) -> None:
        self.db.close()

    def _user(self, email: str = "a@x.com") -> User:
        user = self.users.save(
            User(email=email, password_hash="hash", name="Alice", role=UserRole.VIEWER)
        )
        self.db.commit()
        return user

    def _token(self, user: User, token: str, expires_in: timedelta) -> RefreshToken:
        row = self.tokens.save(
            RefreshToken(user_id=user.id, token=token, expires_at=self.now + expires_in)
        )
        self.db.commit()
        return row


class TestUserRepository(RepositoryTestCase):
    def test_find_and_exists_by_email(self) -> None:
        user = self._user()
        self.assertEqual(self.users.find_by_email("a@x.com"), user)
        self.assertTrue(self.users.exists_by_email("a@x.com"))
        self.assertIsNone(self.users.find_by_email("b@x.com"))
        self.assertFalse(self.users.exists_by_email("b@x.com"))

    def test_email_lookup_is_case_sensitive(self) -> None:
        self._user("Alice@x.com")
        self.assertFalse(self.users.exists_by_email("alice@x.com"))

    def test_get_count_and_list(self) -> None:
        self.assertEqual(self.users.count_all(), 0)
        first = self._user("a@x.com")
        second = self._user("b@x.com")
        self.assertEqual(self.users.count_all(), 2)
        self.assertEqual(self.users.get(first.id), first)
        self.assertEqual([u.email for u in self.users.list_all()], ["a@x.com", "b@x.com"])
        self.assertEqual(self.users.list_all()[1], second)

    def test_list_all_orders_by_id(self) -> None:
        created = [self._user(f"u{i}@x.com") for i in range(20)]
        listed = self.users.list_all()
        self.assertEqual([u.id for u in listed], sorted(u.id for u in created))
        self.assertEqual(listed, created)

    def test_save_sets_timestamps_and_default_role(self) -> None:
        user = self.users.save(User(email="c@x.com", password_hash="hash", name="Carol"))
        self.assertEqual(user.role, UserRole.VIEWER)
        self.assertIsNotNone(user.created_at)
        self.assertIsNotNone(user.updated_at)


class TestRefreshTokenRepository(RepositoryTestCase):
    def test_find_by_token(self) -> None:
        user = self._user()
        row = self._token(user, "tok-1", timedelta(days=1))
        found = self.tokens.find_by_token("tok-1")
        self.assertEqual(found, row)
        self.assertEqual(found.user, user)
        self.assertIsNone(self.tokens.find_by_token("missing"))

    def test_delete_reports_rowcount(self) -> None:
        user = self._user()
        row = self._token(user, "tok-1", timedelta(days=1))
        self.assertEqual(self.tokens.delete(row), 1)
        self.assertEqual(self.tokens.delete(row), 0)
        self.assertIsNone(self.tokens.find_by_token("tok-1"))

    def test_delete_by_token_is_idempotent(self) -> None:
        user = self._user()
        self._token(user, "tok-1", timedelta(days=1))
        self.assertEqual(self.tokens.delete_by_token("tok-1"), 1)
        self.assertEqual(self.tokens.delete_by_token("tok-1"), 0)

    def test_delete_all_by_user_id_only_touches_that_user(self) -> None:
        alice = self._user("a@x.com")
        bob = self._user("b@x.com")
        self._token(alice, "a-1", timedelta(days=1))
        self._token(alice, "a-2", timedelta(days=1))
        self._token(bob, "b-1", timedelta(days=1))
        self.assertEqual(self.tokens.delete_all_by_user_id(alice.id), 2)
        self.db.commit()
        self.assertEqual(self.tokens.list_by_user_id(alice.id), [])
        self.assertEqual(len(self.tokens.list_by_user_id(bob.id)), 1)

    def test_delete_expired(self) -> None:
        user = self._user()
        self._token(user, "old", timedelta(seconds=-10))
        self._token(user, "fresh", timedelta(days=1))
        self.assertEqual(self.tokens.delete_expired(self.now), 1)
        self.db.commit()
        self.assertIsNone(self.tokens.find_by_token("old"))
        self.assertIsNotNone(self.tokens.find_by_token("fresh"))

    def test_stored_expiry_survives_round_trip(self) -> None:
        user = self._user()
        self._token(user, "tok-1", timedelta(hours=1))
        self.db.expire_all()
        row = self.tokens.find_by_token("tok-1")
        self.assertFalse(row.is_expired(self.now))
        self.assertTrue(row.is_expired(self.now + timedelta(hours=2)))


if __name__ == "__main__":
    unittest.main()
