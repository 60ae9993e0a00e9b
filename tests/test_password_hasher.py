"""Unit tests for app.core.security.PasswordHasher (bcrypt)."""

import unittest

from tests.support import make_hasher


class TestPasswordHasher(unittest.TestCase):
    def setUp(self) -> None:
        self.hasher = make_hasher()

    def test_hash_is_not_plaintext_and_is_salted(self) -> None:
        first = self.hasher.hash("password1")
        second = self.hasher.hash("password1")
        self.assertNotEqual(first, "password1")
        self.assertNotEqual(first, second)
        self.assertTrue(first.startswith("$2"))

    def test_matches(self) -> None:
        hashed = self.hasher.hash("password1")
        self.assertTrue(self.hasher.matches("password1", hashed))
        self.assertFalse(self.hasher.matches("password2", hashed))

    def test_malformed_hash_never_matches(self) -> None:
        self.assertFalse(self.hasher.matches("password1", "not-a-bcrypt-hash"))
        self.assertFalse(self.hasher.matches("password1", ""))

    def test_verify_dummy_never_matches(self) -> None:
        self.assertFalse(self.hasher.verify_dummy("password1"))
        self.assertFalse(self.hasher.verify_dummy(""))

    def test_rounds_recorded_in_hash(self) -> None:
        self.assertIn("$04$", self.hasher.hash("password1"))

    def test_only_first_72_bytes_count(self) -> None:
        base = "x" * 72
        hashed = self.hasher.hash(base + "tail-one")
        self.assertTrue(self.hasher.matches(base + "tail-two", hashed))


if __name__ == "__main__":
    unittest.main()
