"""Unit tests for app.core.security password hashing."""

import unittest

from app.core.security import hash_password, verify_password


class TestPasswordHashing(unittest.TestCase):
    def test_hash_is_not_the_password_and_verifies(self) -> None:
        hashed = hash_password("correct horse", rounds=4)
        self.assertNotIn("correct horse", hashed)
        self.assertTrue(hashed.startswith("$2"))
        self.assertTrue(verify_password("correct horse", hashed))
        self.assertFalse(verify_password("wrong horse", hashed))

    def test_hash_is_salted(self) -> None:
        self.assertNotEqual(hash_password("same-password", rounds=4), hash_password("same-password", rounds=4))

    def test_garbage_hash_does_not_raise(self) -> None:
        self.assertFalse(verify_password("anything", "not-a-bcrypt-hash"))

    def test_long_password_is_truncated_consistently(self) -> None:
        long_password = "x" * 100
        hashed = hash_password(long_password, rounds=4)
        self.assertTrue(verify_password(long_password, hashed))


if __name__ == "__main__":
    unittest.main()
