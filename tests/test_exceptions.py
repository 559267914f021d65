"""Tests for vinculum custom exceptions."""

import unittest

from vinculum.exceptions import (
    IdentityError,
    NotExposedError,
    RegistrationError,
    ResolutionError,
)


class TestRegistrationError(unittest.TestCase):
    def test_can_be_raised_and_caught(self) -> None:
        with self.assertRaises(RegistrationError):
            raise RegistrationError("bad registration")

    def test_message_is_preserved(self) -> None:
        err = RegistrationError("duplicate key")
        self.assertEqual(str(err), "duplicate key")
        self.assertIsNone(err.token)

    def test_token_is_kept(self) -> None:
        err = RegistrationError("duplicate key", token="db")
        self.assertEqual(err.token, "db")


class TestResolutionError(unittest.TestCase):
    def test_message_without_token(self) -> None:
        err = ResolutionError("missing context")
        self.assertEqual(str(err), "missing context")
        self.assertIsNone(err.token)

    def test_not_exposed_is_a_resolution_error(self) -> None:
        err = NotExposedError("private", token="url")
        self.assertIsInstance(err, ResolutionError)
        self.assertEqual(err.token, "url")


class TestIdentityError(unittest.TestCase):
    def test_is_a_value_error(self) -> None:
        self.assertTrue(issubclass(IdentityError, ValueError))

    def test_value_is_kept(self) -> None:
        err = IdentityError("Invalid base62 character: '$'", "$$$")
        self.assertEqual(err.value, "$$$")
        self.assertIn("base62", str(err))


if __name__ == "__main__":
    unittest.main()
