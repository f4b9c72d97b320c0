"""Unit tests for roster.core.config: defaults and validation of Settings."""

import unittest

from pydantic import ValidationError

from roster.core.config import Settings

BASE = {
    "DATABASE_URL": "sqlite://",
    "JWT_SECRET": "test-access-secret",
    "REFRESH_TOKEN_SECRET": "test-refresh-secret",
}


def _settings(**overrides: object) -> Settings:
    values = dict(BASE)
    values.update(overrides)
    return Settings(_env_file=None, **values)


class TestDefaults(unittest.TestCase):
    def test_token_and_rate_limit_defaults(self) -> None:
        s = _settings()
        self.assertEqual(s.ACCESS_TOKEN_EXPIRE_MINUTES, 15)
        self.assertEqual(s.REFRESH_TOKEN_EXPIRE_DAYS, 7)
        self.assertEqual(s.BCRYPT_ROUNDS, 12)
        self.assertEqual(s.LOGIN_RATE_LIMIT_MAX, 10)
        self.assertEqual(s.LOGIN_RATE_LIMIT_WINDOW_SECONDS, 900)
        self.assertEqual(s.API_PREFIX, "/api")
        self.assertFalse(s.refresh_cookie_secure)

    def test_prod_marks_cookie_secure(self) -> None:
        self.assertTrue(_settings(APP_ENV="prod").refresh_cookie_secure)


class TestValidation(unittest.TestCase):
    def test_secrets_must_differ(self) -> None:
        with self.assertRaises(ValidationError):
            _settings(JWT_SECRET="same-secret", REFRESH_TOKEN_SECRET="same-secret")

    def test_secrets_must_be_non_empty(self) -> None:
        with self.assertRaises(ValidationError):
            _settings(REFRESH_TOKEN_SECRET="   ")

    def test_database_url_scheme(self) -> None:
        with self.assertRaises(ValidationError):
            _settings(DATABASE_URL="mysql://localhost/roster")
        self.assertEqual(
            _settings(DATABASE_URL=" postgresql://u:p@db/roster ").DATABASE_URL,
            "postgresql://u:p@db/roster",
        )

    def test_bcrypt_rounds_range(self) -> None:
        for bad in (3, 32):
            with self.assertRaises(ValidationError):
                _settings(BCRYPT_ROUNDS=bad)

    def test_only_hmac_algorithms(self) -> None:
        with self.assertRaises(ValidationError):
            _settings(JWT_ALGORITHM="RS256")

    def test_frontend_origin(self) -> None:
        self.assertIsNone(_settings(FRONTEND_ORIGIN="").FRONTEND_ORIGIN)
        self.assertEqual(
            _settings(FRONTEND_ORIGIN="https://roster.example.com/").FRONTEND_ORIGIN,
            "https://roster.example.com",
        )
        with self.assertRaises(ValidationError):
            _settings(FRONTEND_ORIGIN="roster.example.com")


if __name__ == "__main__":
    unittest.main()
