"""Unit tests for roster.services.tokens: issuing and verifying access and refresh JWTs."""

import unittest
from datetime import UTC, datetime, timedelta

import jwt
from jwt.utils import base64url_encode

from roster.core.config import Settings
from roster.core.errors import AuthError, AuthErrorKind
from roster.models import User
from roster.services.tokens import TokenIssuer

ACCESS_SECRET = "test-access-secret"
REFRESH_SECRET = "test-refresh-secret"


def _settings(**overrides: object) -> Settings:
    values = {
        "DATABASE_URL": "sqlite://",
        "JWT_SECRET": ACCESS_SECRET,
        "REFRESH_TOKEN_SECRET": REFRESH_SECRET,
        "BCRYPT_ROUNDS": 4,
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


def _user(user_id: int = 7, role: str = "manager") -> User:
    return User(id=user_id, username="alice", password_hash="x", role=role)


def _fixed_clock(at: datetime):
    return lambda: at


class MovableClock:
    def __init__(self, at: datetime) -> None:
        self.now = at

    def __call__(self) -> datetime:
        return self.now


class TestAccessToken(unittest.TestCase):
    """Access tokens round-trip id and role and expire 15 minutes after issuance."""

    def setUp(self) -> None:
        self.now = datetime.now(UTC).replace(microsecond=0)
        self.issuer = TokenIssuer(_settings(), clock=_fixed_clock(self.now))

    def test_round_trip_recovers_identity_role_and_expiry(self) -> None:
        for role in ("admin", "manager", "viewer"):
            token = self.issuer.issue_access_token(_user(user_id=42, role=role))
            claims = self.issuer.decode_access_token(token)
            self.assertNotIsInstance(claims, AuthError)
            self.assertEqual(claims.user_id, 42)
            self.assertEqual(claims.role, role)
            self.assertEqual(claims.expires_at, self.now + timedelta(minutes=15))

    def test_signing_is_deterministic_for_same_claims(self) -> None:
        user = _user()
        self.assertEqual(self.issuer.issue_access_token(user), self.issuer.issue_access_token(user))

    def test_expired_token_rejected(self) -> None:
        past = datetime.now(UTC) - timedelta(minutes=16)
        old_issuer = TokenIssuer(_settings(), clock=_fixed_clock(past))
        token = old_issuer.issue_access_token(_user())
        self.assertEqual(
            self.issuer.decode_access_token(token),
            AuthError(AuthErrorKind.INVALID_OR_EXPIRED_TOKEN),
        )

    def test_expiry_follows_injected_clock(self) -> None:
        clock = MovableClock(datetime(2020, 1, 1, 12, 0, tzinfo=UTC))
        issuer = TokenIssuer(_settings(), clock=clock)
        token = issuer.issue_access_token(_user())
        self.assertNotIsInstance(issuer.decode_access_token(token), AuthError)
        clock.now += timedelta(minutes=15) - timedelta(seconds=1)
        self.assertNotIsInstance(issuer.decode_access_token(token), AuthError)
        clock.now += timedelta(seconds=1)
        self.assertEqual(
            issuer.decode_access_token(token),
            AuthError(AuthErrorKind.INVALID_OR_EXPIRED_TOKEN),
        )

    def test_issuer_ahead_of_wall_clock_accepts_its_own_tokens(self) -> None:
        ahead = TokenIssuer(_settings(), clock=_fixed_clock(self.now + timedelta(days=30)))
        claims = ahead.decode_access_token(ahead.issue_access_token(_user()))
        self.assertNotIsInstance(claims, AuthError)
        self.assertEqual(claims.expires_at, self.now + timedelta(days=30, minutes=15))

    def test_tampered_payload_rejected_with_same_error_as_expiry(self) -> None:
        token = self.issuer.issue_access_token(_user(role="viewer"))
        header, _, signature = token.split(".")
        forged_payload = base64url_encode(
            b'{"sub":"7","role":"admin","type":"access","iat":1,"exp":4102444800}'
        ).decode()
        forged = f"{header}.{forged_payload}.{signature}"
        result = self.issuer.decode_access_token(forged)
        self.assertIsInstance(result, AuthError)
        self.assertEqual(result.kind, AuthErrorKind.INVALID_OR_EXPIRED_TOKEN)

    def test_token_signed_with_other_secret_rejected(self) -> None:
        other = TokenIssuer(
            _settings(JWT_SECRET="another-access", REFRESH_TOKEN_SECRET="another-refresh"),
            clock=_fixed_clock(self.now),
        )
        token = other.issue_access_token(_user())
        self.assertIsInstance(self.issuer.decode_access_token(token), AuthError)

    def test_garbage_rejected(self) -> None:
        for token in ("", "abc", "a.b.c"):
            self.assertEqual(
                self.issuer.decode_access_token(token),
                AuthError(AuthErrorKind.INVALID_OR_EXPIRED_TOKEN),
            )

    def test_unknown_role_in_signed_payload_rejected(self) -> None:
        token = jwt.encode(
            {
                "sub": "7",
                "role": "superuser",
                "type": "access",
                "iat": self.now,
                "exp": self.now + timedelta(minutes=5),
            },
            ACCESS_SECRET,
            algorithm="HS256",
        )
        self.assertIsInstance(self.issuer.decode_access_token(token), AuthError)

    def test_refresh_token_not_accepted_as_access_token(self) -> None:
        refresh_token, _ = self.issuer.issue_refresh_token(_user())
        self.assertIsInstance(self.issuer.decode_access_token(refresh_token), AuthError)


class TestRefreshToken(unittest.TestCase):
    """Refresh tokens carry the user id, a unique jti and a 7-day expiry under their own secret."""

    def setUp(self) -> None:
        self.now = datetime.now(UTC).replace(microsecond=0)
        self.issuer = TokenIssuer(_settings(), clock=_fixed_clock(self.now))

    def test_round_trip(self) -> None:
        token, expires_at = self.issuer.issue_refresh_token(_user(user_id=3))
        claims = self.issuer.decode_refresh_token(token)
        self.assertNotIsInstance(claims, AuthError)
        self.assertEqual(claims.user_id, 3)
        self.assertEqual(expires_at, self.now + timedelta(days=7))
        self.assertEqual(claims.expires_at, expires_at)

    def test_tokens_issued_together_are_distinct(self) -> None:
        first, _ = self.issuer.issue_refresh_token(_user())
        second, _ = self.issuer.issue_refresh_token(_user())
        self.assertNotEqual(first, second)

    def test_signed_with_refresh_secret_not_access_secret(self) -> None:
        token, _ = self.issuer.issue_refresh_token(_user())
        jwt.decode(token, REFRESH_SECRET, algorithms=["HS256"])
        with self.assertRaises(jwt.InvalidSignatureError):
            jwt.decode(token, ACCESS_SECRET, algorithms=["HS256"])

    def test_access_token_not_accepted_as_refresh_token(self) -> None:
        access = self.issuer.issue_access_token(_user())
        self.assertEqual(
            self.issuer.decode_refresh_token(access),
            AuthError(AuthErrorKind.INVALID_REFRESH_TOKEN),
        )

    def test_expired_refresh_token_rejected(self) -> None:
        past = datetime.now(UTC) - timedelta(days=8)
        token, _ = TokenIssuer(_settings(), clock=_fixed_clock(past)).issue_refresh_token(_user())
        self.assertEqual(
            self.issuer.decode_refresh_token(token),
            AuthError(AuthErrorKind.INVALID_REFRESH_TOKEN),
        )

    def test_future_clock_rejects_token_past_expiry(self) -> None:
        token, _ = self.issuer.issue_refresh_token(_user())
        later = TokenIssuer(_settings(), clock=_fixed_clock(self.now + timedelta(days=7)))
        self.assertEqual(
            later.decode_refresh_token(token),
            AuthError(AuthErrorKind.INVALID_REFRESH_TOKEN),
        )
        earlier = TokenIssuer(_settings(), clock=_fixed_clock(self.now + timedelta(days=6)))
        self.assertNotIsInstance(earlier.decode_refresh_token(token), AuthError)


if __name__ == "__main__":
    unittest.main()
