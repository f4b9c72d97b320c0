"""Unit tests for roster.services.roles: the role gate is a pure membership check."""

import unittest
from datetime import UTC, datetime, timedelta

from roster.schemas.auth import AccessTokenClaims
from roster.services.roles import Decision, authorize, role_set


def _claims(role: str) -> AccessTokenClaims:
    return AccessTokenClaims(
        user_id=1,
        role=role,
        expires_at=datetime.now(UTC) + timedelta(minutes=15),
    )


class TestAuthorize(unittest.TestCase):
    def test_admin_only_gate(self) -> None:
        admin_only = role_set({"admin"})
        self.assertIs(authorize(_claims("admin"), admin_only), Decision.ALLOW)
        self.assertIs(authorize(_claims("manager"), admin_only), Decision.DENY)
        self.assertIs(authorize(_claims("viewer"), admin_only), Decision.DENY)

    def test_editor_gate(self) -> None:
        editors = role_set({"manager", "admin"})
        self.assertIs(authorize(_claims("admin"), editors), Decision.ALLOW)
        self.assertIs(authorize(_claims("manager"), editors), Decision.ALLOW)
        self.assertIs(authorize(_claims("viewer"), editors), Decision.DENY)


class TestRoleSet(unittest.TestCase):
    def test_accepts_known_roles(self) -> None:
        self.assertEqual(role_set(["viewer", "viewer"]), frozenset({"viewer"}))

    def test_rejects_unknown_role(self) -> None:
        with self.assertRaises(ValueError):
            role_set({"admin", "superuser"})

    def test_rejects_empty_set(self) -> None:
        with self.assertRaises(ValueError):
            role_set(set())


if __name__ == "__main__":
    unittest.main()
