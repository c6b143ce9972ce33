"""Unit tests for newcloud_auth.core.tokens: issue/verify round trip, expiry and tampering."""

import unittest
from datetime import UTC, datetime, timedelta

import jwt

from newcloud_auth.core.errors import ErrorKind, InvalidTokenError
from newcloud_auth.core.tokens import TokenClaims, TokenService

SECRET = "token-service-test-secret-0123456789abcdef"


class TestTokenRoundTrip(unittest.TestCase):
    """verify(issue(id, name)) returns the same identity until expiry."""

    def setUp(self) -> None:
        self.tokens = TokenService(SECRET, expire_minutes=1440)

    def test_round_trip(self) -> None:
        for user_id, username in [(1, "alice"), (42, "bob.smith"), (999999, "ünïcode")]:
            token = self.tokens.issue(user_id, username)
            self.assertEqual(self.tokens.verify(token), TokenClaims(user_id=user_id, username=username))

    def test_expiry_is_configured_duration(self) -> None:
        now = datetime.now(UTC)
        token = self.tokens.issue(7, "carol", now=now)
        payload = jwt.decode(token, SECRET, algorithms=["HS256"])
        self.assertEqual(payload["exp"] - payload["iat"], 24 * 60 * 60)
        self.assertEqual(payload["sub"], "7")


class TestTokenRejection(unittest.TestCase):
    """verify raises InvalidTokenError for expired, tampered or malformed tokens."""

    def setUp(self) -> None:
        self.tokens = TokenService(SECRET, expire_minutes=60)

    def test_expired_token(self) -> None:
        token = self.tokens.issue(1, "alice", now=datetime.now(UTC) - timedelta(hours=2))
        with self.assertRaises(InvalidTokenError) as ctx:
            self.tokens.verify(token)
        self.assertEqual(ctx.exception.kind, ErrorKind.INVALID_TOKEN)
        self.assertEqual(ctx.exception.message, "Token expired")

    def test_wrong_secret(self) -> None:
        other = TokenService("another-secret-entirely-0123456789abcdef")
        with self.assertRaises(InvalidTokenError):
            self.tokens.verify(other.issue(1, "alice"))

    def test_forged_payload(self) -> None:
        head, _, sig = self.tokens.issue(1, "alice").split(".")
        _, forged_body, _ = self.tokens.issue(2, "mallory").split(".")
        tampered = ".".join([head, forged_body, sig])
        with self.assertRaises(InvalidTokenError):
            self.tokens.verify(tampered)

    def test_malformed_token(self) -> None:
        for garbage in ["", "not-a-jwt", "a.b.c"]:
            with self.assertRaises(InvalidTokenError):
                self.tokens.verify(garbage)

    def test_non_integer_subject(self) -> None:
        exp = datetime.now(UTC) + timedelta(minutes=5)
        token = jwt.encode({"sub": "abc", "username": "x", "exp": exp}, SECRET, algorithm="HS256")
        with self.assertRaises(InvalidTokenError):
            self.tokens.verify(token)

    def test_missing_username(self) -> None:
        exp = datetime.now(UTC) + timedelta(minutes=5)
        token = jwt.encode({"sub": "1", "exp": exp}, SECRET, algorithm="HS256")
        with self.assertRaises(InvalidTokenError):
            self.tokens.verify(token)

    def test_missing_expiry(self) -> None:
        token = jwt.encode({"sub": "1", "username": "x"}, SECRET, algorithm="HS256")
        with self.assertRaises(InvalidTokenError):
            self.tokens.verify(token)


class TestTokenServiceConstruction(unittest.TestCase):

    def test_empty_secret_refused(self) -> None:
        for secret in ["", "   "]:
            with self.assertRaises(ValueError):
                TokenService(secret)


if __name__ == "__main__":
    unittest.main()
