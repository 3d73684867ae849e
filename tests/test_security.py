"""Unit tests for panelauth.core.security: bcrypt hashing and JWT issue/verify."""

import base64
import json
import string
import unittest
from datetime import timedelta

import jwt
from pydantic import SecretStr

from panelauth.core.errors import ExpiredTokenError, InvalidTokenError
from panelauth.core.security import (
    PASSWORD_SYMBOLS,
    burn_password_check,
    create_access_token,
    decode_access_token,
    generate_secure_password,
    hash_password,
    verify_password,
)
from tests.helpers import TEST_SECRET, make_settings


def _b64url_decode(segment: str) -> bytes:
    return base64.urlsafe_b64decode(segment + "=" * (-len(segment) % 4))


def _b64url_encode(raw: bytes) -> str:
    return base64.urlsafe_b64encode(raw).rstrip(b"=").decode("ascii")


class TestPasswordHashing(unittest.TestCase):
    """hash_password salts every call; verify_password accepts only the right password."""

    def test_same_password_hashes_differently(self) -> None:
        first = hash_password("secret123", rounds=4)
        second = hash_password("secret123", rounds=4)
        self.assertNotEqual(first, second)
        self.assertTrue(verify_password("secret123", first))
        self.assertTrue(verify_password("secret123", second))

    def test_wrong_password_rejected(self) -> None:
        hashed = hash_password("secret123", rounds=4)
        self.assertFalse(verify_password("secret124", hashed))
        self.assertFalse(verify_password("", hashed))

    def test_hash_is_self_describing(self) -> None:
        hashed = hash_password("secret123", rounds=5)
        self.assertTrue(hashed.startswith("$2b$05$"))
        self.assertNotIn("secret123", hashed)

    def test_old_cost_still_verifies_after_cost_increase(self) -> None:
        old = hash_password("secret123", rounds=4)
        new = hash_password("secret123", rounds=6)
        self.assertTrue(verify_password("secret123", old))
        self.assertTrue(verify_password("secret123", new))

    def test_malformed_hash_returns_false(self) -> None:
        self.assertFalse(verify_password("secret123", "not-a-bcrypt-hash"))
        self.assertFalse(verify_password("secret123", ""))

    def test_long_password_truncated_consistently(self) -> None:
        long_pw = "a" * 100
        hashed = hash_password(long_pw, rounds=4)
        self.assertTrue(verify_password(long_pw, hashed))

    def test_burn_password_check_returns_none(self) -> None:
        self.assertIsNone(burn_password_check("anything", rounds=4))

    def test_cost_must_be_given(self) -> None:
        with self.assertRaises(TypeError):
            hash_password("secret123")
        with self.assertRaises(TypeError):
            burn_password_check("secret123")


class TestGenerateSecurePassword(unittest.TestCase):
    def test_contains_each_character_class(self) -> None:
        for _ in range(20):
            pw = generate_secure_password()
            self.assertEqual(len(pw), 12)
            self.assertTrue(any(c in string.ascii_uppercase for c in pw))
            self.assertTrue(any(c in string.ascii_lowercase for c in pw))
            self.assertTrue(any(c in string.digits for c in pw))
            self.assertTrue(any(c in PASSWORD_SYMBOLS for c in pw))

    def test_custom_length(self) -> None:
        self.assertEqual(len(generate_secure_password(20)), 20)

    def test_too_short_rejected(self) -> None:
        with self.assertRaises(ValueError):
            generate_secure_password(3)


class TestAccessTokens(unittest.TestCase):
    """create_access_token / decode_access_token: claims, expiry and tamper detection."""

    def setUp(self) -> None:
        self.settings = make_settings()

    def test_round_trip_claims(self) -> None:
        token = create_access_token(self.settings, sub="abc123", email="ann@x.com")
        payload = decode_access_token(self.settings, token)
        self.assertEqual(payload["sub"], "abc123")
        self.assertEqual(payload["email"], "ann@x.com")
        self.assertIn("jti", payload)
        self.assertEqual(payload["exp"] - payload["iat"], self.settings.JWT_EXPIRE_MINUTES * 60)

    def test_default_lifetime_is_seven_days(self) -> None:
        token = create_access_token(self.settings, sub="abc123", email="ann@x.com")
        payload = decode_access_token(self.settings, token)
        self.assertEqual(payload["exp"] - payload["iat"], 7 * 24 * 3600)

    def test_each_token_is_unique(self) -> None:
        a = create_access_token(self.settings, sub="abc123", email="ann@x.com")
        b = create_access_token(self.settings, sub="abc123", email="ann@x.com")
        self.assertNotEqual(a, b)

    def test_expired_token_raises_expired(self) -> None:
        token = create_access_token(
            self.settings, sub="abc123", email="ann@x.com", expires_delta=timedelta(seconds=-30)
        )
        with self.assertRaises(ExpiredTokenError):
            decode_access_token(self.settings, token)

    def test_tampered_payload_raises_invalid(self) -> None:
        token = create_access_token(self.settings, sub="abc123", email="ann@x.com")
        header, payload, signature = token.split(".")
        claims = json.loads(_b64url_decode(payload))
        claims["sub"] = "someone-else"
        forged = ".".join([header, _b64url_encode(json.dumps(claims).encode()), signature])
        with self.assertRaises(InvalidTokenError):
            decode_access_token(self.settings, forged)

    def test_tampered_and_expired_reports_invalid(self) -> None:
        token = create_access_token(
            self.settings, sub="abc123", email="ann@x.com", expires_delta=timedelta(seconds=-30)
        )
        header, payload, signature = token.split(".")
        claims = json.loads(_b64url_decode(payload))
        claims["email"] = "mallory@x.com"
        forged = ".".join([header, _b64url_encode(json.dumps(claims).encode()), signature])
        with self.assertRaises(InvalidTokenError):
            decode_access_token(self.settings, forged)

    def test_wrong_secret_raises_invalid(self) -> None:
        other = make_settings(JWT_SECRET=SecretStr("another-secret"))
        token = create_access_token(other, sub="abc123", email="ann@x.com")
        with self.assertRaises(InvalidTokenError):
            decode_access_token(self.settings, token)

    def test_missing_subject_raises_invalid(self) -> None:
        token = jwt.encode(
            {"email": "ann@x.com", "iat": 1, "exp": 4102444800},
            TEST_SECRET,
            algorithm="HS256",
        )
        with self.assertRaises(InvalidTokenError):
            decode_access_token(self.settings, token)

    def test_garbage_raises_invalid(self) -> None:
        with self.assertRaises(InvalidTokenError):
            decode_access_token(self.settings, "not.a.jwt")


if __name__ == "__main__":
    unittest.main()
