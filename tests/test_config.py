"""Unit tests for panelauth.core.config.Settings validation."""

import unittest

from pydantic import SecretStr
from pydantic import ValidationError as PydanticValidationError

from panelauth.core.config import DEFAULT_JWT_SECRET, Settings
from tests.helpers import make_settings


class TestSettingsDefaults(unittest.TestCase):
    def test_defaults(self) -> None:
        settings = Settings(_env_file=None, JWT_SECRET=SecretStr("x"))
        self.assertEqual(settings.JWT_EXPIRE_MINUTES, 10080)
        self.assertEqual(settings.token_lifetime_seconds, 7 * 24 * 3600)
        self.assertEqual(settings.COOKIE_NAME, "token")
        self.assertEqual(settings.JWT_ALGORITHM, "HS256")
        self.assertEqual(settings.BCRYPT_ROUNDS, 12)
        self.assertFalse(settings.is_production)


class TestSettingsValidation(unittest.TestCase):
    """Invalid values fail at startup rather than at first use."""

    def test_rejects_non_sql_database_url(self) -> None:
        with self.assertRaises(PydanticValidationError):
            make_settings(DATABASE_URL="mongodb://localhost:27017/panel")

    def test_accepts_postgres_url(self) -> None:
        settings = make_settings(DATABASE_URL=" postgresql://u:p@db:5432/panel ")
        self.assertEqual(settings.DATABASE_URL, "postgresql://u:p@db:5432/panel")

    def test_rejects_empty_secret(self) -> None:
        with self.assertRaises(PydanticValidationError):
            make_settings(JWT_SECRET=SecretStr("   "))

    def test_prod_rejects_default_secret(self) -> None:
        with self.assertRaises(PydanticValidationError):
            make_settings(APP_ENV="prod", JWT_SECRET=SecretStr(DEFAULT_JWT_SECRET))

    def test_dev_allows_default_secret(self) -> None:
        settings = make_settings(JWT_SECRET=SecretStr(DEFAULT_JWT_SECRET))
        self.assertEqual(settings.JWT_SECRET.get_secret_value(), DEFAULT_JWT_SECRET)

    def test_rejects_non_hmac_algorithm(self) -> None:
        with self.assertRaises(PydanticValidationError):
            make_settings(JWT_ALGORITHM="RS256")

    def test_bcrypt_rounds_bounds(self) -> None:
        with self.assertRaises(PydanticValidationError):
            make_settings(BCRYPT_ROUNDS=3)
        with self.assertRaises(PydanticValidationError):
            make_settings(BCRYPT_ROUNDS=17)

    def test_expire_minutes_bounds(self) -> None:
        with self.assertRaises(PydanticValidationError):
            make_settings(JWT_EXPIRE_MINUTES=0)

    def test_client_url_trailing_slash_stripped(self) -> None:
        settings = make_settings(CLIENT_URL="https://panel.example.com/")
        self.assertEqual(settings.CLIENT_URL, "https://panel.example.com")

    def test_blank_cookie_domain_is_none(self) -> None:
        self.assertIsNone(make_settings(COOKIE_DOMAIN="  ").COOKIE_DOMAIN)


if __name__ == "__main__":
    unittest.main()
