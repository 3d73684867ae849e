"""Shared builders for tests: settings, an app on in-memory SQLite, HTTP shortcuts."""

from typing import Any

from fastapi import FastAPI
from fastapi.testclient import TestClient
from pydantic import SecretStr

from panelauth.core.config import Settings
from panelauth.core.database import Database
from panelauth.main import create_app
from panelauth.models import Base

TEST_SECRET = "test-jwt-secret-for-testing-only"


def make_settings(**overrides: Any) -> Settings:
    """Settings isolated from the environment's .env; low bcrypt cost for speed."""
    values: dict[str, Any] = {
        "APP_ENV": "dev",
        "DATABASE_URL": "sqlite://",
        "JWT_SECRET": SecretStr(TEST_SECRET),
        "BCRYPT_ROUNDS": 4,
        "LOG_LEVEL": "WARNING",
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


def make_database(url: str = "sqlite://") -> Database:
    database = Database(url)
    Base.metadata.create_all(database.engine)
    return database


def make_app(**overrides: Any) -> tuple[FastAPI, Database]:
    settings = make_settings(**overrides)
    database = make_database(settings.DATABASE_URL)
    return create_app(settings=settings, database=database), database


def register(
    client: TestClient,
    name: str = "Ann",
    email: str = "ann@x.com",
    password: str = "secret123",
    **extra: Any,
):
    return client.post(
        "/api/auth/register",
        json={"name": name, "email": email, "password": password, **extra},
    )


def login(client: TestClient, email: str = "ann@x.com", password: str = "secret123"):
    return client.post("/api/auth/login", json={"email": email, "password": password})


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def parse_set_cookie(header: str) -> tuple[str, str, dict[str, str]]:
    """Split a Set-Cookie header into (name, value, {lowercased attribute: value})."""
    parts = [p.strip() for p in header.split(";") if p.strip()]
    name, _, value = parts[0].partition("=")
    attrs: dict[str, str] = {}
    for part in parts[1:]:
        key, _, val = part.partition("=")
        attrs[key.strip().lower()] = val.strip().lower()
    return name, value, attrs
