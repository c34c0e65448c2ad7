# This file provides shared helpers for API endpoint tests.
# Tests override the config and storage dependencies; storage is a temporary SQLite file
# or a fake client, never a real deployment database.
# Token helpers sign credentials with the test config's secret.

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime
from decimal import Decimal
from typing import Any

from fastapi.testclient import TestClient

from storefront.api.api_config import ApiConfig
from storefront.api.app import app
from storefront.api.db_access import DatabaseClient
from storefront.api.dependencies import get_config, get_database_client
from storefront.identity.tokens import Principal, Role, issue_token

TEST_SECRET = "api-test-secret-with-at-least-32-chars"


def build_test_config(**overrides: Any) -> ApiConfig:
    """Create deterministic API config for tests."""

    values: dict[str, Any] = {
        "api_name": "Test Storefront API",
        "api_version_path": "/api/v1",
        "schema_version": "1.0.0",
        "host": "0.0.0.0",
        "port": 8000,
        "environment": "test",
        "database_url": "sqlite://",
        "jwt_secret": TEST_SECRET,
        "enable_request_logging": False,
        "allowed_origins": [],
        "app_version": "0.1.0",
    }
    values.update(overrides)
    return ApiConfig(**values)


class FakeDBClient:
    """Simple fake DB dependency for health/readiness endpoint tests."""

    def __init__(self, *, connected: bool = True, existing_tables: set[str] | None = None) -> None:
        self._connected = connected
        self._tables = existing_tables if existing_tables is not None else {
            "users",
            "products",
            "cart_lines",
            "orders",
            "shipments",
        }
        self.closed = False

    def can_connect(self) -> bool:
        return self._connected

    def table_exists(self, table_name: str) -> bool:
        return self._connected and table_name in self._tables


@contextmanager
def api_test_client(
    *,
    config: ApiConfig | None = None,
    db_client: Any | None = None,
) -> Iterator[TestClient]:
    """Yield a TestClient with scoped dependency overrides."""

    resolved_config = config or build_test_config()

    app.dependency_overrides[get_config] = lambda: resolved_config
    if db_client is not None:
        app.dependency_overrides[get_database_client] = lambda: db_client

    try:
        with TestClient(app) as client:
            yield client
    finally:
        app.dependency_overrides.clear()


def auth_headers(
    user_id: int,
    *,
    role: Role = Role.USER,
    email: str | None = None,
    config: ApiConfig | None = None,
    secret: str | None = None,
    now: datetime | None = None,
) -> dict[str, str]:
    """Bearer header for a principal, signed with the test secret unless told otherwise."""

    resolved_config = config or build_test_config()
    principal = Principal(id=user_id, email=email or f"user{user_id}@example.com", role=role)
    issued = issue_token(
        principal,
        secret=secret or resolved_config.jwt_secret,
        ttl_seconds=resolved_config.token_ttl_seconds,
        now=now,
    )
    return {"Authorization": f"Bearer {issued.token}"}


def seed_user(db: DatabaseClient, *, email: str, role: Role = Role.USER, name: str = "Test User") -> int:
    """Insert a user row directly; the hash is a placeholder, so the user cannot log in."""

    row = db.execute_returning(
        "INSERT INTO users (name, email, password_hash, role) VALUES (:name, :email, 'unusable', :role) RETURNING id",
        {"name": name, "email": email, "role": role.value},
    )
    assert row is not None
    return int(row["id"])


def seed_product(db: DatabaseClient, *, name: str, price: str = "9.99", category: str | None = None) -> int:
    row = db.execute_returning(
        "INSERT INTO products (name, price, category) VALUES (:name, :price, :category) RETURNING id",
        {"name": name, "price": price, "category": category},
    )
    assert row is not None
    return int(row["id"])


def as_decimal(value: Any) -> Decimal:
    return Decimal(str(value))
