"""
Shared test configuration.
It asserts expected behavior and guards against regressions in the corresponding component.
These tests are executed by `pytest` locally and in CI and should remain deterministic.
"""

from __future__ import annotations

import os
import sys
from collections.abc import Iterator
from pathlib import Path

import pytest

ROOT_DIR = Path(__file__).resolve().parent.parent
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

TEST_ENV_DEFAULTS = {
    "PROJECT_NAME": "storefront-test",
    "ENV": "test",
    "LOG_LEVEL": "INFO",
    "DATABASE_URL": "sqlite://",
    "JWT_SECRET": "test-secret-with-at-least-32-characters",
    "API_HOST": "0.0.0.0",
    "API_PORT": "8000",
}

# The app module reads its configuration at import time.
for _key, _value in TEST_ENV_DEFAULTS.items():
    os.environ.setdefault(_key, _value)

from storefront.api.db_access import DatabaseClient  # noqa: E402


@pytest.fixture(autouse=True)
def base_test_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Ensure required environment variables are present during tests."""

    for key, value in TEST_ENV_DEFAULTS.items():
        if os.getenv(key) is None:
            monkeypatch.setenv(key, value)


@pytest.fixture
def db_client(tmp_path: Path) -> Iterator[DatabaseClient]:
    """File-backed SQLite database with the storefront schema applied."""

    client = DatabaseClient(database_url=f"sqlite:///{tmp_path / 'storefront.db'}")
    client.ensure_schema()
    try:
        yield client
    finally:
        client.close()
