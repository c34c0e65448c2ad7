"""
Unit tests for settings and API configuration loading.
It asserts expected behavior and guards against regressions in the corresponding component.
These tests are executed by `pytest` locally and in CI and should remain deterministic.
"""

import pytest

from storefront.api import api_config as api_config_module
from storefront.common import settings as settings_module


def test_load_settings_success() -> None:
    settings_module.get_settings.cache_clear()
    settings = settings_module.get_settings()
    assert settings.PROJECT_NAME
    assert settings.DATABASE_URL


def test_load_settings_missing_required(monkeypatch: pytest.MonkeyPatch) -> None:
    settings_module.get_settings.cache_clear()
    monkeypatch.delenv("JWT_SECRET", raising=False)
    with pytest.raises(RuntimeError, match="Missing required environment variables: JWT_SECRET"):
        settings_module.load_settings(load_env=False)


def test_load_settings_rejects_short_secret(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("JWT_SECRET", "short")
    with pytest.raises(RuntimeError, match="Invalid environment configuration"):
        settings_module.load_settings(load_env=False)


def test_api_config_reads_enabled_services(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("STOREFRONT_SERVICES", "cart, orders")
    monkeypatch.setenv("TOKEN_TTL_SECONDS", "60")
    config = api_config_module.load_api_config(load_env=False)

    assert config.enabled_services == ["cart", "orders"]
    assert config.service_enabled("orders")
    assert not config.service_enabled("accounts")
    assert config.token_ttl_seconds == 60


def test_api_config_rejects_unknown_service(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("STOREFRONT_SERVICES", "cart,payments")
    with pytest.raises(ValueError, match="Unknown services: payments"):
        api_config_module.load_api_config(load_env=False)


def test_api_config_requires_secret(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("JWT_SECRET", raising=False)
    with pytest.raises(RuntimeError, match="JWT_SECRET is required"):
        api_config_module.load_api_config(load_env=False)


def test_api_config_rejects_bad_boolean(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("API_AUTO_CREATE_SCHEMA", "maybe")
    with pytest.raises(ValueError, match="API_AUTO_CREATE_SCHEMA must be boolean-like"):
        api_config_module.load_api_config(load_env=False)


def test_credential_policies_differ_by_family() -> None:
    config = api_config_module.load_api_config(load_env=False)

    assert config.credential_policy("cart").missing_status == 401
    assert config.credential_policy("cart").invalid_status == 403
    assert config.credential_policy("orders").missing_status == 403
    assert config.credential_policy("orders").invalid_status == 401


def test_credential_policy_only_accepts_auth_statuses() -> None:
    with pytest.raises(ValueError):
        api_config_module.CredentialStatusPolicy(missing_status=404)
