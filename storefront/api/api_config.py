# This file defines runtime settings for the API layer in one place.
# The loader reads environment variables and applies defaults for local development.
# One process mounts the routers of the services listed in STOREFRONT_SERVICES.

from __future__ import annotations

import os
from functools import lru_cache

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, field_validator

from storefront.identity.tokens import DEFAULT_ALGORITHM, DEFAULT_TOKEN_TTL_SECONDS

KNOWN_SERVICES: tuple[str, ...] = ("accounts", "catalog", "cart", "orders", "shipments", "legacy")


class CredentialStatusPolicy(BaseModel):
    """HTTP status codes the guard uses for a missing and for a rejected credential."""

    model_config = ConfigDict(frozen=True)

    missing_status: int = 401
    invalid_status: int = 403

    @field_validator("missing_status", "invalid_status")
    @classmethod
    def validate_auth_status(cls, value: int) -> int:
        if value not in {401, 403}:
            raise ValueError("Credential failures must map to 401 or 403.")
        return value


# Status codes observed per endpoint family.
DEFAULT_CREDENTIAL_POLICIES: dict[str, CredentialStatusPolicy] = {
    "accounts": CredentialStatusPolicy(missing_status=401, invalid_status=403),
    "catalog": CredentialStatusPolicy(missing_status=401, invalid_status=403),
    "cart": CredentialStatusPolicy(missing_status=401, invalid_status=403),
    "orders": CredentialStatusPolicy(missing_status=403, invalid_status=401),
    "shipments": CredentialStatusPolicy(missing_status=403, invalid_status=401),
}


class ApiConfig(BaseModel):
    """Typed API runtime configuration."""

    model_config = ConfigDict(extra="ignore")

    api_name: str = "Storefront API"
    api_version_path: str = "/api/v1"
    schema_version: str = "1.0.0"
    host: str = "0.0.0.0"
    port: int = 8000
    environment: str = "local"
    database_url: str
    jwt_secret: str = Field(repr=False)
    jwt_algorithm: str = DEFAULT_ALGORITHM
    token_ttl_seconds: int = DEFAULT_TOKEN_TTL_SECONDS
    enabled_services: list[str] = Field(default_factory=lambda: list(KNOWN_SERVICES))
    enable_request_logging: bool = False
    auto_create_schema: bool = False
    allowed_origins: list[str] = Field(default_factory=list)
    app_version: str = "0.1.0"
    credential_policies: dict[str, CredentialStatusPolicy] = Field(
        default_factory=lambda: dict(DEFAULT_CREDENTIAL_POLICIES)
    )

    @field_validator("api_version_path")
    @classmethod
    def validate_api_version_path(cls, value: str) -> str:
        if not value.startswith("/"):
            raise ValueError("api_version_path must start with '/'.")
        parts = [part for part in value.split("/") if part]
        if len(parts) < 2 or parts[-1].startswith("v") is False:
            raise ValueError("api_version_path must look like '/api/v1'.")
        return value.rstrip("/")

    @field_validator("enabled_services")
    @classmethod
    def validate_enabled_services(cls, value: list[str]) -> list[str]:
        unknown = sorted(set(value) - set(KNOWN_SERVICES))
        if unknown:
            raise ValueError(f"Unknown services: {', '.join(unknown)}")
        if not value:
            raise ValueError("At least one service must be enabled.")
        return value

    @field_validator("jwt_algorithm")
    @classmethod
    def validate_algorithm(cls, value: str) -> str:
        # Symmetric shared key only.
        if value not in {"HS256", "HS384", "HS512"}:
            raise ValueError("jwt_algorithm must be one of HS256, HS384, HS512.")
        return value

    @field_validator("token_ttl_seconds")
    @classmethod
    def validate_positive_ints(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("Value must be greater than 0.")
        return value

    def credential_policy(self, family: str) -> CredentialStatusPolicy:
        return self.credential_policies.get(family, CredentialStatusPolicy())

    def service_enabled(self, service: str) -> bool:
        return service in self.enabled_services


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    value = raw.strip().lower()
    if value in {"1", "true", "yes", "y", "on"}:
        return True
    if value in {"0", "false", "no", "n", "off"}:
        return False
    raise ValueError(f"{name} must be boolean-like, got {raw!r}")


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return int(raw)


def _env_list(name: str, default: list[str] | None = None) -> list[str]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return list(default or [])
    return [item.strip() for item in raw.split(",") if item.strip()]


def load_api_config(*, load_env: bool = True) -> ApiConfig:
    """Load API configuration from `.env` and process environment."""

    if load_env:
        load_dotenv()

    config_values: dict[str, object] = {
        "api_name": os.getenv("API_NAME", "Storefront API"),
        "api_version_path": os.getenv("API_VERSION_PATH", "/api/v1"),
        "schema_version": os.getenv("API_SCHEMA_VERSION", "1.0.0"),
        "host": os.getenv("API_HOST", "0.0.0.0"),
        "port": _env_int("API_PORT", 8000),
        "environment": os.getenv("ENV", "local"),
        "database_url": os.getenv("DATABASE_URL", ""),
        "jwt_secret": os.getenv("JWT_SECRET", ""),
        "jwt_algorithm": os.getenv("JWT_ALGORITHM", DEFAULT_ALGORITHM),
        "token_ttl_seconds": _env_int("TOKEN_TTL_SECONDS", DEFAULT_TOKEN_TTL_SECONDS),
        "enabled_services": _env_list("STOREFRONT_SERVICES", list(KNOWN_SERVICES)),
        "enable_request_logging": _env_bool("API_ENABLE_REQUEST_LOGGING", False),
        "auto_create_schema": _env_bool("API_AUTO_CREATE_SCHEMA", False),
        "allowed_origins": _env_list("API_ALLOWED_ORIGINS", []),
        "app_version": os.getenv("APP_VERSION", "0.1.0"),
    }
    if not config_values["database_url"]:
        raise RuntimeError("DATABASE_URL is required for API startup.")
    if not config_values["jwt_secret"]:
        raise RuntimeError("JWT_SECRET is required for API startup.")

    return ApiConfig.model_validate(config_values)


@lru_cache(maxsize=1)
def get_api_config() -> ApiConfig:
    """Cached accessor for API config."""

    return load_api_config()
