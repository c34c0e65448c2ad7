# This file builds response envelopes for API endpoints in a consistent format.
# The helpers return plain dictionaries that the Pydantic response models validate.

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from fastapi import Request

from storefront.api.api_config import ApiConfig
from storefront.api.schema_versions import build_version_fields


def utc_now() -> datetime:
    """Return timezone-aware UTC timestamp for response generation."""

    return datetime.now(tz=UTC)


def build_envelope(
    *,
    config: ApiConfig,
    request: Request,
    data: dict[str, Any] | list[dict[str, Any]] | None,
    warnings: list[str] | None = None,
) -> dict[str, Any]:
    """Build the standard response envelope around `data`."""

    return {
        **build_version_fields(api_version_path=config.api_version_path, schema_version=config.schema_version),
        "request_id": str(getattr(request.state, "request_id", "unknown")),
        "generated_at": utc_now(),
        "data": data,
        "warnings": warnings,
    }
