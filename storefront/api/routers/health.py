# This file defines the root probe plus liveness, readiness, and version endpoints.
# None of these routes pass through the authorization guard.
# Readiness confirms database connectivity and that the storefront tables exist.

from __future__ import annotations

import subprocess
from datetime import UTC, datetime

from fastapi import APIRouter, Request

from storefront.api.dependencies import ConfigDep, DBDep
from storefront.api.schema_versions import build_version_fields
from storefront.api.schemas.health_schemas import (
    HealthResponse,
    ReadinessResponse,
    RootResponse,
    VersionResponse,
)
from storefront.common.ddl import STOREFRONT_TABLES

router = APIRouter(tags=["health"])


def _utc_now() -> datetime:
    return datetime.now(tz=UTC)


def _git_commit() -> str | None:
    try:
        completed = subprocess.run(
            ["git", "rev-parse", "--short", "HEAD"],
            check=True,
            capture_output=True,
            text=True,
        )
    except (OSError, subprocess.CalledProcessError):
        return None
    return completed.stdout.strip() or None


@router.get("/", response_model=RootResponse)
def root(config: ConfigDep) -> dict[str, object]:
    return {
        "service_name": config.api_name,
        "services": config.enabled_services,
        "status": "running",
    }


@router.get("/health", response_model=HealthResponse)
def health(
    request: Request,
    config: ConfigDep,
) -> dict[str, object]:
    return {
        **build_version_fields(
            api_version_path=config.api_version_path,
            schema_version=config.schema_version,
        ),
        "request_id": request.state.request_id,
        "status": "ok",
        "environment": config.environment,
        "service_name": config.api_name,
        "services": config.enabled_services,
        "timestamp": _utc_now(),
    }


@router.get("/ready", response_model=ReadinessResponse)
def ready(
    request: Request,
    config: ConfigDep,
    db: DBDep,
) -> dict[str, object]:
    db_connected = db.can_connect()
    missing_tables = [table for table in STOREFRONT_TABLES if not (db_connected and db.table_exists(table))]
    tables_ready = db_connected and not missing_tables

    return {
        **build_version_fields(
            api_version_path=config.api_version_path,
            schema_version=config.schema_version,
        ),
        "request_id": request.state.request_id,
        "db_connected": db_connected,
        "tables_ready": tables_ready,
        "missing_tables": missing_tables,
        "ready": tables_ready,
        "database": "reachable" if db_connected else "unreachable",
        "timestamp": _utc_now(),
    }


@router.get("/version", response_model=VersionResponse)
def version(
    request: Request,
    config: ConfigDep,
) -> dict[str, object]:
    return {
        **build_version_fields(
            api_version_path=config.api_version_path,
            schema_version=config.schema_version,
        ),
        "request_id": request.state.request_id,
        "api_version_path": config.api_version_path,
        "app_version": config.app_version,
        "git_commit": _git_commit(),
        "project": config.api_name,
        "version": config.app_version,
        "timestamp": _utc_now(),
    }
