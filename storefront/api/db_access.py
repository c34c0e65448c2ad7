# This file wraps database access so API services run parameter-bound SQL only.
# The client owns the process-scoped connection pool: it is created at startup,
# injected into handlers, and disposed at shutdown.
# Driver errors are translated into the API storage error types here.

from __future__ import annotations

import re
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from typing import Any

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from storefront.api.error_handlers import ConstraintViolation, StorageFailure
from storefront.common.ddl import apply_schema_ddl

_IDENTIFIER_RE = re.compile(r"^[a-zA-Z_][a-zA-Z0-9_]*$")


class DatabaseClient:
    """Minimal SQLAlchemy wrapper for API read/write access."""

    def __init__(self, *, database_url: str) -> None:
        self._engine: Engine = create_engine(database_url, pool_pre_ping=True, future=True)
        if self._engine.dialect.name == "sqlite":
            event.listen(self._engine, "connect", _enable_sqlite_foreign_keys)
        self._closed = False

    @property
    def engine(self) -> Engine:
        return self._engine

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        if not self._closed:
            self._engine.dispose()
            self._closed = True

    def ensure_schema(self) -> None:
        with self._translate_errors():
            apply_schema_ddl(self._engine)

    def can_connect(self) -> bool:
        try:
            with self._engine.connect() as connection:
                connection.execute(text("SELECT 1"))
            return True
        except SQLAlchemyError:
            return False

    def table_exists(self, table_name: str) -> bool:
        self._validate_identifier(table_name)
        if self._engine.dialect.name == "sqlite":
            query = text("SELECT COUNT(*) FROM sqlite_master WHERE type = 'table' AND name = :table_name")
        else:
            query = text("SELECT to_regclass(:table_name) IS NOT NULL AS exists_flag")
        with self._translate_errors(), self._engine.connect() as connection:
            result = connection.execute(query, {"table_name": table_name}).scalar_one()
        return bool(result)

    def fetch_all(self, query: str, params: Mapping[str, Any] | None = None) -> list[dict[str, Any]]:
        with self._translate_errors(), self._engine.connect() as connection:
            rows = connection.execute(text(query), dict(params or {})).mappings().all()
        return [dict(row) for row in rows]

    def fetch_one(self, query: str, params: Mapping[str, Any] | None = None) -> dict[str, Any] | None:
        with self._translate_errors(), self._engine.connect() as connection:
            row = connection.execute(text(query), dict(params or {})).mappings().first()
        return dict(row) if row is not None else None

    def execute(self, query: str, params: Mapping[str, Any] | None = None) -> int:
        """Run one write statement in its own transaction and return the affected row count."""

        with self._translate_errors(), self._engine.begin() as connection:
            result = connection.execute(text(query), dict(params or {}))
            return result.rowcount

    def execute_returning(self, query: str, params: Mapping[str, Any] | None = None) -> dict[str, Any] | None:
        """Run one write statement with a RETURNING clause and return the first row, if any."""

        with self._translate_errors(), self._engine.begin() as connection:
            rows = connection.execute(text(query), dict(params or {})).mappings().all()
        return dict(rows[0]) if rows else None

    @contextmanager
    def _translate_errors(self) -> Iterator[None]:
        try:
            yield
        except IntegrityError as exc:
            raise ConstraintViolation(message=str(exc.orig)) from exc
        except SQLAlchemyError as exc:
            raise StorageFailure(message=f"{type(exc).__name__}: {exc}") from exc

    def _validate_identifier(self, identifier: str) -> str:
        if not _IDENTIFIER_RE.match(identifier):
            raise ValueError(f"Unsafe SQL identifier: {identifier!r}")
        return identifier


def _enable_sqlite_foreign_keys(dbapi_connection: Any, _connection_record: Any) -> None:
    # SQLite leaves REFERENCES and ON DELETE CASCADE unenforced per connection by default.
    cursor = dbapi_connection.cursor()
    try:
        cursor.execute("PRAGMA foreign_keys=ON")
    finally:
        cursor.close()
