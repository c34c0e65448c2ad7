#!/usr/bin/env python3
"""
Create the storefront tables in the configured database.
It packages the schema bootstrap so every service process can start against a ready database.
Run it directly or via `make`, and expect it to exit non-zero when the database is unreachable.
"""
# ruff: noqa: E402

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from storefront.api.db_access import DatabaseClient
from storefront.api.error_handlers import StorageFailure
from storefront.common.ddl import STOREFRONT_TABLES
from storefront.common.logging import configure_logging
from storefront.common.settings import get_settings


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Apply the storefront schema")
    parser.add_argument("--database-url", default=None, help="Defaults to DATABASE_URL from the environment.")
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    configure_logging()
    db = DatabaseClient(database_url=args.database_url or get_settings().DATABASE_URL)
    try:
        db.ensure_schema()
        tables = {table: db.table_exists(table) for table in STOREFRONT_TABLES}
    except StorageFailure as exc:
        print(f"Schema bootstrap failed: {exc.message}", file=sys.stderr)
        sys.exit(1)
    finally:
        db.close()
    print(json.dumps({"tables": tables}, indent=2))


if __name__ == "__main__":
    main()
