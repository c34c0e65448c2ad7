"""DDL helpers for the storefront tables."""

from __future__ import annotations

from sqlalchemy.engine import Engine

STOREFRONT_TABLES: tuple[str, ...] = ("users", "products", "cart_lines", "orders", "shipments")

_ID_COLUMN_BY_DIALECT: dict[str, str] = {
    "postgresql": "BIGSERIAL PRIMARY KEY",
    "sqlite": "INTEGER PRIMARY KEY AUTOINCREMENT",
}

# Applied in order; foreign keys point backwards only.
SCHEMA_DDL: list[str] = [
    """
    CREATE TABLE IF NOT EXISTS users (
        id {id_column},
        name VARCHAR(120) NOT NULL,
        email VARCHAR(255) NOT NULL UNIQUE,
        password_hash VARCHAR(255) NOT NULL,
        role VARCHAR(16) NOT NULL DEFAULT 'user' CHECK (role IN ('user', 'admin')),
        created_at TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS products (
        id {id_column},
        name VARCHAR(200) NOT NULL,
        description TEXT,
        price NUMERIC(10, 2) NOT NULL CHECK (price >= 0),
        category VARCHAR(120),
        created_at TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS cart_lines (
        id {id_column},
        owner_id BIGINT NOT NULL REFERENCES users (id) ON DELETE CASCADE,
        product_id BIGINT NOT NULL REFERENCES products (id) ON DELETE CASCADE,
        quantity INTEGER NOT NULL CHECK (quantity >= 1),
        created_at TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP,
        UNIQUE (owner_id, product_id)
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS orders (
        id {id_column},
        owner_id BIGINT NOT NULL REFERENCES users (id) ON DELETE CASCADE,
        total NUMERIC(12, 2) NOT NULL,
        status VARCHAR(32) NOT NULL DEFAULT 'Pending',
        created_at TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP
    )
    """,
    "CREATE INDEX IF NOT EXISTS ix_orders_owner_created ON orders (owner_id, created_at)",
    """
    CREATE TABLE IF NOT EXISTS shipments (
        id {id_column},
        name VARCHAR(200) NOT NULL,
        destination VARCHAR(255) NOT NULL,
        created_at TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP
    )
    """,
]


def render_schema_ddl(dialect_name: str) -> list[str]:
    """Return the DDL statements with the identity column for `dialect_name`."""

    try:
        id_column = _ID_COLUMN_BY_DIALECT[dialect_name]
    except KeyError as exc:
        supported = ", ".join(sorted(_ID_COLUMN_BY_DIALECT))
        raise ValueError(f"Unsupported database dialect {dialect_name!r}; expected one of: {supported}") from exc
    return [statement.format(id_column=id_column).strip() for statement in SCHEMA_DDL]


def apply_schema_ddl(engine: Engine) -> None:
    """Create the storefront tables if they do not exist yet."""

    with engine.begin() as connection:
        for statement in render_schema_ddl(engine.dialect.name):
            connection.exec_driver_sql(statement)
