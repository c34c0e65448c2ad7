# This file implements the order lifecycle: creation in Pending and the permission rules
# for status changes and deletion.
# An admin may change or delete any order. Any other principal may do so only for its own
# order while the order is still Pending. Every mutation is one conditional statement;
# the follow-up read after a miss only classifies the failure.

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Any, NoReturn

from storefront.api.db_access import DatabaseClient
from storefront.api.error_handlers import ConstraintViolation, Forbidden, NotFound, StorageFailure
from storefront.identity.tokens import Principal

LOGGER = logging.getLogger("storefront.orders")

PENDING = "Pending"

LEGACY_INVALID_ID = "invalid id"
LEGACY_NOT_FOUND = "not found"
LEGACY_INTERNAL_ERROR = "internal error"

_ORDER_COLUMNS = "id, owner_id, total, status, created_at"
_MIN_ORDER_ID = -(2**63)
_MAX_ORDER_ID = 2**63 - 1


class OrderService:
    """Order state machine over the orders table."""

    def __init__(self, *, db: DatabaseClient) -> None:
        self.db = db

    def create_order(self, *, requester: Principal, owner_id: int, total: Decimal) -> dict[str, Any]:
        if not requester.is_admin and owner_id != requester.id:
            raise Forbidden(message="You may only create orders for yourself.")

        query = f"""
        INSERT INTO orders (owner_id, total, status)
        VALUES (:owner_id, :total, :status)
        RETURNING {_ORDER_COLUMNS}
        """
        try:
            order = self.db.execute_returning(
                query,
                # bound as text; sqlite3 has no Decimal adapter
                {"owner_id": owner_id, "total": str(total), "status": PENDING},
            )
        except ConstraintViolation:
            owner = self.db.fetch_one("SELECT id FROM users WHERE id = :owner_id", {"owner_id": owner_id})
            if owner is None:
                raise NotFound(message=f"Owner {owner_id} does not exist.") from None
            raise
        if order is None:
            raise RuntimeError("Insert returned no row.")
        LOGGER.info("order %s created owner_id=%s by principal=%s", order["id"], owner_id, requester.id)
        return order

    def update_status(self, *, requester: Principal, order_id: int, new_status: str) -> dict[str, Any]:
        where_sql, params = self._mutable_by(requester, order_id)
        query = f"""
        UPDATE orders
        SET status = :new_status
        WHERE {where_sql}
        RETURNING {_ORDER_COLUMNS}
        """
        order = self.db.execute_returning(query, {**params, "new_status": new_status})
        if order is None:
            self._raise_not_mutable(order_id, action="update")
        LOGGER.info("order %s status=%s by principal=%s", order_id, new_status, requester.id)
        return order

    def delete_order(self, *, requester: Principal, order_id: int) -> dict[str, Any]:
        where_sql, params = self._mutable_by(requester, order_id)
        query = f"""
        DELETE FROM orders
        WHERE {where_sql}
        RETURNING {_ORDER_COLUMNS}
        """
        order = self.db.execute_returning(query, params)
        if order is None:
            self._raise_not_mutable(order_id, action="delete")
        LOGGER.info("order %s deleted by principal=%s", order_id, requester.id)
        return order

    def list_orders(self, *, requester: Principal, filter_owner_id: int | None = None) -> list[dict[str, Any]]:
        """Newest first. A non-admin filter is ignored; non-admins only ever see their own orders."""

        if requester.is_admin and filter_owner_id is None:
            where_sql, params = "1 = 1", {}
        elif requester.is_admin:
            where_sql, params = "owner_id = :owner_id", {"owner_id": filter_owner_id}
        else:
            where_sql, params = "owner_id = :owner_id", {"owner_id": requester.id}

        query = f"""
        SELECT {_ORDER_COLUMNS}
        FROM orders
        WHERE {where_sql}
        ORDER BY created_at DESC, id DESC
        """
        return self.db.fetch_all(query, params)

    def get_order(self, *, requester: Principal, order_id: int) -> dict[str, Any]:
        order = self.db.fetch_one(f"SELECT {_ORDER_COLUMNS} FROM orders WHERE id = :order_id", {"order_id": order_id})
        # Other owners' orders read as absent.
        if order is None or (not requester.is_admin and order["owner_id"] != requester.id):
            raise NotFound(message=f"Order {order_id} not found.")
        return order

    def get_order_status(self, raw_order_id: Any) -> str:
        """Legacy lookup: the status, or one of the fixed `not found` / `invalid id` answers."""

        order_id = _parse_order_id(raw_order_id)
        if order_id is None:
            return LEGACY_INVALID_ID
        try:
            row = self.db.fetch_one("SELECT status FROM orders WHERE id = :order_id", {"order_id": order_id})
        except StorageFailure:
            LOGGER.exception("legacy status lookup failed order_id=%s", order_id)
            return LEGACY_INTERNAL_ERROR
        if row is None:
            return LEGACY_NOT_FOUND
        return str(row["status"])

    @staticmethod
    def _mutable_by(requester: Principal, order_id: int) -> tuple[str, dict[str, Any]]:
        if requester.is_admin:
            return "id = :order_id", {"order_id": order_id}
        return (
            "id = :order_id AND owner_id = :owner_id AND status = :pending",
            {"order_id": order_id, "owner_id": requester.id, "pending": PENDING},
        )

    def _raise_not_mutable(self, order_id: int, *, action: str) -> NoReturn:
        existing = self.db.fetch_one("SELECT id FROM orders WHERE id = :order_id", {"order_id": order_id})
        if existing is None:
            raise NotFound(message=f"Order {order_id} not found.")
        raise Forbidden(message=f"You may not {action} this order in its current state.")


def _parse_order_id(raw_order_id: Any) -> int | None:
    if isinstance(raw_order_id, bool):
        return None
    if isinstance(raw_order_id, int):
        order_id = raw_order_id
    else:
        try:
            order_id = int(str(raw_order_id).strip())
        except ValueError:
            return None
    # Ids are BIGINT; anything wider can never name an order.
    if not _MIN_ORDER_ID <= order_id <= _MAX_ORDER_ID:
        return None
    return order_id
