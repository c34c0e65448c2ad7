# This file implements the cart rules: merge-or-insert on add, owner-scoped update and removal.
# Each mutation is a single statement; ownership is part of the statement predicate,
# so an owner can never address another owner's line.

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from storefront.api.db_access import DatabaseClient
from storefront.api.error_handlers import ConstraintViolation, NotFound, ValidationFailed

LOGGER = logging.getLogger("storefront.cart")

_LINE_COLUMNS = "id, owner_id, product_id, quantity, created_at"


@dataclass(frozen=True)
class AddItemResult:
    line: dict[str, Any]
    created: bool


class CartService:
    """Cart line storage rules."""

    def __init__(self, *, db: DatabaseClient) -> None:
        self.db = db

    def add_item(self, *, owner_id: int, product_id: int, quantity: int) -> AddItemResult:
        """Insert a line or add `quantity` to the existing `(owner_id, product_id)` line.

        Positivity of `quantity` is the caller's responsibility.
        """

        query = f"""
        INSERT INTO cart_lines (owner_id, product_id, quantity)
        VALUES (:owner_id, :product_id, :quantity)
        ON CONFLICT (owner_id, product_id)
        DO UPDATE SET quantity = cart_lines.quantity + excluded.quantity
        RETURNING {_LINE_COLUMNS}
        """
        try:
            line = self.db.execute_returning(
                query,
                {"owner_id": owner_id, "product_id": product_id, "quantity": quantity},
            )
        except ConstraintViolation:
            product = self.db.fetch_one("SELECT id FROM products WHERE id = :product_id", {"product_id": product_id})
            if product is None:
                raise NotFound(message=f"Product {product_id} does not exist.") from None
            owner = self.db.fetch_one("SELECT id FROM users WHERE id = :owner_id", {"owner_id": owner_id})
            if owner is None:
                raise NotFound(message="The cart owner no longer exists.") from None
            raise
        if line is None:
            raise RuntimeError("Upsert returned no row.")

        # An existing line holds at least 1, so a merged quantity always differs from the input.
        created = int(line["quantity"]) == quantity
        LOGGER.info(
            "cart line %s owner_id=%s product_id=%s quantity=%s",
            "created" if created else "merged",
            owner_id,
            product_id,
            line["quantity"],
        )
        return AddItemResult(line=line, created=created)

    def update_quantity(self, *, line_id: int, owner_id: int, quantity: Any) -> dict[str, Any]:
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
            raise ValidationFailed(message="quantity must be an integer greater than or equal to 1.")

        query = f"""
        UPDATE cart_lines
        SET quantity = :quantity
        WHERE id = :line_id AND owner_id = :owner_id
        RETURNING {_LINE_COLUMNS}
        """
        line = self.db.execute_returning(
            query,
            {"quantity": quantity, "line_id": line_id, "owner_id": owner_id},
        )
        if line is None:
            raise NotFound(message="Cart line not found in the caller's cart.")
        return line

    def remove_item(self, *, line_id: int, owner_id: int) -> dict[str, Any]:
        query = f"""
        DELETE FROM cart_lines
        WHERE id = :line_id AND owner_id = :owner_id
        RETURNING {_LINE_COLUMNS}
        """
        line = self.db.execute_returning(query, {"line_id": line_id, "owner_id": owner_id})
        if line is None:
            raise NotFound(message="Cart line not found in the caller's cart.")
        return line

    def list_cart(self, *, owner_id: int) -> list[dict[str, Any]]:
        query = f"""
        SELECT {_LINE_COLUMNS}
        FROM cart_lines
        WHERE owner_id = :owner_id
        ORDER BY id ASC
        """
        lines = self.db.fetch_all(query, {"owner_id": owner_id})
        if not lines:
            raise NotFound(message="The cart is empty.")
        return lines

    def list_all_carts(self) -> list[dict[str, Any]]:
        query = f"""
        SELECT {_LINE_COLUMNS}
        FROM cart_lines
        ORDER BY owner_id ASC, id ASC
        """
        return self.db.fetch_all(query)
