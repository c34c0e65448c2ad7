# This file implements catalog reads (public) and product administration (admin routes).

from __future__ import annotations

from typing import Any

from storefront.api.db_access import DatabaseClient
from storefront.api.error_handlers import NotFound
from storefront.api.schemas.catalog_schemas import ProductCreate, ProductPatch
from storefront.api.services.patching import patch_changes

_PRODUCT_COLUMNS = "id, name, description, price, category, created_at"


class CatalogService:
    """Product storage."""

    def __init__(self, *, db: DatabaseClient) -> None:
        self.db = db

    def list_products(self, *, category: str | None = None) -> list[dict[str, Any]]:
        if category is None:
            return self.db.fetch_all(f"SELECT {_PRODUCT_COLUMNS} FROM products ORDER BY id ASC")
        return self.db.fetch_all(
            f"SELECT {_PRODUCT_COLUMNS} FROM products WHERE LOWER(category) = LOWER(:category) ORDER BY id ASC",
            {"category": category},
        )

    def get_product(self, *, product_id: int) -> dict[str, Any]:
        product = self.db.fetch_one(
            f"SELECT {_PRODUCT_COLUMNS} FROM products WHERE id = :product_id",
            {"product_id": product_id},
        )
        if product is None:
            raise NotFound(message=f"Product {product_id} not found.")
        return product

    def create_product(self, product: ProductCreate) -> dict[str, Any]:
        query = f"""
        INSERT INTO products (name, description, price, category)
        VALUES (:name, :description, :price, :category)
        RETURNING {_PRODUCT_COLUMNS}
        """
        created = self.db.execute_returning(
            query,
            {
                "name": product.name,
                "description": product.description,
                "price": str(product.price),
                "category": product.category,
            },
        )
        if created is None:
            raise RuntimeError("Insert returned no row.")
        return created

    def update_product(self, *, product_id: int, patch: ProductPatch) -> dict[str, Any]:
        changes = patch_changes(patch, required=("name", "price"))

        # Nullable columns carry a presence flag so an explicit null clears them.
        query = f"""
        UPDATE products
        SET name = COALESCE(:name, name),
            description = CASE WHEN :set_description THEN :description ELSE description END,
            price = COALESCE(:price, price),
            category = CASE WHEN :set_category THEN :category ELSE category END
        WHERE id = :product_id
        RETURNING {_PRODUCT_COLUMNS}
        """
        updated = self.db.execute_returning(
            query,
            {
                "product_id": product_id,
                "name": changes.get("name"),
                "description": changes.get("description"),
                "price": str(changes["price"]) if "price" in changes else None,
                "category": changes.get("category"),
                "set_description": "description" in changes,
                "set_category": "category" in changes,
            },
        )
        if updated is None:
            raise NotFound(message=f"Product {product_id} not found.")
        return updated

    def delete_product(self, *, product_id: int) -> dict[str, Any]:
        deleted = self.db.execute_returning(
            f"DELETE FROM products WHERE id = :product_id RETURNING {_PRODUCT_COLUMNS}",
            {"product_id": product_id},
        )
        if deleted is None:
            raise NotFound(message=f"Product {product_id} not found.")
        return deleted
