# This file implements shipment storage for the shipments service.

from __future__ import annotations

from typing import Any

from storefront.api.db_access import DatabaseClient
from storefront.api.error_handlers import NotFound
from storefront.api.schemas.shipment_schemas import ShipmentCreate, ShipmentPatch
from storefront.api.services.patching import patch_changes

_SHIPMENT_COLUMNS = "id, name, destination, created_at"


class ShipmentService:
    def __init__(self, *, db: DatabaseClient) -> None:
        self.db = db

    def list_shipments(self) -> list[dict[str, Any]]:
        return self.db.fetch_all(f"SELECT {_SHIPMENT_COLUMNS} FROM shipments ORDER BY id ASC")

    def create_shipment(self, shipment: ShipmentCreate) -> dict[str, Any]:
        created = self.db.execute_returning(
            f"""
            INSERT INTO shipments (name, destination)
            VALUES (:name, :destination)
            RETURNING {_SHIPMENT_COLUMNS}
            """,
            {"name": shipment.name, "destination": shipment.destination},
        )
        if created is None:
            raise RuntimeError("Insert returned no row.")
        return created

    def update_shipment(self, *, shipment_id: int, patch: ShipmentPatch) -> dict[str, Any]:
        changes = patch_changes(patch, required=("name", "destination"))

        updated = self.db.execute_returning(
            f"""
            UPDATE shipments
            SET name = COALESCE(:name, name),
                destination = COALESCE(:destination, destination)
            WHERE id = :shipment_id
            RETURNING {_SHIPMENT_COLUMNS}
            """,
            {
                "shipment_id": shipment_id,
                "name": changes.get("name"),
                "destination": changes.get("destination"),
            },
        )
        if updated is None:
            raise NotFound(message=f"Shipment {shipment_id} not found.")
        return updated

    def delete_shipment(self, *, shipment_id: int) -> None:
        deleted = self.db.execute("DELETE FROM shipments WHERE id = :shipment_id", {"shipment_id": shipment_id})
        if deleted == 0:
            raise NotFound(message=f"Shipment {shipment_id} not found.")
