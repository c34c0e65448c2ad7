# This file provides dependency factories for FastAPI routes.
# The storage client lives on app.state for the lifetime of the process; services
# are cheap per-request objects built around it.
# Tests override these factories instead of touching a real database.

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Request

from storefront.api.api_config import ApiConfig, get_api_config
from storefront.api.db_access import DatabaseClient
from storefront.api.error_handlers import StorageFailure
from storefront.api.services.account_service import AccountService
from storefront.api.services.cart_service import CartService
from storefront.api.services.catalog_service import CatalogService
from storefront.api.services.order_service import OrderService
from storefront.api.services.shipment_service import ShipmentService


def get_config() -> ApiConfig:
    return get_api_config()


def get_database_client(request: Request) -> DatabaseClient:
    db = getattr(request.app.state, "db", None)
    if db is None or db.closed:
        raise StorageFailure(message="Database client is not initialized.")
    return db


ConfigDep = Annotated[ApiConfig, Depends(get_config)]
DBDep = Annotated[DatabaseClient, Depends(get_database_client)]


def get_account_service(config: ConfigDep, db: DBDep) -> AccountService:
    return AccountService(config=config, db=db)


def get_catalog_service(db: DBDep) -> CatalogService:
    return CatalogService(db=db)


def get_cart_service(db: DBDep) -> CartService:
    return CartService(db=db)


def get_order_service(db: DBDep) -> OrderService:
    return OrderService(db=db)


def get_shipment_service(db: DBDep) -> ShipmentService:
    return ShipmentService(db=db)
