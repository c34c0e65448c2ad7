# This file defines the catalog service endpoints.
# Product reads are public; creating, changing and deleting products requires admin.

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request, status

from storefront.api.dependencies import ConfigDep, get_catalog_service
from storefront.api.guard import ADMIN_ONLY, AuthGuard, require_roles
from storefront.api.response_envelope import build_envelope
from storefront.api.schemas.catalog_schemas import (
    ProductCreate,
    ProductListResponseV1,
    ProductPatch,
    ProductResponseV1,
)
from storefront.api.services.catalog_service import CatalogService
from storefront.identity.tokens import Principal

router = APIRouter(prefix="/products", tags=["catalog"])
guard = AuthGuard(family="catalog")
CatalogServiceDep = Annotated[CatalogService, Depends(get_catalog_service)]
AdminDep = Annotated[Principal, Depends(require_roles(guard, ADMIN_ONLY))]


@router.get("", response_model=ProductListResponseV1)
def list_products(
    request: Request,
    service: CatalogServiceDep,
    config: ConfigDep,
    category: str | None = Query(default=None, min_length=1),
) -> dict[str, object]:
    return build_envelope(config=config, request=request, data=service.list_products(category=category))


@router.get("/{product_id}", response_model=ProductResponseV1)
def get_product(
    product_id: int,
    request: Request,
    service: CatalogServiceDep,
    config: ConfigDep,
) -> dict[str, object]:
    return build_envelope(config=config, request=request, data=service.get_product(product_id=product_id))


@router.post("", response_model=ProductResponseV1, status_code=status.HTTP_201_CREATED)
def create_product(
    _: AdminDep,
    payload: ProductCreate,
    request: Request,
    service: CatalogServiceDep,
    config: ConfigDep,
) -> dict[str, object]:
    return build_envelope(config=config, request=request, data=service.create_product(payload))


@router.put("/{product_id}", response_model=ProductResponseV1)
def update_product(
    _: AdminDep,
    product_id: int,
    payload: ProductPatch,
    request: Request,
    service: CatalogServiceDep,
    config: ConfigDep,
) -> dict[str, object]:
    product = service.update_product(product_id=product_id, patch=payload)
    return build_envelope(config=config, request=request, data=product)


@router.delete("/{product_id}", response_model=ProductResponseV1)
def delete_product(
    _: AdminDep,
    product_id: int,
    request: Request,
    service: CatalogServiceDep,
    config: ConfigDep,
) -> dict[str, object]:
    return build_envelope(config=config, request=request, data=service.delete_product(product_id=product_id))
