# This file defines the shipments service endpoints.
# Listing needs any token; creating, changing and deleting shipments requires admin.

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Request, status

from storefront.api.dependencies import ConfigDep, get_shipment_service
from storefront.api.guard import ADMIN_ONLY, ANY_AUTHENTICATED, AuthGuard, require_roles
from storefront.api.response_envelope import build_envelope
from storefront.api.schemas.common import MessageResponseV1
from storefront.api.schemas.shipment_schemas import (
    ShipmentCreate,
    ShipmentListResponseV1,
    ShipmentPatch,
    ShipmentResponseV1,
)
from storefront.api.services.shipment_service import ShipmentService
from storefront.identity.tokens import Principal

router = APIRouter(prefix="/shipments", tags=["shipments"])
guard = AuthGuard(family="shipments")
ShipmentServiceDep = Annotated[ShipmentService, Depends(get_shipment_service)]
AuthenticatedDep = Annotated[Principal, Depends(require_roles(guard, ANY_AUTHENTICATED))]
AdminDep = Annotated[Principal, Depends(require_roles(guard, ADMIN_ONLY))]


@router.get("", response_model=ShipmentListResponseV1)
def list_shipments(
    _: AuthenticatedDep,
    request: Request,
    service: ShipmentServiceDep,
    config: ConfigDep,
) -> dict[str, object]:
    return build_envelope(config=config, request=request, data=service.list_shipments())


@router.post("", response_model=ShipmentResponseV1, status_code=status.HTTP_201_CREATED)
def create_shipment(
    _: AdminDep,
    payload: ShipmentCreate,
    request: Request,
    service: ShipmentServiceDep,
    config: ConfigDep,
) -> dict[str, object]:
    return build_envelope(config=config, request=request, data=service.create_shipment(payload))


@router.put("/{shipment_id}", response_model=ShipmentResponseV1)
def update_shipment(
    _: AdminDep,
    shipment_id: int,
    payload: ShipmentPatch,
    request: Request,
    service: ShipmentServiceDep,
    config: ConfigDep,
) -> dict[str, object]:
    shipment = service.update_shipment(shipment_id=shipment_id, patch=payload)
    return build_envelope(config=config, request=request, data=shipment)


@router.delete("/{shipment_id}", response_model=MessageResponseV1)
def delete_shipment(
    _: AdminDep,
    shipment_id: int,
    request: Request,
    service: ShipmentServiceDep,
    config: ConfigDep,
) -> dict[str, object]:
    service.delete_shipment(shipment_id=shipment_id)
    return build_envelope(config=config, request=request, data={"message": f"Shipment {shipment_id} deleted."})
