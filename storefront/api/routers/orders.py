# This file defines the orders service endpoints.
# Every route needs a token; who may mutate which order is decided by the order service.

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request, status

from storefront.api.dependencies import ConfigDep, get_order_service
from storefront.api.guard import ANY_AUTHENTICATED, AuthGuard, require_roles
from storefront.api.response_envelope import build_envelope
from storefront.api.schemas.order_schemas import (
    OrderCreate,
    OrderListResponseV1,
    OrderResponseV1,
    OrderStatusUpdate,
)
from storefront.api.services.order_service import OrderService
from storefront.identity.tokens import Principal

router = APIRouter(prefix="/orders", tags=["orders"])
guard = AuthGuard(family="orders")
OrderServiceDep = Annotated[OrderService, Depends(get_order_service)]
RequesterDep = Annotated[Principal, Depends(require_roles(guard, ANY_AUTHENTICATED))]


@router.get("", response_model=OrderListResponseV1)
def list_orders(
    requester: RequesterDep,
    request: Request,
    service: OrderServiceDep,
    config: ConfigDep,
    owner_id: int | None = Query(default=None, gt=0),
) -> dict[str, object]:
    orders = service.list_orders(requester=requester, filter_owner_id=owner_id)
    return build_envelope(config=config, request=request, data=orders)


@router.get("/{order_id}", response_model=OrderResponseV1)
def get_order(
    requester: RequesterDep,
    order_id: int,
    request: Request,
    service: OrderServiceDep,
    config: ConfigDep,
) -> dict[str, object]:
    return build_envelope(config=config, request=request, data=service.get_order(requester=requester, order_id=order_id))


@router.post("", response_model=OrderResponseV1, status_code=status.HTTP_201_CREATED)
def create_order(
    requester: RequesterDep,
    payload: OrderCreate,
    request: Request,
    service: OrderServiceDep,
    config: ConfigDep,
) -> dict[str, object]:
    order = service.create_order(requester=requester, owner_id=payload.owner_id, total=payload.total)
    return build_envelope(config=config, request=request, data=order)


@router.put("/{order_id}", response_model=OrderResponseV1)
def update_order_status(
    requester: RequesterDep,
    order_id: int,
    payload: OrderStatusUpdate,
    request: Request,
    service: OrderServiceDep,
    config: ConfigDep,
) -> dict[str, object]:
    order = service.update_status(requester=requester, order_id=order_id, new_status=payload.status)
    return build_envelope(config=config, request=request, data=order)


@router.delete("/{order_id}", response_model=OrderResponseV1)
def delete_order(
    requester: RequesterDep,
    order_id: int,
    request: Request,
    service: OrderServiceDep,
    config: ConfigDep,
) -> dict[str, object]:
    order = service.delete_order(requester=requester, order_id=order_id)
    return build_envelope(config=config, request=request, data=order)
