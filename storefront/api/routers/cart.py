# This file defines the cart service endpoints.
# Cart contents belong to the calling user; the line id in the path is always
# matched together with the caller's id. Admins may only list every cart.

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Request, Response, status

from storefront.api.dependencies import ConfigDep, get_cart_service
from storefront.api.guard import ADMIN_ONLY, USER_ONLY, AuthGuard, require_roles
from storefront.api.response_envelope import build_envelope
from storefront.api.schemas.cart_schemas import (
    CartItemAdd,
    CartLineListResponseV1,
    CartLineResponseV1,
    CartQuantityUpdate,
)
from storefront.api.services.cart_service import CartService
from storefront.identity.tokens import Principal

router = APIRouter(tags=["cart"])
guard = AuthGuard(family="cart")
CartServiceDep = Annotated[CartService, Depends(get_cart_service)]
UserDep = Annotated[Principal, Depends(require_roles(guard, USER_ONLY))]
AdminDep = Annotated[Principal, Depends(require_roles(guard, ADMIN_ONLY))]


@router.get("/cart", response_model=CartLineListResponseV1)
def get_cart(
    principal: UserDep,
    request: Request,
    service: CartServiceDep,
    config: ConfigDep,
) -> dict[str, object]:
    return build_envelope(config=config, request=request, data=service.list_cart(owner_id=principal.id))


@router.post(
    "/cart",
    response_model=CartLineResponseV1,
    status_code=status.HTTP_201_CREATED,
    responses={200: {"description": "Quantity merged into an existing line."}},
)
def add_item(
    principal: UserDep,
    payload: CartItemAdd,
    request: Request,
    response: Response,
    service: CartServiceDep,
    config: ConfigDep,
) -> dict[str, object]:
    result = service.add_item(owner_id=principal.id, product_id=payload.product_id, quantity=payload.quantity)
    if not result.created:
        response.status_code = status.HTTP_200_OK
    return build_envelope(config=config, request=request, data=result.line)


@router.put("/cart/{line_id}", response_model=CartLineResponseV1)
def update_quantity(
    principal: UserDep,
    line_id: int,
    payload: CartQuantityUpdate,
    request: Request,
    service: CartServiceDep,
    config: ConfigDep,
) -> dict[str, object]:
    line = service.update_quantity(line_id=line_id, owner_id=principal.id, quantity=payload.quantity)
    return build_envelope(config=config, request=request, data=line)


@router.delete("/cart/{line_id}", response_model=CartLineResponseV1)
def remove_item(
    principal: UserDep,
    line_id: int,
    request: Request,
    service: CartServiceDep,
    config: ConfigDep,
) -> dict[str, object]:
    line = service.remove_item(line_id=line_id, owner_id=principal.id)
    return build_envelope(config=config, request=request, data=line)


@router.get("/admin/cart", response_model=CartLineListResponseV1)
def list_all_carts(
    _: AdminDep,
    request: Request,
    service: CartServiceDep,
    config: ConfigDep,
) -> dict[str, object]:
    return build_envelope(config=config, request=request, data=service.list_all_carts())
