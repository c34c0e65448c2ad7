# This file exposes the legacy order-status lookup used by partner systems.
# It is read-only and unauthenticated, and answers with a plain status string.

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Query

from storefront.api.dependencies import get_order_service
from storefront.api.schemas.order_schemas import LegacyOrderStatusResponse
from storefront.api.services.order_service import OrderService

router = APIRouter(prefix="/legacy", tags=["legacy"])
OrderServiceDep = Annotated[OrderService, Depends(get_order_service)]


@router.get("/order-status", response_model=LegacyOrderStatusResponse)
def get_order_status(
    service: OrderServiceDep,
    order_id: str = Query(...),
) -> dict[str, str]:
    return {"order_id": order_id, "status": service.get_order_status(order_id)}
