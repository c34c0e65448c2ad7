# Order request and response models, including the legacy status lookup payload.

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from storefront.api.schemas.common import EnvelopeFields


class OrderCreate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    owner_id: int = Field(gt=0)
    total: Decimal = Field(ge=0, max_digits=12, decimal_places=2)


class OrderStatusUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    status: str = Field(min_length=1, max_length=32)


class OrderV1(BaseModel):
    id: int
    owner_id: int
    total: Decimal
    status: str
    created_at: datetime


class OrderResponseV1(EnvelopeFields):
    data: OrderV1


class OrderListResponseV1(EnvelopeFields):
    data: list[OrderV1]


class LegacyOrderStatusResponse(BaseModel):
    order_id: str
    status: str
