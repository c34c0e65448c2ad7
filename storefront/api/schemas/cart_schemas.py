# Cart request and response models.
# CartItemAdd requires a positive quantity; CartQuantityUpdate leaves the range check
# to the cart service, which reports it as a 400 validation error.

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, StrictInt

from storefront.api.schemas.common import EnvelopeFields


class CartItemAdd(BaseModel):
    model_config = ConfigDict(extra="forbid")

    product_id: int = Field(gt=0)
    quantity: int = Field(gt=0)


class CartQuantityUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    quantity: StrictInt


class CartLineV1(BaseModel):
    id: int
    owner_id: int
    product_id: int
    quantity: int
    created_at: datetime


class CartLineResponseV1(EnvelopeFields):
    data: CartLineV1


class CartLineListResponseV1(EnvelopeFields):
    data: list[CartLineV1]
