# Product request and response models.

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from storefront.api.schemas.common import EnvelopeFields


class ProductCreate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str = Field(min_length=1, max_length=200)
    description: str | None = None
    price: Decimal = Field(ge=0, max_digits=10, decimal_places=2)
    category: str | None = Field(default=None, max_length=120)


class ProductPatch(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str | None = Field(default=None, min_length=1, max_length=200)
    description: str | None = None
    price: Decimal | None = Field(default=None, ge=0, max_digits=10, decimal_places=2)
    category: str | None = Field(default=None, max_length=120)


class ProductV1(BaseModel):
    id: int
    name: str
    description: str | None = None
    price: Decimal
    category: str | None = None
    created_at: datetime


class ProductResponseV1(EnvelopeFields):
    data: ProductV1


class ProductListResponseV1(EnvelopeFields):
    data: list[ProductV1]
