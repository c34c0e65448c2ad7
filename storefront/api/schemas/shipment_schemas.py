# Shipment request and response models.

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from storefront.api.schemas.common import EnvelopeFields


class ShipmentCreate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str = Field(min_length=1, max_length=200)
    destination: str = Field(min_length=1, max_length=255)


class ShipmentPatch(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str | None = Field(default=None, min_length=1, max_length=200)
    destination: str | None = Field(default=None, min_length=1, max_length=255)


class ShipmentV1(BaseModel):
    id: int
    name: str
    destination: str
    created_at: datetime


class ShipmentResponseV1(EnvelopeFields):
    data: ShipmentV1


class ShipmentListResponseV1(EnvelopeFields):
    data: list[ShipmentV1]
