# This file defines request and response models for registration, login and user administration.
# UserPatch is the explicit partial-update structure: unset fields are left untouched.

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from storefront.api.schemas.common import EnvelopeFields
from storefront.identity.tokens import Role

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


class RegistrationRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str = Field(min_length=1, max_length=120)
    email: str = Field(pattern=EMAIL_PATTERN, max_length=255)
    password: str = Field(min_length=8, max_length=128)


class LoginRequest(BaseModel):
    email: str = Field(min_length=3, max_length=255)
    password: str = Field(min_length=1, max_length=128)


class UserPatch(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str | None = Field(default=None, min_length=1, max_length=120)
    email: str | None = Field(default=None, pattern=EMAIL_PATTERN, max_length=255)
    password: str | None = Field(default=None, min_length=8, max_length=128)
    role: Role | None = None


class UserV1(BaseModel):
    id: int
    name: str
    email: str
    role: Role
    created_at: datetime


class TokenV1(BaseModel):
    token: str
    token_type: str = "bearer"
    issued_at: datetime
    expires_at: datetime
    expires_in: int


class UserResponseV1(EnvelopeFields):
    data: UserV1


class UserListResponseV1(EnvelopeFields):
    data: list[UserV1]


class TokenResponseV1(EnvelopeFields):
    data: TokenV1
