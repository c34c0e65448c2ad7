# This file defines the accounts service endpoints: registration, login, and user administration.
# Registration and login are public; profile reads need any token; administration needs admin.

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Request, status

from storefront.api.dependencies import ConfigDep, get_account_service
from storefront.api.guard import ADMIN_ONLY, ANY_AUTHENTICATED, AuthGuard, require_roles
from storefront.api.response_envelope import build_envelope
from storefront.api.schemas.account_schemas import (
    LoginRequest,
    RegistrationRequest,
    TokenResponseV1,
    UserListResponseV1,
    UserPatch,
    UserResponseV1,
)
from storefront.api.schemas.common import MessageResponseV1
from storefront.api.services.account_service import AccountService
from storefront.identity.tokens import Principal

router = APIRouter(tags=["accounts"])
guard = AuthGuard(family="accounts")
AccountServiceDep = Annotated[AccountService, Depends(get_account_service)]
AuthenticatedDep = Annotated[Principal, Depends(require_roles(guard, ANY_AUTHENTICATED))]
AdminDep = Annotated[Principal, Depends(require_roles(guard, ADMIN_ONLY))]


@router.post("/registration", response_model=UserResponseV1, status_code=status.HTTP_201_CREATED)
def register(
    payload: RegistrationRequest,
    request: Request,
    service: AccountServiceDep,
    config: ConfigDep,
) -> dict[str, object]:
    user = service.register(payload)
    return build_envelope(config=config, request=request, data=user)


@router.post("/login", response_model=TokenResponseV1)
def login(
    payload: LoginRequest,
    request: Request,
    service: AccountServiceDep,
    config: ConfigDep,
) -> dict[str, object]:
    issued = service.login(email=payload.email, password=payload.password)
    return build_envelope(
        config=config,
        request=request,
        data={
            "token": issued.token,
            "token_type": "bearer",
            "issued_at": issued.issued_at,
            "expires_at": issued.expires_at,
            "expires_in": config.token_ttl_seconds,
        },
    )


@router.get("/users/me", response_model=UserResponseV1)
def profile(
    principal: AuthenticatedDep,
    request: Request,
    service: AccountServiceDep,
    config: ConfigDep,
) -> dict[str, object]:
    return build_envelope(config=config, request=request, data=service.get_profile(user_id=principal.id))


@router.get("/users", response_model=UserListResponseV1)
def list_users(
    _: AdminDep,
    request: Request,
    service: AccountServiceDep,
    config: ConfigDep,
) -> dict[str, object]:
    return build_envelope(config=config, request=request, data=service.list_users())


@router.put("/users/{user_id}", response_model=UserResponseV1)
def update_user(
    _: AdminDep,
    user_id: int,
    payload: UserPatch,
    request: Request,
    service: AccountServiceDep,
    config: ConfigDep,
) -> dict[str, object]:
    user = service.update_user(user_id=user_id, patch=payload)
    return build_envelope(config=config, request=request, data=user)


@router.delete("/users/{user_id}", response_model=MessageResponseV1)
def delete_user(
    _: AdminDep,
    user_id: int,
    request: Request,
    service: AccountServiceDep,
    config: ConfigDep,
) -> dict[str, object]:
    service.delete_user(user_id=user_id)
    return build_envelope(config=config, request=request, data={"message": f"User {user_id} deleted."})
