# This file implements the authorization guard shared by every service router.
# The guard turns the bearer credential into a Principal; the role check runs after it
# and compares the principal's role with the role set the route declares.
# No postponed annotations here: FastAPI resolves the dependency signatures at runtime.

import logging
from collections.abc import Callable, Iterable
from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from storefront.api.api_config import ApiConfig
from storefront.api.dependencies import get_config
from storefront.api.error_handlers import Forbidden, InvalidCredential, Unauthenticated
from storefront.identity.tokens import Principal, Role, TokenError, decode_token

LOGGER = logging.getLogger("storefront.auth")

ADMIN_ONLY: frozenset[Role] = frozenset({Role.ADMIN})
USER_ONLY: frozenset[Role] = frozenset({Role.USER})
ANY_AUTHENTICATED: frozenset[Role] = frozenset(Role)

_bearer_scheme = HTTPBearer(auto_error=False, description="Token returned by POST /login.")


class AuthGuard:
    """Dependency that validates the bearer token for one endpoint family."""

    def __init__(self, family: str) -> None:
        self.family = family

    def __call__(
        self,
        request: Request,
        config: Annotated[ApiConfig, Depends(get_config)],
        credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(_bearer_scheme)],
    ) -> Principal:
        policy = config.credential_policy(self.family)
        if credentials is None or not credentials.credentials:
            raise Unauthenticated(
                status_code=policy.missing_status,
                message="A bearer token is required.",
            )

        try:
            principal = decode_token(
                credentials.credentials,
                secret=config.jwt_secret,
                algorithm=config.jwt_algorithm,
            )
        except TokenError as exc:
            LOGGER.info("rejected credential family=%s path=%s reason=%s", self.family, request.url.path, exc)
            raise InvalidCredential(
                status_code=policy.invalid_status,
                message="The token is invalid or has expired.",
            ) from exc

        request.state.principal = principal
        return principal

    def __repr__(self) -> str:
        return f"AuthGuard(family={self.family!r})"


def require_roles(guard: AuthGuard, roles: Iterable[Role]) -> Callable[..., Principal]:
    """Build a role check that runs after `guard` and admits only `roles`."""

    allowed = frozenset(roles)

    def role_check(principal: Annotated[Principal, Depends(guard)]) -> Principal:
        if principal.role not in allowed:
            required = ", ".join(sorted(role.value for role in allowed))
            raise Forbidden(message=f"This operation requires one of the roles: {required}.")
        return principal

    return role_check
