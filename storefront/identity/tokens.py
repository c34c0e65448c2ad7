"""
Identity tokens.
A token is an HS256 JWT carrying the principal (`sub`, `email`, `role`) and
its validity window (`iat`, `exp`). Tokens are never renewed server-side.
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from enum import Enum
from typing import Any

import jwt
from pydantic import BaseModel, ConfigDict, ValidationError

DEFAULT_TOKEN_TTL_SECONDS = 7 * 60
DEFAULT_ALGORITHM = "HS256"
REQUIRED_CLAIMS: tuple[str, ...] = ("sub", "email", "role", "iat", "exp")


class Role(str, Enum):
    USER = "user"
    ADMIN = "admin"


class Principal(BaseModel):
    """Authenticated identity attached to a request."""

    model_config = ConfigDict(frozen=True)

    id: int
    email: str
    role: Role

    @property
    def is_admin(self) -> bool:
        return self.role is Role.ADMIN


class TokenError(Exception):
    """Raised when a token cannot be verified (bad signature, expired, malformed claims)."""


class IssuedToken(BaseModel):
    token: str
    issued_at: datetime
    expires_at: datetime


def issue_token(
    principal: Principal,
    *,
    secret: str,
    ttl_seconds: int = DEFAULT_TOKEN_TTL_SECONDS,
    algorithm: str = DEFAULT_ALGORITHM,
    now: datetime | None = None,
) -> IssuedToken:
    """Sign a token for `principal` valid for `ttl_seconds` from `now`."""

    if ttl_seconds <= 0:
        raise ValueError("ttl_seconds must be greater than 0.")

    issued_at = (now or datetime.now(tz=UTC)).replace(microsecond=0)
    expires_at = issued_at + timedelta(seconds=ttl_seconds)
    claims: dict[str, Any] = {
        "sub": str(principal.id),
        "email": principal.email,
        "role": principal.role.value,
        "iat": issued_at,
        "exp": expires_at,
    }
    token = jwt.encode(claims, secret, algorithm=algorithm)
    return IssuedToken(token=token, issued_at=issued_at, expires_at=expires_at)


def decode_token(
    token: str,
    *,
    secret: str,
    algorithm: str = DEFAULT_ALGORITHM,
    now: datetime | None = None,
) -> Principal:
    """Verify signature and expiry and return the embedded principal."""

    options: dict[str, Any] = {"require": list(REQUIRED_CLAIMS)}
    if now is not None:
        # Expiry is checked below against the supplied clock instead.
        options["verify_exp"] = False
        options["verify_iat"] = False

    try:
        claims = jwt.decode(token, secret, algorithms=[algorithm], options=options)
    except jwt.PyJWTError as exc:
        raise TokenError(str(exc)) from exc

    if now is not None and int(claims["exp"]) <= int(now.timestamp()):
        raise TokenError("Signature has expired")

    try:
        return Principal(id=int(claims["sub"]), email=claims["email"], role=claims["role"])
    except (TypeError, ValueError, ValidationError) as exc:
        raise TokenError(f"Malformed token claims: {exc}") from exc
