# This file implements the identity issuer and account administration.
# Login verifies the argon2 hash and signs a short-lived token with the shared secret.
# Partial updates go through an explicit patch object: only present fields are applied,
# in one static statement.

from __future__ import annotations

import logging
from typing import Any

from storefront.api.api_config import ApiConfig
from storefront.api.db_access import DatabaseClient
from storefront.api.error_handlers import (
    Conflict,
    ConstraintViolation,
    InvalidCredential,
    NotFound,
    Unauthenticated,
)
from storefront.api.schemas.account_schemas import RegistrationRequest, UserPatch
from storefront.api.services.patching import patch_changes
from storefront.identity.passwords import hash_password, needs_rehash, verify_password
from storefront.identity.tokens import IssuedToken, Principal, Role, issue_token

LOGGER = logging.getLogger("storefront.accounts")

_USER_COLUMNS = "id, name, email, role, created_at"


class AccountService:
    """User registration, login and account administration."""

    def __init__(self, *, config: ApiConfig, db: DatabaseClient) -> None:
        self.config = config
        self.db = db

    def register(self, registration: RegistrationRequest) -> dict[str, Any]:
        query = f"""
        INSERT INTO users (name, email, password_hash, role)
        VALUES (:name, :email, :password_hash, :role)
        RETURNING {_USER_COLUMNS}
        """
        try:
            user = self.db.execute_returning(
                query,
                {
                    "name": registration.name,
                    "email": registration.email,
                    "password_hash": hash_password(registration.password),
                    "role": Role.USER.value,
                },
            )
        except ConstraintViolation as exc:
            raise Conflict(message="An account with this email already exists.") from exc
        if user is None:
            raise RuntimeError("Insert returned no row.")
        LOGGER.info("registered user id=%s", user["id"])
        return user

    def login(self, *, email: str, password: str) -> IssuedToken:
        row = self.db.fetch_one(
            "SELECT id, email, role, password_hash FROM users WHERE email = :email",
            {"email": email},
        )
        if row is None:
            raise Unauthenticated(message="Invalid email or password.")
        if not verify_password(row["password_hash"], password):
            LOGGER.info("failed login user id=%s", row["id"])
            raise InvalidCredential(message="Invalid email or password.")

        if needs_rehash(row["password_hash"]):
            self.db.execute(
                "UPDATE users SET password_hash = :password_hash WHERE id = :user_id",
                {"password_hash": hash_password(password), "user_id": row["id"]},
            )

        principal = Principal(id=row["id"], email=row["email"], role=row["role"])
        return issue_token(
            principal,
            secret=self.config.jwt_secret,
            ttl_seconds=self.config.token_ttl_seconds,
            algorithm=self.config.jwt_algorithm,
        )

    def get_profile(self, *, user_id: int) -> dict[str, Any]:
        user = self.db.fetch_one(f"SELECT {_USER_COLUMNS} FROM users WHERE id = :user_id", {"user_id": user_id})
        if user is None:
            raise NotFound(message="User not found.")
        return user

    def list_users(self) -> list[dict[str, Any]]:
        return self.db.fetch_all(f"SELECT {_USER_COLUMNS} FROM users ORDER BY id ASC")

    def update_user(self, *, user_id: int, patch: UserPatch) -> dict[str, Any]:
        changes = patch_changes(patch, required=("name", "email", "password", "role"))

        params: dict[str, Any] = {
            "user_id": user_id,
            "name": changes.get("name"),
            "email": changes.get("email"),
            "password_hash": hash_password(changes["password"]) if "password" in changes else None,
            "role": changes["role"].value if "role" in changes else None,
        }
        query = f"""
        UPDATE users
        SET name = COALESCE(:name, name),
            email = COALESCE(:email, email),
            password_hash = COALESCE(:password_hash, password_hash),
            role = COALESCE(:role, role)
        WHERE id = :user_id
        RETURNING {_USER_COLUMNS}
        """
        try:
            user = self.db.execute_returning(query, params)
        except ConstraintViolation as exc:
            raise Conflict(message="An account with this email already exists.") from exc
        if user is None:
            raise NotFound(message="User not found.")
        LOGGER.info("updated user id=%s fields=%s", user_id, sorted(changes))
        return user

    def delete_user(self, *, user_id: int) -> None:
        deleted = self.db.execute("DELETE FROM users WHERE id = :user_id", {"user_id": user_id})
        if deleted == 0:
            raise NotFound(message="User not found.")
        LOGGER.info("deleted user id=%s", user_id)
