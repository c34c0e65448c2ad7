# This file tests the shared authorization guard across the endpoint families.
# Each family keeps its own status codes for a missing and for a rejected credential.
# Role checks always answer 403 once the credential itself is valid.

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest

from storefront.identity.tokens import Role
from tests.api.support import api_test_client, auth_headers, seed_user

FAMILY_PROBES = [
    # (family, method, path, missing status, invalid status)
    ("accounts", "GET", "/api/v1/users/me", 401, 403),
    ("catalog", "POST", "/api/v1/products", 401, 403),
    ("cart", "GET", "/api/v1/cart", 401, 403),
    ("orders", "GET", "/api/v1/orders", 403, 401),
    ("shipments", "GET", "/api/v1/shipments", 403, 401),
]


@pytest.mark.parametrize(("family", "method", "path", "missing_status", "invalid_status"), FAMILY_PROBES)
def test_missing_credential_status_per_family(
    db_client, family: str, method: str, path: str, missing_status: int, invalid_status: int
) -> None:
    with api_test_client(db_client=db_client) as client:
        response = client.request(method, path)

    assert response.status_code == missing_status, family
    assert response.json()["error_code"] == "UNAUTHENTICATED"


@pytest.mark.parametrize(("family", "method", "path", "missing_status", "invalid_status"), FAMILY_PROBES)
def test_bad_signature_status_per_family(
    db_client, family: str, method: str, path: str, missing_status: int, invalid_status: int
) -> None:
    headers = auth_headers(1, secret="some-other-secret-of-sufficient-length")
    with api_test_client(db_client=db_client) as client:
        response = client.request(method, path, headers=headers)

    assert response.status_code == invalid_status, family
    assert response.json()["error_code"] == "INVALID_CREDENTIAL"


@pytest.mark.parametrize(("family", "method", "path", "missing_status", "invalid_status"), FAMILY_PROBES)
def test_expired_token_status_per_family(
    db_client, family: str, method: str, path: str, missing_status: int, invalid_status: int
) -> None:
    headers = auth_headers(1, now=datetime.now(tz=UTC) - timedelta(hours=1))
    with api_test_client(db_client=db_client) as client:
        response = client.request(method, path, headers=headers)

    assert response.status_code == invalid_status, family


def test_non_bearer_scheme_counts_as_missing(db_client) -> None:
    with api_test_client(db_client=db_client) as client:
        cart = client.get("/api/v1/cart", headers={"Authorization": "Token abc"})
        orders = client.get("/api/v1/orders", headers={"Authorization": "Token abc"})

    assert cart.status_code == 401
    assert orders.status_code == 403


def test_garbage_token_is_invalid(db_client) -> None:
    with api_test_client(db_client=db_client) as client:
        response = client.get("/api/v1/orders", headers={"Authorization": "Bearer not-a-jwt"})

    assert response.status_code == 401
    assert response.json()["error_code"] == "INVALID_CREDENTIAL"


def test_user_role_on_admin_route_is_forbidden(db_client) -> None:
    user_id = seed_user(db_client, email="shopper@example.com")
    with api_test_client(db_client=db_client) as client:
        response = client.get("/api/v1/admin/cart", headers=auth_headers(user_id))

    assert response.status_code == 403
    assert response.json()["error_code"] == "FORBIDDEN"


def test_admin_role_on_user_only_route_is_forbidden(db_client) -> None:
    admin_id = seed_user(db_client, email="admin@example.com", role=Role.ADMIN)
    with api_test_client(db_client=db_client) as client:
        response = client.get("/api/v1/cart", headers=auth_headers(admin_id, role=Role.ADMIN))

    assert response.status_code == 403


def test_public_catalog_reads_skip_the_guard(db_client) -> None:
    with api_test_client(db_client=db_client) as client:
        response = client.get("/api/v1/products")

    assert response.status_code == 200
    assert response.json()["data"] == []
