# This file tests the order lifecycle endpoints and their ownership rules.
# Owners may change or delete their own orders only while Pending; admins may always.

from __future__ import annotations

import pytest

from storefront.identity.tokens import Role
from tests.api.support import api_test_client, as_decimal, auth_headers, seed_user


def _create_order(client, owner_id: int, total: str = "25.50") -> dict:
    response = client.post(
        "/api/v1/orders",
        json={"owner_id": owner_id, "total": total},
        headers=auth_headers(owner_id),
    )
    assert response.status_code == 201
    return response.json()["data"]


def test_create_order_starts_pending(db_client) -> None:
    user_id = seed_user(db_client, email="a@example.com")
    with api_test_client(db_client=db_client) as client:
        order = _create_order(client, user_id, total="19.99")

    assert order["status"] == "Pending"
    assert order["owner_id"] == user_id
    assert as_decimal(order["total"]) == as_decimal("19.99")


def test_user_cannot_create_order_for_someone_else(db_client) -> None:
    a_id = seed_user(db_client, email="a@example.com")
    b_id = seed_user(db_client, email="b@example.com")
    with api_test_client(db_client=db_client) as client:
        response = client.post("/api/v1/orders", json={"owner_id": b_id, "total": "5"}, headers=auth_headers(a_id))

    assert response.status_code == 403


def test_admin_can_create_order_for_any_owner(db_client) -> None:
    admin_id = seed_user(db_client, email="admin@example.com", role=Role.ADMIN)
    b_id = seed_user(db_client, email="b@example.com")
    with api_test_client(db_client=db_client) as client:
        response = client.post(
            "/api/v1/orders",
            json={"owner_id": b_id, "total": "5"},
            headers=auth_headers(admin_id, role=Role.ADMIN),
        )

    assert response.status_code == 201
    assert response.json()["data"]["owner_id"] == b_id


def test_status_changes_follow_ownership_and_pending_rule(db_client) -> None:
    a_id = seed_user(db_client, email="a@example.com")
    b_id = seed_user(db_client, email="b@example.com")
    admin_id = seed_user(db_client, email="admin@example.com", role=Role.ADMIN)

    with api_test_client(db_client=db_client) as client:
        order_id = _create_order(client, a_id)["id"]
        by_other = client.put(f"/api/v1/orders/{order_id}", json={"status": "Cancelled"}, headers=auth_headers(b_id))
        by_owner = client.put(f"/api/v1/orders/{order_id}", json={"status": "Cancelled"}, headers=auth_headers(a_id))
        owner_again = client.put(f"/api/v1/orders/{order_id}", json={"status": "Pending"}, headers=auth_headers(a_id))
        by_admin = client.put(
            f"/api/v1/orders/{order_id}",
            json={"status": "Shipped"},
            headers=auth_headers(admin_id, role=Role.ADMIN),
        )

    assert by_other.status_code == 403
    assert by_owner.status_code == 200
    assert by_owner.json()["data"]["status"] == "Cancelled"
    assert owner_again.status_code == 403
    assert by_admin.status_code == 200
    assert by_admin.json()["data"]["status"] == "Shipped"


def test_delete_rules(db_client) -> None:
    a_id = seed_user(db_client, email="a@example.com")
    admin_id = seed_user(db_client, email="admin@example.com", role=Role.ADMIN)
    admin = auth_headers(admin_id, role=Role.ADMIN)

    with api_test_client(db_client=db_client) as client:
        pending_id = _create_order(client, a_id)["id"]
        shipped_id = _create_order(client, a_id)["id"]
        client.put(f"/api/v1/orders/{shipped_id}", json={"status": "Shipped"}, headers=admin)

        owner_deletes_pending = client.delete(f"/api/v1/orders/{pending_id}", headers=auth_headers(a_id))
        owner_deletes_shipped = client.delete(f"/api/v1/orders/{shipped_id}", headers=auth_headers(a_id))
        admin_deletes_shipped = client.delete(f"/api/v1/orders/{shipped_id}", headers=admin)
        missing = client.delete(f"/api/v1/orders/{shipped_id}", headers=admin)

    assert owner_deletes_pending.status_code == 200
    assert owner_deletes_shipped.status_code == 403
    assert admin_deletes_shipped.status_code == 200
    assert missing.status_code == 404


def test_list_orders_scopes_non_admins_to_themselves(db_client) -> None:
    a_id = seed_user(db_client, email="a@example.com")
    b_id = seed_user(db_client, email="b@example.com")
    admin_id = seed_user(db_client, email="admin@example.com", role=Role.ADMIN)

    with api_test_client(db_client=db_client) as client:
        first = _create_order(client, a_id)["id"]
        second = _create_order(client, a_id)["id"]
        _create_order(client, b_id)
        own = client.get("/api/v1/orders", params={"owner_id": b_id}, headers=auth_headers(a_id))
        filtered = client.get(
            "/api/v1/orders",
            params={"owner_id": a_id},
            headers=auth_headers(admin_id, role=Role.ADMIN),
        )
        everything = client.get("/api/v1/orders", headers=auth_headers(admin_id, role=Role.ADMIN))

    assert [order["id"] for order in own.json()["data"]] == [second, first]
    assert [order["id"] for order in filtered.json()["data"]] == [second, first]
    assert len(everything.json()["data"]) == 3


def test_get_order_hides_other_owners(db_client) -> None:
    a_id = seed_user(db_client, email="a@example.com")
    b_id = seed_user(db_client, email="b@example.com")

    with api_test_client(db_client=db_client) as client:
        order_id = _create_order(client, a_id)["id"]
        own = client.get(f"/api/v1/orders/{order_id}", headers=auth_headers(a_id))
        other = client.get(f"/api/v1/orders/{order_id}", headers=auth_headers(b_id))

    assert own.status_code == 200
    assert other.status_code == 404


def test_legacy_status_lookup_is_unauthenticated(db_client) -> None:
    a_id = seed_user(db_client, email="a@example.com")

    with api_test_client(db_client=db_client) as client:
        order_id = _create_order(client, a_id)["id"]
        found = client.get("/api/v1/legacy/order-status", params={"order_id": str(order_id)})
        missing = client.get("/api/v1/legacy/order-status", params={"order_id": "999999"})
        invalid = client.get("/api/v1/legacy/order-status", params={"order_id": "abc"})

    assert found.status_code == 200
    assert found.json() == {"order_id": str(order_id), "status": "Pending"}
    assert missing.json()["status"] == "not found"
    assert invalid.json()["status"] == "invalid id"


def test_admin_order_for_unknown_owner_is_not_found(db_client) -> None:
    admin_id = seed_user(db_client, email="admin@example.com", role=Role.ADMIN)
    with api_test_client(db_client=db_client) as client:
        response = client.post(
            "/api/v1/orders",
            json={"owner_id": 999, "total": "5"},
            headers=auth_headers(admin_id, role=Role.ADMIN),
        )

    assert response.status_code == 404
    assert response.json()["error_code"] == "NOT_FOUND"


@pytest.mark.parametrize("requested_status", ["Pending", "Cancelled", "Shipped"])
def test_owner_cannot_change_shipped_order(db_client, requested_status: str) -> None:
    a_id = seed_user(db_client, email="a@example.com")
    admin_id = seed_user(db_client, email="admin@example.com", role=Role.ADMIN)

    with api_test_client(db_client=db_client) as client:
        order_id = _create_order(client, a_id)["id"]
        client.put(
            f"/api/v1/orders/{order_id}",
            json={"status": "Shipped"},
            headers=auth_headers(admin_id, role=Role.ADMIN),
        )
        response = client.put(
            f"/api/v1/orders/{order_id}",
            json={"status": requested_status},
            headers=auth_headers(a_id),
        )
        current = client.get(f"/api/v1/orders/{order_id}", headers=auth_headers(a_id))

    assert response.status_code == 403
    assert current.json()["data"]["status"] == "Shipped"


def test_legacy_status_lookup_with_oversized_id(db_client) -> None:
    with api_test_client(db_client=db_client) as client:
        response = client.get("/api/v1/legacy/order-status", params={"order_id": "99999999999999999999"})

    assert response.status_code == 200
    assert response.json()["status"] == "invalid id"
