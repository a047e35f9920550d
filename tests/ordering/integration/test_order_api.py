"""Integration tests for the admin Order API endpoints."""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from ordering.api.routes import cart_router, checkout_router, order_router
from shared.actor import issue_token
from shared.errors import register_error_handlers


@pytest.fixture()
def admin_headers():
    return {"Authorization": f"Bearer {issue_token('admin-1', roles=['admin'])}"}


@pytest.fixture()
def client():
    app = FastAPI()
    register_error_handlers(app)
    app.include_router(cart_router)
    app.include_router(checkout_router)
    app.include_router(order_router)
    return TestClient(app)


def _place_order(client):
    client.cookies.clear()
    client.post("/cart/items", json={"product_id": "prod-kurta", "variant_id": "kurta-m", "quantity": 2})
    response = client.post(
        "/checkout/payment-intent",
        json={
            "customer": {"name": "Asha Rao", "email": "asha@example.com"},
            "shipping_address": {"address_line1": "12 MG Road", "city": "Bengaluru", "postal_code": "560001"},
        },
    )
    assert response.status_code == 200
    return response.json()["order_id"]


class TestOrderAccess:
    def test_anonymous_is_401(self, client):
        assert client.get("/orders").status_code == 401

    def test_customer_without_admin_role_is_403(self, client):
        headers = {"Authorization": f"Bearer {issue_token('cust-001')}"}
        response = client.get("/orders", headers=headers)
        assert response.status_code == 403
        assert response.json()["error"]["code"] == "forbidden"


class TestListOrdersEndpoint:
    def test_list_orders(self, client, admin_headers):
        first = _place_order(client)
        second = _place_order(client)

        response = client.get("/orders", headers=admin_headers)

        assert response.status_code == 200
        body = response.json()
        assert [o["id"] for o in body["orders"]] == [second, first]
        assert body["next_cursor"] is None
        assert body["orders"][0]["customer_phone"] == "0000000000"

    def test_pagination(self, client, admin_headers):
        ids = [_place_order(client) for _ in range(3)]

        page = client.get("/orders", params={"limit": 2}, headers=admin_headers).json()
        rest = client.get("/orders", params={"limit": 2, "cursor": page["next_cursor"]}, headers=admin_headers).json()

        assert [o["id"] for o in page["orders"] + rest["orders"]] == list(reversed(ids))

    def test_limit_above_maximum_is_400(self, client, admin_headers):
        assert client.get("/orders", params={"limit": 500}, headers=admin_headers).status_code == 400


class TestOrderDetailEndpoint:
    def test_get_order(self, client, admin_headers):
        order_id = _place_order(client)

        response = client.get(f"/orders/{order_id}", headers=admin_headers)

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "pending_payment"
        assert body["total_price"] == 1000.0
        assert body["shipping_address"]["country"] == "India"
        assert body["items"][0]["quantity"] == 2

    def test_unknown_order_is_404(self, client, admin_headers):
        assert client.get("/orders/missing", headers=admin_headers).status_code == 404


class TestCancelOrderEndpoint:
    def test_cancel(self, client, admin_headers):
        order_id = _place_order(client)

        response = client.post(f"/orders/{order_id}/cancel", json={"reason": "Abandoned"}, headers=admin_headers)

        assert response.status_code == 200
        assert response.json()["status"] == "cancelled"
        assert response.json()["cancelled_at"] is not None

    def test_cancel_twice_is_400(self, client, admin_headers):
        order_id = _place_order(client)
        client.post(f"/orders/{order_id}/cancel", json={"reason": "first"}, headers=admin_headers)

        response = client.post(f"/orders/{order_id}/cancel", json={"reason": "again"}, headers=admin_headers)

        assert response.status_code == 400
