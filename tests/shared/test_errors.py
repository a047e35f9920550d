"""Tests for the structured error responses."""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from protean.exceptions import ObjectNotFoundError, ValidationError
from pydantic import BaseModel, Field
from shared.errors import (
    EmptyCartError,
    ForbiddenError,
    InvalidSignatureError,
    NegativeStockError,
    PaymentGatewayError,
    register_error_handlers,
)


class _Body(BaseModel):
    quantity: int = Field(ge=1)


@pytest.fixture()
def client():
    app = FastAPI()
    register_error_handlers(app)

    @app.get("/validation")
    async def validation():
        raise ValidationError({"quantity": ["Insufficient stock: only 3 available"]})

    @app.get("/empty-cart")
    async def empty_cart():
        raise EmptyCartError({"cart": ["Cart is empty"]})

    @app.get("/signature")
    async def signature():
        raise InvalidSignatureError({"signature": ["Payment signature verification failed"]})

    @app.get("/negative")
    async def negative():
        raise NegativeStockError({"quantity": ["Adjustment would result in negative quantity"]})

    @app.get("/missing")
    async def missing():
        raise ObjectNotFoundError("Order ord-1 does not exist")

    @app.get("/gateway")
    async def gateway():
        raise PaymentGatewayError("Payment gateway unreachable")

    @app.get("/forbidden")
    async def forbidden():
        raise ForbiddenError("Insufficient role")

    @app.post("/body")
    async def body(payload: _Body):
        return payload

    return TestClient(app, raise_server_exceptions=False)


class TestErrorResponses:
    def test_validation_error_is_400(self, client):
        response = client.get("/validation")
        assert response.status_code == 400
        assert response.json() == {
            "error": {
                "code": "validation_error",
                "message": "Insufficient stock: only 3 available",
                "details": {"quantity": ["Insufficient stock: only 3 available"]},
            }
        }

    @pytest.mark.parametrize(
        "path, code",
        [("/empty-cart", "empty_cart"), ("/signature", "invalid_signature"), ("/negative", "negative_stock")],
    )
    def test_validation_subclasses_keep_their_code(self, client, path, code):
        response = client.get(path)
        assert response.status_code == 400
        assert response.json()["error"]["code"] == code

    def test_not_found_is_404(self, client):
        response = client.get("/missing")
        assert response.status_code == 404
        assert response.json()["error"] == {
            "code": "not_found",
            "message": "Order ord-1 does not exist",
            "details": {},
        }

    def test_gateway_error_is_500(self, client):
        response = client.get("/gateway")
        assert response.status_code == 500
        assert response.json()["error"]["code"] == "payment_gateway_error"

    def test_forbidden_is_403(self, client):
        assert client.get("/forbidden").status_code == 403

    def test_request_body_errors_are_400(self, client):
        response = client.post("/body", json={"quantity": 0})
        assert response.status_code == 400
        error = response.json()["error"]
        assert error["code"] == "validation_error"
        assert "quantity" in error["details"]
