"""Pydantic request/response schemas for the Ordering API.

These are external contracts (anti-corruption layer) — separate from
internal Protean commands.
"""

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Shared sub-models
# ---------------------------------------------------------------------------
class AddressSchema(BaseModel):
    address_line1: str = Field(min_length=1)
    address_line2: str | None = None
    city: str = Field(min_length=1)
    state: str | None = None
    postal_code: str = Field(min_length=1)
    country: str = "India"


class CustomerSchema(BaseModel):
    name: str = Field(min_length=1)
    email: str = Field(min_length=3)
    phone: str | None = None


class StatusResponse(BaseModel):
    status: str = "ok"


# ---------------------------------------------------------------------------
# Cart
# ---------------------------------------------------------------------------
class AddCartItemRequest(BaseModel):
    product_id: str
    variant_id: str | None = None
    quantity: int = Field(ge=1, default=1)

    model_config = {"json_schema_extra": {"examples": [{"product_id": "prod-001", "quantity": 2}]}}


class AddCartItemResponse(BaseModel):
    product_id: str
    variant_id: str
    quantity: int
    price: float
    currency: str


class CartItemResponse(BaseModel):
    id: str
    product_id: str
    variant_id: str
    sku: str
    title: str
    price: float
    quantity: int
    image_url: str
    line_total: float


class CartResponse(BaseModel):
    items: list[CartItemResponse]
    total: float
    count: int
    currency: str


class MergeCartResponse(BaseModel):
    items_merged: int


# ---------------------------------------------------------------------------
# Checkout
# ---------------------------------------------------------------------------
class PaymentIntentRequest(BaseModel):
    customer: CustomerSchema
    shipping_address: AddressSchema
    billing_address: AddressSchema | None = None
    idempotency_key: str | None = Field(default=None, max_length=255)

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "customer": {"name": "Asha Rao", "email": "asha@example.com", "phone": "9876543210"},
                    "shipping_address": {
                        "address_line1": "12 MG Road",
                        "city": "Bengaluru",
                        "state": "Karnataka",
                        "postal_code": "560001",
                        "country": "India",
                    },
                    "idempotency_key": "checkout-7f3c",
                }
            ]
        }
    }


class PaymentIntentResponse(BaseModel):
    order_id: str
    order_number: str
    gateway_order_id: str
    amount: int
    currency: str
    gateway_public_key: str


class VerifyPaymentRequest(BaseModel):
    order_id: str
    gateway_order_id: str
    gateway_payment_id: str
    signature: str


class VerifyPaymentResponse(BaseModel):
    order_id: str
    status: str


class ConfigureGatewayRequest(BaseModel):
    should_succeed: bool = True
    failure_reason: str = "Gateway unavailable"


class GatewayConfigResponse(BaseModel):
    gateway: str
    should_succeed: bool
    failure_reason: str


# ---------------------------------------------------------------------------
# Orders
# ---------------------------------------------------------------------------
class OrderAddressResponse(BaseModel):
    address_line1: str
    address_line2: str
    city: str
    state: str
    postal_code: str
    country: str


class OrderLineItemResponse(BaseModel):
    id: str
    product_id: str
    variant_id: str
    sku: str
    title: str
    image_url: str
    unit_price: float
    quantity: int
    line_total: float


class OrderResponse(BaseModel):
    id: str
    order_number: str
    status: str
    currency: str
    subtotal: float
    tax_amount: float
    shipping_amount: float
    discount_amount: float
    total_price: float
    customer_id: str | None = None
    customer_name: str
    customer_email: str
    customer_phone: str
    shipping_address: OrderAddressResponse
    billing_address: OrderAddressResponse
    payment_method: str
    gateway_order_id: str
    gateway_payment_id: str
    item_count: int
    paid_at: str | None = None
    cancelled_at: str | None = None
    created_at: str | None = None
    updated_at: str | None = None
    items: list[OrderLineItemResponse] | None = None


class OrderListResponse(BaseModel):
    orders: list[OrderResponse]
    next_cursor: str | None = None


class CancelOrderRequest(BaseModel):
    reason: str = Field(min_length=1, max_length=500)
