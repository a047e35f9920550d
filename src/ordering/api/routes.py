"""FastAPI routes for the Ordering domain — cart, checkout and orders."""

from fastapi import APIRouter, Depends, Query
from protean.utils.globals import current_domain

from ordering.api.schemas import (
    AddCartItemRequest,
    AddCartItemResponse,
    CancelOrderRequest,
    CartResponse,
    ConfigureGatewayRequest,
    GatewayConfigResponse,
    MergeCartResponse,
    OrderListResponse,
    OrderResponse,
    PaymentIntentRequest,
    PaymentIntentResponse,
    StatusResponse,
    VerifyPaymentRequest,
    VerifyPaymentResponse,
)
from ordering.cart.items import ClearCart, RemoveFromCart, add_to_cart
from ordering.cart.management import merge_guest_cart
from ordering.cart.queries import get_cart
from ordering.checkout.intent import start_checkout
from ordering.checkout.verification import VerifyPayment
from ordering.order.cancellation import CancelOrder
from ordering.order.queries import get_order, list_orders
from payments.gateway import get_gateway
from payments.gateway.fake_adapter import FakeGateway
from shared.actor import Actor, optional_actor, require_actor, require_roles, session_actor
from shared.concurrency import process_with_retry
from shared.errors import ForbiddenError
from shared.settings import get_settings


def shopper(actor: Actor = Depends(session_actor)) -> Actor:
    """Session actor whose guest cart, if any, has been folded into the customer cart."""
    merge_guest_cart(actor)
    return actor


# ---------------------------------------------------------------------------
# Cart Router
# ---------------------------------------------------------------------------
cart_router = APIRouter(prefix="/cart", tags=["cart"])


@cart_router.post("/items", response_model=AddCartItemResponse)
def add_cart_item(body: AddCartItemRequest, actor: Actor = Depends(shopper)) -> AddCartItemResponse:
    result = add_to_cart(
        actor,
        product_id=body.product_id,
        variant_id=body.variant_id,
        quantity=body.quantity,
    )
    return AddCartItemResponse(**result)


@cart_router.get("", response_model=CartResponse)
def read_cart(actor: Actor | None = Depends(optional_actor)) -> CartResponse:
    if actor is not None:
        merge_guest_cart(actor)
    return CartResponse(**get_cart(actor.key if actor else None))


@cart_router.delete("/items/{item_id}", response_model=StatusResponse)
def remove_cart_item(item_id: str, actor: Actor = Depends(require_actor)) -> StatusResponse:
    process_with_retry(RemoveFromCart(actor_key=actor.key, item_id=item_id))
    return StatusResponse(status="removed")


@cart_router.delete("", response_model=StatusResponse)
def clear_cart(actor: Actor = Depends(require_actor)) -> StatusResponse:
    process_with_retry(ClearCart(actor_key=actor.key))
    return StatusResponse(status="cleared")


@cart_router.post("/merge", response_model=MergeCartResponse)
def merge_cart(actor: Actor = Depends(require_actor)) -> MergeCartResponse:
    """Explicitly fold the guest session's cart into the signed-in customer's cart."""
    return MergeCartResponse(items_merged=merge_guest_cart(actor))


# ---------------------------------------------------------------------------
# Checkout Router
# ---------------------------------------------------------------------------
checkout_router = APIRouter(prefix="/checkout", tags=["checkout"])


@checkout_router.post("/payment-intent", response_model=PaymentIntentResponse)
def create_payment_intent(
    body: PaymentIntentRequest,
    actor: Actor = Depends(shopper),
) -> PaymentIntentResponse:
    """Price the cart, create the pending order and open a gateway payment intent.

    Amounts in the request are never consulted; totals come from the cart.
    """
    intent = start_checkout(
        actor,
        customer=body.customer.model_dump(),
        shipping_address=body.shipping_address.model_dump(),
        billing_address=body.billing_address.model_dump() if body.billing_address else None,
        idempotency_key=body.idempotency_key,
    )
    return PaymentIntentResponse(
        order_id=intent.order_id,
        order_number=intent.order_number,
        gateway_order_id=intent.gateway_order_id,
        amount=intent.amount,
        currency=intent.currency,
        gateway_public_key=intent.gateway_public_key,
    )


@checkout_router.post("/verify", response_model=VerifyPaymentResponse)
def verify_payment(
    body: VerifyPaymentRequest,
    actor: Actor | None = Depends(optional_actor),
) -> VerifyPaymentResponse:
    command = VerifyPayment(
        order_id=body.order_id,
        gateway_order_id=body.gateway_order_id,
        gateway_payment_id=body.gateway_payment_id,
        signature=body.signature,
        actor_key=actor.key if actor else None,
    )
    status = current_domain.process(command, asynchronous=False)
    return VerifyPaymentResponse(order_id=body.order_id, status=status)


@checkout_router.post("/gateway/configure", response_model=GatewayConfigResponse)
def configure_gateway(body: ConfigureGatewayRequest) -> GatewayConfigResponse:
    """Configure the FakeGateway behavior (non-production only)."""
    if get_settings().is_production:
        raise ForbiddenError("Gateway configuration not available in production")

    gateway = get_gateway()
    if not isinstance(gateway, FakeGateway):
        raise ForbiddenError("Gateway configuration only available for FakeGateway")

    gateway.configure(should_succeed=body.should_succeed, failure_reason=body.failure_reason)
    return GatewayConfigResponse(
        gateway=type(gateway).__name__,
        should_succeed=gateway.should_succeed,
        failure_reason=gateway.failure_reason,
    )


# ---------------------------------------------------------------------------
# Order Router (admin)
# ---------------------------------------------------------------------------
order_router = APIRouter(prefix="/orders", tags=["orders"])


@order_router.get("", response_model=OrderListResponse)
def list_all_orders(
    cursor: str | None = None,
    limit: int = Query(default=50, ge=1, le=200),
    status: str | None = None,
    actor: Actor = Depends(require_roles()),
) -> OrderListResponse:
    return OrderListResponse(**list_orders(cursor=cursor, limit=limit, status=status))


@order_router.get("/{order_id}", response_model=OrderResponse)
def get_order_detail(order_id: str, actor: Actor = Depends(require_roles())) -> OrderResponse:
    return OrderResponse(**get_order(order_id))


@order_router.post("/{order_id}/cancel", response_model=OrderResponse)
def cancel_order(
    order_id: str,
    body: CancelOrderRequest,
    actor: Actor = Depends(require_roles()),
) -> OrderResponse:
    current_domain.process(
        CancelOrder(order_id=order_id, reason=body.reason, cancelled_by=actor.user_id),
        asynchronous=False,
    )
    return OrderResponse(**get_order(order_id))
