"""Checkout: freeze the cart into an Order and open a gateway payment intent.

The flow runs in two units of work with the gateway call between them:

1. ``PlaceOrder`` prices the actor's cart and writes the Order in
   ``pending_payment`` with frozen lines and contact snapshots.
2. The gateway is asked for a payment intent for the order's total.
3. ``RecordPaymentIntent`` stores the gateway's order id on the Order.

If the gateway fails, the order stays in ``pending_payment`` with no
gateway id and ``PaymentGatewayError`` reaches the caller. Retrying with the
same idempotency key picks the same order back up.
"""

from dataclasses import dataclass

from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from ordering.cart.cart import ShoppingCart
from ordering.checkout.pricing import price_cart
from ordering.domain import logger, ordering
from ordering.order.order import CustomerSnapshot, Order, ShippingAddress
from payments.gateway import get_gateway
from shared.actor import Actor


@ordering.command(part_of="Order")
class PlaceOrder:
    actor_key = String(required=True, max_length=255)
    customer_id = Identifier()
    customer_name = String(required=True, max_length=255)
    customer_email = String(required=True, max_length=255)
    customer_phone = String(max_length=30)
    shipping_line1 = String(required=True, max_length=255)
    shipping_line2 = String(max_length=255)
    shipping_city = String(required=True, max_length=100)
    shipping_state = String(max_length=100)
    shipping_postal_code = String(required=True, max_length=20)
    shipping_country = String(max_length=100)
    billing_line1 = String(max_length=255)
    billing_line2 = String(max_length=255)
    billing_city = String(max_length=100)
    billing_state = String(max_length=100)
    billing_postal_code = String(max_length=20)
    billing_country = String(max_length=100)
    idempotency_key = String(max_length=255)


@ordering.command(part_of="Order")
class RecordPaymentIntent:
    order_id = Identifier(required=True)
    gateway_order_id = String(required=True, max_length=255)


def _address(command, prefix) -> ShippingAddress | None:
    line1 = getattr(command, f"{prefix}_line1")
    if not line1:
        return None
    return ShippingAddress(
        address_line1=line1,
        address_line2=getattr(command, f"{prefix}_line2"),
        city=getattr(command, f"{prefix}_city"),
        state=getattr(command, f"{prefix}_state"),
        postal_code=getattr(command, f"{prefix}_postal_code"),
        country=getattr(command, f"{prefix}_country") or "India",
    )


@ordering.command_handler(part_of=Order)
class CheckoutHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        orders = current_domain.repository_for(Order)
        if command.idempotency_key:
            existing = orders.find_by_idempotency_key(command.actor_key, command.idempotency_key)
            if existing is not None:
                logger.info(
                    "Reusing order for idempotency key",
                    order_id=str(existing.id),
                    idempotency_key=command.idempotency_key,
                )
                return str(existing.id)

        cart = current_domain.repository_for(ShoppingCart).find_for_actor(command.actor_key)
        snapshot = price_cart(cart)

        order = Order.place(
            snapshot=snapshot,
            actor_key=command.actor_key,
            customer_id=command.customer_id,
            customer=CustomerSnapshot(
                name=command.customer_name,
                email=command.customer_email,
                phone=command.customer_phone,
            ),
            shipping_address=_address(command, "shipping"),
            billing_address=_address(command, "billing"),
            idempotency_key=command.idempotency_key,
        )
        orders.add(order)

        logger.info(
            "Order placed",
            order_id=str(order.id),
            order_number=order.order_number,
            grand_total=order.total_price,
            currency=snapshot.currency,
        )
        return str(order.id)

    @handle(RecordPaymentIntent)
    def record_payment_intent(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        order.record_payment_intent(command.gateway_order_id)
        repo.add(order)


@dataclass(frozen=True)
class CheckoutIntent:
    order_id: str
    order_number: str
    gateway_order_id: str
    amount: int
    currency: str
    gateway_public_key: str


def start_checkout(actor: Actor, customer: dict, shipping_address: dict, billing_address=None, idempotency_key=None):
    """Create (or resume) the actor's pending order and its gateway payment intent."""
    billing_address = billing_address or {}
    command = PlaceOrder(
        actor_key=actor.key,
        customer_id=actor.user_id,
        customer_name=customer["name"],
        customer_email=customer["email"],
        customer_phone=customer.get("phone"),
        shipping_line1=shipping_address["address_line1"],
        shipping_line2=shipping_address.get("address_line2"),
        shipping_city=shipping_address["city"],
        shipping_state=shipping_address.get("state"),
        shipping_postal_code=shipping_address["postal_code"],
        shipping_country=shipping_address.get("country"),
        billing_line1=billing_address.get("address_line1"),
        billing_line2=billing_address.get("address_line2"),
        billing_city=billing_address.get("city"),
        billing_state=billing_address.get("state"),
        billing_postal_code=billing_address.get("postal_code"),
        billing_country=billing_address.get("country"),
        idempotency_key=idempotency_key,
    )
    order_id = current_domain.process(command, asynchronous=False)
    order = current_domain.repository_for(Order).get(order_id)
    gateway = get_gateway()

    if not order.gateway_order_id:
        intent = gateway.create_payment_intent(
            amount=order.amount_minor,
            currency=order.pricing.currency,
            receipt=str(order.id),
            idempotency_key=str(order.id),
        )
        current_domain.process(
            RecordPaymentIntent(order_id=order_id, gateway_order_id=intent.gateway_order_id),
            asynchronous=False,
        )
        order = current_domain.repository_for(Order).get(order_id)

    return CheckoutIntent(
        order_id=str(order.id),
        order_number=order.order_number,
        gateway_order_id=order.gateway_order_id,
        amount=order.amount_minor,
        currency=order.pricing.currency,
        gateway_public_key=gateway.public_key,
    )
