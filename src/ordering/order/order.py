"""Order aggregate (CQRS): a frozen purchase awaiting or confirming payment.

Everything an order needs after checkout is copied onto it at creation: line
titles, SKUs and prices, the pricing totals, and the customer, shipping and
billing details. Later catalog or profile edits never reach an existing order.

State Machine:
    PENDING → PENDING_PAYMENT → PAID
    PENDING / PENDING_PAYMENT → CANCELLED
    PAID and CANCELLED are terminal.
"""

from datetime import UTC, datetime
from enum import Enum
from uuid import uuid4

from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, HasMany, Identifier, Integer, String, ValueObject

from ordering.domain import ordering
from ordering.order.events import OrderCancelled, OrderPaid, OrderPlaced, PaymentIntentRecorded


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class OrderStatus(Enum):
    PENDING = "pending"
    PENDING_PAYMENT = "pending_payment"
    PAID = "paid"
    CANCELLED = "cancelled"


class PaymentMethod(Enum):
    RAZORPAY = "razorpay"


# State machine transition map
_VALID_TRANSITIONS = {
    OrderStatus.PENDING: {OrderStatus.PENDING_PAYMENT, OrderStatus.CANCELLED},
    OrderStatus.PENDING_PAYMENT: {OrderStatus.PAID, OrderStatus.CANCELLED},
    OrderStatus.PAID: set(),  # Terminal
    OrderStatus.CANCELLED: set(),  # Terminal
}


def generate_order_number(now: datetime | None = None) -> str:
    now = now or datetime.now(UTC)
    return f"ORD-{now:%Y%m%d}-{uuid4().hex[:8].upper()}"


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@ordering.value_object(part_of="Order")
class CustomerSnapshot:
    """Contact details captured when the order was placed."""

    name = String(required=True, max_length=255)
    email = String(required=True, max_length=255)
    phone = String(max_length=30)


@ordering.value_object(part_of="Order")
class ShippingAddress:
    """A delivery or billing address captured at checkout time.

    Once recorded on an Order, the address is immutable: it represents where
    the order was shipped, regardless of later address book changes.
    """

    address_line1 = String(required=True, max_length=255)
    address_line2 = String(max_length=255)
    city = String(required=True, max_length=100)
    state = String(max_length=100)
    postal_code = String(required=True, max_length=20)
    country = String(required=True, max_length=100, default="India")


@ordering.value_object(part_of="Order")
class OrderPricing:
    """Financial summary locked at checkout; never recomputed afterwards."""

    subtotal = Float(default=0.0, min_value=0.0)
    shipping_cost = Float(default=0.0, min_value=0.0)
    tax_total = Float(default=0.0, min_value=0.0)
    discount_total = Float(default=0.0, min_value=0.0)
    grand_total = Float(default=0.0, min_value=0.0)
    currency = String(max_length=3, default="INR")


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@ordering.entity(part_of="Order")
class OrderLineItem:
    """One purchased variant, with the title, SKU and price it sold at."""

    product_id = Identifier(required=True)
    variant_id = Identifier(required=True)
    sku = String(required=True, max_length=100)
    title = String(required=True, max_length=255)
    image_url = String(max_length=1000)
    unit_price = Float(required=True, min_value=0.0)
    quantity = Integer(required=True, min_value=1)
    line_total = Float(required=True, min_value=0.0)


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@ordering.aggregate
class Order:
    order_number = String(required=True, max_length=50, unique=True)
    actor_key = String(required=True, max_length=255)
    customer_id = Identifier()  # Nullable for guest checkouts
    status = String(choices=OrderStatus, default=OrderStatus.PENDING.value)
    items = HasMany(OrderLineItem)
    pricing = ValueObject(OrderPricing)
    customer = ValueObject(CustomerSnapshot)
    shipping_address = ValueObject(ShippingAddress)
    billing_address = ValueObject(ShippingAddress)
    payment_method = String(choices=PaymentMethod, default=PaymentMethod.RAZORPAY.value)
    idempotency_key = String(max_length=255)
    gateway_order_id = String(max_length=255)
    gateway_payment_id = String(max_length=255)
    gateway_signature = String(max_length=255)
    cancellation_reason = String(max_length=500)
    paid_at = DateTime()
    cancelled_at = DateTime()
    created_at = DateTime()
    updated_at = DateTime()

    @property
    def total_price(self) -> float:
        return self.pricing.grand_total if self.pricing else 0.0

    @property
    def amount_minor(self) -> int:
        """Grand total in minor currency units, as charged by the gateway."""
        return int(round(self.total_price * 100))

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def place(
        cls,
        snapshot,
        actor_key,
        customer,
        shipping_address,
        billing_address=None,
        customer_id=None,
        idempotency_key=None,
    ):
        """Create an order from a pricing snapshot, ready for payment."""
        now = datetime.now(UTC)
        order = cls(
            order_number=generate_order_number(now),
            actor_key=actor_key,
            customer_id=customer_id,
            status=OrderStatus.PENDING.value,
            pricing=OrderPricing(
                subtotal=snapshot.subtotal,
                shipping_cost=snapshot.shipping,
                tax_total=snapshot.tax,
                discount_total=snapshot.discount,
                grand_total=snapshot.total,
                currency=snapshot.currency,
            ),
            customer=customer,
            shipping_address=shipping_address,
            billing_address=billing_address or shipping_address,
            idempotency_key=idempotency_key,
            created_at=now,
            updated_at=now,
        )
        for line in snapshot.lines:
            order.add_items(
                OrderLineItem(
                    product_id=line.product_id,
                    variant_id=line.variant_id,
                    sku=line.sku,
                    title=line.title,
                    image_url=line.image_url,
                    unit_price=line.unit_price,
                    quantity=line.quantity,
                    line_total=line.line_total,
                )
            )

        order._transition_to(OrderStatus.PENDING_PAYMENT)
        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                order_number=order.order_number,
                actor_key=actor_key,
                customer_id=str(customer_id) if customer_id else None,
                item_count=len(snapshot.lines),
                grand_total=snapshot.total,
                currency=snapshot.currency,
                placed_at=now,
            )
        )
        return order

    # -------------------------------------------------------------------
    # State machine
    # -------------------------------------------------------------------
    def _assert_can_transition(self, target: OrderStatus) -> None:
        current = OrderStatus(self.status)
        if target not in _VALID_TRANSITIONS[current]:
            raise ValidationError({"status": [f"Cannot transition from {current.value} to {target.value}"]})

    def _transition_to(self, target: OrderStatus) -> None:
        self._assert_can_transition(target)
        self.status = target.value
        self.updated_at = datetime.now(UTC)

    # -------------------------------------------------------------------
    # Payment
    # -------------------------------------------------------------------
    def record_payment_intent(self, gateway_order_id):
        """Correlate the order with a gateway intent. Re-recording the same id is a no-op."""
        if self.gateway_order_id == gateway_order_id:
            return
        if OrderStatus(self.status) != OrderStatus.PENDING_PAYMENT:
            raise ValidationError({"status": ["Payment intents can only be recorded while awaiting payment"]})
        if self.gateway_order_id:
            raise ValidationError({"gateway_order_id": ["Order is already linked to another payment intent"]})

        self.gateway_order_id = gateway_order_id
        self.updated_at = datetime.now(UTC)

        self.raise_(
            PaymentIntentRecorded(
                order_id=str(self.id),
                gateway_order_id=gateway_order_id,
                amount=self.amount_minor,
                currency=self.pricing.currency,
            )
        )

    def mark_paid(self, gateway_order_id, gateway_payment_id, signature) -> bool:
        """Finalize a verified payment.

        Returns ``False`` without touching the order when it is already paid,
        so replayed callbacks have no effect.
        """
        if OrderStatus(self.status) == OrderStatus.PAID:
            return False

        self._transition_to(OrderStatus.PAID)
        now = datetime.now(UTC)
        self.gateway_order_id = gateway_order_id
        self.gateway_payment_id = gateway_payment_id
        self.gateway_signature = signature
        self.paid_at = now

        self.raise_(
            OrderPaid(
                order_id=str(self.id),
                order_number=self.order_number,
                gateway_order_id=gateway_order_id,
                gateway_payment_id=gateway_payment_id,
                grand_total=self.total_price,
                currency=self.pricing.currency,
                paid_at=now,
            )
        )
        return True

    def cancel(self, reason):
        previous = self.status
        self._transition_to(OrderStatus.CANCELLED)
        now = datetime.now(UTC)
        self.cancellation_reason = reason
        self.cancelled_at = now

        self.raise_(
            OrderCancelled(
                order_id=str(self.id),
                previous_status=previous,
                reason=reason,
                cancelled_at=now,
            )
        )
