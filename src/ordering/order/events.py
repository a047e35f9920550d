"""Domain events for the Order aggregate."""

from protean.fields import DateTime, Float, Identifier, Integer, String

from ordering.domain import ordering


@ordering.event(part_of="Order")
class OrderPlaced:
    """Checkout froze a cart into an order awaiting payment."""

    __version__ = 1

    order_id = Identifier(required=True)
    order_number = String(required=True)
    actor_key = String(required=True)
    customer_id = Identifier()
    item_count = Integer(required=True)
    grand_total = Float(required=True)
    currency = String(required=True)
    placed_at = DateTime(required=True)


@ordering.event(part_of="Order")
class PaymentIntentRecorded:
    """The order was correlated with a payment intent on the gateway."""

    __version__ = 1

    order_id = Identifier(required=True)
    gateway_order_id = String(required=True)
    amount = Integer(required=True)  # minor units
    currency = String(required=True)


@ordering.event(part_of="Order")
class OrderPaid:
    """A verified gateway callback confirmed payment."""

    __version__ = 1

    order_id = Identifier(required=True)
    order_number = String(required=True)
    gateway_order_id = String(required=True)
    gateway_payment_id = String(required=True)
    grand_total = Float(required=True)
    currency = String(required=True)
    paid_at = DateTime(required=True)


@ordering.event(part_of="Order")
class OrderCancelled:
    __version__ = 1

    order_id = Identifier(required=True)
    previous_status = String(required=True)
    reason = String(required=True)
    cancelled_at = DateTime(required=True)
