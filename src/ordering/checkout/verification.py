"""Payment verification — command and handler.

The client returns from the gateway with ``(gateway_order_id,
gateway_payment_id, signature)``. The signature is checked before anything
is loaded or written; a valid callback moves the order to ``paid`` and clears
the purchasing actor's cart in the same unit of work. Replays of a callback
for an order that is already paid change nothing.
"""

from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from ordering.cart.cart import ShoppingCart
from ordering.domain import logger, ordering
from ordering.order.order import Order
from payments.gateway import get_gateway
from shared.errors import InvalidSignatureError


@ordering.command(part_of="Order")
class VerifyPayment:
    order_id = Identifier(required=True)
    gateway_order_id = String(required=True, max_length=255)
    gateway_payment_id = String(required=True, max_length=255)
    signature = String(required=True, max_length=255)
    actor_key = String(max_length=255)  # Caller's cart, cleared alongside the order's own


@ordering.command_handler(part_of=Order)
class VerifyPaymentHandler:
    @handle(VerifyPayment)
    def verify_payment(self, command):
        if not get_gateway().verify_payment_signature(
            command.gateway_order_id,
            command.gateway_payment_id,
            command.signature,
        ):
            logger.warning(
                "Rejected payment callback with invalid signature",
                order_id=str(command.order_id),
                gateway_order_id=command.gateway_order_id,
            )
            raise InvalidSignatureError({"signature": ["Payment signature verification failed"]})

        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)

        if order.gateway_order_id != command.gateway_order_id:
            raise InvalidSignatureError({"gateway_order_id": ["Payment does not belong to this order"]})

        if not order.mark_paid(command.gateway_order_id, command.gateway_payment_id, command.signature):
            logger.info("Payment already verified", order_id=str(order.id))
            return order.status

        repo.add(order)

        carts = current_domain.repository_for(ShoppingCart)
        for actor_key in dict.fromkeys(filter(None, [order.actor_key, command.actor_key])):
            cart = carts.find_for_actor(actor_key)
            if cart is not None and cart.items:
                cart.clear(reason="order_paid")
                carts.add(cart)

        logger.info(
            "Payment verified",
            order_id=str(order.id),
            order_number=order.order_number,
            gateway_payment_id=command.gateway_payment_id,
        )
        return order.status
