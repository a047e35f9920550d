"""Order cancellation — command and handler.

Used by operators to close out orders that will never be paid, such as
checkouts abandoned at the gateway.
"""

from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from ordering.domain import logger, ordering
from ordering.order.order import Order


@ordering.command(part_of="Order")
class CancelOrder:
    order_id = Identifier(required=True)
    reason = String(required=True, max_length=500)
    cancelled_by = String(max_length=255)


@ordering.command_handler(part_of=Order)
class CancelOrderHandler:
    @handle(CancelOrder)
    def cancel_order(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        order.cancel(reason=command.reason)
        repo.add(order)

        logger.info(
            "Order cancelled",
            order_id=str(order.id),
            reason=command.reason,
            cancelled_by=command.cancelled_by,
        )
