"""Custom lookups for Order."""

from ordering.domain import ordering
from ordering.order.order import Order


@ordering.repository(part_of=Order)
class OrderRepository:
    def find_by_idempotency_key(self, actor_key, idempotency_key) -> Order | None:
        orders = self._dao.query.filter(actor_key=actor_key, idempotency_key=idempotency_key).all().items
        return orders[0] if orders else None
