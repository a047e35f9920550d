"""Custom lookups for ShoppingCart."""

from ordering.cart.cart import ShoppingCart
from ordering.domain import ordering


@ordering.repository(part_of=ShoppingCart)
class ShoppingCartRepository:
    def find_for_actor(self, actor_key) -> ShoppingCart | None:
        carts = self._dao.query.filter(actor_key=actor_key).all().items
        return carts[0] if carts else None
