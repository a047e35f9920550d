"""Shopping Cart aggregate (CQRS): one cart per actor.

A cart holds at most one line per (product, variant). Lines carry only
quantities; prices are resolved live from the catalog whenever the cart is
read and frozen only when checkout creates an Order.
"""

from datetime import UTC, datetime
from uuid import NAMESPACE_URL, uuid5

from protean import invariant
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import DateTime, HasMany, Identifier, Integer, String

from ordering.cart.events import CartCleared, CartItemAdded, CartItemRemoved, CartsMerged
from ordering.domain import ordering


def cart_id_for(actor_key: str) -> str:
    """Stable cart identity for an actor."""
    return str(uuid5(NAMESPACE_URL, f"cart:{actor_key}"))


@ordering.entity(part_of="ShoppingCart")
class CartItem:
    product_id = Identifier(required=True)
    variant_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)
    added_at = DateTime()


@ordering.aggregate
class ShoppingCart:
    actor_key = String(required=True, max_length=255, unique=True)
    customer_id = Identifier()  # Set for authenticated customers
    session_token = String(max_length=255)  # Set for guest carts
    items = HasMany(CartItem)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def one_line_per_variant(self):
        keys = [(str(i.product_id), str(i.variant_id)) for i in self.items]
        if len(keys) != len(set(keys)):
            raise ValidationError({"items": ["A variant can only appear once in the cart"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(cls, actor_key, customer_id=None, session_token=None):
        now = datetime.now(UTC)
        return cls(
            id=cart_id_for(actor_key),
            actor_key=actor_key,
            customer_id=customer_id,
            session_token=session_token,
            created_at=now,
            updated_at=now,
        )

    # -------------------------------------------------------------------
    # Lines
    # -------------------------------------------------------------------
    def find_line(self, product_id, variant_id):
        return next(
            (i for i in self.items if str(i.product_id) == str(product_id) and str(i.variant_id) == str(variant_id)),
            None,
        )

    def quantity_of(self, product_id, variant_id) -> int:
        line = self.find_line(product_id, variant_id)
        return line.quantity if line else 0

    def add_item(self, product_id, variant_id, quantity):
        """Increment the variant's line, creating it if absent. Returns the line."""
        if quantity < 1:
            raise ValidationError({"quantity": ["Quantity must be at least 1"]})

        now = datetime.now(UTC)
        line = self.find_line(product_id, variant_id)
        if line:
            line.quantity += quantity
        else:
            line = CartItem(
                product_id=product_id,
                variant_id=variant_id,
                quantity=quantity,
                added_at=now,
            )
            self.add_items(line)

        self.updated_at = now

        self.raise_(
            CartItemAdded(
                cart_id=str(self.id),
                actor_key=self.actor_key,
                item_id=str(line.id),
                product_id=str(product_id),
                variant_id=str(variant_id),
                quantity_added=quantity,
                new_quantity=line.quantity,
            )
        )
        return line

    def remove_item(self, item_id):
        line = next((i for i in self.items if str(i.id) == str(item_id)), None)
        if line is None:
            raise ObjectNotFoundError(f"Cart item {item_id} does not exist")

        self.remove_items(line)
        self.updated_at = datetime.now(UTC)

        self.raise_(
            CartItemRemoved(
                cart_id=str(self.id),
                actor_key=self.actor_key,
                item_id=str(item_id),
                product_id=str(line.product_id),
                variant_id=str(line.variant_id),
            )
        )

    def clear(self, reason="requested"):
        """Remove every line. Clearing an empty cart is a no-op."""
        lines = list(self.items)
        if not lines:
            return

        for line in lines:
            self.remove_items(line)
        self.updated_at = datetime.now(UTC)

        self.raise_(
            CartCleared(
                cart_id=str(self.id),
                actor_key=self.actor_key,
                items_removed=len(lines),
                reason=reason,
            )
        )

    # -------------------------------------------------------------------
    # Guest handoff
    # -------------------------------------------------------------------
    def absorb(self, guest_cart):
        """Fold ``guest_cart``'s lines into this cart, summing quantities per variant."""
        if guest_cart.actor_key == self.actor_key:
            raise ValidationError({"cart": ["Cannot merge a cart into itself"]})

        lines = list(guest_cart.items)
        if not lines:
            return

        now = datetime.now(UTC)
        for guest_line in lines:
            line = self.find_line(guest_line.product_id, guest_line.variant_id)
            if line:
                line.quantity += guest_line.quantity
            else:
                self.add_items(
                    CartItem(
                        product_id=guest_line.product_id,
                        variant_id=guest_line.variant_id,
                        quantity=guest_line.quantity,
                        added_at=guest_line.added_at or now,
                    )
                )
        self.updated_at = now

        self.raise_(
            CartsMerged(
                cart_id=str(self.id),
                actor_key=self.actor_key,
                source_actor_key=guest_cart.actor_key,
                items_merged_count=len(lines),
            )
        )
        guest_cart.clear(reason="merged")
