"""Domain events for the ShoppingCart aggregate."""

from protean.fields import Identifier, Integer, String

from ordering.domain import ordering


@ordering.event(part_of="ShoppingCart")
class CartItemAdded:
    """Units of a variant were added to the cart (new line or increment)."""

    __version__ = 1

    cart_id = Identifier(required=True)
    actor_key = String(required=True)
    item_id = Identifier(required=True)
    product_id = Identifier(required=True)
    variant_id = Identifier(required=True)
    quantity_added = Integer(required=True)
    new_quantity = Integer(required=True)


@ordering.event(part_of="ShoppingCart")
class CartItemRemoved:
    """A line was removed from the cart."""

    __version__ = 1

    cart_id = Identifier(required=True)
    actor_key = String(required=True)
    item_id = Identifier(required=True)
    product_id = Identifier(required=True)
    variant_id = Identifier(required=True)


@ordering.event(part_of="ShoppingCart")
class CartCleared:
    """Every line was removed, either on request or after payment."""

    __version__ = 1

    cart_id = Identifier(required=True)
    actor_key = String(required=True)
    items_removed = Integer(required=True)
    reason = String(required=True)


@ordering.event(part_of="ShoppingCart")
class CartsMerged:
    """A guest cart's lines were folded into an authenticated customer's cart."""

    __version__ = 1

    cart_id = Identifier(required=True)
    actor_key = String(required=True)
    source_actor_key = String(required=True)
    items_merged_count = Integer(required=True)
