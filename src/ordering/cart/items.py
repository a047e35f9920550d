"""Cart line management — commands, handler and the add-to-cart entry point."""

from protean import handle
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import Identifier, Integer, String
from protean.utils.globals import current_domain

from inventory.stock.queries import available_for
from ordering.cart.cart import ShoppingCart
from ordering.cart.management import open_cart
from ordering.catalog import get_catalog
from ordering.domain import ordering
from shared.actor import Actor
from shared.concurrency import process_with_retry


@ordering.command(part_of="ShoppingCart")
class AddToCart:
    actor_key = String(required=True, max_length=255)
    customer_id = Identifier()
    session_token = String(max_length=255)
    product_id = Identifier(required=True)
    variant_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)
    available_stock = Integer()  # None when the ledger does not track the variant


@ordering.command(part_of="ShoppingCart")
class RemoveFromCart:
    actor_key = String(required=True, max_length=255)
    item_id = Identifier(required=True)


@ordering.command(part_of="ShoppingCart")
class ClearCart:
    actor_key = String(required=True, max_length=255)


@ordering.command_handler(part_of=ShoppingCart)
class ManageCartItemsHandler:
    @handle(AddToCart)
    def add_to_cart(self, command):
        variant = get_catalog().get_variant(command.product_id, command.variant_id)
        if variant is None:
            raise ObjectNotFoundError(f"Product {command.product_id} variant {command.variant_id} does not exist")
        if not variant.is_active:
            raise ValidationError({"product_id": ["Product is not available for purchase"]})

        repo = current_domain.repository_for(ShoppingCart)
        cart = repo.find_for_actor(command.actor_key)
        if cart is None:
            cart = ShoppingCart.create(
                actor_key=command.actor_key,
                customer_id=command.customer_id,
                session_token=command.session_token,
            )

        requested = cart.quantity_of(variant.product_id, variant.variant_id) + command.quantity
        if command.available_stock is not None and requested > command.available_stock:
            raise ValidationError({"quantity": [f"Insufficient stock: only {command.available_stock} available"]})

        line = cart.add_item(
            product_id=variant.product_id,
            variant_id=variant.variant_id,
            quantity=command.quantity,
        )
        repo.add(cart)

        return {
            "item_id": str(line.id),
            "product_id": variant.product_id,
            "variant_id": variant.variant_id,
            "quantity": line.quantity,
            "price": variant.price,
            "currency": variant.currency,
        }

    @handle(RemoveFromCart)
    def remove_from_cart(self, command):
        repo = current_domain.repository_for(ShoppingCart)
        cart = repo.find_for_actor(command.actor_key)
        if cart is None:
            raise ObjectNotFoundError(f"Cart item {command.item_id} does not exist")
        cart.remove_item(item_id=command.item_id)
        repo.add(cart)

    @handle(ClearCart)
    def clear_cart(self, command):
        repo = current_domain.repository_for(ShoppingCart)
        cart = repo.find_for_actor(command.actor_key)
        if cart is None:
            return
        cart.clear()
        repo.add(cart)


def add_to_cart(actor: Actor, product_id, quantity, variant_id=None) -> dict:
    """Add ``quantity`` units for ``actor`` and return the line's new state.

    Resolves the default variant when none is given and reads current stock
    from the inventory ledger before entering the cart's unit of work.
    """
    variant = get_catalog().get_variant(product_id, variant_id)
    if variant is None:
        raise ObjectNotFoundError(f"Product {product_id} does not exist")

    command = AddToCart(
        actor_key=actor.key,
        customer_id=actor.user_id,
        session_token=None if actor.is_authenticated else actor.session_token,
        product_id=variant.product_id,
        variant_id=variant.variant_id,
        quantity=quantity,
        available_stock=available_for(variant.product_id, variant.variant_id),
    )
    open_cart(actor)
    return process_with_retry(command)
