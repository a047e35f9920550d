"""Cart lifecycle — creation and the guest → customer handoff.

A cart is created once per actor, before its first line is added. When a
shopper signs in while still holding a guest session, the guest lines are
merged into the customer's cart (quantities summed per variant) and the
guest cart is emptied, both in one unit of work.
"""

from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from ordering.cart.cart import ShoppingCart
from ordering.domain import logger, ordering
from shared.actor import Actor
from shared.concurrency import lock_for, process_with_retry


@ordering.command(part_of="ShoppingCart")
class CreateCart:
    actor_key = String(required=True, max_length=255)
    customer_id = Identifier()
    session_token = String(max_length=255)


@ordering.command(part_of="ShoppingCart")
class MergeGuestCart:
    guest_actor_key = String(required=True, max_length=255)
    actor_key = String(required=True, max_length=255)
    customer_id = Identifier(required=True)


@ordering.command_handler(part_of=ShoppingCart)
class ManageCartHandler:
    @handle(CreateCart)
    def create_cart(self, command):
        repo = current_domain.repository_for(ShoppingCart)
        cart = repo.find_for_actor(command.actor_key)
        if cart is None:
            cart = ShoppingCart.create(
                actor_key=command.actor_key,
                customer_id=command.customer_id,
                session_token=command.session_token,
            )
            repo.add(cart)
        return str(cart.id)

    @handle(MergeGuestCart)
    def merge_guest_cart(self, command):
        repo = current_domain.repository_for(ShoppingCart)
        guest_cart = repo.find_for_actor(command.guest_actor_key)
        if guest_cart is None or not guest_cart.items:
            return 0

        cart = repo.find_for_actor(command.actor_key)
        if cart is None:
            cart = ShoppingCart.create(actor_key=command.actor_key, customer_id=command.customer_id)

        merged = len(guest_cart.items)
        cart.absorb(guest_cart)
        repo.add(cart)
        repo.add(guest_cart)

        logger.info(
            "Merged guest cart",
            cart_id=str(cart.id),
            guest_actor_key=command.guest_actor_key,
            items_merged=merged,
        )
        return merged


def merge_guest_cart(actor: Actor) -> int:
    """Merge the guest cart riding along with an authenticated request.

    Returns the number of guest lines merged; zero when there is nothing to do.
    """
    if not actor.is_authenticated or not actor.guest_cart_key:
        return 0
    command = MergeGuestCart(
        guest_actor_key=actor.guest_cart_key,
        actor_key=actor.key,
        customer_id=actor.user_id,
    )
    return process_with_retry(command)


def open_cart(actor: Actor) -> str:
    """Return the id of ``actor``'s cart, creating the cart on first use.

    Inserts are not version-checked, so creation is serialized per actor.
    Every later write then goes through the version-checked update path.
    """
    with lock_for(actor.key):
        cart = current_domain.repository_for(ShoppingCart).find_for_actor(actor.key)
        if cart is not None:
            return str(cart.id)
        command = CreateCart(
            actor_key=actor.key,
            customer_id=actor.user_id,
            session_token=None if actor.is_authenticated else actor.session_token,
        )
        return current_domain.process(command, asynchronous=False)
