"""Shared BDD fixtures and step definitions for the Ordering domain."""

import pytest
from inventory.domain import inventory
from inventory.stock.creation import CreateInventoryItem
from ordering.cart.cart import ShoppingCart
from ordering.cart.items import add_to_cart
from protean import current_domain
from protean.exceptions import ValidationError
from pytest_bdd import given, parsers, then, when
from shared.actor import Actor


@pytest.fixture()
def error():
    """Container for captured validation errors."""
    return {"exc": None}


def _cart(actor_key):
    return current_domain.repository_for(ShoppingCart).find_for_actor(actor_key)


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given("a guest shopper", target_fixture="shopper")
def guest_shopper():
    return Actor.guest("session_bdd")


@given(parsers.cfparse('{quantity:d} units of "{product_id}" variant "{variant_id}" are in stock'))
def stock_on_hand(quantity, product_id, variant_id):
    with inventory.domain_context():
        current_domain.process(
            CreateInventoryItem(
                product_id=product_id,
                variant_id=variant_id,
                sku=f"{variant_id.upper()}-BDD",
                quantity=quantity,
            ),
            asynchronous=False,
        )


# ---------------------------------------------------------------------------
# When steps
# ---------------------------------------------------------------------------
@given(parsers.cfparse('the shopper adds {quantity:d} of "{product_id}" variant "{variant_id}"'))
@when(parsers.cfparse('the shopper adds {quantity:d} of "{product_id}" variant "{variant_id}"'))
def shopper_adds(shopper, quantity, product_id, variant_id, error):
    try:
        add_to_cart(shopper, product_id=product_id, variant_id=variant_id, quantity=quantity)
    except ValidationError as exc:
        error["exc"] = exc


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse("the cart has {count:d} line"))
@then(parsers.cfparse("the cart has {count:d} lines"))
def cart_has_lines(shopper, count):
    assert len(_cart(shopper.key).items) == count


@then(parsers.cfparse('the cart holds {quantity:d} of "{product_id}" variant "{variant_id}"'))
def cart_holds(shopper, quantity, product_id, variant_id):
    assert _cart(shopper.key).quantity_of(product_id, variant_id) == quantity


@then("the cart is empty")
def cart_is_empty(shopper):
    assert len(_cart(shopper.key).items) == 0


@then("the cart action fails with a validation error")
def cart_action_fails(error):
    assert error["exc"] is not None, "Expected a validation error but none was raised"
    assert isinstance(error["exc"], ValidationError)
