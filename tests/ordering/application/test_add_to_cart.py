"""Application tests for adding to, removing from and clearing carts."""

import pytest
from inventory.domain import inventory
from inventory.stock.creation import CreateInventoryItem
from ordering.cart.cart import ShoppingCart
from ordering.cart.items import AddToCart, ClearCart, RemoveFromCart, add_to_cart
from ordering.cart.queries import get_cart
from protean import current_domain
from protean.exceptions import ObjectNotFoundError, ValidationError


def _stock(product_id, variant_id, quantity):
    with inventory.domain_context():
        current_domain.process(
            CreateInventoryItem(
                product_id=product_id,
                variant_id=variant_id,
                sku=f"{variant_id.upper()}-STOCK",
                quantity=quantity,
            ),
            asynchronous=False,
        )


def _cart_for(actor):
    return current_domain.repository_for(ShoppingCart).find_for_actor(actor.key)


class TestAddToCart:
    def test_first_add_creates_cart(self, guest):
        result = add_to_cart(guest, product_id="prod-kurta", variant_id="kurta-m", quantity=2)

        assert result["quantity"] == 2
        assert result["price"] == 500.0
        assert result["currency"] == "INR"
        cart = _cart_for(guest)
        assert cart.session_token == "session_guest-001"
        assert cart.customer_id is None

    def test_repeated_adds_sum_quantities(self, guest):
        for quantity in (1, 2, 3):
            add_to_cart(guest, product_id="prod-kurta", variant_id="kurta-m", quantity=quantity)

        cart = _cart_for(guest)
        assert len(cart.items) == 1
        assert cart.items[0].quantity == 6

    def test_default_variant_is_used_when_omitted(self, guest):
        result = add_to_cart(guest, product_id="prod-kurta", quantity=1)
        assert result["variant_id"] == "kurta-m"

    def test_authenticated_cart_is_keyed_by_user(self, shopper_user):
        add_to_cart(shopper_user, product_id="prod-saree", quantity=1)
        cart = _cart_for(shopper_user)
        assert cart.actor_key == "user:cust-001"
        assert cart.customer_id == "cust-001"

    def test_unknown_product_raises_not_found(self, guest):
        with pytest.raises(ObjectNotFoundError):
            add_to_cart(guest, product_id="prod-missing", quantity=1)

    def test_unknown_variant_raises_not_found(self, guest):
        with pytest.raises(ObjectNotFoundError):
            add_to_cart(guest, product_id="prod-kurta", variant_id="kurta-xxl", quantity=1)

    def test_inactive_product_is_rejected(self, guest):
        with pytest.raises(ValidationError) as exc_info:
            add_to_cart(guest, product_id="prod-retired", quantity=1)
        assert "product_id" in exc_info.value.messages

    def test_untracked_variant_has_no_stock_limit(self, guest):
        result = add_to_cart(guest, product_id="prod-kurta", variant_id="kurta-m", quantity=500)
        assert result["quantity"] == 500


class TestStockLimit:
    def test_add_within_stock_succeeds(self, guest):
        _stock("prod-kurta", "kurta-m", 3)
        result = add_to_cart(guest, product_id="prod-kurta", variant_id="kurta-m", quantity=3)
        assert result["quantity"] == 3

    def test_add_beyond_stock_is_rejected(self, guest):
        _stock("prod-kurta", "kurta-m", 3)
        with pytest.raises(ValidationError) as exc_info:
            add_to_cart(guest, product_id="prod-kurta", variant_id="kurta-m", quantity=4)
        assert exc_info.value.messages["quantity"] == ["Insufficient stock: only 3 available"]

    def test_cumulative_quantity_counts_against_stock(self, guest):
        _stock("prod-kurta", "kurta-m", 3)
        add_to_cart(guest, product_id="prod-kurta", variant_id="kurta-m", quantity=2)

        with pytest.raises(ValidationError):
            add_to_cart(guest, product_id="prod-kurta", variant_id="kurta-m", quantity=2)

        assert _cart_for(guest).items[0].quantity == 2

    def test_command_with_explicit_stock(self, guest):
        with pytest.raises(ValidationError):
            current_domain.process(
                AddToCart(
                    actor_key=guest.key,
                    product_id="prod-saree",
                    variant_id="saree-red",
                    quantity=2,
                    available_stock=1,
                ),
                asynchronous=False,
            )
        assert _cart_for(guest) is None

    def test_product_level_stock_limits_every_variant(self, guest):
        with inventory.domain_context():
            current_domain.process(
                CreateInventoryItem(product_id="prod-kurta", sku="KURTA-ALL", quantity=2),
                asynchronous=False,
            )

        with pytest.raises(ValidationError) as exc_info:
            add_to_cart(guest, product_id="prod-kurta", variant_id="kurta-l", quantity=3)
        assert exc_info.value.messages["quantity"] == ["Insufficient stock: only 2 available"]

        result = add_to_cart(guest, product_id="prod-kurta", variant_id="kurta-l", quantity=2)
        assert result["quantity"] == 2


class TestRemoveAndClear:
    def test_remove_line(self, guest):
        result = add_to_cart(guest, product_id="prod-kurta", variant_id="kurta-m", quantity=2)
        current_domain.process(RemoveFromCart(actor_key=guest.key, item_id=result["item_id"]), asynchronous=False)
        assert len(_cart_for(guest).items) == 0

    def test_remove_from_missing_cart_raises_not_found(self, guest):
        with pytest.raises(ObjectNotFoundError):
            current_domain.process(RemoveFromCart(actor_key=guest.key, item_id="line-1"), asynchronous=False)

    def test_clear_cart(self, guest):
        add_to_cart(guest, product_id="prod-kurta", variant_id="kurta-m", quantity=2)
        add_to_cart(guest, product_id="prod-saree", quantity=1)
        current_domain.process(ClearCart(actor_key=guest.key), asynchronous=False)
        assert get_cart(guest.key)["count"] == 0

    def test_clear_without_cart_is_a_noop(self, guest):
        current_domain.process(ClearCart(actor_key=guest.key), asynchronous=False)
        assert _cart_for(guest) is None


class TestCartView:
    def test_view_prices_lines_from_catalog(self, guest):
        add_to_cart(guest, product_id="prod-kurta", variant_id="kurta-m", quantity=2)
        add_to_cart(guest, product_id="prod-saree", quantity=1)

        view = get_cart(guest.key)

        assert view["count"] == 3
        assert view["total"] == 2200.0
        assert view["currency"] == "INR"
        kurta = next(i for i in view["items"] if i["variant_id"] == "kurta-m")
        assert kurta["line_total"] == 1000.0
        assert kurta["image_url"] == "/product-placeholder.webp"

    def test_view_reflects_current_price(self, guest, catalog):
        add_to_cart(guest, product_id="prod-kurta", variant_id="kurta-m", quantity=2)
        catalog.set_price("prod-kurta", "kurta-m", 400.0)
        assert get_cart(guest.key)["total"] == 800.0

    def test_delisted_lines_are_hidden(self, guest, catalog):
        add_to_cart(guest, product_id="prod-kurta", variant_id="kurta-m", quantity=2)
        add_to_cart(guest, product_id="prod-saree", quantity=1)
        catalog.remove_variant("prod-saree", "saree-red")

        view = get_cart(guest.key)

        assert [i["sku"] for i in view["items"]] == ["KURTA-M"]
        assert view["total"] == 1000.0

    def test_no_actor_reads_empty_cart(self):
        assert get_cart(None) == {"items": [], "total": 0.0, "count": 0, "currency": "INR"}

    def test_unknown_actor_reads_empty_cart(self):
        assert get_cart("guest:nobody")["items"] == []
