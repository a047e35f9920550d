"""Application tests for payment callback verification."""

import pytest
from ordering.cart.items import add_to_cart
from ordering.cart.queries import get_cart
from ordering.checkout.intent import start_checkout
from ordering.checkout.verification import VerifyPayment
from ordering.order.order import Order, OrderStatus
from protean import current_domain
from protean.exceptions import ObjectNotFoundError
from shared.actor import Actor
from shared.errors import InvalidSignatureError


@pytest.fixture()
def intent(guest, checkout_details):
    add_to_cart(guest, product_id="prod-kurta", variant_id="kurta-m", quantity=2)
    add_to_cart(guest, product_id="prod-saree", variant_id="saree-red", quantity=1)
    return start_checkout(guest, checkout_details["customer"], checkout_details["shipping_address"])


def _verify(intent, gateway, payment_id="pay_001", signature=None, gateway_order_id=None, actor_key=None):
    gateway_order_id = gateway_order_id or intent.gateway_order_id
    return current_domain.process(
        VerifyPayment(
            order_id=intent.order_id,
            gateway_order_id=gateway_order_id,
            gateway_payment_id=payment_id,
            signature=signature or gateway.sign(gateway_order_id, payment_id),
            actor_key=actor_key,
        ),
        asynchronous=False,
    )


def _order(intent):
    return current_domain.repository_for(Order).get(intent.order_id)


class TestVerifyPayment:
    def test_valid_signature_marks_order_paid(self, intent, gateway):
        status = _verify(intent, gateway)

        assert status == OrderStatus.PAID.value
        order = _order(intent)
        assert order.status == OrderStatus.PAID.value
        assert order.gateway_payment_id == "pay_001"
        assert order.paid_at is not None

    def test_purchasing_cart_is_emptied(self, intent, gateway, guest):
        _verify(intent, gateway)
        assert get_cart(guest.key)["count"] == 0

    def test_callers_cart_is_emptied_too(self, intent, gateway):
        customer = Actor.user("cust-009")
        add_to_cart(customer, product_id="prod-kurta", variant_id="kurta-l", quantity=1)

        _verify(intent, gateway, actor_key=customer.key)

        assert get_cart(customer.key)["count"] == 0

    def test_unrelated_carts_are_untouched(self, intent, gateway):
        other = Actor.guest("session_other")
        add_to_cart(other, product_id="prod-kurta", variant_id="kurta-l", quantity=1)

        _verify(intent, gateway)

        assert get_cart(other.key)["count"] == 1


class TestInvalidSignature:
    def test_tampered_signature_is_rejected(self, intent, gateway, guest):
        with pytest.raises(InvalidSignatureError) as exc_info:
            _verify(intent, gateway, signature="0" * 64)

        assert "signature" in exc_info.value.messages
        assert _order(intent).status == OrderStatus.PENDING_PAYMENT.value
        assert get_cart(guest.key)["count"] == 3

    def test_signature_for_another_payment_is_rejected(self, intent, gateway):
        signature = gateway.sign(intent.gateway_order_id, "pay_other")
        with pytest.raises(InvalidSignatureError):
            _verify(intent, gateway, payment_id="pay_001", signature=signature)

    def test_valid_signature_for_another_gateway_order_is_rejected(self, intent, gateway):
        with pytest.raises(InvalidSignatureError) as exc_info:
            _verify(intent, gateway, gateway_order_id="order_someone_else")

        assert "gateway_order_id" in exc_info.value.messages
        assert _order(intent).status == OrderStatus.PENDING_PAYMENT.value

    def test_signature_is_checked_before_order_lookup(self, gateway):
        with pytest.raises(InvalidSignatureError):
            current_domain.process(
                VerifyPayment(
                    order_id="no-such-order",
                    gateway_order_id="order_x",
                    gateway_payment_id="pay_x",
                    signature="bad",
                ),
                asynchronous=False,
            )

    def test_unknown_order_with_valid_signature_is_not_found(self, gateway):
        with pytest.raises(ObjectNotFoundError):
            current_domain.process(
                VerifyPayment(
                    order_id="no-such-order",
                    gateway_order_id="order_x",
                    gateway_payment_id="pay_x",
                    signature=gateway.sign("order_x", "pay_x"),
                ),
                asynchronous=False,
            )


class TestReplay:
    def test_second_verification_changes_nothing(self, intent, gateway):
        _verify(intent, gateway)
        first = _order(intent)

        status = _verify(intent, gateway, payment_id="pay_002")

        assert status == OrderStatus.PAID.value
        second = _order(intent)
        assert second.gateway_payment_id == "pay_001"
        assert second.paid_at == first.paid_at

    def test_replay_does_not_clear_a_refilled_cart(self, intent, gateway, guest):
        _verify(intent, gateway)
        add_to_cart(guest, product_id="prod-kurta", variant_id="kurta-m", quantity=1)

        _verify(intent, gateway)

        assert get_cart(guest.key)["count"] == 1
