"""Checkout load test scenarios.

A guest shopper journey from an empty session through a verified payment,
and a contention user that piles concurrent adds onto one variant to exercise
optimistic-concurrency retries on the same cart row.
"""

import random

from locust import HttpUser, SequentialTaskSet, between, task

from loadtests.data_generators import (
    cart_item_data,
    hot_item_data,
    payment_callback,
    payment_intent_data,
)
from loadtests.helpers.response import extract_error_detail
from loadtests.helpers.state import CheckoutState


class GuestCheckoutJourney(SequentialTaskSet):
    """Add Items -> View Cart -> Payment Intent -> Verify -> Cart Is Empty.

    The session cookie minted by the first add is kept by the client and
    scopes every following call to the same guest cart.
    """

    def on_start(self):
        self.state = CheckoutState()
        self.client.cookies.clear()

    @task
    def add_items(self):
        for _ in range(random.randint(1, 3)):
            payload = cart_item_data()
            with self.client.post(
                "/cart/items",
                json=payload,
                catch_response=True,
                name="POST /cart/items",
            ) as resp:
                if resp.status_code == 200:
                    self.state.added_variants.append(payload["variant_id"])
                else:
                    resp.failure(f"Add to cart failed: {resp.status_code} — {extract_error_detail(resp)}")

        if not self.state.added_variants:
            self.interrupt()

    @task
    def view_cart(self):
        with self.client.get("/cart", catch_response=True, name="GET /cart") as resp:
            if resp.status_code != 200:
                resp.failure(f"View cart failed: {resp.status_code} — {extract_error_detail(resp)}")
                return
            body = resp.json()
            self.state.cart_total = body["total"]
            if body["count"] == 0:
                resp.failure("Cart is unexpectedly empty")
                self.interrupt()

    @task
    def create_payment_intent(self):
        with self.client.post(
            "/checkout/payment-intent",
            json=payment_intent_data(),
            catch_response=True,
            name="POST /checkout/payment-intent",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Payment intent failed: {resp.status_code} — {extract_error_detail(resp)}")
                self.interrupt()
                return
            body = resp.json()
            self.state.order_id = body["order_id"]
            self.state.gateway_order_id = body["gateway_order_id"]
            self.state.amount = body["amount"]
            if body["amount"] != round(self.state.cart_total * 100):
                resp.failure(f"Charged {body['amount']} for a cart totalling {self.state.cart_total}")

    @task
    def verify_payment(self):
        with self.client.post(
            "/checkout/verify",
            json=payment_callback(self.state.order_id, self.state.gateway_order_id),
            catch_response=True,
            name="POST /checkout/verify",
        ) as resp:
            if resp.status_code != 200 or resp.json().get("status") != "paid":
                resp.failure(f"Verify failed: {resp.status_code} — {extract_error_detail(resp)}")

    @task
    def cart_is_empty(self):
        with self.client.get("/cart", catch_response=True, name="GET /cart (after payment)") as resp:
            if resp.status_code == 200 and resp.json()["count"] != 0:
                resp.failure("Cart not cleared after verified payment")

    @task
    def done(self):
        self.interrupt()


class GuestCheckoutUser(HttpUser):
    """Shopper completing a full guest checkout."""

    tasks = [GuestCheckoutJourney]
    wait_time = between(1, 3)
    weight = 3


class HotItemUser(HttpUser):
    """Many users adding the same variant in quick succession.

    Each user owns one guest session, so concurrency lands on both the shared
    stock row read and, via parallel greenlets, the user's own cart.
    """

    wait_time = between(0.05, 0.2)
    weight = 1

    @task
    def add_hot_item(self):
        with self.client.post(
            "/cart/items",
            json=hot_item_data(),
            catch_response=True,
            name="POST /cart/items (hot)",
        ) as resp:
            # Running out of stock is an expected outcome under contention
            if resp.status_code == 400 and "Insufficient stock" in resp.text:
                resp.success()
            elif resp.status_code != 200:
                resp.failure(f"Hot add failed: {resp.status_code} — {extract_error_detail(resp)}")
