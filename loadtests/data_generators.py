"""Faker-based data generators for Locust load test scenarios.

Payloads match the field names of the API's Pydantic request schemas. Cart
items are drawn from ``catalog_seed.json``, which the server under test must
load (``CATALOG_SEED_PATH=loadtests/catalog_seed.json``).
"""

import hashlib
import hmac
import json
import os
import random
import uuid
from pathlib import Path

from faker import Faker

fake = Faker("en_IN")

CATALOG_SEED = json.loads((Path(__file__).parent / "catalog_seed.json").read_text(encoding="utf-8"))

# Must match the server's GATEWAY_KEY_SECRET so callbacks verify.
GATEWAY_KEY_SECRET = os.environ.get("GATEWAY_KEY_SECRET", "rzp_test_secret")


# ---------- Cart ----------


def cart_item_data(quantity: int | None = None) -> dict:
    """Generate an AddCartItemRequest for a random seeded variant."""
    variant = random.choice(CATALOG_SEED)
    return {
        "product_id": variant["product_id"],
        "variant_id": variant["variant_id"],
        "quantity": quantity or random.randint(1, 3),
    }


def hot_item_data() -> dict:
    """The single variant every contention user hammers."""
    variant = CATALOG_SEED[0]
    return {"product_id": variant["product_id"], "variant_id": variant["variant_id"], "quantity": 1}


# ---------- Checkout ----------


def customer_data() -> dict:
    return {
        "name": fake.name()[:255],
        "email": f"{fake.user_name()[:20]}.{uuid.uuid4().hex[:4]}@example.com",
        "phone": fake.msisdn()[:10],
    }


def address_data() -> dict:
    return {
        "address_line1": fake.street_address()[:255],
        "address_line2": random.choice(["", fake.secondary_address()[:255]]),
        "city": fake.city()[:100],
        "state": fake.state()[:100],
        "postal_code": fake.postcode()[:20],
        "country": "India",
    }


def payment_intent_data(idempotency_key: str | None = None) -> dict:
    return {
        "customer": customer_data(),
        "shipping_address": address_data(),
        "idempotency_key": idempotency_key or f"lt-{uuid.uuid4().hex}",
    }


def payment_callback(order_id: str, gateway_order_id: str) -> dict:
    """Simulate the gateway's client-side success callback."""
    gateway_payment_id = f"pay_lt{uuid.uuid4().hex[:14]}"
    signature = hmac.new(
        GATEWAY_KEY_SECRET.encode("utf-8"),
        f"{gateway_order_id}|{gateway_payment_id}".encode(),
        hashlib.sha256,
    ).hexdigest()
    return {
        "order_id": order_id,
        "gateway_order_id": gateway_order_id,
        "gateway_payment_id": gateway_payment_id,
        "signature": signature,
    }


# ---------- Inventory ----------


def inventory_item_data() -> dict:
    variant = random.choice(CATALOG_SEED)
    return {
        "product_id": variant["product_id"],
        "variant_id": variant["variant_id"],
        "sku": f"{variant['sku']}-{uuid.uuid4().hex[:6].upper()}",
        "quantity": random.randint(20, 200),
        "location": f"Rack {random.choice('ABCDEF')}{random.randint(1, 9)}",
        "cost_price": round(variant["price"] * random.uniform(0.4, 0.7), 2),
    }


def adjustment_data() -> dict:
    delta = random.choice([-3, -2, -1, 1, 2, 5, 10])
    reason = "sale" if delta < 0 else random.choice(["restock", "return", "count correction"])
    return {"quantity": delta, "reason": reason}
