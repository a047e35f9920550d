"""Per-user state tracking for Locust load test scenarios.

Each Locust user instance maintains its own state.
The guest session itself lives in the HTTP client's cookie jar; state here
tracks the ids returned by the API so follow-up calls can reference them.
"""

from dataclasses import dataclass, field


@dataclass
class CheckoutState:
    """Tracks a single shopper's cart and checkout."""

    added_variants: list[str] = field(default_factory=list)
    cart_total: float = 0.0
    order_id: str | None = None
    gateway_order_id: str | None = None
    amount: int = 0


@dataclass
class StockState:
    """Tracks inventory items created by an admin user."""

    item_ids: list[str] = field(default_factory=list)
