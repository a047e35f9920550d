"""Ordering bounded context: shopping carts, checkout and orders.

Carts are per-actor CQRS aggregates. Checkout freezes a pricing snapshot into
an Order in ``pending_payment``, correlates it with a gateway payment intent,
and a verified gateway callback finalizes it to ``paid``.
"""

import structlog
from protean.domain import Domain

ordering = Domain(name="ordering")

logger = structlog.get_logger(__name__)
