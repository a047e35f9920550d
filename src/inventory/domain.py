"""Inventory bounded context: the stock ledger and its audit trail.

Each SKU is an InventoryItem tracking quantity, reserved and available units.
Quantity only changes through explicit adjustments, each recorded as an
append-only InventoryAdjustment and an AuditLogEntry in the same unit of work.
"""

import structlog
from protean.domain import Domain

inventory = Domain(name="inventory")

logger = structlog.get_logger(__name__)
