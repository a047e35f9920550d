"""InventoryItem aggregate (CQRS): per-SKU stock ledger.

Quantity is the number of units on hand, reserved is the number held for
in-flight orders, and available is always ``quantity - reserved``. Quantity
changes only through ``adjust_quantity``, which appends an immutable
InventoryAdjustment row alongside the write.
"""

from datetime import UTC, datetime

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, HasMany, Identifier, Integer, String

from inventory.domain import inventory
from inventory.stock.events import InventoryItemCreated, InventoryItemUpdated, StockAdjusted
from shared.errors import NegativeStockError


@inventory.entity(part_of="InventoryItem")
class InventoryAdjustment:
    """One append-only entry in an item's adjustment history."""

    delta = Integer(required=True)
    reason = String(required=True, max_length=500)
    previous_quantity = Integer(required=True, min_value=0)
    new_quantity = Integer(required=True, min_value=0)
    adjusted_by = String(max_length=255)
    adjusted_at = DateTime(required=True)


@inventory.aggregate
class InventoryItem:
    product_id = Identifier(required=True)
    variant_id = Identifier()
    sku = String(required=True, max_length=100, unique=True)
    quantity = Integer(required=True, min_value=0, default=0)
    reserved = Integer(required=True, min_value=0, default=0)
    available = Integer(required=True, min_value=0, default=0)
    location = String(max_length=255)
    cost_price = Float(min_value=0.0)
    adjustments = HasMany(InventoryAdjustment)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def available_is_quantity_minus_reserved(self):
        if self.available != self.quantity - self.reserved:
            raise ValidationError({"available": ["Available must equal quantity minus reserved"]})

    @invariant.post
    def reserved_cannot_exceed_quantity(self):
        if self.reserved > self.quantity:
            raise ValidationError({"reserved": ["Reserved units cannot exceed quantity on hand"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(cls, product_id, sku, quantity=0, variant_id=None, location=None, cost_price=None):
        if quantity < 0:
            raise NegativeStockError({"quantity": ["Initial quantity cannot be negative"]})

        now = datetime.now(UTC)
        item = cls(
            product_id=product_id,
            variant_id=variant_id,
            sku=sku,
            quantity=quantity,
            reserved=0,
            available=quantity,
            location=location,
            cost_price=cost_price,
            created_at=now,
            updated_at=now,
        )
        item.raise_(
            InventoryItemCreated(
                inventory_item_id=str(item.id),
                product_id=str(product_id),
                variant_id=str(variant_id) if variant_id else None,
                sku=sku,
                quantity=quantity,
                created_at=now,
            )
        )
        return item

    # -------------------------------------------------------------------
    # Stock movements
    # -------------------------------------------------------------------
    def adjust_quantity(self, delta, reason, adjusted_by=None):
        """Apply ``delta`` to quantity on hand and recompute availability.

        Returns the appended InventoryAdjustment. Nothing is mutated when the
        adjustment is rejected.
        """
        if delta == 0:
            raise ValidationError({"quantity": ["Adjustment cannot be zero"]})
        if not reason or not reason.strip():
            raise ValidationError({"reason": ["Reason is required for stock adjustments"]})

        previous = self.quantity
        new_quantity = previous + delta
        if new_quantity < 0:
            raise NegativeStockError({"quantity": ["Adjustment would result in negative quantity"]})
        if new_quantity - self.reserved < 0:
            raise NegativeStockError({"available": ["Adjustment would leave fewer units than are reserved"]})

        now = datetime.now(UTC)
        adjustment = InventoryAdjustment(
            delta=delta,
            reason=reason.strip(),
            previous_quantity=previous,
            new_quantity=new_quantity,
            adjusted_by=adjusted_by,
            adjusted_at=now,
        )

        with atomic_change(self):
            self.quantity = new_quantity
            self.available = new_quantity - self.reserved
            self.add_adjustments(adjustment)
            self.updated_at = now

        self.raise_(
            StockAdjusted(
                inventory_item_id=str(self.id),
                delta=delta,
                reason=adjustment.reason,
                previous_quantity=previous,
                new_quantity=new_quantity,
                new_available=self.available,
                adjusted_by=adjusted_by,
                adjusted_at=now,
            )
        )
        return adjustment

    def update_details(self, location=None, cost_price=None):
        """Change location and/or cost. ``None`` leaves a field untouched."""
        if cost_price is not None and cost_price < 0:
            raise ValidationError({"cost_price": ["Cost price cannot be negative"]})

        now = datetime.now(UTC)
        if location is not None:
            self.location = location
        if cost_price is not None:
            self.cost_price = cost_price
        self.updated_at = now

        self.raise_(
            InventoryItemUpdated(
                inventory_item_id=str(self.id),
                location=self.location,
                cost_price=self.cost_price,
                updated_at=now,
            )
        )
