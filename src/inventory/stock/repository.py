"""Custom lookups for InventoryItem."""

from inventory.domain import inventory
from inventory.stock.item import InventoryItem


@inventory.repository(part_of=InventoryItem)
class InventoryItemRepository:
    def find_by_sku(self, sku) -> InventoryItem | None:
        items = self._dao.query.filter(sku=sku).all().items
        return items[0] if items else None

    def find_for_variant(self, product_id, variant_id=None) -> InventoryItem | None:
        """Ledger row for a catalog variant.

        A variant without its own row is covered by the product-level row
        (one with no variant), when the product has one.
        """
        rows = self._dao.query.filter(product_id=str(product_id)).all().items
        if variant_id:
            row = next((r for r in rows if r.variant_id and str(r.variant_id) == str(variant_id)), None)
            if row is not None:
                return row
        return next((r for r in rows if not r.variant_id), None)
