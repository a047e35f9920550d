"""Domain events for the InventoryItem aggregate."""

from protean.fields import DateTime, Float, Identifier, Integer, String

from inventory.domain import inventory


@inventory.event(part_of="InventoryItem")
class InventoryItemCreated:
    """A SKU was registered in the stock ledger."""

    __version__ = 1

    inventory_item_id = Identifier(required=True)
    product_id = Identifier(required=True)
    variant_id = Identifier()
    sku = String(required=True)
    quantity = Integer(required=True)
    created_at = DateTime(required=True)


@inventory.event(part_of="InventoryItem")
class StockAdjusted:
    """Quantity on hand changed through an explicit adjustment."""

    __version__ = 1

    inventory_item_id = Identifier(required=True)
    delta = Integer(required=True)
    reason = String(required=True)
    previous_quantity = Integer(required=True)
    new_quantity = Integer(required=True)
    new_available = Integer(required=True)
    adjusted_by = String()
    adjusted_at = DateTime(required=True)


@inventory.event(part_of="InventoryItem")
class InventoryItemUpdated:
    """Location or cost details of a SKU changed."""

    __version__ = 1

    inventory_item_id = Identifier(required=True)
    location = String()
    cost_price = Float()
    updated_at = DateTime(required=True)
