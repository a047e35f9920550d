"""Stock adjustment — command and handler.

The quantity write, the appended InventoryAdjustment and the audit entry are
persisted in one unit of work: either all three land or none do.
"""

from protean import handle
from protean.fields import Identifier, Integer, String
from protean.utils.globals import current_domain

from inventory.audit.entry import AuditAction, record_audit_entry
from inventory.domain import inventory, logger
from inventory.stock.item import InventoryItem


@inventory.command(part_of="InventoryItem")
class AdjustStock:
    """Add or remove units on hand. ``delta`` may be negative."""

    inventory_item_id = Identifier(required=True)
    delta = Integer(required=True)
    reason = String(required=True, max_length=500)
    actor_id = String(max_length=255)
    actor_kind = String(max_length=20)
    ip_address = String(max_length=64)
    user_agent = String(max_length=500)


@inventory.command_handler(part_of=InventoryItem)
class StockAdjustmentHandler:
    @handle(AdjustStock)
    def adjust_stock(self, command):
        repo = current_domain.repository_for(InventoryItem)
        item = repo.get(command.inventory_item_id)

        adjustment = item.adjust_quantity(
            delta=command.delta,
            reason=command.reason,
            adjusted_by=command.actor_id,
        )
        repo.add(item)

        record_audit_entry(
            AuditAction.ADJUST_INVENTORY,
            resource_type="inventory_item",
            resource_id=str(item.id),
            actor_id=command.actor_id,
            actor_kind=command.actor_kind,
            quantity_delta=adjustment.delta,
            previous_quantity=adjustment.previous_quantity,
            new_quantity=adjustment.new_quantity,
            reason=adjustment.reason,
            details={"sku": item.sku, "new_available": item.available},
            ip_address=command.ip_address,
            user_agent=command.user_agent,
        )

        logger.info(
            "Stock adjusted",
            inventory_item_id=str(item.id),
            delta=adjustment.delta,
            new_quantity=item.quantity,
            new_available=item.available,
        )
        return str(item.id)
