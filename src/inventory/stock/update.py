"""Partial updates of an inventory item — command and handler.

A new absolute ``quantity`` is applied as an adjustment (delta against the
current value) so it shares the ledger's history and audit guarantees.
Location and cost are plain detail changes.
"""

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Float, Identifier, Integer, String
from protean.utils.globals import current_domain

from inventory.audit.entry import AuditAction, record_audit_entry
from inventory.domain import inventory, logger
from inventory.stock.item import InventoryItem

MANUAL_UPDATE_REASON = "manual update"


@inventory.command(part_of="InventoryItem")
class UpdateInventoryItem:
    inventory_item_id = Identifier(required=True)
    quantity = Integer()
    location = String(max_length=255)
    cost_price = Float()
    actor_id = String(max_length=255)
    actor_kind = String(max_length=20)
    ip_address = String(max_length=64)
    user_agent = String(max_length=500)


@inventory.command_handler(part_of=InventoryItem)
class UpdateInventoryItemHandler:
    @handle(UpdateInventoryItem)
    def update_inventory_item(self, command):
        if command.quantity is None and command.location is None and command.cost_price is None:
            raise ValidationError({"_entity": ["No fields to update"]})

        repo = current_domain.repository_for(InventoryItem)
        item = repo.get(command.inventory_item_id)
        previous_quantity = item.quantity
        changes = {}

        if command.quantity is not None and command.quantity != item.quantity:
            adjustment = item.adjust_quantity(
                delta=command.quantity - item.quantity,
                reason=MANUAL_UPDATE_REASON,
                adjusted_by=command.actor_id,
            )
            changes["quantity"] = adjustment.new_quantity

        if command.location is not None or command.cost_price is not None:
            item.update_details(location=command.location, cost_price=command.cost_price)
            if command.location is not None:
                changes["location"] = command.location
            if command.cost_price is not None:
                changes["cost_price"] = command.cost_price

        repo.add(item)

        record_audit_entry(
            AuditAction.UPDATE_INVENTORY,
            resource_type="inventory_item",
            resource_id=str(item.id),
            actor_id=command.actor_id,
            actor_kind=command.actor_kind,
            quantity_delta=item.quantity - previous_quantity,
            previous_quantity=previous_quantity,
            new_quantity=item.quantity,
            reason=MANUAL_UPDATE_REASON if "quantity" in changes else None,
            details={"changes": changes},
            ip_address=command.ip_address,
            user_agent=command.user_agent,
        )

        logger.info("Inventory item updated", inventory_item_id=str(item.id), changes=sorted(changes))
        return str(item.id)
