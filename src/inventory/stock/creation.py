"""Registering a SKU in the stock ledger — command and handler."""

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Float, Identifier, Integer, String
from protean.utils.globals import current_domain

from inventory.audit.entry import AuditAction, record_audit_entry
from inventory.domain import inventory, logger
from inventory.stock.item import InventoryItem


@inventory.command(part_of="InventoryItem")
class CreateInventoryItem:
    product_id = Identifier(required=True)
    variant_id = Identifier()
    sku = String(required=True, max_length=100)
    quantity = Integer(default=0)
    location = String(max_length=255)
    cost_price = Float(min_value=0.0)
    actor_id = String(max_length=255)
    actor_kind = String(max_length=20)
    ip_address = String(max_length=64)
    user_agent = String(max_length=500)


@inventory.command_handler(part_of=InventoryItem)
class CreateInventoryItemHandler:
    @handle(CreateInventoryItem)
    def create_inventory_item(self, command):
        repo = current_domain.repository_for(InventoryItem)
        if repo.find_by_sku(command.sku) is not None:
            raise ValidationError({"sku": [f"An inventory item with SKU {command.sku} already exists"]})

        item = InventoryItem.create(
            product_id=command.product_id,
            variant_id=command.variant_id,
            sku=command.sku,
            quantity=command.quantity or 0,
            location=command.location,
            cost_price=command.cost_price,
        )
        repo.add(item)

        record_audit_entry(
            AuditAction.CREATE_INVENTORY,
            resource_type="inventory_item",
            resource_id=str(item.id),
            actor_id=command.actor_id,
            actor_kind=command.actor_kind,
            quantity_delta=item.quantity,
            previous_quantity=0,
            new_quantity=item.quantity,
            details={"sku": item.sku, "product_id": str(item.product_id)},
            ip_address=command.ip_address,
            user_agent=command.user_agent,
        )

        logger.info("Inventory item created", inventory_item_id=str(item.id), sku=item.sku)
        return str(item.id)
