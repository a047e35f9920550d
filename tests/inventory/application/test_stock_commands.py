"""Application tests for stock ledger commands and their audit entries."""

import pytest
from inventory.audit.entry import AuditLogEntry
from inventory.stock.adjustment import AdjustStock
from inventory.stock.creation import CreateInventoryItem
from inventory.stock.item import InventoryItem
from inventory.stock.update import UpdateInventoryItem
from protean import current_domain
from protean.exceptions import ObjectNotFoundError, ValidationError
from shared.errors import NegativeStockError


def _create(**overrides):
    defaults = {
        "product_id": "prod-kurta",
        "variant_id": "kurta-m",
        "sku": "KURTA-M",
        "quantity": 10,
        "actor_id": "admin-1",
        "actor_kind": "user",
    }
    defaults.update(overrides)
    return current_domain.process(CreateInventoryItem(**defaults), asynchronous=False)


def _audit_for(item_id):
    entries = current_domain.repository_for(AuditLogEntry)._dao.query.filter(resource_id=item_id).all().items
    return sorted(entries, key=lambda e: e.created_at)


class TestCreateInventoryItem:
    def test_create_persists_item(self):
        item_id = _create(location="Rack A3", cost_price=320.0)

        item = current_domain.repository_for(InventoryItem).get(item_id)
        assert item.sku == "KURTA-M"
        assert item.quantity == 10
        assert item.available == 10
        assert item.location == "Rack A3"

    def test_create_writes_audit_entry(self):
        item_id = _create()

        [entry] = _audit_for(item_id)
        assert entry.action == "create_inventory_item"
        assert entry.resource_type == "inventory_item"
        assert entry.actor_id == "admin-1"
        assert entry.quantity_delta == 10
        assert entry.previous_quantity == 0
        assert entry.new_quantity == 10
        assert entry.details_map == {"sku": "KURTA-M", "product_id": "prod-kurta"}

    def test_duplicate_sku_is_rejected(self):
        _create()
        with pytest.raises(ValidationError) as exc_info:
            _create(variant_id="kurta-l")
        assert "sku" in exc_info.value.messages

    def test_negative_quantity_is_rejected(self):
        with pytest.raises(NegativeStockError):
            _create(quantity=-2)


class TestAdjustStock:
    def test_adjust_updates_quantity_and_history(self):
        item_id = _create(quantity=10)

        current_domain.process(
            AdjustStock(inventory_item_id=item_id, delta=-4, reason="sale", actor_id="admin-1"),
            asynchronous=False,
        )

        item = current_domain.repository_for(InventoryItem).get(item_id)
        assert item.quantity == 6
        assert item.available == 6
        assert len(item.adjustments) == 1
        assert item.adjustments[0].reason == "sale"

    def test_adjust_writes_audit_entry(self):
        item_id = _create(quantity=10)

        current_domain.process(
            AdjustStock(inventory_item_id=item_id, delta=5, reason="restock", actor_id="admin-2"),
            asynchronous=False,
        )

        entry = _audit_for(item_id)[-1]
        assert entry.action == "adjust_inventory"
        assert entry.actor_id == "admin-2"
        assert entry.quantity_delta == 5
        assert entry.previous_quantity == 10
        assert entry.new_quantity == 15
        assert entry.reason == "restock"

    def test_overdraw_leaves_no_trace(self):
        item_id = _create(quantity=3)

        with pytest.raises(NegativeStockError):
            current_domain.process(
                AdjustStock(inventory_item_id=item_id, delta=-5, reason="sale"),
                asynchronous=False,
            )

        item = current_domain.repository_for(InventoryItem).get(item_id)
        assert item.quantity == 3
        assert len(item.adjustments) == 0
        assert len(_audit_for(item_id)) == 1

    def test_unknown_item(self):
        with pytest.raises(ObjectNotFoundError):
            current_domain.process(
                AdjustStock(inventory_item_id="missing", delta=1, reason="restock"),
                asynchronous=False,
            )


class TestUpdateInventoryItem:
    def test_no_fields_is_rejected(self):
        item_id = _create()
        with pytest.raises(ValidationError) as exc_info:
            current_domain.process(UpdateInventoryItem(inventory_item_id=item_id), asynchronous=False)
        assert "_entity" in exc_info.value.messages

    def test_quantity_is_applied_as_adjustment(self):
        item_id = _create(quantity=10)

        current_domain.process(UpdateInventoryItem(inventory_item_id=item_id, quantity=7), asynchronous=False)

        item = current_domain.repository_for(InventoryItem).get(item_id)
        assert item.quantity == 7
        assert item.available == 7
        [adjustment] = item.adjustments
        assert adjustment.delta == -3
        assert adjustment.reason == "manual update"

    def test_details_update_records_changes(self):
        item_id = _create()

        current_domain.process(
            UpdateInventoryItem(inventory_item_id=item_id, location="Rack B2", cost_price=299.0),
            asynchronous=False,
        )

        item = current_domain.repository_for(InventoryItem).get(item_id)
        assert item.location == "Rack B2"
        assert len(item.adjustments) == 0
        entry = _audit_for(item_id)[-1]
        assert entry.action == "update_inventory_item"
        assert entry.quantity_delta == 0
        assert entry.reason is None
        assert entry.details_map == {"changes": {"location": "Rack B2", "cost_price": 299.0}}

    def test_unchanged_quantity_is_not_an_adjustment(self):
        item_id = _create(quantity=10)

        current_domain.process(
            UpdateInventoryItem(inventory_item_id=item_id, quantity=10, location="Rack B2"),
            asynchronous=False,
        )

        item = current_domain.repository_for(InventoryItem).get(item_id)
        assert len(item.adjustments) == 0
        assert _audit_for(item_id)[-1].details_map == {"changes": {"location": "Rack B2"}}
