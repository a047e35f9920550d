"""Shared BDD fixtures and step definitions for the Inventory domain."""

import pytest
from inventory.audit.entry import AuditLogEntry
from inventory.stock.creation import CreateInventoryItem
from inventory.stock.item import InventoryItem
from protean import current_domain
from pytest_bdd import given, parsers, then


@pytest.fixture()
def error():
    """Container for captured validation errors."""
    return {"exc": None}


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(parsers.cfparse('an inventory item "{sku}" with {quantity:d} units'), target_fixture="inventory_item_id")
def inventory_item(sku, quantity):
    return current_domain.process(
        CreateInventoryItem(product_id="prod-kurta", variant_id="kurta-m", sku=sku, quantity=quantity),
        asynchronous=False,
    )


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse("the item has {available:d} units available"))
def item_available(inventory_item_id, available):
    item = current_domain.repository_for(InventoryItem).get(inventory_item_id)
    assert item.available == available
    assert item.quantity - item.reserved == available


@then(parsers.cfparse("the item has {count:d} adjustment"))
@then(parsers.cfparse("the item has {count:d} adjustments"))
def item_adjustments(inventory_item_id, count):
    item = current_domain.repository_for(InventoryItem).get(inventory_item_id)
    assert len(item.adjustments) == count


@then(parsers.cfparse("the audit trail has {count:d} entry"))
@then(parsers.cfparse("the audit trail has {count:d} entries"))
def audit_entries(inventory_item_id, count):
    entries = current_domain.repository_for(AuditLogEntry)._dao.query.filter(resource_id=inventory_item_id).all()
    assert entries.total == count
