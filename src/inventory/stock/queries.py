"""Read side of the stock ledger: item detail, cursor listing, availability."""

from protean.utils.globals import current_domain

from inventory.domain import inventory
from inventory.stock.item import InventoryItem
from shared.pagination import DEFAULT_LIMIT, clamp_limit, next_cursor, parse_cursor


def serialize_item(item: InventoryItem, include_adjustments: bool = False) -> dict:
    data = {
        "id": str(item.id),
        "product_id": str(item.product_id),
        "variant_id": str(item.variant_id) if item.variant_id else None,
        "sku": item.sku,
        "quantity": item.quantity,
        "reserved": item.reserved,
        "available": item.available,
        "location": item.location,
        "cost_price": item.cost_price,
        "created_at": item.created_at.isoformat() if item.created_at else None,
        "updated_at": item.updated_at.isoformat() if item.updated_at else None,
    }
    if include_adjustments:
        history = sorted(item.adjustments, key=lambda a: a.adjusted_at, reverse=True)
        data["adjustments"] = [
            {
                "id": str(adj.id),
                "delta": adj.delta,
                "reason": adj.reason,
                "previous_quantity": adj.previous_quantity,
                "new_quantity": adj.new_quantity,
                "adjusted_by": adj.adjusted_by,
                "adjusted_at": adj.adjusted_at.isoformat(),
            }
            for adj in history
        ]
    return data


def get_item(inventory_item_id) -> dict:
    """Item detail including its adjustment history. Raises ObjectNotFoundError."""
    item = current_domain.repository_for(InventoryItem).get(inventory_item_id)
    return serialize_item(item, include_adjustments=True)


def list_items(cursor: str | None = None, limit: int = DEFAULT_LIMIT) -> dict:
    """Items ordered by last update, newest first.

    ``cursor`` is the ``updated_at`` of the last item on the previous page.
    """
    limit = clamp_limit(limit)
    before = parse_cursor(cursor)

    query = current_domain.repository_for(InventoryItem)._dao.query
    if before is not None:
        query = query.filter(updated_at__lt=before)
    items = query.order_by("-updated_at").limit(limit).all().items

    return {"items": [serialize_item(item) for item in items], "next_cursor": next_cursor(items, limit)}


def available_for(product_id, variant_id=None) -> int | None:
    """Units available for a catalog variant, or ``None`` if the ledger does not track it.

    Safe to call from other bounded contexts: the lookup runs inside the
    inventory domain's own context.
    """
    with inventory.domain_context():
        item = inventory.repository_for(InventoryItem).find_for_variant(product_id, variant_id)
        return item.available if item is not None else None
