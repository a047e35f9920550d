"""FastAPI routes for the Inventory domain — stock ledger and audit trail.

All routes are restricted to admin roles.
"""

from fastapi import APIRouter, Depends, Query, Request
from protean.utils.globals import current_domain

from inventory.api.schemas import (
    AdjustStockRequest,
    AuditListResponse,
    CreateInventoryItemRequest,
    InventoryItemResponse,
    InventoryListResponse,
    UpdateInventoryItemRequest,
)
from inventory.audit.queries import list_audit_entries
from inventory.stock.adjustment import AdjustStock
from inventory.stock.creation import CreateInventoryItem
from inventory.stock.queries import get_item, list_items
from inventory.stock.update import UpdateInventoryItem
from shared.actor import Actor, require_roles


def _request_meta(request: Request, actor: Actor) -> dict:
    """Attribution fields copied onto every ledger command for the audit trail."""
    return {
        "actor_id": actor.user_id,
        "actor_kind": actor.kind,
        "ip_address": request.client.host if request.client else None,
        "user_agent": request.headers.get("User-Agent"),
    }


# ---------------------------------------------------------------------------
# Inventory Router
# ---------------------------------------------------------------------------
inventory_router = APIRouter(prefix="/inventory", tags=["inventory"])


@inventory_router.post("", status_code=201, response_model=InventoryItemResponse)
def create_inventory_item(
    body: CreateInventoryItemRequest,
    request: Request,
    actor: Actor = Depends(require_roles()),
) -> InventoryItemResponse:
    command = CreateInventoryItem(
        product_id=body.product_id,
        variant_id=body.variant_id,
        sku=body.sku,
        quantity=body.quantity,
        location=body.location,
        cost_price=body.cost_price,
        **_request_meta(request, actor),
    )
    item_id = current_domain.process(command, asynchronous=False)
    return InventoryItemResponse(**get_item(item_id))


@inventory_router.get("", response_model=InventoryListResponse)
def list_inventory_items(
    cursor: str | None = None,
    limit: int = Query(default=50, ge=1, le=200),
    actor: Actor = Depends(require_roles()),
) -> InventoryListResponse:
    return InventoryListResponse(**list_items(cursor=cursor, limit=limit))


@inventory_router.get("/{inventory_item_id}", response_model=InventoryItemResponse)
def get_inventory_item(
    inventory_item_id: str,
    actor: Actor = Depends(require_roles()),
) -> InventoryItemResponse:
    return InventoryItemResponse(**get_item(inventory_item_id))


@inventory_router.patch("/{inventory_item_id}", response_model=InventoryItemResponse)
def update_inventory_item(
    inventory_item_id: str,
    body: UpdateInventoryItemRequest,
    request: Request,
    actor: Actor = Depends(require_roles()),
) -> InventoryItemResponse:
    command = UpdateInventoryItem(
        inventory_item_id=inventory_item_id,
        quantity=body.quantity,
        location=body.location,
        cost_price=body.cost_price,
        **_request_meta(request, actor),
    )
    current_domain.process(command, asynchronous=False)
    return InventoryItemResponse(**get_item(inventory_item_id))


@inventory_router.post("/{inventory_item_id}/adjust", response_model=InventoryItemResponse)
def adjust_stock(
    inventory_item_id: str,
    body: AdjustStockRequest,
    request: Request,
    actor: Actor = Depends(require_roles()),
) -> InventoryItemResponse:
    command = AdjustStock(
        inventory_item_id=inventory_item_id,
        delta=body.quantity,
        reason=body.reason,
        **_request_meta(request, actor),
    )
    current_domain.process(command, asynchronous=False)
    return InventoryItemResponse(**get_item(inventory_item_id))


# ---------------------------------------------------------------------------
# Audit Router
# ---------------------------------------------------------------------------
audit_router = APIRouter(prefix="/audit", tags=["audit"])


@audit_router.get("", response_model=AuditListResponse)
def list_audit_log(
    resource_type: str | None = None,
    resource_id: str | None = None,
    limit: int = Query(default=50, ge=1, le=200),
    actor: Actor = Depends(require_roles()),
) -> AuditListResponse:
    return AuditListResponse(
        entries=list_audit_entries(resource_type=resource_type, resource_id=resource_id, limit=limit)
    )
