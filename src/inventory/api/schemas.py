"""Pydantic request/response schemas for the Inventory API.

These are external contracts (anti-corruption layer) — separate from
internal Protean commands.
"""

from pydantic import BaseModel, Field, field_validator


# ---------------------------------------------------------------------------
# Request Schemas
# ---------------------------------------------------------------------------
class CreateInventoryItemRequest(BaseModel):
    product_id: str
    variant_id: str | None = None
    sku: str = Field(min_length=1, max_length=100)
    quantity: int = Field(ge=0, default=0)
    location: str | None = None
    cost_price: float | None = Field(default=None, ge=0)

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "product_id": "prod-001",
                    "variant_id": "var-001",
                    "sku": "KURTA-BLU-M",
                    "quantity": 25,
                    "location": "Rack A3",
                    "cost_price": 320.0,
                }
            ]
        }
    }


class AdjustStockRequest(BaseModel):
    quantity: int = Field(description="Signed change to quantity on hand")
    reason: str = Field(min_length=1, max_length=500)

    @field_validator("quantity")
    @classmethod
    def quantity_must_be_non_zero(cls, v: int) -> int:
        if v == 0:
            raise ValueError("quantity adjustment cannot be zero")
        return v

    model_config = {"json_schema_extra": {"examples": [{"quantity": -5, "reason": "sale"}]}}


class UpdateInventoryItemRequest(BaseModel):
    quantity: int | None = Field(default=None, ge=0)
    location: str | None = None
    cost_price: float | None = Field(default=None, ge=0)


# ---------------------------------------------------------------------------
# Response Schemas
# ---------------------------------------------------------------------------
class InventoryAdjustmentResponse(BaseModel):
    id: str
    delta: int
    reason: str
    previous_quantity: int
    new_quantity: int
    adjusted_by: str | None = None
    adjusted_at: str


class InventoryItemResponse(BaseModel):
    id: str
    product_id: str
    variant_id: str | None = None
    sku: str
    quantity: int
    reserved: int
    available: int
    location: str | None = None
    cost_price: float | None = None
    created_at: str | None = None
    updated_at: str | None = None
    adjustments: list[InventoryAdjustmentResponse] | None = None


class InventoryListResponse(BaseModel):
    items: list[InventoryItemResponse]
    next_cursor: str | None = None


class AuditEntryResponse(BaseModel):
    id: str
    action: str
    resource_type: str
    resource_id: str
    actor_id: str | None = None
    actor_kind: str | None = None
    quantity_delta: int | None = None
    previous_quantity: int | None = None
    new_quantity: int | None = None
    reason: str | None = None
    details: dict = Field(default_factory=dict)
    ip_address: str | None = None
    user_agent: str | None = None
    created_at: str | None = None


class AuditListResponse(BaseModel):
    entries: list[AuditEntryResponse]
