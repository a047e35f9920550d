"""Audit trail for ledger writes.

An AuditLogEntry is a tagged payload: the fields an operator filters on
(action, resource, actor, quantity movement) are first-class columns, and
anything else goes into an explicit ``details`` JSON map. Entries are written
in the same unit of work as the change they describe and are never updated.
"""

import json
from datetime import UTC, datetime
from enum import Enum

import structlog
from protean.exceptions import ValidationError
from protean.fields import DateTime, Integer, String, Text
from protean.utils.globals import current_domain

from inventory.domain import inventory

logger = structlog.get_logger(__name__)


class AuditAction(Enum):
    CREATE_INVENTORY = "create_inventory_item"
    ADJUST_INVENTORY = "adjust_inventory"
    UPDATE_INVENTORY = "update_inventory_item"


@inventory.aggregate
class AuditLogEntry:
    action = String(required=True, max_length=50, choices=AuditAction)
    resource_type = String(required=True, max_length=50)
    resource_id = String(required=True, max_length=255)
    actor_id = String(max_length=255)
    actor_kind = String(max_length=20)
    quantity_delta = Integer()
    previous_quantity = Integer()
    new_quantity = Integer()
    reason = String(max_length=500)
    details = Text()  # JSON object
    ip_address = String(max_length=64)
    user_agent = String(max_length=500)
    created_at = DateTime(required=True)

    @property
    def details_map(self) -> dict:
        return json.loads(self.details) if self.details else {}

    def to_dict(self) -> dict:
        return {
            "id": str(self.id),
            "action": self.action,
            "resource_type": self.resource_type,
            "resource_id": self.resource_id,
            "actor_id": self.actor_id,
            "actor_kind": self.actor_kind,
            "quantity_delta": self.quantity_delta,
            "previous_quantity": self.previous_quantity,
            "new_quantity": self.new_quantity,
            "reason": self.reason,
            "details": self.details_map,
            "ip_address": self.ip_address,
            "user_agent": self.user_agent,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }


def record_audit_entry(
    action: AuditAction,
    resource_type: str,
    resource_id: str,
    actor_id: str | None = None,
    actor_kind: str | None = None,
    quantity_delta: int | None = None,
    previous_quantity: int | None = None,
    new_quantity: int | None = None,
    reason: str | None = None,
    details: dict | None = None,
    ip_address: str | None = None,
    user_agent: str | None = None,
) -> AuditLogEntry | None:
    """Add an audit entry to the current unit of work.

    Building the entry is best-effort: a malformed entry is logged and
    skipped so it never blocks the write it annotates. Persistence shares the
    caller's unit of work, so a committed change always has its entry.
    """
    try:
        entry = AuditLogEntry(
            action=action.value,
            resource_type=resource_type,
            resource_id=str(resource_id),
            actor_id=actor_id,
            actor_kind=actor_kind,
            quantity_delta=quantity_delta,
            previous_quantity=previous_quantity,
            new_quantity=new_quantity,
            reason=reason,
            details=json.dumps(details or {}, default=str),
            ip_address=ip_address,
            user_agent=(user_agent or "")[:500] or None,
            created_at=datetime.now(UTC),
        )
    except (ValidationError, TypeError, ValueError) as exc:
        logger.warning(
            "Skipping malformed audit entry",
            action=action.value,
            resource_id=str(resource_id),
            error=str(exc),
        )
        return None

    current_domain.repository_for(AuditLogEntry).add(entry)
    return entry
