"""Read access to the audit trail."""

from protean.utils.globals import current_domain

from inventory.audit.entry import AuditLogEntry
from shared.pagination import DEFAULT_LIMIT, clamp_limit


def list_audit_entries(resource_type=None, resource_id=None, limit=DEFAULT_LIMIT) -> list[dict]:
    """Newest-first audit entries, optionally narrowed to one resource."""
    filters = {}
    if resource_type:
        filters["resource_type"] = resource_type
    if resource_id:
        filters["resource_id"] = str(resource_id)

    query = current_domain.repository_for(AuditLogEntry)._dao.query
    if filters:
        query = query.filter(**filters)
    entries = query.order_by("-created_at").limit(clamp_limit(limit)).all().items
    return [entry.to_dict() for entry in entries]
