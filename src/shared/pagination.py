"""Cursor pagination helpers for newest-first listings keyed by ``updated_at``."""

from datetime import datetime

from protean.exceptions import ValidationError

DEFAULT_LIMIT = 50
MAX_LIMIT = 200


def clamp_limit(limit: int | None) -> int:
    return max(1, min(limit or DEFAULT_LIMIT, MAX_LIMIT))


def parse_cursor(cursor: str | None) -> datetime | None:
    if not cursor:
        return None
    try:
        return datetime.fromisoformat(cursor)
    except ValueError as exc:
        raise ValidationError({"cursor": ["Cursor must be an ISO-8601 timestamp"]}) from exc


def next_cursor(records: list, limit: int) -> str | None:
    """Cursor for the following page; only a full page can have one."""
    if len(records) < limit:
        return None
    return records[-1].updated_at.isoformat()
