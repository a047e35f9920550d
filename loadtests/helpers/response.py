"""Response error extraction for load test observability.

Parses checkout API error responses into human-readable messages.
Handles two response shapes:

- Structured errors (400/401/403/404/500):
  {"error": {"code": "...", "message": "...", "details": {"field": ["msg"]}}}
- Framework validation fallbacks (422): {"detail": [{"loc": [...], "msg": "..."}]}
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from requests import Response


def extract_error_detail(response: Response) -> str:
    """Extract a human-readable error message from an API error response.

    Returns a compact string suitable for Locust failure messages and log lines.
    Gracefully handles unparseable bodies and missing fields.
    """
    try:
        body = response.json()
    except ValueError:
        # Not JSON, raw text truncated
        text = getattr(response, "text", "") or ""
        return text[:300] or "(empty response body)"

    if not isinstance(body, dict):
        return str(body)[:300]

    # Structured errors: {"error": {"code", "message", "details"}}
    error = body.get("error")
    if isinstance(error, dict):
        code = error.get("code", "error")
        message = error.get("message", "")
        details = error.get("details") or {}
        fields = " | ".join(f"{k}: {v}" for k, v in details.items() if k != "_entity")
        return f"{code}: {message}" + (f" ({fields})" if fields else "")
    if error is not None:
        return str(error)

    # Pydantic validation errors: {"detail": [{"loc": [...], "msg": "..."}]}
    if isinstance(body.get("detail"), list):
        parts = []
        for err in body["detail"]:
            loc = ".".join(str(p) for p in err.get("loc", []))
            msg = err.get("msg", str(err))
            parts.append(f"{loc}: {msg}" if loc else msg)
        return " | ".join(parts)

    # Unknown shape
    return str(body)[:300]
