"""Checkout service FastAPI application.

Serves the cart, checkout, order administration and stock ledger APIs.
Commands are processed synchronously; each request is wrapped in the
Protean domain context that owns its URL prefix.

Usage:
    uvicorn app:app --app-dir src --host 0.0.0.0 --port 8000 --reload
"""

from uuid import uuid4

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from inventory.domain import inventory
from ordering.domain import ordering
from shared.errors import register_error_handlers
from shared.logging import bind_request_context, clear_request_context, configure_logging
from shared.settings import get_settings

# ---------------------------------------------------------------------------
# Domain initialization
# ---------------------------------------------------------------------------
# PROTEAN_ENV selects the config overlay from pyproject's [tool.protean].
configure_logging()
ordering.init()
inventory.init()

logger = structlog.get_logger(__name__)

# ---------------------------------------------------------------------------
# Route-to-domain mapping
# ---------------------------------------------------------------------------
_ROUTE_DOMAIN_MAP = {
    "/cart": ordering,
    "/checkout": ordering,
    "/orders": ordering,
    "/inventory": inventory,
    "/audit": inventory,
}


def _resolve_domain(path: str):
    """Return the domain for the given request path, or None."""
    for prefix, domain in _ROUTE_DOMAIN_MAP.items():
        if path.startswith(prefix):
            return domain
    return None


# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
app = FastAPI(
    title="Checkout Service API",
    description="Carts, checkout with payment verification, orders and stock ledger",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().get_cors_origins_list(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_error_handlers(app)


@app.middleware("http")
async def domain_context_middleware(request: Request, call_next):
    """Push the correct Protean domain context for each request."""
    domain = _resolve_domain(request.url.path)
    if domain is not None:
        with domain.domain_context():
            response = await call_next(request)
        return response
    # Health check and docs run outside any domain
    return await call_next(request)


@app.middleware("http")
async def request_logging_middleware(request: Request, call_next):
    """Bind request identifiers into every log line emitted while serving it."""
    request_id = request.headers.get("X-Request-ID") or uuid4().hex
    bind_request_context(request_id=request_id, method=request.method, path=request.url.path)
    try:
        response = await call_next(request)
        response.headers["X-Request-ID"] = request_id
        logger.info("Request completed", status_code=response.status_code)
        return response
    finally:
        clear_request_context()


# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
from inventory.api.routes import audit_router, inventory_router  # noqa: E402
from ordering.api.routes import cart_router, checkout_router, order_router  # noqa: E402

app.include_router(cart_router)
app.include_router(checkout_router)
app.include_router(order_router)
app.include_router(inventory_router)
app.include_router(audit_router)


# ---------------------------------------------------------------------------
# Health / root
# ---------------------------------------------------------------------------
@app.get("/health")
async def health():
    return JSONResponse(
        content={
            "status": "ok",
            "domains": {
                "ordering": {"name": ordering.name},
                "inventory": {"name": inventory.name},
            },
        }
    )
