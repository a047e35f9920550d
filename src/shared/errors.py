"""Error taxonomy for the checkout service and its HTTP mapping.

Validation-flavoured failures extend Protean's ``ValidationError`` so they can
be raised from aggregates and handlers like any other domain validation. The
remaining errors describe infrastructure or access problems and are plain
exceptions raised from the application layer.

Every error is rendered at the boundary as::

    {"error": {"code": "...", "message": "...", "details": {...}}}
"""

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.integrations.fastapi import register_exception_handlers

logger = structlog.get_logger(__name__)

NotFoundError = ObjectNotFoundError


class EmptyCartError(ValidationError):
    """Checkout was attempted on a cart whose subtotal is not positive."""

    error_code = "empty_cart"


class InvalidSignatureError(ValidationError):
    """A payment callback signature did not match the recomputed HMAC."""

    error_code = "invalid_signature"


class NegativeStockError(ValidationError):
    """A stock write would drive quantity or availability below zero."""

    error_code = "negative_stock"


class ServiceError(Exception):
    """Base class for non-validation failures surfaced over HTTP."""

    status_code = 500
    error_code = "internal_error"

    def __init__(self, message: str, details: dict | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}


class PaymentGatewayError(ServiceError):
    """The payment gateway was unreachable or answered with a non-2xx status."""

    status_code = 500
    error_code = "payment_gateway_error"


class UnauthorizedError(ServiceError):
    status_code = 401
    error_code = "unauthorized"


class ForbiddenError(ServiceError):
    status_code = 403
    error_code = "forbidden"


def _first_message(messages: dict) -> str:
    for errors in messages.values():
        if isinstance(errors, list | tuple) and errors:
            return str(errors[0])
        if errors:
            return str(errors)
    return "Validation failed"


def _error_body(code: str, message: str, details: dict) -> dict:
    return {"error": {"code": code, "message": message, "details": details}}


async def _validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    messages = exc.messages if isinstance(exc.messages, dict) else {"_entity": [str(exc.messages)]}
    code = getattr(exc, "error_code", "validation_error")
    return JSONResponse(status_code=400, content=_error_body(code, _first_message(messages), messages))


async def _request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = {}
    for error in exc.errors():
        field = ".".join(str(part) for part in error.get("loc", ()) if part != "body") or "_entity"
        details.setdefault(field, []).append(error.get("msg", "Invalid value"))
    return JSONResponse(
        status_code=400,
        content=_error_body("validation_error", _first_message(details), details),
    )


async def _not_found_handler(request: Request, exc: ObjectNotFoundError) -> JSONResponse:
    message = str(exc.args[0]) if exc.args else "Resource not found"
    return JSONResponse(status_code=404, content=_error_body("not_found", message, {}))


async def _service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(
            "Request failed",
            error_code=exc.error_code,
            error_message=exc.message,
            path=request.url.path,
        )
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(exc.error_code, exc.message, exc.details),
    )


def register_error_handlers(app: FastAPI) -> None:
    """Install Protean's default handlers, then the service's structured ones."""
    register_exception_handlers(app)
    app.add_exception_handler(ValidationError, _validation_error_handler)
    app.add_exception_handler(RequestValidationError, _request_validation_handler)
    app.add_exception_handler(ObjectNotFoundError, _not_found_handler)
    app.add_exception_handler(ServiceError, _service_error_handler)
