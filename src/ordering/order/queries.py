"""Order read model for admin listing and detail views.

Rows are rendered with placeholder defaults so orders with missing customer or
address data still serialise.
"""

from protean.utils.globals import current_domain

from ordering.order.order import Order
from shared.pagination import DEFAULT_LIMIT, clamp_limit, next_cursor, parse_cursor

GUEST_NAME = "Guest Customer"
GUEST_EMAIL = "guest@example.com"
GUEST_PHONE = "0000000000"
DEFAULT_COUNTRY = "India"
DEFAULT_PAYMENT_METHOD = "razorpay"


def _isoformat(value):
    return value.isoformat() if value else None


def _address(address) -> dict:
    return {
        "address_line1": (address.address_line1 if address else None) or "",
        "address_line2": (address.address_line2 if address else None) or "",
        "city": (address.city if address else None) or "",
        "state": (address.state if address else None) or "",
        "postal_code": (address.postal_code if address else None) or "",
        "country": (address.country if address else None) or DEFAULT_COUNTRY,
    }


def serialize_order(order: Order, include_items: bool = True) -> dict:
    customer = order.customer
    pricing = order.pricing
    data = {
        "id": str(order.id),
        "order_number": order.order_number or "",
        "status": order.status,
        "currency": (pricing.currency if pricing else None) or "INR",
        "subtotal": pricing.subtotal if pricing else 0.0,
        "tax_amount": pricing.tax_total if pricing else 0.0,
        "shipping_amount": pricing.shipping_cost if pricing else 0.0,
        "discount_amount": pricing.discount_total if pricing else 0.0,
        "total_price": order.total_price,
        "customer_id": str(order.customer_id) if order.customer_id else None,
        "customer_name": (customer.name if customer else None) or GUEST_NAME,
        "customer_email": (customer.email if customer else None) or GUEST_EMAIL,
        "customer_phone": (customer.phone if customer else None) or GUEST_PHONE,
        "shipping_address": _address(order.shipping_address),
        "billing_address": _address(order.billing_address or order.shipping_address),
        "payment_method": order.payment_method or DEFAULT_PAYMENT_METHOD,
        "gateway_order_id": order.gateway_order_id or "",
        "gateway_payment_id": order.gateway_payment_id or "",
        "item_count": sum(item.quantity for item in order.items),
        "paid_at": _isoformat(order.paid_at),
        "cancelled_at": _isoformat(order.cancelled_at),
        "created_at": _isoformat(order.created_at),
        "updated_at": _isoformat(order.updated_at),
    }
    if include_items:
        data["items"] = [
            {
                "id": str(item.id),
                "product_id": str(item.product_id),
                "variant_id": str(item.variant_id),
                "sku": item.sku or "",
                "title": item.title or "",
                "image_url": item.image_url or "",
                "unit_price": item.unit_price,
                "quantity": item.quantity,
                "line_total": item.line_total,
            }
            for item in order.items
        ]
    return data


def get_order(order_id) -> dict:
    """Order detail with line items. Raises ObjectNotFoundError."""
    return serialize_order(current_domain.repository_for(Order).get(order_id))


def list_orders(cursor: str | None = None, limit: int = DEFAULT_LIMIT, status: str | None = None) -> dict:
    """Orders by last update, newest first, paginated with an ``updated_at`` cursor."""
    limit = clamp_limit(limit)
    before = parse_cursor(cursor)

    filters = {}
    if before is not None:
        filters["updated_at__lt"] = before
    if status:
        filters["status"] = status

    query = current_domain.repository_for(Order)._dao.query
    if filters:
        query = query.filter(**filters)
    orders = query.order_by("-updated_at").limit(limit).all().items

    return {
        "orders": [serialize_order(order, include_items=False) for order in orders],
        "next_cursor": next_cursor(orders, limit),
    }
