"""Cart read model: lines joined with live catalog data."""

from protean.utils.globals import current_domain

from ordering.cart.cart import ShoppingCart
from ordering.catalog import get_catalog
from shared.settings import get_settings


def _empty_cart() -> dict:
    return {"items": [], "total": 0.0, "count": 0, "currency": get_settings().default_currency}


def get_cart(actor_key: str | None) -> dict:
    """Current cart for ``actor_key`` priced against the live catalog.

    An unknown actor or a missing cart reads as an empty cart. Lines whose
    variant is no longer listed are left out of the view and the totals.
    """
    if not actor_key:
        return _empty_cart()

    cart = current_domain.repository_for(ShoppingCart).find_for_actor(actor_key)
    if cart is None or not cart.items:
        return _empty_cart()

    keys = [(str(line.product_id), str(line.variant_id)) for line in cart.items]
    variants = get_catalog().get_variants(keys)

    items = []
    currency = None
    for line in sorted(cart.items, key=lambda i: i.added_at or cart.created_at):
        variant = variants.get((str(line.product_id), str(line.variant_id)))
        if variant is None:
            continue
        currency = currency or variant.currency
        items.append(
            {
                "id": str(line.id),
                "product_id": variant.product_id,
                "variant_id": variant.variant_id,
                "sku": variant.sku,
                "title": variant.title,
                "price": variant.price,
                "quantity": line.quantity,
                "image_url": variant.display_image,
                "line_total": round(variant.price * line.quantity, 2),
            }
        )

    return {
        "items": items,
        "total": round(sum(item["price"] * item["quantity"] for item in items), 2),
        "count": sum(item["quantity"] for item in items),
        "currency": currency or get_settings().default_currency,
    }
