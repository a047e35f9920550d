"""Pricing snapshot: server-side totals for a cart at checkout time.

Totals are computed only from the stored cart quantities and live catalog
prices; amounts sent by the client are never consulted. The snapshot is the
contract behind both the Order's frozen totals and the gateway charge.
"""

from dataclasses import dataclass

from protean.exceptions import ValidationError

from ordering.catalog import get_catalog
from shared.errors import EmptyCartError
from shared.settings import get_settings

# Tax and shipping are not computed by this service.
TAX_AMOUNT = 0.0
SHIPPING_AMOUNT = 0.0
DISCOUNT_AMOUNT = 0.0


@dataclass(frozen=True)
class SnapshotLine:
    product_id: str
    variant_id: str
    sku: str
    title: str
    image_url: str | None
    unit_price: float
    quantity: int

    @property
    def line_total(self) -> float:
        return round(self.unit_price * self.quantity, 2)


@dataclass(frozen=True)
class PricingSnapshot:
    lines: tuple[SnapshotLine, ...]
    currency: str
    subtotal: float
    tax: float = TAX_AMOUNT
    shipping: float = SHIPPING_AMOUNT
    discount: float = DISCOUNT_AMOUNT

    @property
    def total(self) -> float:
        return round(self.subtotal + self.tax + self.shipping - self.discount, 2)

    @property
    def total_minor(self) -> int:
        return int(round(self.total * 100))


def price_cart(cart) -> PricingSnapshot:
    """Price every line of ``cart`` against the catalog.

    Lines whose variant is no longer listed are dropped. Raises
    ``EmptyCartError`` when nothing billable remains.
    """
    items = list(cart.items) if cart is not None else []
    variants = get_catalog().get_variants([(str(i.product_id), str(i.variant_id)) for i in items])

    lines = []
    for item in items:
        variant = variants.get((str(item.product_id), str(item.variant_id)))
        if variant is None:
            continue
        lines.append(
            SnapshotLine(
                product_id=variant.product_id,
                variant_id=variant.variant_id,
                sku=variant.sku,
                title=variant.title,
                image_url=variant.image_url,
                unit_price=variant.price,
                quantity=item.quantity,
            )
        )

    currencies = {variant.currency for variant in variants.values()}
    if len(currencies) > 1:
        raise ValidationError({"currency": ["Cart contains items priced in different currencies"]})

    subtotal = round(sum(line.unit_price * line.quantity for line in lines), 2)
    if subtotal <= 0:
        raise EmptyCartError({"cart": ["Cart is empty"]})

    currency = currencies.pop() if currencies else get_settings().default_currency
    return PricingSnapshot(lines=tuple(lines), currency=currency, subtotal=subtotal)
