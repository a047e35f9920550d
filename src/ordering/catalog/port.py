"""Catalog port: live product data consumed by carts and checkout.

Products, categories and pricing are owned by the catalog service. The
ordering context only reads variant-level price, title, sku and image
through this interface and never writes back.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass

PLACEHOLDER_IMAGE = "/product-placeholder.webp"


@dataclass(frozen=True)
class CatalogVariant:
    """A purchasable variant as currently listed in the catalog."""

    product_id: str
    variant_id: str
    sku: str
    title: str
    price: float
    currency: str = "INR"
    image_url: str | None = None
    is_active: bool = True

    @property
    def display_image(self) -> str:
        return self.image_url or PLACEHOLDER_IMAGE


class Catalog(ABC):
    """Abstract catalog reader."""

    @abstractmethod
    def get_variant(self, product_id: str, variant_id: str | None = None) -> CatalogVariant | None:
        """Return the variant, or the product's default variant when ``variant_id`` is omitted.

        Returns ``None`` when the product or variant does not exist.
        """
        ...

    def get_variants(self, keys) -> dict[tuple[str, str], CatalogVariant]:
        """Resolve many ``(product_id, variant_id)`` pairs, skipping unknown ones."""
        found = {}
        for product_id, variant_id in keys:
            variant = self.get_variant(product_id, variant_id)
            if variant is not None:
                found[(str(product_id), str(variant_id))] = variant
        return found
