"""In-process catalog for development and tests.

Keeps variants in insertion order per product, so the first variant added for
a product is its default.
"""

import json
from dataclasses import replace
from pathlib import Path

from ordering.catalog.port import Catalog, CatalogVariant


class InMemoryCatalog(Catalog):
    def __init__(self) -> None:
        self._variants: dict[str, dict[str, CatalogVariant]] = {}

    def add_variant(
        self,
        product_id: str,
        variant_id: str,
        sku: str,
        title: str,
        price: float,
        currency: str = "INR",
        image_url: str | None = None,
        is_active: bool = True,
    ) -> CatalogVariant:
        variant = CatalogVariant(
            product_id=str(product_id),
            variant_id=str(variant_id),
            sku=sku,
            title=title,
            price=float(price),
            currency=currency,
            image_url=image_url,
            is_active=is_active,
        )
        self._variants.setdefault(str(product_id), {})[str(variant_id)] = variant
        return variant

    @classmethod
    def from_file(cls, path) -> "InMemoryCatalog":
        """Build a catalog from a JSON list of variant records (see ``add_variant``)."""
        catalog = cls()
        for record in json.loads(Path(path).read_text(encoding="utf-8")):
            catalog.add_variant(**record)
        return catalog

    def set_price(self, product_id: str, variant_id: str, price: float) -> None:
        self._replace(product_id, variant_id, price=float(price))

    def deactivate(self, product_id: str, variant_id: str) -> None:
        self._replace(product_id, variant_id, is_active=False)

    def remove_variant(self, product_id: str, variant_id: str) -> None:
        self._variants.get(str(product_id), {}).pop(str(variant_id), None)

    def _replace(self, product_id, variant_id, **changes) -> None:
        variants = self._variants[str(product_id)]
        variants[str(variant_id)] = replace(variants[str(variant_id)], **changes)

    def get_variant(self, product_id: str, variant_id: str | None = None) -> CatalogVariant | None:
        variants = self._variants.get(str(product_id))
        if not variants:
            return None
        if variant_id is None:
            return next(iter(variants.values()))
        return variants.get(str(variant_id))
