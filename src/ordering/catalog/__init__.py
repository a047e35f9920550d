"""Catalog factory.

Provides get_catalog() / set_catalog() so deployments can plug in a catalog
service client while development and tests use InMemoryCatalog.
"""

from ordering.catalog.port import Catalog
from shared.settings import get_settings

_current_catalog: Catalog | None = None


def get_catalog() -> Catalog:
    """Return the current catalog.

    Defaults to an InMemoryCatalog, seeded from ``CATALOG_SEED_PATH`` when set.
    """
    global _current_catalog
    if _current_catalog is None:
        from ordering.catalog.memory_adapter import InMemoryCatalog

        seed_path = get_settings().catalog_seed_path
        _current_catalog = InMemoryCatalog.from_file(seed_path) if seed_path else InMemoryCatalog()
    return _current_catalog


def set_catalog(catalog: Catalog) -> None:
    global _current_catalog
    _current_catalog = catalog


def reset_catalog() -> None:
    global _current_catalog
    _current_catalog = None
