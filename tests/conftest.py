import os
from pathlib import Path

import pytest

# Domains set up by a bed during this session; their stores are reset after every test.
_ACTIVE_DOMAINS = []


def pytest_addoption(parser):
    parser.addoption(
        "--env",
        action="store",
        default="test",
        help="Config environment to run tests on",
    )


def pytest_sessionstart(session):
    """Pytest hook to run before collecting tests.

    Pin the environment every setting is read from, so a developer's ``.env``
    or shell cannot change gateway or token behavior under test.
    """
    os.environ["PROTEAN_ENV"] = session.config.option.env
    os.environ["PAYMENT_GATEWAY"] = "fake"
    os.environ["GATEWAY_KEY_ID"] = "rzp_test_key"
    os.environ["GATEWAY_KEY_SECRET"] = "rzp_test_secret"
    os.environ["JWT_SECRET"] = "test-jwt-secret"
    os.environ.pop("CATALOG_SEED_PATH", None)
    os.environ.pop("COOKIE_DOMAIN", None)

    from shared.settings import get_settings

    get_settings.cache_clear()


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their directory location."""
    for item in items:
        # Get the test file path relative to the tests directory
        test_path = Path(item.fspath)

        # Mark tests based on their directory
        if "/domain/" in str(test_path):
            item.add_marker(pytest.mark.domain)
        elif "/application/" in str(test_path):
            item.add_marker(pytest.mark.application)
        elif "/integration/" in str(test_path):
            item.add_marker(pytest.mark.integration)
            # Integration tests are often slower
            if not any(m.name == "fast" for m in item.iter_markers()):
                item.add_marker(pytest.mark.slow)
        elif "/bdd/" in str(test_path):
            item.add_marker(pytest.mark.bdd)


# ---------------------------------------------------------------------------
# Domain beds
# ---------------------------------------------------------------------------
@pytest.fixture(scope="session")
def ordering_bed():
    from ordering.domain import ordering
    from protean.integrations.pytest import DomainFixture

    bed = DomainFixture(ordering)
    bed.setup()
    _ACTIVE_DOMAINS.append(ordering)
    yield bed
    bed.teardown()


@pytest.fixture(scope="session")
def inventory_bed():
    from inventory.domain import inventory
    from protean.integrations.pytest import DomainFixture

    bed = DomainFixture(inventory)
    bed.setup()
    _ACTIVE_DOMAINS.append(inventory)
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def run_around_tests():
    """Fixture to automatically cleanup infrastructure after every test"""
    from ordering.catalog import reset_catalog
    from payments.gateway import reset_gateway
    from shared.settings import get_settings

    yield

    reset_gateway()
    reset_catalog()
    get_settings.cache_clear()

    for domain in _ACTIVE_DOMAINS:
        with domain.domain_context():
            # Clear all databases
            for _, provider in domain.providers.items():
                provider._data_reset()

            # Drain event stores
            domain.event_store.store._data_reset()


# ---------------------------------------------------------------------------
# Adapters
# ---------------------------------------------------------------------------
@pytest.fixture()
def gateway():
    """A fresh FakeGateway installed as the active payment gateway."""
    from payments.gateway import set_gateway
    from payments.gateway.fake_adapter import FakeGateway

    fake = FakeGateway(key_id="rzp_test_key", key_secret="rzp_test_secret")
    set_gateway(fake)
    return fake


@pytest.fixture()
def catalog():
    """An in-memory catalog with a small fixed assortment, installed as active."""
    from ordering.catalog import set_catalog
    from ordering.catalog.memory_adapter import InMemoryCatalog

    cat = InMemoryCatalog()
    cat.add_variant("prod-kurta", "kurta-m", sku="KURTA-M", title="Cotton Kurta (M)", price=500.0)
    cat.add_variant("prod-kurta", "kurta-l", sku="KURTA-L", title="Cotton Kurta (L)", price=550.0)
    cat.add_variant(
        "prod-saree",
        "saree-red",
        sku="SAREE-RED",
        title="Silk Saree (Red)",
        price=1200.0,
        image_url="/images/saree-red.webp",
    )
    cat.add_variant("prod-retired", "retired-1", sku="RETIRED-1", title="Retired Scarf", price=99.0, is_active=False)
    set_catalog(cat)
    return cat
