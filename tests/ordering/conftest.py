import pytest

from shared.actor import Actor


@pytest.fixture(autouse=True)
def _ctx(ordering_bed, inventory_bed, catalog, gateway):
    with ordering_bed.domain_context():
        yield


@pytest.fixture()
def guest():
    return Actor.guest("session_guest-001")


@pytest.fixture()
def shopper_user():
    return Actor.user("cust-001")


@pytest.fixture()
def checkout_details():
    return {
        "customer": {"name": "Asha Rao", "email": "asha@example.com", "phone": "9876543210"},
        "shipping_address": {
            "address_line1": "12 MG Road",
            "city": "Bengaluru",
            "state": "Karnataka",
            "postal_code": "560001",
            "country": "India",
        },
    }
