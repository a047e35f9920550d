"""Checkout service load testing — Locust entry point.

Discovers all user classes from the scenarios package. The server under test
must run with the FakeGateway and the seeded catalog:

    CATALOG_SEED_PATH=loadtests/catalog_seed.json uvicorn app:app --app-dir src

Usage:
    # All scenarios (web UI):
    locust -f loadtests/locustfile.py

    # Guest checkout only:
    locust -f loadtests/locustfile.py GuestCheckoutUser

    # Headless (CI mode):
    locust -f loadtests/locustfile.py --headless \
           -u 50 -r 5 -t 300s --csv=results/loadtest
"""

import logging
import time

import requests
from locust import events

# Import all user classes so Locust discovers them
from loadtests.helpers.response import extract_error_detail
from loadtests.scenarios.checkout import GuestCheckoutUser, HotItemUser  # noqa: F401
from loadtests.scenarios.inventory import StockAdminUser  # noqa: F401

logger = logging.getLogger("loadtest")


@events.request.add_listener
def on_request(request_type, name, response, exception, **_kw):
    """Log error details for every failed request.

    Fires for every scenario.
    """
    if exception:
        logger.error("[EXCEPTION] %s %s: %s", request_type, name, exception)
    elif response is not None and response.status_code >= 400:
        detail = extract_error_detail(response)
        logger.error("[%s] %s %s: %s", response.status_code, request_type, name, detail)


@events.test_start.add_listener
def on_test_start(environment, **_kwargs):
    """Check the target is up before spawning users."""
    print(f"\n[LOADTEST] Started at {time.strftime('%H:%M:%S')}")
    print(f"[LOADTEST] Target host: {environment.host}")
    try:
        resp = requests.get(f"{environment.host}/health", timeout=5)
        print(f"[LOADTEST] Health: {resp.status_code} {resp.text[:200]}")
    except requests.RequestException as e:
        print(f"[LOADTEST] Health check failed: {e}")
    print()


@events.test_stop.add_listener
def on_test_stop(**_kwargs):
    print(f"\n[LOADTEST] Stopped at {time.strftime('%H:%M:%S')}\n")
