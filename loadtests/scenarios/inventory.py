"""Inventory load test scenarios.

An admin user registering SKUs and applying stock adjustments, then reading
the ledger and audit trail back. Authenticates with a bearer token signed
with the server's ``JWT_SECRET``.
"""

import os
import random
import uuid
from datetime import UTC, datetime, timedelta

import jwt
from locust import HttpUser, between, task

from loadtests.data_generators import adjustment_data, inventory_item_data
from loadtests.helpers.response import extract_error_detail
from loadtests.helpers.state import StockState

JWT_SECRET = os.environ.get("JWT_SECRET", "change-me")


def admin_token() -> str:
    payload = {
        "user_id": f"lt-admin-{uuid.uuid4().hex[:8]}",
        "roles": ["admin"],
        "exp": datetime.now(UTC) + timedelta(hours=2),
    }
    return jwt.encode(payload, JWT_SECRET, algorithm="HS256")


class StockAdminUser(HttpUser):
    """Admin registering items and adjusting stock."""

    wait_time = between(0.5, 2)
    weight = 1

    def on_start(self):
        self.state = StockState()
        self.client.headers["Authorization"] = f"Bearer {admin_token()}"

    @task(1)
    def create_item(self):
        with self.client.post(
            "/inventory",
            json=inventory_item_data(),
            catch_response=True,
            name="POST /inventory",
        ) as resp:
            if resp.status_code == 201:
                self.state.item_ids.append(resp.json()["id"])
            else:
                resp.failure(f"Create item failed: {resp.status_code} — {extract_error_detail(resp)}")

    @task(4)
    def adjust_stock(self):
        if not self.state.item_ids:
            return
        with self.client.post(
            f"/inventory/{random.choice(self.state.item_ids)}/adjust",
            json=adjustment_data(),
            catch_response=True,
            name="POST /inventory/{id}/adjust",
        ) as resp:
            # The ledger rejects negative stock
            if resp.status_code == 400 and "negative_stock" in resp.text:
                resp.success()
            elif resp.status_code != 200:
                resp.failure(f"Adjust failed: {resp.status_code} — {extract_error_detail(resp)}")

    @task(2)
    def list_items(self):
        with self.client.get("/inventory?limit=50", catch_response=True, name="GET /inventory") as resp:
            if resp.status_code != 200:
                resp.failure(f"List items failed: {resp.status_code} — {extract_error_detail(resp)}")

    @task(1)
    def read_audit(self):
        if not self.state.item_ids:
            return
        with self.client.get(
            "/audit",
            params={"resource_type": "inventory_item", "resource_id": random.choice(self.state.item_ids)},
            catch_response=True,
            name="GET /audit",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Audit read failed: {resp.status_code} — {extract_error_detail(resp)}")
