"""Administrator load test scenario.

Restocks the catalog, walks pending orders through the lifecycle and polls
the analytics dashboard. Requires LOADTEST_ADMIN_TOKEN.
"""

import os
import random

from locust import HttpUser, between, task

from loadtests.data_generators import product_data
from loadtests.helpers.response import extract_error_detail
from loadtests.helpers.state import AdminState

_NEXT_STATUS = {"pending": "processing", "processing": "shipped", "shipped": "delivered"}


class AdminUser(HttpUser):
    wait_time = between(2, 5)
    weight = 1

    def on_start(self):
        self.state = AdminState(token=os.environ.get("LOADTEST_ADMIN_TOKEN"))
        if not self.state.token:
            self.stop()
            return
        for _ in range(10):
            self.create_product()

    @task(1)
    def create_product(self):
        with self.client.post(
            "/products",
            json=product_data(stock=random.choice([1, 2, 5, 200])),
            headers=self.state.headers,
            catch_response=True,
            name="POST /products",
        ) as resp:
            if resp.status_code != 201:
                resp.failure(f"Create product failed: {resp.status_code} {extract_error_detail(resp)}")

    @task(3)
    def advance_orders(self):
        with self.client.get(
            "/orders", headers=self.state.headers, catch_response=True, name="GET /orders"
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"List orders failed: {resp.status_code} {extract_error_detail(resp)}")
                return
            open_orders = [o for o in resp.json() if o["status"] in _NEXT_STATUS]

        for order in open_orders[:5]:
            with self.client.put(
                f"/orders/{order['id']}/status",
                json={"status": _NEXT_STATUS[order["status"]]},
                headers=self.state.headers,
                catch_response=True,
                name="PUT /orders/{id}/status",
            ) as resp:
                if resp.status_code != 200:
                    resp.failure(f"Advance order failed: {resp.status_code} {extract_error_detail(resp)}")

    @task(1)
    def dashboard(self):
        time_range = random.choice(["day", "week", "month", "year", "all"])
        self.client.get(
            f"/analytics?time_range={time_range}", headers=self.state.headers, name="GET /analytics"
        )
