"""Shopper load test scenarios.

ShopperUser registers, browses the catalog, places orders and reads its
order history. LastUnitRaceUser hammers a handful of low-stock products so
that concurrent placements compete for the last units; an
``InsufficientStock`` rejection there is the expected outcome, not a
failure.
"""

import random

from locust import HttpUser, between, task

from loadtests.data_generators import order_data, registration_data
from loadtests.helpers.response import error_code, extract_error_detail
from loadtests.helpers.state import ShopperState


class _ShopperBase(HttpUser):
    abstract = True

    def on_start(self):
        self.state = ShopperState()
        with self.client.post("/users", json=registration_data(), catch_response=True, name="POST /users") as resp:
            if resp.status_code == 201:
                body = resp.json()
                self.state.user_id = body["user_id"]
                self.state.token = body["token"]
            else:
                resp.failure(f"Register failed: {resp.status_code} {extract_error_detail(resp)}")
        self.refresh_catalog()

    def refresh_catalog(self):
        with self.client.get("/products", catch_response=True, name="GET /products") as resp:
            if resp.status_code == 200:
                self.state.product_ids = [p["id"] for p in resp.json() if p["stock"] > 0]
            else:
                resp.failure(f"Browse failed: {resp.status_code} {extract_error_detail(resp)}")


class ShopperUser(_ShopperBase):
    wait_time = between(1, 3)
    weight = 5

    @task(4)
    def browse(self):
        self.refresh_catalog()
        if self.state.product_ids:
            product_id = random.choice(self.state.product_ids)
            self.client.get(f"/products/{product_id}", name="GET /products/{id}")

    @task(2)
    def place_order(self):
        if not self.state.product_ids:
            return
        with self.client.post(
            "/orders",
            json=order_data(self.state.product_ids),
            headers=self.state.headers,
            catch_response=True,
            name="POST /orders",
        ) as resp:
            if resp.status_code == 201:
                self.state.order_ids.append(resp.json()["id"])
            elif error_code(resp) == "InsufficientStock":
                resp.success()
                self.refresh_catalog()
            else:
                resp.failure(f"Place order failed: {resp.status_code} {extract_error_detail(resp)}")

    @task(2)
    def order_history(self):
        self.client.get("/orders/myorders", headers=self.state.headers, name="GET /orders/myorders")
        if self.state.order_ids:
            order_id = random.choice(self.state.order_ids)
            self.client.get(f"/orders/{order_id}", headers=self.state.headers, name="GET /orders/{id}")


class LastUnitRaceUser(_ShopperBase):
    wait_time = between(0.1, 0.5)
    weight = 1

    @task
    def grab_last_unit(self):
        if not self.state.product_ids:
            self.refresh_catalog()
            return
        payload = order_data(self.state.product_ids[:3], max_lines=1)
        payload["items"][0]["quantity"] = 1
        with self.client.post(
            "/orders",
            json=payload,
            headers=self.state.headers,
            catch_response=True,
            name="POST /orders (race)",
        ) as resp:
            if resp.status_code == 201 or error_code(resp) == "InsufficientStock":
                resp.success()
            else:
                resp.failure(f"Race order failed: {resp.status_code} {extract_error_detail(resp)}")
