"""Marketplace load test scenarios.

Stateful SequentialTaskSet journeys for the three roles: a vendor
stocking the catalogue, a buyer going from browsing to a paid order,
and an anonymous visitor browsing products.
"""

import random
from dataclasses import dataclass, field

from locust import HttpUser, SequentialTaskSet, between, task

from loadtests.data_generators import (
    CATEGORIES,
    product_data,
    product_update_data,
    profile_data,
    register_data,
    search_term,
)
from loadtests.helpers.response import bearer, extract_error_detail


@dataclass
class ShopperState:
    """Tracks state for a single journey."""

    headers: dict = field(default_factory=dict)
    user_id: str | None = None
    product_ids: list[str] = field(default_factory=list)
    order_id: str | None = None


class _Journey(SequentialTaskSet):
    role = "buyer"

    def on_start(self):
        self.state = ShopperState()

    def register(self):
        with self.client.post(
            "/auth/register",
            json=register_data(self.role),
            catch_response=True,
            name="POST /auth/register",
        ) as resp:
            if resp.status_code == 201:
                body = resp.json()
                self.state.headers = bearer(body["token"])
                self.state.user_id = body["user"]["id"]
            else:
                resp.failure(f"Register failed: {resp.status_code} - {extract_error_detail(resp)}")
                self.interrupt()


class VendorCatalogueJourney(_Journey):
    """Register -> List 3 products -> Reprice one -> Review own orders."""

    role = "vendor"

    @task
    def create_account(self):
        self.register()

    @task
    def list_products(self):
        for _ in range(3):
            with self.client.post(
                "/products",
                json=product_data(),
                headers=self.state.headers,
                catch_response=True,
                name="POST /products",
            ) as resp:
                if resp.status_code == 201:
                    self.state.product_ids.append(resp.json()["product"]["id"])
                else:
                    resp.failure(f"Create product failed: {resp.status_code} - {extract_error_detail(resp)}")

    @task
    def reprice(self):
        if not self.state.product_ids:
            self.interrupt()
        product_id = random.choice(self.state.product_ids)
        with self.client.put(
            f"/products/{product_id}",
            json=product_update_data(),
            headers=self.state.headers,
            catch_response=True,
            name="PUT /products/{id}",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Update product failed: {resp.status_code} - {extract_error_detail(resp)}")

    @task
    def review_orders(self):
        with self.client.get("/orders", headers=self.state.headers, catch_response=True, name="GET /orders") as resp:
            if resp.status_code != 200:
                resp.failure(f"List orders failed: {resp.status_code} - {extract_error_detail(resp)}")
        self.interrupt()


class BuyerCheckoutJourney(_Journey):
    """Register -> Update profile -> Browse -> Fill cart -> Checkout -> Mock payment -> View order."""

    @task
    def create_account(self):
        self.register()

    @task
    def update_profile(self):
        with self.client.put(
            "/users/me",
            json=profile_data(),
            headers=self.state.headers,
            catch_response=True,
            name="PUT /users/me",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Update profile failed: {resp.status_code} - {extract_error_detail(resp)}")

    @task
    def browse(self):
        with self.client.get("/products", params={"limit": 20}, catch_response=True, name="GET /products") as resp:
            if resp.status_code == 200:
                products = [p for p in resp.json()["products"] if p["stock"] > 5]
                self.state.product_ids = [p["id"] for p in random.sample(products, min(2, len(products)))]
            else:
                resp.failure(f"List products failed: {resp.status_code} - {extract_error_detail(resp)}")
        if not self.state.product_ids:
            self.interrupt()

    @task
    def fill_cart(self):
        for product_id in self.state.product_ids:
            with self.client.post(
                "/cart",
                json={"product_id": product_id, "quantity": random.randint(1, 3)},
                headers=self.state.headers,
                catch_response=True,
                name="POST /cart",
            ) as resp:
                if resp.status_code != 200:
                    resp.failure(f"Add to cart failed: {resp.status_code} - {extract_error_detail(resp)}")

    @task
    def checkout(self):
        with self.client.post("/orders", headers=self.state.headers, catch_response=True, name="POST /orders") as resp:
            if resp.status_code == 201:
                self.state.order_id = resp.json()["order"]["id"]
            else:
                resp.failure(f"Checkout failed: {resp.status_code} - {extract_error_detail(resp)}")
                self.interrupt()

    @task
    def pay(self):
        with self.client.post(
            "/payments/mock",
            json={"order_id": self.state.order_id},
            headers=self.state.headers,
            catch_response=True,
            name="POST /payments/mock",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Mock payment failed: {resp.status_code} - {extract_error_detail(resp)}")

    @task
    def view_order(self):
        with self.client.get(
            f"/orders/{self.state.order_id}",
            headers=self.state.headers,
            catch_response=True,
            name="GET /orders/{id}",
        ) as resp:
            if resp.status_code == 200 and resp.json()["order"]["payment_status"] != "paid":
                resp.failure("Order not settled after mock payment")
            elif resp.status_code != 200:
                resp.failure(f"Get order failed: {resp.status_code} - {extract_error_detail(resp)}")
        self.interrupt()


class BrowsingJourney(SequentialTaskSet):
    """Page through products -> Filter by category -> Search -> Open one product."""

    @task
    def page(self):
        self.product_ids = []
        for page in (1, 2):
            with self.client.get(
                "/products", params={"page": page}, catch_response=True, name="GET /products?page"
            ) as resp:
                if resp.status_code == 200:
                    self.product_ids.extend(p["id"] for p in resp.json()["products"])
                else:
                    resp.failure(f"List products failed: {resp.status_code} - {extract_error_detail(resp)}")

    @task
    def filter_and_search(self):
        self.client.get("/products", params={"category": random.choice(CATEGORIES)}, name="GET /products?category")
        self.client.get("/products", params={"search": search_term()}, name="GET /products?search")

    @task
    def open_product(self):
        if self.product_ids:
            self.client.get(f"/products/{random.choice(self.product_ids)}", name="GET /products/{id}")
        self.interrupt()


class MarketplaceUser(HttpUser):
    """Mixed marketplace traffic: mostly browsing, with checkouts and vendor activity."""

    wait_time = between(0.5, 2.0)
    tasks = {
        BrowsingJourney: 5,
        BuyerCheckoutJourney: 3,
        VendorCatalogueJourney: 1,
    }
