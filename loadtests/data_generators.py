"""Faker-based payload generators for the load test scenarios.

Field names match the API's Pydantic request schemas.
"""

import random
import uuid

from faker import Faker

fake = Faker()

PAYMENT_METHODS = ["credit_card", "debit_card", "paypal", "cash_on_delivery"]
CATEGORIES = ["Kitchen", "Garden", "Books", "Outdoors", "Electronics"]


def registration_data() -> dict:
    return {
        "name": fake.name()[:100],
        "email": f"{fake.user_name()[:20]}.{uuid.uuid4().hex[:6]}@{fake.free_email_domain()}",
    }


def product_data(stock: int | None = None) -> dict:
    return {
        "name": f"{fake.word().capitalize()} {fake.word()} {uuid.uuid4().hex[:4]}",
        "description": fake.sentence(),
        "price": round(random.uniform(3.0, 120.0), 2),
        "category": random.choice(CATEGORIES),
        "image_url": f"https://images.example.com/{uuid.uuid4().hex}.jpg",
        "stock": stock if stock is not None else random.randint(50, 500),
    }


def shipping_address() -> dict:
    return {
        "full_name": fake.name()[:255],
        "address": fake.street_address()[:255],
        "city": fake.city()[:100],
        "postal_code": fake.postcode()[:20],
        "country": fake.country_code(),
    }


def order_data(product_ids: list[str], max_lines: int = 3) -> dict:
    chosen = random.sample(product_ids, k=min(len(product_ids), random.randint(1, max_lines)))
    return {
        "items": [{"product": product_id, "quantity": random.randint(1, 3)} for product_id in chosen],
        "shipping_address": shipping_address(),
        "payment_method": random.choice(PAYMENT_METHODS),
    }
