import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from storefront.api import (
    analytics_router,
    order_router,
    product_router,
    register_error_handlers,
    user_router,
)


@pytest.fixture()
def app():
    app = FastAPI()
    app.include_router(user_router)
    app.include_router(product_router)
    app.include_router(order_router)
    app.include_router(analytics_router)
    register_error_handlers(app)
    return app


@pytest.fixture()
def client(app):
    return TestClient(app)


def bearer(user):
    return {"Authorization": f"Bearer {user.api_token}"}


@pytest.fixture()
def auth():
    return bearer


@pytest.fixture()
def order_payload(address):
    def _payload(product, quantity=1, **overrides):
        payload = {
            "items": [{"product": str(product.id), "quantity": quantity}],
            "shipping_address": address,
            "payment_method": "credit_card",
        }
        payload.update(overrides)
        return payload

    return _payload
