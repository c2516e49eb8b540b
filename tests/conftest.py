import os
from pathlib import Path

import pytest


def pytest_addoption(parser):
    parser.addoption(
        "--env",
        action="store",
        default="test",
        help="Config environment to run tests on",
    )


def pytest_sessionstart(session):
    """Select the config environment before test modules import the domain."""
    os.environ["PROTEAN_ENV"] = session.config.option.env


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their directory location."""
    for item in items:
        test_path = str(Path(item.fspath))

        if "/domain/" in test_path:
            item.add_marker(pytest.mark.domain)
        elif "/application/" in test_path:
            item.add_marker(pytest.mark.application)
        elif "/integration/" in test_path:
            item.add_marker(pytest.mark.integration)
            if not any(m.name == "fast" for m in item.iter_markers()):
                item.add_marker(pytest.mark.slow)


@pytest.fixture(scope="session")
def _storefront_domain(request):
    """Initialize the storefront domain once per session."""
    os.environ["PROTEAN_ENV"] = request.config.option.env

    from storefront.domain import storefront

    storefront.init()
    return storefront


@pytest.fixture(scope="session", autouse=True)
def setup_db(_storefront_domain):
    from storefront.utils.db import drop_db, setup_db

    setup_db(_storefront_domain)

    yield

    drop_db(_storefront_domain)


@pytest.fixture(autouse=True)
def run_around_tests(_storefront_domain):
    """Push domain context before each test, cleanup after."""
    ctx = _storefront_domain.domain_context()
    ctx.push()

    yield

    from protean import current_domain

    from storefront.ordering.transitions import reset_policy
    from storefront.payment import reset_processor

    for _, provider in current_domain.providers.items():
        provider._data_reset()

    current_domain.event_store.store._data_reset()
    reset_processor()
    reset_policy()
    ctx.pop()


# ---------------------------------------------------------------------------
# Shared builders
# ---------------------------------------------------------------------------
ADDRESS = {
    "full_name": "Grace Hopper",
    "address": "1 Compiler Way",
    "city": "Arlington",
    "postal_code": "22201",
    "country": "US",
}


@pytest.fixture()
def address():
    return dict(ADDRESS)


def _register(name, email, role):
    from protean import current_domain

    from storefront.identity.registration import RegisterUser
    from storefront.identity.user import User

    user_id = current_domain.process(RegisterUser(name=name, email=email, role=role), asynchronous=False)
    return current_domain.repository_for(User).get(user_id)


@pytest.fixture()
def customer():
    return _register("Grace Hopper", "grace@example.com", "customer")


@pytest.fixture()
def other_customer():
    return _register("Alan Turing", "alan@example.com", "customer")


@pytest.fixture()
def admin():
    return _register("Store Admin", "admin@example.com", "admin")


@pytest.fixture()
def make_product():
    """Create and persist a product; returns the stored aggregate."""
    from protean import current_domain

    from storefront.catalogue.product import Product

    def _make(name="Espresso Cups", price=12.5, stock=10, category="Kitchen", image_url=None):
        product = Product.create(
            name=name,
            price=price,
            stock=stock,
            category=category,
            image_url=image_url or f"https://images.example.com/{name.lower().replace(' ', '-')}.jpg",
        )
        current_domain.repository_for(Product).add(product)
        return current_domain.repository_for(Product).get(product.id)

    return _make


@pytest.fixture()
def place():
    """Place an order for ``user`` with ``[(product, quantity), ...]``; returns the order id."""
    from storefront.ordering.placement import place_order

    def _place(user, lines, payment_method="credit_card", shipping_address=None):
        return place_order(
            user_id=user.id,
            user_name=user.name,
            items=[{"product_id": str(product.id), "quantity": quantity} for product, quantity in lines],
            shipping_address=shipping_address if shipping_address is not None else dict(ADDRESS),
            payment_method=payment_method,
        )

    return _place


@pytest.fixture()
def advance():
    """Walk an order through the strict lifecycle up to ``target``."""
    from protean import current_domain

    from storefront.ordering.status import UpdateOrderStatus

    path = ["processing", "shipped", "delivered"]

    def _advance(order_id, target="delivered"):
        for status in path[: path.index(target) + 1]:
            current_domain.process(
                UpdateOrderStatus(order_id=order_id, status=status, actor_role="admin"),
                asynchronous=False,
            )

    return _advance
