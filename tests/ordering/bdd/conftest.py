"""Shared BDD fixtures and step definitions for ordering."""

import pytest
from protean import current_domain
from protean.exceptions import ValidationError
from pytest_bdd import given, parsers, then

from storefront.catalogue.product import Product
from storefront.exceptions import StorefrontError
from storefront.ordering.order import Order
from storefront.ordering.placement import place_order
from storefront.utils.queries import fetch_all


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------
@pytest.fixture()
def error():
    """Container for captured domain errors."""
    return {"exc": None}


@pytest.fixture()
def products():
    """Products created by the scenario, keyed by name."""
    return {}


@pytest.fixture()
def placed():
    return {"order_id": None}


@pytest.fixture()
def capture(error):
    """Run an action, recording the domain error it raises instead of failing."""

    def _capture(action):
        try:
            return action()
        except (StorefrontError, ValidationError) as exc:
            error["exc"] = exc
            return None

    return _capture


@pytest.fixture()
def order_lines(products):
    def _lines(name, quantity):
        return [{"product_id": str(products[name].id), "quantity": quantity}]

    return _lines


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given("a registered customer", target_fixture="shopper")
def registered_customer(customer):
    return customer


@given(parsers.cfparse('a product "{name}" priced {price:f} with {stock:d} in stock'))
def product_in_stock(make_product, products, name, price, stock):
    products[name] = make_product(name=name, price=price, stock=stock)


@given(parsers.cfparse('the customer has a pending order for {quantity:d} of "{name}"'))
def pending_order(shopper, order_lines, placed, address, name, quantity):
    placed["order_id"] = place_order(
        user_id=shopper.id,
        user_name=shopper.name,
        items=order_lines(name, quantity),
        shipping_address=address,
        payment_method="credit_card",
    )


# ---------------------------------------------------------------------------
# Then steps (shared)
# ---------------------------------------------------------------------------
@then(parsers.cfparse('"{name}" has {stock:d} in stock'))
def product_stock(products, name, stock):
    assert current_domain.repository_for(Product).get(products[name].id).stock == stock


@then(parsers.cfparse('the order status is "{status}"'))
def order_status(placed, status):
    assert current_domain.repository_for(Order).get(placed["order_id"]).status == status


@then("the customer has no orders")
def no_orders(shopper):
    assert fetch_all(Order, user_id=str(shopper.id)) == []
