"""BDD tests for order status changes and post-delivery ratings."""

from protean import current_domain
from pytest_bdd import given, parsers, scenarios, then, when

from storefront.catalogue.product import Product
from storefront.catalogue.rating import rate_product
from storefront.ordering.order import Order
from storefront.ordering.status import UpdateOrderStatus
from storefront.ordering.transitions import PermissiveTransitionPolicy, set_policy

scenarios("features/order_lifecycle.feature")


def _move(order_id, status, role):
    current_domain.process(
        UpdateOrderStatus(order_id=order_id, status=status, actor_role=role),
        asynchronous=False,
    )


@given("the order has been delivered")
def order_delivered(placed, advance):
    advance(placed["order_id"], "delivered")


@given("the permissive status policy")
def permissive_policy():
    set_policy(PermissiveTransitionPolicy())


# ---------------------------------------------------------------------------
# When steps
# ---------------------------------------------------------------------------
@when(parsers.cfparse('an admin moves the order to "{status}"'))
def admin_moves(placed, capture, status):
    capture(lambda: _move(placed["order_id"], status, "admin"))


@when(parsers.cfparse('the customer moves the order to "{status}"'))
def customer_moves(placed, capture, status):
    capture(lambda: _move(placed["order_id"], status, "customer"))


@when(parsers.cfparse('the customer rates "{name}" {stars:d} stars'))
def customer_rates(shopper, products, error, capture, name, stars):
    error["exc"] = None
    capture(lambda: rate_product(products[name].id, shopper.id, stars))


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then("the order has a delivery time")
def has_delivery_time(placed):
    assert current_domain.repository_for(Order).get(placed["order_id"]).delivered_at is not None


@then(parsers.cfparse('the status change is rejected with "{code}"'))
def status_rejected(error, code):
    assert error["exc"] is not None, "Expected the status change to be rejected"
    assert error["exc"].code == code


@then(parsers.cfparse('the rating is rejected with "{code}"'))
def rating_rejected(error, code):
    assert error["exc"] is not None, "Expected the rating to be rejected"
    assert error["exc"].code == code


@then(parsers.cfparse('"{name}" has an average rating of {average:f} from {count:d} rating'))
def average_rating(products, name, average, count):
    product = current_domain.repository_for(Product).get(products[name].id)
    assert product.average_rating == average
    assert product.total_ratings == count
