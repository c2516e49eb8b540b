"""Application tests for UpdateOrderStatus."""

import pytest
from protean import current_domain
from protean.exceptions import ObjectNotFoundError, ValidationError

from storefront.exceptions import InvalidStatusTransition, NotAuthorized
from storefront.ordering.order import Order
from storefront.ordering.status import UpdateOrderStatus
from storefront.ordering.transitions import (
    PermissiveTransitionPolicy,
    StrictTransitionPolicy,
    get_policy,
    reset_policy,
    set_policy,
)


def _update(order_id, status, actor_role="admin"):
    current_domain.process(
        UpdateOrderStatus(order_id=order_id, status=status, actor_role=actor_role),
        asynchronous=False,
    )
    return current_domain.repository_for(Order).get(order_id)


@pytest.fixture()
def order_id(customer, make_product, place):
    return place(customer, [(make_product(), 1)])


class TestAuthorization:
    def test_customer_cannot_change_status(self, order_id):
        with pytest.raises(NotAuthorized):
            _update(order_id, "processing", actor_role="customer")
        assert current_domain.repository_for(Order).get(order_id).status == "pending"

    def test_admin_role_is_case_insensitive(self, order_id):
        assert _update(order_id, "processing", actor_role="Admin").status == "processing"


class TestTransitions:
    def test_full_lifecycle(self, order_id):
        for status in ("processing", "shipped"):
            order = _update(order_id, status)
            assert order.delivered_at is None
        order = _update(order_id, "delivered")
        assert order.status == "delivered"
        assert order.delivered_at is not None

    def test_unknown_order(self):
        with pytest.raises(ObjectNotFoundError):
            _update("no-such-order", "processing")

    def test_unknown_status(self, order_id):
        with pytest.raises(ValidationError):
            _update(order_id, "teleported")

    def test_strict_policy_by_default(self, order_id):
        with pytest.raises(InvalidStatusTransition):
            _update(order_id, "delivered")

    def test_permissive_policy(self, order_id):
        set_policy(PermissiveTransitionPolicy())
        order = _update(order_id, "delivered")
        assert order.delivered_at is not None

        order = _update(order_id, "processing")
        assert order.status == "processing"


class TestPolicySelection:
    def test_environment_selects_policy(self, monkeypatch):
        monkeypatch.setenv("STOREFRONT_STATUS_POLICY", "permissive")
        reset_policy()
        assert isinstance(get_policy(), PermissiveTransitionPolicy)

    def test_default_is_strict(self, monkeypatch):
        monkeypatch.delenv("STOREFRONT_STATUS_POLICY", raising=False)
        reset_policy()
        assert isinstance(get_policy(), StrictTransitionPolicy)

    def test_unknown_policy_name(self, monkeypatch):
        monkeypatch.setenv("STOREFRONT_STATUS_POLICY", "chaotic")
        reset_policy()
        with pytest.raises(ValueError):
            get_policy()
