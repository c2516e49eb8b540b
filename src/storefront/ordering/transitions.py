"""Order status transition policies.

``strict`` (the default) enforces the forward-only lifecycle::

    pending → processing → shipped → delivered
    pending | processing | shipped → cancelled
    delivered, cancelled → (terminal)

``permissive`` lets an administrator set any status at any time.

Select one with the ``STOREFRONT_STATUS_POLICY`` environment variable, or
install one directly with ``set_policy()``.
"""

import os

from protean.exceptions import ValidationError

from storefront.exceptions import InvalidStatusTransition
from storefront.ordering.order import OrderStatus

_VALID_TRANSITIONS = {
    OrderStatus.PENDING: {OrderStatus.PROCESSING, OrderStatus.CANCELLED},
    OrderStatus.PROCESSING: {OrderStatus.SHIPPED, OrderStatus.CANCELLED},
    OrderStatus.SHIPPED: {OrderStatus.DELIVERED, OrderStatus.CANCELLED},
    OrderStatus.DELIVERED: set(),  # Terminal
    OrderStatus.CANCELLED: set(),  # Terminal
}

_STATUS_VALUES = {status.value for status in OrderStatus}


def _assert_known(status):
    if status not in _STATUS_VALUES:
        raise ValidationError({"status": [f"Invalid status: {status!r}"]})


class StrictTransitionPolicy:
    name = "strict"

    def check(self, current, target):
        _assert_known(target)
        if OrderStatus(target) not in _VALID_TRANSITIONS[OrderStatus(current)]:
            raise InvalidStatusTransition(current, target)


class PermissiveTransitionPolicy:
    name = "permissive"

    def check(self, current, target):  # noqa: ARG002
        _assert_known(target)


_POLICIES = {
    StrictTransitionPolicy.name: StrictTransitionPolicy,
    PermissiveTransitionPolicy.name: PermissiveTransitionPolicy,
}

_current_policy = None


def get_policy():
    """Return the active transition policy (singleton)."""
    global _current_policy
    if _current_policy is None:
        name = os.environ.get("STOREFRONT_STATUS_POLICY", StrictTransitionPolicy.name).lower()
        if name not in _POLICIES:
            raise ValueError(f"Unknown status policy: {name}")
        _current_policy = _POLICIES[name]()
    return _current_policy


def set_policy(policy) -> None:
    """Override the active policy (useful for tests)."""
    global _current_policy
    _current_policy = policy


def reset_policy() -> None:
    global _current_policy
    _current_policy = None
