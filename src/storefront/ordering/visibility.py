"""Who may see which orders.

Customers see their own orders; administrators see everyone's. Asking for
another customer's order is refused with ``NotAuthorized`` rather than
hidden behind ``NotFound``.
"""

from protean.utils.globals import current_domain

from storefront.exceptions import NotAuthorized
from storefront.ordering.order import Order


def _orders():
    return current_domain.repository_for(Order)._dao.query


def orders_for_user(user, offset=0, limit=100):
    """The caller's own orders, newest first."""
    return (
        _orders()
        .filter(user_id=str(user.id))
        .order_by("-created_at")
        .offset(offset)
        .limit(limit)
        .all()
        .items
    )


def all_orders(viewer, offset=0, limit=100):
    if not viewer.is_admin:
        raise NotAuthorized("Not authorized as an admin")
    return _orders().order_by("-created_at").offset(offset).limit(limit).all().items


def order_for_viewer(order_id, viewer):
    """Fetch one order for ``viewer``.

    Raises ``ObjectNotFoundError`` for unknown ids and ``NotAuthorized`` when a
    non-admin asks for someone else's order.
    """
    order = current_domain.repository_for(Order).get(order_id)
    if not order.is_owned_by(viewer.id) and not viewer.is_admin:
        raise NotAuthorized("Not authorized to view this order")
    return order
