"""Domain events for the Order aggregate."""

from protean.fields import DateTime, Float, Identifier, Integer, String

from storefront.domain import storefront


@storefront.event(part_of="Order")
class OrderPlaced:
    """A customer placed an order; stock for every line has been taken."""

    __version__ = 1

    order_id: Identifier(required=True)
    user_id: Identifier(required=True)
    item_count: Integer(required=True)
    subtotal: Float(required=True)
    shipping_cost: Float(required=True)
    total: Float(required=True)
    payment_method: String(required=True)
    placed_at: DateTime(required=True)


@storefront.event(part_of="Order")
class OrderPaid:
    __version__ = 1

    order_id: Identifier(required=True)
    amount: Float(required=True)
    payment_reference: String()
    paid_at: DateTime(required=True)


@storefront.event(part_of="Order")
class OrderStatusChanged:
    """An administrator moved the order to a new status."""

    __version__ = 1

    order_id: Identifier(required=True)
    user_id: Identifier(required=True)
    previous_status: String(required=True)
    new_status: String(required=True)
    total: Float()
    delivered_at: DateTime()
    changed_at: DateTime(required=True)


@storefront.event(part_of="Order")
class OrderItemRated:
    __version__ = 1

    order_id: Identifier(required=True)
    item_id: Identifier(required=True)
    product_id: Identifier(required=True)
