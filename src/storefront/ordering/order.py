"""Order aggregate: the record of one checkout.

An order captures what was bought (a frozen snapshot of each product's name,
price and image at placement time), where it ships, how it was paid, and
where it is in the fulfilment lifecycle. Pricing is fixed at placement and
never re-derived.

Status changes are decided by the active transition policy
(``storefront.ordering.transitions``); the aggregate only records them.
"""

from datetime import UTC, datetime
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import (
    Boolean,
    DateTime,
    Float,
    HasMany,
    Identifier,
    Integer,
    String,
    ValueObject,
)

from storefront.domain import storefront
from storefront.exceptions import AlreadyRated, NotEligibleToRate
from storefront.ordering.events import OrderItemRated, OrderPaid, OrderPlaced, OrderStatusChanged


class OrderStatus(Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class PaymentMethod(Enum):
    CREDIT_CARD = "credit_card"
    DEBIT_CARD = "debit_card"
    PAYPAL = "paypal"
    CASH_ON_DELIVERY = "cash_on_delivery"


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@storefront.value_object(part_of="Order")
class ShippingAddress:
    """Where the order ships. Captured at checkout and never edited."""

    full_name: String(max_length=255)
    address: String(required=True, max_length=255)
    city: String(required=True, max_length=100)
    postal_code: String(required=True, max_length=20)
    country: String(required=True, max_length=100)


@storefront.value_object(part_of="Order")
class OrderPricing:
    subtotal: Float(required=True, min_value=0.0)
    shipping_cost: Float(required=True, min_value=0.0)
    total: Float(required=True, min_value=0.0)

    @invariant.post
    def total_is_subtotal_plus_shipping(self):
        if round(self.subtotal + self.shipping_cost, 2) != round(self.total, 2):
            raise ValidationError({"total": ["Total must equal subtotal plus shipping"]})


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@storefront.entity(part_of="Order")
class OrderItem:
    """A line item, snapshotted from the product at placement time."""

    product_id: Identifier(required=True)
    name: String(required=True, max_length=255)
    unit_price: Float(required=True, min_value=0.0)
    quantity: Integer(required=True, min_value=1)
    image_url: String(max_length=500)
    rated: Boolean(default=False)


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@storefront.aggregate
class Order:
    user_id: Identifier(required=True)
    items: HasMany(OrderItem)
    shipping_address: ValueObject(ShippingAddress, required=True)
    payment_method: String(choices=PaymentMethod, required=True)
    pricing: ValueObject(OrderPricing, required=True)

    status: String(choices=OrderStatus, default=OrderStatus.PENDING.value)

    is_paid: Boolean(default=False)
    paid_at: DateTime()
    payment_reference: String(max_length=100)
    delivered_at: DateTime()

    created_at: DateTime()
    updated_at: DateTime()

    @classmethod
    def place(cls, user_id, lines, shipping_address, payment_method, pricing):
        """Build a new pending order.

        ``lines`` are dicts carrying product_id, name, unit_price, quantity
        and image_url, already resolved against the catalog.
        """
        now = datetime.now(UTC)
        order = cls(
            user_id=user_id,
            shipping_address=shipping_address,
            payment_method=payment_method,
            pricing=pricing,
            status=OrderStatus.PENDING.value,
            created_at=now,
            updated_at=now,
        )
        for line in lines:
            order.add_items(OrderItem(**line))

        order.raise_(
            OrderPlaced(
                order_id=order.id,
                user_id=user_id,
                item_count=sum(line["quantity"] for line in lines),
                subtotal=pricing.subtotal,
                shipping_cost=pricing.shipping_cost,
                total=pricing.total,
                payment_method=payment_method,
                placed_at=now,
            )
        )
        return order

    def mark_paid(self, reference):
        now = datetime.now(UTC)
        self.is_paid = True
        self.paid_at = now
        self.payment_reference = reference
        self.raise_(
            OrderPaid(
                order_id=self.id,
                amount=self.pricing.total,
                payment_reference=reference,
                paid_at=now,
            )
        )

    def change_status(self, target, policy):
        """Move to ``target`` if ``policy`` allows it.

        ``delivered_at`` is stamped when, and only when, the target is
        delivered.
        """
        previous = self.status
        policy.check(previous, target)

        now = datetime.now(UTC)
        self.status = target
        if target == OrderStatus.DELIVERED.value:
            self.delivered_at = now
        self.updated_at = now

        self.raise_(
            OrderStatusChanged(
                order_id=self.id,
                user_id=self.user_id,
                previous_status=previous,
                new_status=target,
                total=self.pricing.total,
                delivered_at=self.delivered_at if target == OrderStatus.DELIVERED.value else None,
                changed_at=now,
            )
        )

    def is_owned_by(self, user_id):
        return str(self.user_id) == str(user_id)

    def items_for(self, product_id):
        return [item for item in self.items if str(item.product_id) == str(product_id)]

    def mark_item_rated(self, item_id):
        if self.status != OrderStatus.DELIVERED.value:
            raise NotEligibleToRate("Products can only be rated after the order is delivered")

        item = next((i for i in self.items if str(i.id) == str(item_id)), None)
        if item is None:
            raise ValidationError({"items": [f"Item {item_id} not found"]})
        if item.rated:
            raise AlreadyRated("You have already rated this product")

        item.rated = True
        self.updated_at = datetime.now(UTC)
        self.raise_(
            OrderItemRated(
                order_id=self.id,
                item_id=item.id,
                product_id=item.product_id,
            )
        )
