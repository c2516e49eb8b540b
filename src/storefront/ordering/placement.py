"""PlaceOrder: turn a cart payload into a paid, pending order.

Checks run in a fixed order and the first failure wins:

1. the cart has at least one line, each with a positive quantity
2. the shipping address is complete
3. the payment method is one we accept
4. every referenced product exists (one batch lookup)
5. every line fits in the remaining stock of its product

Nothing is written until all five pass. Stock is then taken line by line,
the payment is charged and the order is stored. If anything fails after the
first decrement, the stock already taken is put back before the error
propagates.

``place_order()`` is the entry point callers should use. It serializes
placements within the process so the stock check and the decrement of one
request cannot interleave with another's.
"""

import json
import threading
from collections import defaultdict

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from storefront.catalogue.product import Product
from storefront.domain import storefront
from storefront.exceptions import (
    EmptyCart,
    IncompleteAddress,
    InsufficientStock,
    InvalidPaymentMethod,
    PaymentDeclined,
    ProductNotFound,
)
from storefront.ordering.order import Order, OrderPricing, PaymentMethod, ShippingAddress
from storefront.ordering.pricing import price_lines
from storefront.payment import get_processor
from storefront.utils.logging import get_logger
from storefront.utils.queries import fetch_all

logger = get_logger(__name__)

_REQUIRED_ADDRESS_FIELDS = ("address", "city", "postal_code", "country")
_PAYMENT_METHODS = {method.value for method in PaymentMethod}

_placement_guard = threading.Lock()


@storefront.command(part_of="Order")
class PlaceOrder:
    user_id: Identifier(required=True)
    user_name: String(max_length=255)  # Fallback for the recipient name
    items: Text(required=True)  # JSON: [{product_id, quantity}]
    shipping_address: Text()  # JSON: {full_name, address, city, postal_code, country}
    payment_method: String()


# ---------------------------------------------------------------------------
# Validation steps
# ---------------------------------------------------------------------------
def _parse_items(raw):
    items = json.loads(raw) if raw else []
    if not items:
        raise EmptyCart()

    requested = []
    for item in items:
        quantity = item.get("quantity")
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
            raise ValidationError({"quantity": ["Quantity must be a positive integer"]})
        product_id = item.get("product_id")
        if not product_id:
            raise ValidationError({"product_id": ["Each item must reference a product"]})
        requested.append({"product_id": str(product_id), "quantity": quantity})
    return requested


def _resolve_address(raw, user_name):
    data = json.loads(raw) if raw else {}

    missing = [field for field in _REQUIRED_ADDRESS_FIELDS if not str(data.get(field) or "").strip()]
    if missing:
        raise IncompleteAddress(missing)

    full_name = data.get("full_name") or data.get("name") or user_name or ""
    return ShippingAddress(
        full_name=full_name,
        address=data["address"],
        city=data["city"],
        postal_code=data["postal_code"],
        country=data["country"],
    )


def _resolve_payment_method(method):
    if method not in _PAYMENT_METHODS:
        raise InvalidPaymentMethod(method)
    return method


def _load_products(requested):
    wanted = list(dict.fromkeys(line["product_id"] for line in requested))
    found = fetch_all(Product, order_by="id", id__in=wanted)
    products = {str(product.id): product for product in found}

    for product_id in wanted:
        if product_id not in products:
            raise ProductNotFound(product_id)
    return products


def _check_stock(requested, products):
    claimed = defaultdict(int)
    for line in requested:
        product = products[line["product_id"]]
        available = product.stock - claimed[line["product_id"]]
        if line["quantity"] > available:
            raise InsufficientStock(product.name, line["quantity"], available)
        claimed[line["product_id"]] += line["quantity"]


def _snapshot(requested, products):
    return [
        {
            "product_id": line["product_id"],
            "name": products[line["product_id"]].name,
            "unit_price": products[line["product_id"]].price,
            "quantity": line["quantity"],
            "image_url": products[line["product_id"]].image_url,
        }
        for line in requested
    ]


def _restore_stock(repo, taken, order_id):
    for product, quantity in reversed(taken):
        product.restore_stock(quantity, reason=f"Order {order_id} was not placed")
        repo.add(product)

    logger.warning(
        "stock_reconciliation",
        order_id=str(order_id),
        restored=[{"product_id": str(p.id), "quantity": q} for p, q in taken],
    )


# ---------------------------------------------------------------------------
# Handler
# ---------------------------------------------------------------------------
@storefront.command_handler(part_of=Order)
class PlaceOrderHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        try:
            requested = _parse_items(command.items)
            address = _resolve_address(command.shipping_address, command.user_name)
            payment_method = _resolve_payment_method(command.payment_method)
            products = _load_products(requested)
            _check_stock(requested, products)
        except ValidationError as exc:
            logger.info("Order rejected", user_id=str(command.user_id), reason=str(exc))
            raise

        lines = _snapshot(requested, products)
        pricing = OrderPricing(**price_lines(lines))

        order = Order.place(
            user_id=command.user_id,
            lines=lines,
            shipping_address=address,
            payment_method=payment_method,
            pricing=pricing,
        )

        product_repo = current_domain.repository_for(Product)
        taken = []
        try:
            for line in requested:
                product = products[line["product_id"]]
                product.decrement_stock(line["quantity"], order_id=order.id)
                product_repo.add(product)
                taken.append((product, line["quantity"]))

            charge = get_processor().charge(pricing.total, payment_method, str(order.id))
            if not charge.success:
                raise PaymentDeclined(charge.failure_reason or "Payment declined")
            order.mark_paid(charge.reference)

            self._persist_order(order)
        except Exception:
            _restore_stock(product_repo, taken, order.id)
            raise

        logger.info(
            "Order placed",
            order_id=str(order.id),
            user_id=str(order.user_id),
            total=pricing.total,
            lines=len(lines),
        )
        return str(order.id)

    def _persist_order(self, order):
        current_domain.repository_for(Order).add(order)


def place_order(user_id, items, shipping_address, payment_method, user_name=None):
    """Place an order for ``user_id`` and return its id.

    ``items`` is a list of ``{"product_id", "quantity"}`` dicts and
    ``shipping_address`` a dict of address fields.
    """
    command = PlaceOrder(
        user_id=user_id,
        user_name=user_name,
        items=json.dumps(items or []),
        shipping_address=json.dumps(shipping_address or {}),
        payment_method=payment_method,
    )
    with _placement_guard:
        return current_domain.process(command, asynchronous=False)
