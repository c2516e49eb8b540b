"""Order pricing.

Amounts are computed in ``Decimal`` and rounded half-up to cents before
being handed back as floats for storage.
"""

from decimal import ROUND_HALF_UP, Decimal

FREE_SHIPPING_THRESHOLD = Decimal("50.00")
FLAT_SHIPPING_COST = Decimal("10.00")

_CENTS = Decimal("0.01")


def to_cents(amount) -> Decimal:
    return Decimal(str(amount)).quantize(_CENTS, rounding=ROUND_HALF_UP)


def shipping_for(subtotal: Decimal) -> Decimal:
    """Free shipping at or above the threshold, flat rate below it."""
    return Decimal("0.00") if subtotal >= FREE_SHIPPING_THRESHOLD else FLAT_SHIPPING_COST


def price_lines(lines) -> dict:
    """Return subtotal, shipping_cost and total for ``lines``.

    Each line needs ``unit_price`` and ``quantity``.
    """
    subtotal = to_cents(sum((Decimal(str(line["unit_price"])) * line["quantity"] for line in lines), Decimal("0")))
    shipping = shipping_for(subtotal)
    total = to_cents(subtotal + shipping)
    return {
        "subtotal": float(subtotal),
        "shipping_cost": float(shipping),
        "total": float(total),
    }
