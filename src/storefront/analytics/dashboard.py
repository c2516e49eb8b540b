"""Admin dashboard figures.

Everything is computed on demand from orders, products and users. A time
range selects the reporting window ending now; growth figures compare it
with the window of equal length immediately before it. All timestamps are
treated as UTC.
"""

from collections import Counter, defaultdict
from datetime import UTC, datetime, timedelta
from decimal import ROUND_HALF_UP, Decimal

from protean.exceptions import ValidationError

from storefront.catalogue.product import Product
from storefront.identity.user import User, UserRole
from storefront.ordering.order import Order
from storefront.utils.queries import fetch_all

LOW_STOCK_THRESHOLD = 10
TOP_PRODUCT_COUNT = 5
LOW_STOCK_COUNT = 5

_WINDOWS = {
    "day": timedelta(days=1),
    "week": timedelta(days=7),
    "month": timedelta(days=30),
    "year": timedelta(days=365),
    "all": None,
}

_EPOCH = datetime(1970, 1, 1, tzinfo=UTC)


def _round(value, places=0):
    exponent = Decimal(1).scaleb(-places)
    rounded = Decimal(str(value)).quantize(exponent, rounding=ROUND_HALF_UP)
    return int(rounded) if places == 0 else float(rounded)


def _utc(moment):
    if moment is None:
        return _EPOCH
    return moment if moment.tzinfo else moment.replace(tzinfo=UTC)


def _growth(current, previous):
    if not previous:
        return 0.0
    return _round((current - previous) / previous * 100, 1)


def _period_label(moment, time_range):
    if time_range == "day":
        return f"{moment.hour}:00"
    if time_range in ("week", "month"):
        return f"{moment.strftime('%b')} {moment.day}"
    return moment.strftime("%b")


def window_for(time_range, now):
    """Return ``(start, previous_start)`` for ``time_range`` ending at ``now``."""
    if time_range not in _WINDOWS:
        raise ValidationError({"time_range": [f"Unknown time range: {time_range!r}"]})

    length = _WINDOWS[time_range]
    if length is None:
        return _EPOCH, _EPOCH
    start = now - length
    return start, start - length


def _revenue_by_period(orders, time_range):
    buckets = {}
    for order in sorted(orders, key=lambda o: _utc(o.created_at)):
        label = _period_label(_utc(order.created_at), time_range)
        bucket = buckets.setdefault(label, {"revenue": 0.0, "orders": 0})
        bucket["revenue"] += order.pricing.total
        bucket["orders"] += 1
    return [{"name": name, "revenue": _round(data["revenue"]), "orders": data["orders"]} for name, data in buckets.items()]


def _sales_by_category(orders, products_by_id):
    units = Counter()
    for order in orders:
        for item in order.items:
            product = products_by_id.get(str(item.product_id))
            units[product.category if product and product.category else "Other"] += item.quantity
    return [{"name": name, "value": value} for name, value in units.items()]


def _top_products(orders):
    sales = {}
    for order in orders:
        for item in order.items:
            entry = sales.setdefault(
                str(item.product_id),
                {"name": item.name, "image_url": item.image_url, "sales": 0, "revenue": 0.0},
            )
            entry["sales"] += item.quantity
            entry["revenue"] += item.unit_price * item.quantity

    ranked = sorted(sales.values(), key=lambda entry: entry["revenue"], reverse=True)[:TOP_PRODUCT_COUNT]
    for entry in ranked:
        entry["revenue"] = _round(entry["revenue"], 2)
    return ranked


def _status_breakdown(orders):
    breakdown = defaultdict(lambda: {"count": 0, "revenue": 0.0})
    for order in orders:
        breakdown[order.status]["count"] += 1
        breakdown[order.status]["revenue"] += order.pricing.total
    return [
        {"status": status, "count": data["count"], "revenue": _round(data["revenue"], 2)}
        for status, data in breakdown.items()
    ]


def _monthly_revenue(orders, now):
    months = {}
    for order in sorted(orders, key=lambda o: _utc(o.created_at)):
        created = _utc(order.created_at)
        if created.year != now.year:
            continue
        bucket = months.setdefault(created.month, {"revenue": 0.0, "orders": 0})
        bucket["revenue"] += order.pricing.total
        bucket["orders"] += 1
    return [
        {
            "month": datetime(now.year, month, 1).strftime("%b"),
            "revenue": _round(data["revenue"]),
            "orders": data["orders"],
        }
        for month, data in sorted(months.items())
    ]


def _retention_rate(all_orders):
    per_customer = Counter(str(order.user_id) for order in all_orders)
    if not per_customer:
        return 0.0
    repeat = sum(1 for count in per_customer.values() if count > 1)
    return _round(repeat / len(per_customer) * 100, 1)


def build_dashboard(time_range="month", now=None):
    """Compute the admin dashboard for ``time_range`` (day, week, month, year or all)."""
    now = _utc(now or datetime.now(UTC))
    start, previous_start = window_for(time_range, now)

    all_orders = fetch_all(Order)
    products = fetch_all(Product)
    users = fetch_all(User)

    orders = [o for o in all_orders if start <= _utc(o.created_at) <= now]
    previous = [o for o in all_orders if previous_start <= _utc(o.created_at) < start]

    revenue = sum(o.pricing.total for o in orders)
    previous_revenue = sum(o.pricing.total for o in previous)

    customers = [u for u in users if (u.role or "").lower() == UserRole.CUSTOMER.value]
    products_by_id = {str(p.id): p for p in products}

    low_stock = sorted(
        (p for p in products if 0 < (p.stock or 0) <= LOW_STOCK_THRESHOLD),
        key=lambda p: p.stock,
    )[:LOW_STOCK_COUNT]

    return {
        "stats": {
            "total_revenue": _round(revenue),
            "total_orders": len(orders),
            "total_products": len(products),
            "total_users": sum(1 for u in users if _utc(u.created_at) >= start),
            "total_customers": len(customers),
            "new_customers": sum(1 for u in customers if _utc(u.created_at) >= start),
            "average_order_value": _round(revenue / len(orders), 2) if orders else 0.0,
            "revenue_growth": _growth(revenue, previous_revenue),
            "orders_growth": _growth(len(orders), len(previous)),
            "out_of_stock_count": sum(1 for p in products if (p.stock or 0) == 0),
            "retention_rate": _retention_rate(all_orders),
        },
        "revenue_data": _revenue_by_period(orders, time_range),
        "category_data": _sales_by_category(orders, products_by_id),
        "top_products": _top_products(orders),
        "order_status_data": _status_breakdown(orders),
        "low_stock_products": [
            {"product_id": str(p.id), "name": p.name, "stock": p.stock, "image_url": p.image_url} for p in low_stock
        ],
        "monthly_revenue": _monthly_revenue(all_orders, now),
    }
