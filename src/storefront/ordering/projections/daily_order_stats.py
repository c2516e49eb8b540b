"""Daily order stats projection.

Per-day counts of orders placed, delivered and cancelled, plus placed
revenue. Keyed by date (YYYY-MM-DD, UTC).
"""

from protean.core.projector import on
from protean.exceptions import ObjectNotFoundError
from protean.fields import Float, Integer, String
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.ordering.events import OrderPlaced, OrderStatusChanged
from storefront.ordering.order import Order, OrderStatus


@storefront.projection
class DailyOrderStats:
    date: String(identifier=True, required=True, max_length=10)  # YYYY-MM-DD
    orders_placed: Integer(default=0)
    orders_delivered: Integer(default=0)
    orders_cancelled: Integer(default=0)
    revenue: Float(default=0.0)


def _get_or_create(date_key):
    repo = current_domain.repository_for(DailyOrderStats)
    try:
        return repo.get(date_key)
    except ObjectNotFoundError:
        return DailyOrderStats(
            date=date_key,
            orders_placed=0,
            orders_delivered=0,
            orders_cancelled=0,
            revenue=0.0,
        )


@storefront.projector(projector_for=DailyOrderStats, aggregates=[Order])
class DailyOrderStatsProjector:
    @on(OrderPlaced)
    def on_order_placed(self, event):
        record = _get_or_create(event.placed_at.date().isoformat())
        record.orders_placed = (record.orders_placed or 0) + 1
        record.revenue = round((record.revenue or 0.0) + (event.total or 0.0), 2)
        current_domain.repository_for(DailyOrderStats).add(record)

    @on(OrderStatusChanged)
    def on_status_changed(self, event):
        if event.new_status == OrderStatus.DELIVERED.value:
            record = _get_or_create(event.changed_at.date().isoformat())
            record.orders_delivered = (record.orders_delivered or 0) + 1
        elif event.new_status == OrderStatus.CANCELLED.value:
            record = _get_or_create(event.changed_at.date().isoformat())
            record.orders_cancelled = (record.orders_cancelled or 0) + 1
        else:
            return
        current_domain.repository_for(DailyOrderStats).add(record)
