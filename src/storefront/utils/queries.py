"""Repository query helpers."""

from protean.utils.globals import current_domain

_BATCH_SIZE = 500


def fetch_all(aggregate_cls, order_by=None, **filters):
    """Every record of ``aggregate_cls`` matching ``filters``.

    Pages through the DAO so the queryset's default limit never truncates
    the result.
    """
    query = current_domain.repository_for(aggregate_cls)._dao.query
    if filters:
        query = query.filter(**filters)
    if order_by:
        query = query.order_by(order_by)

    records = []
    offset = 0
    while True:
        batch = query.offset(offset).limit(_BATCH_SIZE).all().items
        records.extend(batch)
        if len(batch) < _BATCH_SIZE:
            return records
        offset += _BATCH_SIZE
