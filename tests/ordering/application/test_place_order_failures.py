"""Failures after stock has been taken are compensated."""

import pytest
from protean import current_domain
from structlog.testing import capture_logs

from storefront.catalogue.product import Product
from storefront.exceptions import PaymentDeclined
from storefront.ordering.order import Order
from storefront.ordering.placement import PlaceOrderHandler
from storefront.payment import SimulatedProcessor, set_processor


def _stock(product):
    return current_domain.repository_for(Product).get(product.id).stock


def _order_count():
    return len(current_domain.repository_for(Order)._dao.query.all().items)


class TestPersistenceFailure:
    def test_stock_restored_when_order_cannot_be_saved(self, customer, make_product, place, monkeypatch):
        mug = make_product(name="Mug", stock=5)
        bowl = make_product(name="Bowl", stock=2)

        def _fail(self, order):
            raise RuntimeError("database unavailable")

        monkeypatch.setattr(PlaceOrderHandler, "_persist_order", _fail)

        with pytest.raises(RuntimeError, match="database unavailable"):
            place(customer, [(mug, 3), (bowl, 2)])

        assert _stock(mug) == 5
        assert _stock(bowl) == 2
        assert _order_count() == 0

    def test_restoration_is_logged(self, customer, make_product, place, monkeypatch):
        mug = make_product(name="Mug", stock=5)
        bowl = make_product(name="Bowl", stock=2)

        def _fail(self, order):
            raise RuntimeError("database unavailable")

        monkeypatch.setattr(PlaceOrderHandler, "_persist_order", _fail)

        with capture_logs() as logs, pytest.raises(RuntimeError):
            place(customer, [(mug, 3), (bowl, 2)])

        reconciliations = [entry for entry in logs if entry["event"] == "stock_reconciliation"]
        assert len(reconciliations) == 1
        assert reconciliations[0]["log_level"] == "warning"
        assert sorted(reconciliations[0]["restored"], key=lambda r: r["quantity"]) == [
            {"product_id": str(bowl.id), "quantity": 2},
            {"product_id": str(mug.id), "quantity": 3},
        ]


class TestPaymentDeclined:
    def test_declined_payment_restores_stock(self, customer, make_product, place):
        processor = SimulatedProcessor()
        processor.configure(should_succeed=False, failure_reason="Card expired")
        set_processor(processor)

        product = make_product(stock=4)

        with pytest.raises(PaymentDeclined, match="Card expired"):
            place(customer, [(product, 4)])

        assert _stock(product) == 4
        assert _order_count() == 0
        assert len(processor.charges) == 1

    def test_declined_payment_logs_reconciliation(self, customer, make_product, place):
        processor = SimulatedProcessor()
        processor.configure(should_succeed=False)
        set_processor(processor)
        product = make_product(stock=4)

        with capture_logs() as logs, pytest.raises(PaymentDeclined):
            place(customer, [(product, 3)])

        entry = next(entry for entry in logs if entry["event"] == "stock_reconciliation")
        assert entry["log_level"] == "warning"
        assert entry["restored"] == [{"product_id": str(product.id), "quantity": 3}]

    def test_stock_available_again_after_decline(self, customer, make_product, place):
        processor = SimulatedProcessor()
        processor.configure(should_succeed=False)
        set_processor(processor)
        product = make_product(stock=1)

        with pytest.raises(PaymentDeclined):
            place(customer, [(product, 1)])

        processor.configure(should_succeed=True)
        order_id = place(customer, [(product, 1)])

        assert current_domain.repository_for(Order).get(order_id).is_paid is True
        assert _stock(product) == 0
