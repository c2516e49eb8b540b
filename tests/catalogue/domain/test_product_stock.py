"""Domain tests for Product stock changes."""

import pytest
from protean.exceptions import ValidationError

from storefront.catalogue.events import StockDecremented, StockRestored
from storefront.catalogue.product import Product
from storefront.exceptions import InsufficientStock


def _product(stock=5):
    product = Product.create(name="Linen Apron", price=24.0, stock=stock)
    product._events.clear()
    return product


class TestDecrementStock:
    def test_reduces_stock(self):
        product = _product(stock=5)
        product.decrement_stock(2)
        assert product.stock == 3

    def test_can_take_the_last_unit(self):
        product = _product(stock=1)
        product.decrement_stock(1)
        assert product.stock == 0

    def test_refuses_more_than_available(self):
        product = _product(stock=2)
        with pytest.raises(InsufficientStock) as exc:
            product.decrement_stock(3)
        assert exc.value.requested == 3
        assert exc.value.available == 2
        assert "Linen Apron" in str(exc.value)
        assert product.stock == 2

    def test_insufficient_stock_is_a_validation_error(self):
        product = _product(stock=0)
        with pytest.raises(ValidationError):
            product.decrement_stock(1)

    @pytest.mark.parametrize("quantity", [0, -1])
    def test_rejects_non_positive_quantity(self, quantity):
        product = _product()
        with pytest.raises(ValidationError):
            product.decrement_stock(quantity)

    def test_raises_stock_decremented(self):
        product = _product(stock=5)
        product.decrement_stock(2, order_id="order-1")
        event = product._events[-1]
        assert isinstance(event, StockDecremented)
        assert event.quantity == 2
        assert event.remaining == 3
        assert str(event.order_id) == "order-1"


class TestRestoreStock:
    def test_adds_back(self):
        product = _product(stock=1)
        product.restore_stock(4, reason="Order failed")
        assert product.stock == 5
        assert isinstance(product._events[-1], StockRestored)


class TestStockInvariant:
    def test_cannot_create_with_negative_stock(self):
        with pytest.raises(ValidationError):
            Product.create(name="Broken", price=1.0, stock=-1)

    def test_cannot_set_negative_stock(self):
        product = _product(stock=1)
        with pytest.raises(ValidationError):
            product.stock = -1
