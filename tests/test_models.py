"""
Tests for Pydantic models
"""

from decimal import Decimal

import pytest
from pydantic import ValidationError

from storefront.models import Order, OrderItem, Product, QueryParams, SortKey, StockFilter


class TestProduct:
    """Tests for Product model."""

    def test_valid_product(self):
        product = Product(
            item_id="sku_001",
            item_name="Carnet intelligent",
            item_category="Accessoires",
            price=12000,
            in_stock=True,
            rating=4.5,
            reviews=120,
        )

        assert product.price == Decimal("12000")
        assert product.currency == "XOF"
        assert product.tags == []

    def test_missing_optional_fields(self):
        product = Product.model_validate({
            "item_id": "x", "item_name": "X", "item_category": "Y", "price": 10, "currency": "",
            "tags": None, "extra_field": "ignored",
        })

        assert product.in_stock is False
        assert product.rating == 0
        assert product.currency == "XOF"

    @pytest.mark.parametrize("price", [-1, None, True, "abc"])
    def test_invalid_price(self, price):
        with pytest.raises(ValidationError):
            Product(item_id="x", item_name="X", item_category="Y", price=price)

    def test_empty_id_rejected(self):
        with pytest.raises(ValidationError):
            Product(item_id="", item_name="X", item_category="Y", price=1)

    def test_rating_out_of_range(self):
        with pytest.raises(ValidationError):
            Product(item_id="x", item_name="X", item_category="Y", price=1, rating=6)


class TestQueryParams:
    """Tests for QueryParams model."""

    def test_defaults(self):
        params = QueryParams()

        assert params.text == ""
        assert params.category == "all"
        assert params.stock_filter == StockFilter.ALL
        assert params.sort == SortKey.FEATURED
        assert params.price_max == 0
        assert params.has_text is False

    def test_from_input_form_names(self):
        params = QueryParams.from_input({
            "q": "  cafe ",
            "category": "",
            "stock": "in",
            "sort": "price_desc",
            "priceMax": "15000",
        })

        assert params.text == "cafe"
        assert params.category == "all"
        assert params.stock_filter == StockFilter.IN
        assert params.sort == SortKey.PRICE_DESC
        assert params.price_max == Decimal("15000")

    def test_unknown_values_fall_back(self):
        params = QueryParams.from_input({"stock": "maybe", "sort": "random", "priceMax": "-5"})

        assert params.stock_filter == StockFilter.ALL
        assert params.sort == SortKey.FEATURED
        assert params.price_max == 0

    def test_from_input_none(self):
        assert QueryParams.from_input(None) == QueryParams()


class TestOrder:
    """Tests for Order model."""

    def test_json_round_trip(self):
        order = Order(
            transaction_id="ORD-ABC-1234",
            subtotal=10000,
            shipping=1500,
            value=11500,
            payment_type="mobile_money",
            items=(OrderItem(item_id="a", item_name="A", item_category="T", price="10000", quantity=1),),
        )

        restored = Order.model_validate_json(order.model_dump_json())

        assert restored == order
        assert restored.value == Decimal("11500")
        assert restored.coupon is None

    def test_order_item_quantity_positive(self):
        with pytest.raises(ValidationError):
            OrderItem(item_id="a", item_name="A", item_category="T", price=1, quantity=0)
