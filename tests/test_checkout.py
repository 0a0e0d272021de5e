"""
Tests for order building, the order slot and the checkout flow
"""

import re
from decimal import Decimal

import pytest

from storefront.cart.models import Cart, CartLine
from storefront.checkout import (
    CheckoutService,
    OrderStore,
    build_order,
    make_transaction_id,
    purchase_fact,
    success_url,
)
from storefront.errors import EmptyCartError, OrderNotFoundError, OrderPersistenceError
from storefront.storage import MemoryStorage
from tests.conftest import make_product


class LossyStorage(MemoryStorage):
    """Storage that accepts writes for one key but never keeps them."""

    def __init__(self, lossy_key: str):
        super().__init__()
        self.lossy_key = lossy_key

    def set_item(self, key: str, value: str) -> None:
        if key != self.lossy_key:
            super().set_item(key, value)


def cart_with(*lines: tuple[str, int, int]) -> Cart:
    return Cart(lines=tuple(
        CartLine(item_id=item_id, item_name=f"Produit {item_id}", item_category="Tech", price=price, quantity=qty)
        for item_id, price, qty in lines
    ))


class TestTransactionId:
    """Tests for make_transaction_id."""

    def test_format(self):
        assert re.fullmatch(r"ORD-[0-9A-Z]+-[0-9A-F]{4}", make_transaction_id())

    def test_unique(self):
        ids = {make_transaction_id() for _ in range(500)}
        assert len(ids) == 500


class TestBuildOrder:
    """Tests for build_order."""

    def test_totals_and_items(self):
        order = build_order(cart_with(("a", 10000, 1), ("b", 5000, 2)), coupon="  WELCOME10 ")

        assert order.subtotal == 20000
        assert order.shipping == 1500
        assert order.value == 21500
        assert order.coupon == "WELCOME10"
        assert order.payment_type == "mobile_money"
        assert [(item.item_id, item.quantity) for item in order.items] == [("a", 1), ("b", 2)]
        assert order.items[0].price == Decimal("10000")

    def test_blank_coupon_is_none(self):
        assert build_order(cart_with(("a", 1000, 1)), coupon="   ").coupon is None

    def test_empty_cart(self):
        with pytest.raises(EmptyCartError):
            build_order(Cart())

    def test_success_url(self):
        order = build_order(cart_with(("a", 1000, 1)))
        assert success_url(order) == f"success.html?order={order.transaction_id}"


class TestOrderStore:
    """Tests for the order slot."""

    def test_save_and_load(self, order_store):
        order = build_order(cart_with(("a", 1000, 1)))
        order_store.save(order)

        loaded = order_store.load_last()
        assert loaded == order

    def test_empty_slot(self, order_store):
        assert order_store.load_last() is None

    def test_corrupted_slot(self, storage, order_store):
        storage.set_item(order_store.key, "{broken")
        assert order_store.load_last() is None

    def test_unconfirmed_write_raises(self):
        store = OrderStore(LossyStorage("orders"), key="orders")
        with pytest.raises(OrderPersistenceError):
            store.save(build_order(cart_with(("a", 1000, 1))))


class TestCheckoutFlow:
    """Tests for CheckoutService."""

    def test_summary_requires_items(self, checkout_service):
        with pytest.raises(EmptyCartError):
            checkout_service.summary()

    def test_summary(self, checkout_service, cart_manager, sample_product):
        cart_manager.add_item(sample_product, 3)
        summary = checkout_service.summary()

        assert summary["subtotal"] == 36000
        assert summary["shipping"] == 0
        assert summary["total"] == 36000

    def test_add_shipping_info(self, checkout_service, cart_manager, sink, sample_product):
        cart_manager.add_item(sample_product)
        checkout_service.add_shipping_info("express")

        params = sink.last("add_shipping_info")
        assert params["shipping_tier"] == "express"
        assert params["value"] == 12000

    def test_finalize_persists_order_then_clears_cart(
        self, checkout_service, cart_manager, cart_store, order_store, sink, sample_product
    ):
        cart_manager.add_item(sample_product, 2)

        order = checkout_service.finalize(payment_type="card", coupon="")

        assert order_store.load_last() == order
        assert order.value == 25500
        assert cart_store.load().is_empty
        assert "coupon" not in sink.last("add_payment_info")
        assert sink.last("add_payment_info")["payment_type"] == "card"

    def test_finalize_empty_cart_writes_nothing(self, checkout_service, order_store, sink):
        with pytest.raises(EmptyCartError):
            checkout_service.finalize()

        assert order_store.load_last() is None
        assert sink.names == []

    def test_persistence_failure_keeps_cart(self, cart_manager, cart_store, tracker, sample_product):
        cart_manager.add_item(sample_product)
        service = CheckoutService(
            cart_store=cart_store,
            order_store=OrderStore(LossyStorage("orders"), key="orders"),
            tracker=tracker,
        )

        with pytest.raises(OrderPersistenceError):
            service.finalize()
        assert cart_store.load().find("sku_001") is not None

    def test_confirm_purchase(self, checkout_service, cart_manager, sink, sample_product):
        cart_manager.add_item(sample_product)
        cart_manager.add_item(make_product("p2", price=3000), 2)
        order = checkout_service.finalize(coupon="WELCOME10")

        confirmed = checkout_service.confirm_purchase(order.transaction_id)

        assert confirmed == order
        params = sink.last("purchase")
        assert params["transaction_id"] == order.transaction_id
        assert params["value"] == 19500
        assert params["shipping"] == 1500
        assert params["coupon"] == "WELCOME10"
        assert [item["quantity"] for item in params["items"]] == [1, 2]

    def test_confirm_purchase_stored_order_wins(self, checkout_service, cart_manager, sample_product):
        cart_manager.add_item(sample_product)
        order = checkout_service.finalize()

        assert checkout_service.confirm_purchase("ORD-FORGED-0000") == order

    def test_confirm_without_order(self, checkout_service, sink):
        with pytest.raises(OrderNotFoundError):
            checkout_service.confirm_purchase("ORD-X-0000")
        assert sink.names == []


class TestPurchaseFact:
    """Tests for the purchase payload."""

    def test_no_coupon_key_without_coupon(self):
        fact = purchase_fact(build_order(cart_with(("a", 30000, 1))))

        assert "coupon" not in fact.properties
        assert fact.properties["shipping"] == 0
        assert fact.properties["currency"] == "XOF"
