"""
Checkout Service

Simulated checkout flow:
1. summary()            - checkout page load (refused for an empty cart)
2. add_shipping_info()  - shipping form submitted
3. finalize()           - payment form submitted: order persisted, then cart cleared
4. confirm_purchase()   - confirmation page: purchase event from the stored order
"""
from typing import Optional

from storefront.analytics import events
from storefront.analytics.events import EventName, Fact
from storefront.analytics.tracker import Tracker, get_tracker
from storefront.cart.models import Cart
from storefront.cart.service import CartManager
from storefront.cart.store import CartStore
from storefront.errors import EmptyCartError, OrderNotFoundError
from storefront.logging import get_logger, sanitize_id_for_logging
from storefront.models import Order
from storefront.money import to_float
from storefront.pricing import subtotal
from .orders import OrderStore, build_order

logger = get_logger(__name__)


def order_items(order: Order) -> list[dict]:
    return [
        {
            "item_id": item.item_id,
            "item_name": item.item_name,
            "item_category": item.item_category,
            "price": to_float(item.price),
            "quantity": item.quantity,
        }
        for item in order.items
    ]


def purchase_fact(order: Order) -> Fact:
    params = {
        "transaction_id": order.transaction_id,
        "currency": order.currency,
        "value": to_float(order.value),
        "shipping": to_float(order.shipping),
    }
    if order.coupon:
        params["coupon"] = order.coupon
    if order.payment_type:
        params["payment_type"] = order.payment_type
    params["items"] = order_items(order)
    return Fact(EventName.PURCHASE, params)


class CheckoutService:
    """Checkout flow over the cart slot and the order slot."""

    def __init__(
        self,
        cart_store: Optional[CartStore] = None,
        order_store: Optional[OrderStore] = None,
        tracker: Optional[Tracker] = None,
    ):
        self.cart_store = cart_store or CartStore()
        self.order_store = order_store or OrderStore(self.cart_store.storage)
        self._tracker = tracker

    @property
    def tracker(self) -> Tracker:
        if self._tracker is None:
            self._tracker = get_tracker()
        return self._tracker

    def _load_non_empty_cart(self) -> Cart:
        # Always re-read: another view may have changed the cart
        cart = self.cart_store.load()
        if cart.is_empty:
            raise EmptyCartError()
        return cart

    def summary(self) -> dict:
        """Checkout page recap; EmptyCartError sends the user back to the shop."""
        return CartManager.build_summary(self._load_non_empty_cart())

    def add_shipping_info(self, shipping_tier: str = "standard") -> Cart:
        cart = self._load_non_empty_cart()
        params = events.cart_payload(cart, subtotal(cart))
        params["shipping_tier"] = (shipping_tier or "").strip() or "standard"
        self.tracker.track(EventName.ADD_SHIPPING_INFO.value, params)
        return cart

    def finalize(
        self,
        shipping_tier: str = "standard",
        payment_type: str = "mobile_money",
        coupon: Optional[str] = None,
    ) -> Order:
        """
        Turn the current cart into an order.

        The order is written and confirmed before the cart is cleared; a
        failure in between leaves both the order and the cart in storage.

        Raises:
            EmptyCartError: nothing to order, no order is written
            OrderPersistenceError: order not confirmed, cart untouched
        """
        cart = self._load_non_empty_cart()

        payment = (payment_type or "").strip() or "mobile_money"
        coupon_code = (coupon or "").strip()
        params = events.cart_payload(cart, subtotal(cart))
        params["payment_type"] = payment
        if coupon_code:
            params["coupon"] = coupon_code
        self.tracker.track(EventName.ADD_PAYMENT_INFO.value, params)

        order = build_order(cart, shipping_tier, payment, coupon_code)
        self.order_store.save(order)
        self.cart_store.clear()

        logger.info(f"Order {sanitize_id_for_logging(order.transaction_id)} recorded ({len(order.items)} line(s))")
        return order

    def confirm_purchase(self, transaction_id: Optional[str] = None) -> Order:
        """
        Confirmation page: emit purchase for the stored order.

        ``transaction_id`` comes from the URL and is only a hint; the
        stored order is authoritative.

        Raises:
            OrderNotFoundError: no order in storage
        """
        order = self.order_store.load_last()
        if order is None:
            raise OrderNotFoundError()

        if transaction_id and transaction_id != order.transaction_id:
            logger.warning(
                f"Confirmation hint {sanitize_id_for_logging(transaction_id)} does not match "
                f"stored order {sanitize_id_for_logging(order.transaction_id)}"
            )

        self.tracker.dispatch([purchase_fact(order)])
        return order
