"""Order snapshot: transaction ids, order building and the order slot."""
import json
import secrets
import threading
import time
from typing import Optional
from urllib.parse import quote

from pydantic import ValidationError

from storefront import config
from storefront.cart.models import Cart
from storefront.errors import EmptyCartError, OrderPersistenceError
from storefront.logging import get_logger, sanitize_id_for_logging
from storefront.models import Order, OrderItem
from storefront.pricing import price_cart
from storefront.storage import KeyValueStorage, get_storage

logger = get_logger(__name__)

_BASE36 = "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZ"

_issued_ids: set[str] = set()
_issued_lock = threading.Lock()


def _base36(value: int) -> str:
    if value == 0:
        return "0"
    digits = []
    while value:
        value, rem = divmod(value, 36)
        digits.append(_BASE36[rem])
    return "".join(reversed(digits))


def make_transaction_id() -> str:
    """
    New order id ``ORD-<base36 ms timestamp>-<4 hex>``.

    Unique within the process: ids already handed out are re-drawn.
    """
    with _issued_lock:
        while True:
            candidate = f"ORD-{_base36(int(time.time() * 1000))}-{secrets.token_hex(2).upper()}"
            if candidate not in _issued_ids:
                _issued_ids.add(candidate)
                return candidate


def build_order(
    cart: Cart,
    shipping_tier: str = "standard",
    payment_type: str = "mobile_money",
    coupon: Optional[str] = None,
) -> Order:
    """
    Freeze a cart and its totals into an order.

    Raises:
        EmptyCartError: the cart has no lines
    """
    if cart.is_empty:
        raise EmptyCartError()

    pricing = price_cart(cart)
    coupon_code = (coupon or "").strip() or None
    currency = cart.lines[0].currency or config.DEFAULT_CURRENCY

    return Order(
        transaction_id=make_transaction_id(),
        currency=currency,
        subtotal=pricing.subtotal,
        shipping=pricing.shipping,
        value=pricing.total,
        coupon=coupon_code,
        payment_type=(payment_type or "").strip() or "mobile_money",
        shipping_tier=(shipping_tier or "").strip() or "standard",
        items=tuple(OrderItem(**line.to_dict()) for line in cart),
    )


def success_url(order: Order, page: str = "success.html") -> str:
    """Confirmation page link; the order id is only a display hint."""
    return f"{page}?order={quote(order.transaction_id, safe='')}"


class OrderStore:
    """Single slot holding the most recent order."""

    def __init__(self, storage: Optional[KeyValueStorage] = None, key: str = config.ORDER_KEY):
        self.storage = storage if storage is not None else get_storage()
        self.key = key

    def save(self, order: Order) -> None:
        """
        Write the order and confirm it reads back.

        Raises:
            OrderPersistenceError: write failed or did not round-trip
        """
        try:
            self.storage.set_item(self.key, order.model_dump_json())
        except Exception as e:
            logger.error(f"Failed to write order {sanitize_id_for_logging(order.transaction_id)}: {e}")
            raise OrderPersistenceError() from e

        stored = self.load_last()
        if stored is None or stored.transaction_id != order.transaction_id:
            logger.error(f"Order {sanitize_id_for_logging(order.transaction_id)} not confirmed after write")
            raise OrderPersistenceError()

    def load_last(self) -> Optional[Order]:
        """Most recent order, or None when absent or corrupted."""
        try:
            raw = self.storage.get_item(self.key)
        except Exception as e:
            logger.warning(f"Order slot unreadable: {e}")
            return None

        if not raw:
            return None

        try:
            return Order.model_validate_json(raw)
        except (ValidationError, json.JSONDecodeError) as e:
            logger.warning(f"Corrupted order data in slot {self.key}: {e}")
            return None
