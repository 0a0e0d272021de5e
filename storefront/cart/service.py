"""Cart manager service: load -> pure operation -> save -> dispatch."""
from typing import Optional

from storefront.analytics.tracker import Tracker, get_tracker
from storefront.logging import get_logger, sanitize_id_for_logging
from storefront.models import Product
from storefront.money import format_xof, to_float
from storefront.pricing import price_cart
from storefront.utils.validators import parse_quantity
from . import operations
from .models import Cart
from .operations import CartUpdate
from .store import CartStore

logger = get_logger(__name__)


class CartManager:
    """
    Caller-side glue around the pure cart operations.

    Every call re-reads the store first, so a cart changed by another view
    is never overwritten with a stale copy held across calls.
    """

    def __init__(self, store: Optional[CartStore] = None, tracker: Optional[Tracker] = None):
        self.store = store or CartStore()
        self._tracker = tracker

    @property
    def tracker(self) -> Tracker:
        """Get tracker (lazy initialization)."""
        if self._tracker is None:
            self._tracker = get_tracker()
        return self._tracker

    def _apply(self, update: CartUpdate) -> Cart:
        if update.changed:
            self.store.save(update.cart)
        self.tracker.dispatch(update.facts)
        return update.cart

    def get_cart(self) -> Cart:
        return self.store.load()

    def add_item(self, product: Product, quantity=1) -> Cart:
        """
        Add a product; out-of-stock products are ignored like a disabled button.

        ``quantity`` may be a raw widget value; invalid input adds one unit.
        """
        if not product.in_stock:
            logger.info(f"Ignoring add of out-of-stock product {sanitize_id_for_logging(product.item_id)}")
            return self.store.load()
        return self._apply(operations.add_item(self.store.load(), product, parse_quantity(quantity)))

    def set_quantity(self, item_id: str, new_quantity) -> Cart:
        """Quantity input change; invalid or non-positive input gives 1."""
        return self._apply(operations.set_quantity(self.store.load(), item_id, parse_quantity(new_quantity)))

    def remove_item(self, item_id: str) -> Cart:
        return self._apply(operations.remove_item(self.store.load(), item_id))

    def view_cart(self) -> dict:
        """Cart page render: emits view_cart and returns the summary."""
        cart = self.store.load()
        self._apply(operations.view_cart(cart))
        return self.build_summary(cart)

    def begin_checkout(self) -> Cart:
        """Checkout button; raises EmptyCartError for an empty cart."""
        return self._apply(operations.begin_checkout(self.store.load()))

    def item_count(self) -> int:
        """Header badge count."""
        return self.store.load().item_count

    @staticmethod
    def build_summary(cart: Cart) -> dict:
        """Totals and lines ready for display."""
        pricing = price_cart(cart)
        return {
            "is_empty": cart.is_empty,
            "total_items": cart.item_count,
            "items": [
                {
                    "item_id": line.item_id,
                    "item_name": line.item_name,
                    "item_category": line.item_category,
                    "image": line.image,
                    "quantity": line.quantity,
                    "unit_price": to_float(line.price),
                    "line_total": to_float(line.line_total),
                    "unit_price_display": format_xof(line.price),
                    "line_total_display": format_xof(line.line_total),
                }
                for line in cart
            ],
            "subtotal": to_float(pricing.subtotal),
            "shipping": to_float(pricing.shipping),
            "total": to_float(pricing.total),
            "subtotal_display": format_xof(pricing.subtotal),
            "shipping_display": format_xof(pricing.shipping),
            "total_display": format_xof(pricing.total),
        }


# Singleton instance
_cart_manager: Optional[CartManager] = None


def get_cart_manager() -> CartManager:
    """Get CartManager singleton."""
    global _cart_manager
    if _cart_manager is None:
        _cart_manager = CartManager()
    return _cart_manager
