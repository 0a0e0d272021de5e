"""Checkout package: order snapshot, order slot and checkout flow."""
from .orders import OrderStore, build_order, make_transaction_id, success_url
from .service import CheckoutService, purchase_fact

__all__ = [
    "OrderStore",
    "build_order",
    "make_transaction_id",
    "success_url",
    "CheckoutService",
    "purchase_fact",
]
