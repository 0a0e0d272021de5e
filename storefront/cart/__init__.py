"""Cart package: models, persisted store, pure operations and manager facade."""
from .models import CartLine, Cart
from .operations import CartUpdate, add_item, set_quantity, remove_item, view_cart, begin_checkout
from .service import CartManager, get_cart_manager
from .store import CartStore

__all__ = [
    "CartLine",
    "Cart",
    "CartStore",
    "CartUpdate",
    "add_item",
    "set_quantity",
    "remove_item",
    "view_cart",
    "begin_checkout",
    "CartManager",
    "get_cart_manager",
]
