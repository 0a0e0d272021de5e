"""
Storefront Core Module

This package contains the cart & catalog state engine:
- storage: durable key/value slots (memory + JSON file)
- cart: persisted cart store, pure cart operations, CartManager facade
- pricing: subtotal / shipping / total
- catalog: product source + query pipeline (search, filter, sort)
- analytics: tracker and event payload builders
- checkout: order snapshot and checkout flow

Note: Imports are lazy so that importing a leaf module (e.g. pricing)
does not pull httpx or the storage singletons.
"""

__all__ = [
    "get_storage",
    "get_cart_manager",
    "get_tracker",
]


def __getattr__(name):
    """Lazy attribute access for light module loading."""
    if name == "get_storage":
        from storefront.storage import get_storage
        return get_storage
    elif name == "get_cart_manager":
        from storefront.cart import get_cart_manager
        return get_cart_manager
    elif name == "get_tracker":
        from storefront.analytics import get_tracker
        return get_tracker
    raise AttributeError(f"module 'storefront' has no attribute '{name}'")
