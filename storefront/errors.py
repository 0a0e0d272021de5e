"""
Common Error Constants and Exceptions

Centralized error messages (one string per condition) and the small
exception hierarchy surfaced to callers. Storage corruption and analytics
failures are never raised; they are recovered where they happen.
"""

# Cart / checkout errors
ERROR_EMPTY_CART = "Cart is empty"
ERROR_ORDER_NOT_FOUND = "Order not found"
ERROR_ORDER_NOT_PERSISTED = "Order could not be persisted"

# Catalog errors
ERROR_CATALOG_UNAVAILABLE = "Product catalog could not be loaded"
ERROR_CATALOG_NOT_A_LIST = "Product catalog is not a list"
ERROR_PRODUCT_NOT_FOUND = "Product not found"
ERROR_PRODUCT_ID_MISSING = "No product identifier provided"


class StorefrontError(Exception):
    """Base class for errors surfaced by the storefront engine."""

    default_message = "Storefront error"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.default_message)


class EmptyCartError(StorefrontError):
    """Checkout refused because the cart has no lines."""

    default_message = ERROR_EMPTY_CART


class CatalogFetchError(StorefrontError):
    """Product list could not be fetched or is not a valid list."""

    default_message = ERROR_CATALOG_UNAVAILABLE


class ProductNotFoundError(StorefrontError):
    """Requested product id is not in the catalog."""

    default_message = ERROR_PRODUCT_NOT_FOUND

    def __init__(self, item_id: str | None = None, message: str | None = None):
        self.item_id = item_id
        if message is None and not item_id:
            message = ERROR_PRODUCT_ID_MISSING
        super().__init__(message)


class OrderNotFoundError(StorefrontError):
    """No stored order matches the confirmation request."""

    default_message = ERROR_ORDER_NOT_FOUND


class OrderPersistenceError(StorefrontError):
    """Order write could not be confirmed; the cart must be kept."""

    default_message = ERROR_ORDER_NOT_PERSISTED
