"""Persisted cart store backed by a named storage slot."""
import json
from typing import Callable, Optional

from storefront import config
from storefront.logging import get_logger
from storefront.storage import KeyValueStorage, get_storage
from .models import Cart

logger = get_logger(__name__)

CartListener = Callable[[Cart], None]


class CartStore:
    """
    Owns the canonical cart.

    - load(): never raises on bad data; absent, unreadable or malformed
      slots all read as an empty cart
    - save(): overwrites the slot and notifies listeners exactly once
    - on_change(): "cart changed" subscription, the only coordination
      signal between views sharing the slot (last write wins)
    """

    def __init__(self, storage: Optional[KeyValueStorage] = None, key: str = config.CART_KEY):
        self.storage = storage if storage is not None else get_storage()
        self.key = key
        self._listeners: list[CartListener] = []

    def load(self) -> Cart:
        """Return the last saved cart, or an empty one."""
        try:
            raw = self.storage.get_item(self.key)
        except Exception as e:
            logger.warning(f"Cart slot unreadable: {e}")
            return Cart()

        if not raw:
            return Cart()

        try:
            return Cart.from_list(json.loads(raw))
        except (json.JSONDecodeError, KeyError, TypeError, ValueError, OverflowError) as e:
            # Corrupted data - same as no cart
            logger.warning(f"Corrupted cart data in slot {self.key}: {e}")
            return Cart()

    def save(self, cart: Cart) -> None:
        """Persist the cart and fire the change notification."""
        self.storage.set_item(self.key, json.dumps(cart.to_list(), ensure_ascii=False))
        self._notify(cart)

    def clear(self) -> None:
        """Replace the cart with an empty one."""
        self.save(Cart())

    def on_change(self, listener: CartListener) -> Callable[[], None]:
        """Register a listener; returns a function that unregisters it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self, cart: Cart) -> None:
        for listener in list(self._listeners):
            try:
                listener(cart)
            except Exception as e:
                logger.error(f"Cart change listener failed: {e}", exc_info=True)
