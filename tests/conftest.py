"""Pytest configuration and fixtures"""
import os
from decimal import Decimal

import pytest

# Keep test output quiet and deterministic
os.environ.setdefault("LOG_LEVEL", "WARNING")
os.environ.setdefault("STOREFRONT_STORAGE_PATH", "")
os.environ.setdefault("STOREFRONT_DEBUG", "0")

from storefront.analytics.tracker import Tracker  # noqa: E402
from storefront.cart.service import CartManager  # noqa: E402
from storefront.cart.store import CartStore  # noqa: E402
from storefront.checkout.orders import OrderStore  # noqa: E402
from storefront.checkout.service import CheckoutService  # noqa: E402
from storefront.models import Product  # noqa: E402
from storefront.storage import MemoryStorage  # noqa: E402


class RecordingSink:
    """Analytics sink that keeps every event it receives."""

    def __init__(self):
        self.events: list[tuple[str, dict]] = []

    def __call__(self, event_name: str, params: dict) -> None:
        self.events.append((event_name, params))

    @property
    def names(self) -> list[str]:
        return [name for name, _ in self.events]

    def last(self, event_name: str) -> dict:
        for name, params in reversed(self.events):
            if name == event_name:
                return params
        raise AssertionError(f"{event_name} was not tracked")


@pytest.fixture
def storage():
    """Fresh in-memory storage"""
    return MemoryStorage()


@pytest.fixture
def sink():
    return RecordingSink()


@pytest.fixture
def tracker(storage, sink):
    """Tracker wired to the recording sink"""
    return Tracker(storage=storage, sinks=[sink], debug=False)


@pytest.fixture
def cart_store(storage):
    return CartStore(storage)


@pytest.fixture
def cart_manager(cart_store, tracker):
    return CartManager(store=cart_store, tracker=tracker)


@pytest.fixture
def order_store(storage):
    return OrderStore(storage)


@pytest.fixture
def checkout_service(cart_store, order_store, tracker):
    return CheckoutService(cart_store=cart_store, order_store=order_store, tracker=tracker)


def make_product(item_id: str, **overrides) -> Product:
    """Build a catalog product with sensible defaults"""
    data = {
        "item_id": item_id,
        "item_name": f"Produit {item_id}",
        "item_category": "Tech",
        "price": 10000,
        "currency": "XOF",
        "in_stock": True,
        "rating": 4.0,
        "reviews": 10,
    }
    data.update(overrides)
    return Product(**data)


@pytest.fixture
def sample_product():
    """Sample in-stock product"""
    return make_product(
        "sku_001",
        item_name="Carnet intelligent",
        item_category="Accessoires",
        price=12000,
        image="https://example.test/carnet.jpg",
    )


@pytest.fixture
def catalog():
    """Small catalog covering categories, stock, badges and accents"""
    return [
        make_product("sku_001", item_name="Carnet intelligent", item_category="Accessoires",
                     price=12000, rating=4.5, reviews=120, badge="Nouveau",
                     tags=["papeterie", "bureau"], description="Un carnet réutilisable."),
        make_product("sku_002", item_name="Écouteurs sans fil", item_category="Tech",
                     item_category2="Audio", price=18500, rating=4.2, reviews=450),
        make_product("sku_003", item_name="Lampe minimaliste", item_category="Maison",
                     price=9900, rating=3.9, reviews=35, in_stock=False),
        make_product("sku_004", item_name="Organiseur de bureau", item_category="Bureau",
                     price=6500, rating=4.2, reviews=80),
        make_product("sku_005", item_name="Café Latte", item_category="Épicerie",
                     price=Decimal("2500"), rating=4.8, reviews=300, badge="Promo",
                     description="Mélange torréfié."),
    ]
