"""
Analytics event names, facts and payload builders.

A Fact is one named event with its payload, produced by a core operation
and dispatched by the caller. Payload shapes follow the GA4 ecommerce
conventions (``items`` lists with ``item_id``/``item_name``/...).
"""
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import TYPE_CHECKING, Any, Iterable, Optional

from storefront.config import CATALOG_LIST_NAME, DEFAULT_CURRENCY, EMPTY_SEARCH_TERM
from storefront.money import to_float
from storefront.utils.validators import clean_text

if TYPE_CHECKING:
    from storefront.cart.models import CartLine
    from storefront.models import Product


class EventName(str, Enum):
    """Every event the storefront emits."""
    ADD_TO_CART = "add_to_cart"
    REMOVE_FROM_CART = "remove_from_cart"
    VIEW_CART = "view_cart"
    BEGIN_CHECKOUT = "begin_checkout"
    ADD_SHIPPING_INFO = "add_shipping_info"
    ADD_PAYMENT_INFO = "add_payment_info"
    PURCHASE = "purchase"
    SEARCH = "search"
    FILTER_PRODUCTS = "filter_products"
    SORT_PRODUCTS = "sort_products"
    VIEW_ITEM_LIST = "view_item_list"
    VIEW_ITEM = "view_item"
    SELECT_ITEM = "select_item"
    SELECT_PROMOTION = "select_promotion"
    VIEW_PROMOTION = "view_promotion"
    PAGE_VIEW_CUSTOM = "page_view_custom"


# view_item_list payload cap
MAX_LIST_ITEMS = 50


@dataclass(frozen=True)
class Fact:
    """A single named analytics event with its payload."""
    name: EventName
    properties: dict[str, Any] = field(default_factory=dict)

    @property
    def event_name(self) -> str:
        return self.name.value


def product_item(product: "Product", quantity: Optional[int] = None) -> dict:
    """GA item for a catalog product."""
    item = {
        "item_id": product.item_id,
        "item_name": product.item_name,
        "item_category": product.item_category,
        "item_category2": product.item_category2,
        "price": to_float(product.price),
    }
    if quantity is not None:
        item["quantity"] = quantity
    return item


def line_item(line: "CartLine") -> dict:
    """GA item for a cart line (snapshot price)."""
    return {
        "item_id": line.item_id,
        "item_name": line.item_name,
        "item_category": line.item_category,
        "price": to_float(line.price),
        "quantity": line.quantity,
    }


def line_items(lines: Iterable["CartLine"]) -> list[dict]:
    return [line_item(line) for line in lines]


def cart_payload(lines: Iterable["CartLine"], value: Decimal, currency: str = DEFAULT_CURRENCY) -> dict:
    """Common ``{currency, value, items}`` body of cart/checkout events."""
    return {
        "currency": currency,
        "value": to_float(value),
        "items": line_items(lines),
    }


def search(term: str) -> Fact:
    return Fact(EventName.SEARCH, {"search_term": term})


def search_submit(term: Optional[str]) -> Fact:
    """Header search form: an empty box is still recorded."""
    return search(clean_text(term) or EMPTY_SEARCH_TERM)


def view_item_list(products: Iterable["Product"], list_name: str = CATALOG_LIST_NAME) -> Fact:
    items = []
    for product in products:
        if len(items) >= MAX_LIST_ITEMS:
            break
        items.append(product_item(product))
    return Fact(EventName.VIEW_ITEM_LIST, {"item_list_name": list_name, "items": items})


def view_item(product: "Product") -> Fact:
    return Fact(EventName.VIEW_ITEM, {
        "currency": product.currency or DEFAULT_CURRENCY,
        "value": to_float(product.price),
        "items": [product_item(product)],
    })


def select_item(product: Optional["Product"], list_name: str = CATALOG_LIST_NAME) -> Fact:
    """Product card click; an unknown product still records the click."""
    return Fact(EventName.SELECT_ITEM, {
        "item_list_name": list_name,
        "items": [product_item(product)] if product is not None else [],
    })


def select_promotion(promotion_id: Optional[str], promotion_name: Optional[str]) -> Fact:
    return Fact(EventName.SELECT_PROMOTION, {
        "promotions": [{
            "promotion_id": promotion_id or "PROMO_INCONNUE",
            "promotion_name": promotion_name or "Promotion",
        }],
    })


def view_promotion(promo_code: str) -> Optional[Fact]:
    """Promotion landing (``?promo=`` on the shop page); None without a code."""
    code = (promo_code or "").strip()
    if not code:
        return None
    return Fact(EventName.VIEW_PROMOTION, {
        "promotions": [{"promotion_id": code.upper(), "promotion_name": f"Promo: {code}"}],
    })


def page_view(page_title: str, page_location: str, page_path: str) -> Fact:
    return Fact(EventName.PAGE_VIEW_CUSTOM, {
        "page_title": page_title,
        "page_location": page_location,
        "page_path": page_path,
    })
