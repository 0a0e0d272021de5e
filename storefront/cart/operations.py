"""
Cart operations.

Pure transforms ``(Cart, args) -> CartUpdate(cart, facts)``. Nothing here
touches storage or the tracker: the caller saves ``update.cart`` and then
dispatches ``update.facts``.
"""
from dataclasses import dataclass, field

from storefront.analytics import events
from storefront.analytics.events import EventName, Fact
from storefront.config import DEFAULT_CURRENCY
from storefront.errors import EmptyCartError
from storefront.models import Product
from storefront.money import multiply, to_float
from storefront.pricing import subtotal
from .models import Cart, CartLine


@dataclass(frozen=True)
class CartUpdate:
    """New cart state plus the analytics facts the operation implies."""
    cart: Cart
    facts: tuple[Fact, ...] = field(default_factory=tuple)
    changed: bool = True


def line_from_product(product: Product, quantity: int) -> CartLine:
    """Snapshot the product's current fields into a new cart line."""
    return CartLine(
        item_id=product.item_id,
        item_name=product.item_name,
        item_category=product.item_category,
        price=product.price,
        currency=product.currency or DEFAULT_CURRENCY,
        quantity=quantity,
        image=product.image or "",
    )


def add_item(cart: Cart, product: Product, quantity: int = 1) -> CartUpdate:
    """
    Add ``quantity`` units of a product.

    An existing line for the same id keeps its stored price, name,
    category, currency and image (first seen wins) and only grows by the
    delta. The fact carries the delta, not the new line total.
    """
    delta = max(1, int(quantity))
    idx = cart.index_of(product.item_id)

    if idx >= 0:
        lines = list(cart.lines)
        lines[idx] = lines[idx].with_quantity(lines[idx].quantity + delta)
        new_cart = Cart(lines=tuple(lines))
    else:
        new_cart = Cart(lines=cart.lines + (line_from_product(product, delta),))

    fact = Fact(EventName.ADD_TO_CART, {
        "currency": product.currency or DEFAULT_CURRENCY,
        "value": to_float(multiply(product.price, delta)),
        "items": [events.product_item(product, quantity=delta)],
    })
    return CartUpdate(cart=new_cart, facts=(fact,))


def set_quantity(cart: Cart, item_id: str, new_quantity: int) -> CartUpdate:
    """
    Set a line's quantity, clamped to at least 1.

    Unknown ids leave the cart untouched. Quantity edits emit no fact.
    """
    idx = cart.index_of(item_id)
    if idx < 0:
        return CartUpdate(cart=cart, changed=False)

    lines = list(cart.lines)
    lines[idx] = lines[idx].with_quantity(max(1, int(new_quantity)))
    return CartUpdate(cart=Cart(lines=tuple(lines)))


def remove_item(cart: Cart, item_id: str) -> CartUpdate:
    """Delete the line for ``item_id``; unknown ids are a silent no-op."""
    removed = cart.find(item_id)
    if removed is None:
        return CartUpdate(cart=cart, changed=False)

    new_cart = Cart(lines=tuple(line for line in cart.lines if line.item_id != item_id))
    fact = Fact(EventName.REMOVE_FROM_CART, {
        "currency": removed.currency or DEFAULT_CURRENCY,
        "value": to_float(removed.line_total),
        "items": [events.line_item(removed)],
    })
    return CartUpdate(cart=new_cart, facts=(fact,))


def view_cart(cart: Cart) -> CartUpdate:
    """Cart display: no mutation, one view_cart fact with the subtotal."""
    fact = Fact(EventName.VIEW_CART, events.cart_payload(cart, subtotal(cart)))
    return CartUpdate(cart=cart, facts=(fact,), changed=False)


def begin_checkout(cart: Cart) -> CartUpdate:
    """Checkout button: refused for an empty cart."""
    if cart.is_empty:
        raise EmptyCartError()
    fact = Fact(EventName.BEGIN_CHECKOUT, events.cart_payload(cart, subtotal(cart)))
    return CartUpdate(cart=cart, facts=(fact,), changed=False)
