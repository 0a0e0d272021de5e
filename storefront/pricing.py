"""
Pricing Calculator

Derives subtotal, shipping and grand total from a cart snapshot. All
functions are pure; they use the price stored on each line, so catalog
price changes after add-to-cart never affect an existing cart.
"""
from dataclasses import dataclass
from decimal import Decimal
from typing import TYPE_CHECKING, Iterable

from storefront.money import Number, to_decimal

if TYPE_CHECKING:
    from storefront.cart.models import CartLine

# Orders at or above this subtotal ship for free
FREE_SHIPPING_THRESHOLD = Decimal("25000")

# Flat shipping fee below the threshold
FLAT_SHIPPING = Decimal("1500")


@dataclass(frozen=True)
class PricingSnapshot:
    """Derived totals; only persisted as part of an order."""
    subtotal: Decimal
    shipping: Decimal
    total: Decimal


def subtotal(cart: Iterable["CartLine"]) -> Decimal:
    """Sum of snapshot price times quantity over all lines."""
    return sum((line.line_total for line in cart), Decimal("0"))


def shipping_cost(amount: Number) -> Decimal:
    """Shipping for a given subtotal: free when empty or above the threshold."""
    value = to_decimal(amount)
    if value == 0:
        return Decimal("0")
    if value >= FREE_SHIPPING_THRESHOLD:
        return Decimal("0")
    return FLAT_SHIPPING


def total(cart: Iterable["CartLine"]) -> Decimal:
    """Subtotal plus shipping."""
    return price_cart(cart).total


def price_cart(cart: Iterable["CartLine"]) -> PricingSnapshot:
    """Compute all three totals at once."""
    sub = subtotal(cart)
    ship = shipping_cost(sub)
    return PricingSnapshot(subtotal=sub, shipping=ship, total=sub + ship)
