"""Cart models with Decimal-based pricing."""
from dataclasses import dataclass, field, replace
from decimal import Decimal
from typing import Iterable, Optional

from storefront.config import DEFAULT_CURRENCY
from storefront.money import multiply
from storefront.utils.validators import parse_number


@dataclass(frozen=True)
class CartLine:
    """Single catalog item in the cart with its locked-in price."""
    item_id: str
    item_name: str
    item_category: str
    price: Decimal  # Snapshot at add time
    quantity: int
    currency: str = DEFAULT_CURRENCY
    image: str = ""

    def __post_init__(self):
        # Missing, non-numeric and negative prices make the line invalid
        price = parse_number(self.price)
        if price is None or price < 0:
            raise ValueError(f"price must be a non-negative number, got {self.price!r}")
        object.__setattr__(self, "price", price)
        object.__setattr__(self, "quantity", max(1, int(self.quantity)))

    @property
    def line_total(self) -> Decimal:
        """Snapshot price times quantity."""
        return multiply(self.price, self.quantity)

    def with_quantity(self, quantity: int) -> "CartLine":
        return replace(self, quantity=quantity)

    def to_dict(self) -> dict:
        """Convert to dictionary for the storage slot."""
        return {
            "item_id": self.item_id,
            "item_name": self.item_name,
            "item_category": self.item_category,
            "price": str(self.price),
            "currency": self.currency,
            "quantity": self.quantity,
            "image": self.image,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "CartLine":
        """
        Create from dictionary.

        Raises KeyError/TypeError/ValueError on malformed data; the cart
        store decides what to do with it.
        """
        item_id = data["item_id"]
        if not isinstance(item_id, str) or not item_id:
            raise ValueError("item_id must be a non-empty string")

        quantity = data.get("quantity", 1)
        if isinstance(quantity, bool) or not isinstance(quantity, (int, float, str)):
            raise TypeError("quantity must be a number")

        return cls(
            item_id=item_id,
            item_name=str(data.get("item_name") or ""),
            item_category=str(data.get("item_category") or ""),
            price=data["price"],
            quantity=int(float(quantity)),
            currency=str(data.get("currency") or DEFAULT_CURRENCY),
            image=str(data.get("image") or ""),
        )


@dataclass(frozen=True)
class Cart:
    """Ordered cart lines (insertion order, one line per item id)."""
    lines: tuple[CartLine, ...] = field(default_factory=tuple)

    def __post_init__(self):
        object.__setattr__(self, "lines", tuple(self.lines))

    def __len__(self) -> int:
        return len(self.lines)

    def __iter__(self):
        return iter(self.lines)

    @property
    def is_empty(self) -> bool:
        return not self.lines

    @property
    def item_count(self) -> int:
        """Total number of units in cart."""
        return sum(line.quantity for line in self.lines)

    def find(self, item_id: str) -> Optional[CartLine]:
        return next((line for line in self.lines if line.item_id == item_id), None)

    def index_of(self, item_id: str) -> int:
        for idx, line in enumerate(self.lines):
            if line.item_id == item_id:
                return idx
        return -1

    def to_list(self) -> list[dict]:
        """Convert to a JSON-ready list."""
        return [line.to_dict() for line in self.lines]

    @classmethod
    def from_lines(cls, lines: Iterable[CartLine]) -> "Cart":
        """
        Build a cart, merging duplicate item ids.

        The first line for an id keeps its fields; later duplicates only
        add their quantity.
        """
        merged: dict[str, CartLine] = {}
        for line in lines:
            existing = merged.get(line.item_id)
            if existing is None:
                merged[line.item_id] = line
            else:
                merged[line.item_id] = existing.with_quantity(existing.quantity + line.quantity)
        return cls(lines=tuple(merged.values()))

    @classmethod
    def from_list(cls, data: list) -> "Cart":
        """Create from a decoded storage list."""
        if not isinstance(data, list):
            raise TypeError("cart data must be a list")
        return cls.from_lines(CartLine.from_dict(item) for item in data)
