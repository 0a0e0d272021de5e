"""Storefront Models - Pydantic models for catalog products, queries and orders."""
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Any, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from storefront.config import DEFAULT_CURRENCY
from storefront.money import to_decimal as _to_decimal
from storefront.utils.validators import clean_text, parse_price_max


class StockFilter(str, Enum):
    """Stock availability filter."""
    ALL = "all"
    IN = "in"
    OUT = "out"


class SortKey(str, Enum):
    """Catalog sort orders."""
    FEATURED = "featured"
    PRICE_ASC = "price_asc"
    PRICE_DESC = "price_desc"
    RATING_DESC = "rating_desc"
    NAME_ASC = "name_asc"


class Product(BaseModel):
    """Catalog product (read-only, sourced from the product list)."""
    model_config = ConfigDict(extra="ignore", frozen=True)

    item_id: str = Field(min_length=1)
    item_name: str
    item_category: str
    item_category2: Optional[str] = None
    price: Decimal = Field(ge=0)
    currency: str = DEFAULT_CURRENCY
    in_stock: bool = False
    rating: float = Field(default=0.0, ge=0, le=5)
    reviews: int = Field(default=0, ge=0)
    badge: Optional[str] = None
    image: Optional[str] = None
    tags: list[str] = []
    description: Optional[str] = None

    @field_validator("price", mode="before")
    @classmethod
    def convert_price_to_decimal(cls, v):
        if v is None or isinstance(v, bool):
            raise ValueError("price must be a number")
        return _to_decimal(v) if isinstance(v, (int, float)) else v

    @field_validator("currency", mode="before")
    @classmethod
    def default_currency(cls, v):
        return v or DEFAULT_CURRENCY

    @field_validator("tags", mode="before")
    @classmethod
    def tags_or_empty(cls, v):
        return [] if v is None else v


class QueryParams(BaseModel):
    """
    Fully enumerated catalog query.

    Built at the UI boundary with ``from_input`` so the query engine never
    sees raw widget values.
    """
    model_config = ConfigDict(frozen=True)

    text: str = ""
    category: str = "all"
    stock_filter: StockFilter = StockFilter.ALL
    sort: SortKey = SortKey.FEATURED
    price_max: Decimal = Decimal("0")

    @field_validator("text", mode="before")
    @classmethod
    def strip_text(cls, v):
        return clean_text(v)

    @field_validator("category", mode="before")
    @classmethod
    def category_or_all(cls, v):
        return clean_text(v) or "all"

    @field_validator("stock_filter", mode="before")
    @classmethod
    def known_stock_filter(cls, v):
        try:
            return StockFilter(v)
        except ValueError:
            return StockFilter.ALL

    @field_validator("sort", mode="before")
    @classmethod
    def known_sort(cls, v):
        try:
            return SortKey(v)
        except ValueError:
            return SortKey.FEATURED

    @field_validator("price_max", mode="before")
    @classmethod
    def parse_ceiling(cls, v):
        return parse_price_max(v)

    @property
    def has_text(self) -> bool:
        return bool(self.text)

    @classmethod
    def from_input(cls, data: Mapping[str, Any] | None = None) -> "QueryParams":
        """
        Build a query from loose widget values.

        Accepts the form names used by the shop page (``q``, ``stock``,
        ``priceMax``) as well as the field names.
        """
        data = data or {}

        def pick(*keys):
            for key in keys:
                if key in data and data[key] is not None:
                    return data[key]
            return None

        return cls(
            text=pick("text", "q"),
            category=pick("category"),
            stock_filter=pick("stock_filter", "stockFilter", "stock"),
            sort=pick("sort"),
            price_max=pick("price_max", "priceMax"),
        )


class OrderItem(BaseModel):
    """Frozen copy of a cart line inside an order."""
    model_config = ConfigDict(frozen=True)

    item_id: str
    item_name: str
    item_category: str
    price: Decimal
    currency: str = DEFAULT_CURRENCY
    quantity: int = Field(ge=1)
    image: str = ""


class Order(BaseModel):
    """
    Order snapshot created at checkout completion.

    Never mutated after creation; only the latest one is kept in storage.
    """
    model_config = ConfigDict(frozen=True)

    transaction_id: str
    currency: str = DEFAULT_CURRENCY
    subtotal: Decimal
    shipping: Decimal
    value: Decimal
    coupon: Optional[str] = None
    payment_type: str
    shipping_tier: str = "standard"
    items: tuple[OrderItem, ...]
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @field_validator("subtotal", "shipping", "value", mode="before")
    @classmethod
    def convert_to_decimal(cls, v):
        return _to_decimal(v)
