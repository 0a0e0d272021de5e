"""
Catalog Query Engine

Turns the full product list and a QueryParams into the displayed result
set plus the analytics facts describing the query. Pipeline order is
fixed: text -> category -> stock -> price ceiling -> sort. Sorting is
stable, so ties keep their filter-stage order.
"""
import unicodedata
from dataclasses import dataclass, field
from typing import Callable, Iterable, Optional, Sequence

from storefront.analytics import events
from storefront.analytics.events import EventName, Fact
from storefront.config import FEATURED_LIST_NAME, RELATED_LIST_NAME
from storefront.errors import ProductNotFoundError
from storefront.logging import get_logger, sanitize_id_for_logging
from storefront.models import Product, QueryParams, SortKey, StockFilter
from storefront.money import to_float

logger = get_logger(__name__)

# Review count stops boosting the featured score past this point
REVIEWS_CAP = 300
BADGE_BOOST = 10
RELATED_LIMIT = 4


@dataclass(frozen=True)
class QueryResult:
    """Ordered filtered products plus the facts the query implies."""
    products: tuple[Product, ...]
    facts: tuple[Fact, ...] = field(default_factory=tuple)
    total_count: int = 0

    def __len__(self) -> int:
        return len(self.products)

    @property
    def summary(self) -> str:
        """Result counter shown above the grid."""
        return f"{len(self.products)} produit(s) affiché(s) sur {self.total_count}."


@dataclass(frozen=True)
class ProductView:
    """Product page data: the product, its related items and facts."""
    product: Product
    related: tuple[Product, ...]
    facts: tuple[Fact, ...] = field(default_factory=tuple)


def normalize(value: Optional[str]) -> str:
    """Lowercase and strip diacritics: ``"Café"`` -> ``"cafe"``."""
    decomposed = unicodedata.normalize("NFD", (value or "").lower())
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def search_haystack(product: Product) -> str:
    """Normalized text searched by the query box."""
    parts = [
        product.item_name,
        product.item_category,
        product.item_category2 or "",
        " ".join(product.tags),
        product.description or "",
    ]
    return normalize(" ".join(parts))


def name_sort_key(name: Optional[str]) -> tuple:
    """
    French-style collation key.

    Compares base letters first, then accents, then case (lowercase
    first), which is what a "fr" localeCompare gives for catalog names.
    """
    value = name or ""
    return (normalize(value), value.lower(), value.swapcase())


def featured_score(product: Product) -> float:
    """Badge boost + rating*10 + capped review count / 10."""
    badge_boost = BADGE_BOOST if product.badge else 0
    return badge_boost + product.rating * 10 + min(product.reviews, REVIEWS_CAP) / 10


_SORTS: dict[SortKey, tuple[Callable[[Product], object], bool]] = {
    SortKey.PRICE_ASC: (lambda p: p.price, False),
    SortKey.PRICE_DESC: (lambda p: p.price, True),
    SortKey.RATING_DESC: (lambda p: p.rating, True),
    SortKey.NAME_ASC: (lambda p: name_sort_key(p.item_name), False),
    SortKey.FEATURED: (featured_score, True),
}


def filter_products(products: Iterable[Product], params: QueryParams) -> list[Product]:
    """Apply the four filter stages in order."""
    filtered = list(products)

    if params.text:
        needle = normalize(params.text)
        filtered = [p for p in filtered if needle in search_haystack(p)]

    if params.category != "all":
        filtered = [p for p in filtered if p.item_category == params.category]

    if params.stock_filter == StockFilter.IN:
        filtered = [p for p in filtered if p.in_stock]
    elif params.stock_filter == StockFilter.OUT:
        filtered = [p for p in filtered if not p.in_stock]

    if params.price_max > 0:
        filtered = [p for p in filtered if p.price <= params.price_max]

    return filtered


def sort_products(products: Iterable[Product], sort: SortKey) -> list[Product]:
    """Stable sort (reverse=True keeps equal items in their original order)."""
    key, reverse = _SORTS.get(sort, _SORTS[SortKey.FEATURED])
    return sorted(products, key=key, reverse=reverse)


def query_facts(params: QueryParams, results: Sequence[Product]) -> tuple[Fact, ...]:
    """Facts for a completed query run: search?, filter, sort, list view."""
    facts = []
    if params.text:
        facts.append(events.search(params.text))

    facts.append(Fact(EventName.FILTER_PRODUCTS, {
        "category": params.category,
        "stock": params.stock_filter.value,
        "price_max": to_float(params.price_max) if params.price_max > 0 else None,
    }))
    facts.append(Fact(EventName.SORT_PRODUCTS, {"sort_by": params.sort.value}))
    facts.append(events.view_item_list(results))
    return tuple(facts)


def run_query(
    products: Sequence[Product],
    params: Optional[QueryParams] = None,
    emit_analytics: bool = True,
) -> QueryResult:
    """
    Run the full pipeline.

    Args:
        products: Full catalog (not modified)
        params: Query; defaults to everything, featured order
        emit_analytics: When False the result carries no facts

    Returns:
        QueryResult with ordered products and facts
    """
    params = params or QueryParams()
    results = tuple(sort_products(filter_products(products, params), params.sort))
    facts = query_facts(params, results) if emit_analytics else ()
    return QueryResult(products=results, facts=facts, total_count=len(products))


def unique_categories(products: Iterable[Product]) -> list[str]:
    """Category options for the filter select, collated like names."""
    categories = {p.item_category for p in products if p.item_category}
    return sorted(categories, key=name_sort_key)


def find_product(products: Iterable[Product], item_id: Optional[str]) -> Product:
    """Look a product up by id; raises ProductNotFoundError."""
    wanted = (item_id or "").strip()
    if not wanted:
        raise ProductNotFoundError(None)
    for product in products:
        if product.item_id == wanted:
            return product
    logger.info(f"Unknown product id requested: {sanitize_id_for_logging(wanted)}")
    raise ProductNotFoundError(wanted)


def related_products(products: Iterable[Product], product: Product, limit: int = RELATED_LIMIT) -> list[Product]:
    """Same-category products, excluding the product itself, catalog order."""
    related = [
        p for p in products
        if p.item_id != product.item_id and p.item_category == product.item_category
    ]
    return related[:limit]


def view_product(products: Sequence[Product], item_id: Optional[str]) -> ProductView:
    """Product page: product, related items and the view_item fact."""
    product = find_product(products, item_id)
    return ProductView(
        product=product,
        related=tuple(related_products(products, product)),
        facts=(events.view_item(product),),
    )


def select_related_item(product: Optional[Product]) -> Fact:
    """Click on a related product card."""
    return events.select_item(product, RELATED_LIST_NAME)


def select_featured_item(products: Sequence[Product], item_id: Optional[str]) -> Fact:
    """
    Click on a homepage featured card.

    The card only carries an id; an id missing from the catalog still
    records the click with an empty item list.
    """
    wanted = (item_id or "").strip()
    product = next((p for p in products if p.item_id == wanted), None) if wanted else None
    return events.select_item(product, FEATURED_LIST_NAME)
