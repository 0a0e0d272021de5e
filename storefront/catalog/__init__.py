"""Catalog package: product source and query pipeline."""
from .query import (
    QueryResult,
    ProductView,
    normalize,
    featured_score,
    run_query,
    unique_categories,
    find_product,
    related_products,
    view_product,
    select_related_item,
    select_featured_item,
)
from .source import ProductSource, FileProductSource, CatalogLoader, get_product_source, parse_products

__all__ = [
    "QueryResult",
    "ProductView",
    "normalize",
    "featured_score",
    "run_query",
    "unique_categories",
    "find_product",
    "related_products",
    "view_product",
    "select_related_item",
    "select_featured_item",
    "ProductSource",
    "FileProductSource",
    "CatalogLoader",
    "get_product_source",
    "parse_products",
]
