"""
Product source - fetch the full product list.

The catalog is a static JSON array. It is always read fresh (no cache),
never retried, and either returned whole or rejected with
CatalogFetchError: there is no partial catalog.
"""
import asyncio
import json
from pathlib import Path
from typing import Any, Optional, Protocol

import httpx
from pydantic import ValidationError

from storefront import config
from storefront.errors import CatalogFetchError, ERROR_CATALOG_NOT_A_LIST
from storefront.logging import get_logger, sanitize_string_for_logging
from storefront.models import Product

logger = get_logger(__name__)

NO_CACHE_HEADERS = {"Cache-Control": "no-cache", "Pragma": "no-cache"}


class CatalogSource(Protocol):
    async def fetch(self) -> list[Product]: ...


def parse_products(data: Any) -> list[Product]:
    """
    Validate a decoded product list.

    Raises:
        CatalogFetchError: payload is not a list or a record is invalid
    """
    if not isinstance(data, list):
        raise CatalogFetchError(ERROR_CATALOG_NOT_A_LIST)
    try:
        return [Product.model_validate(item) for item in data]
    except ValidationError as e:
        logger.error(f"Invalid product record in catalog: {e.error_count()} error(s)")
        raise CatalogFetchError(f"Invalid product record: {e.errors()[0].get('msg', 'invalid')}") from e


class ProductSource:
    """HTTP product source (httpx, no timeout, no retry)."""

    def __init__(
        self,
        url: str = config.PRODUCTS_URL,
        base_url: str = "",
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.url = url
        self.base_url = base_url
        self._transport = transport

    async def fetch(self) -> list[Product]:
        try:
            async with httpx.AsyncClient(base_url=self.base_url, timeout=None, transport=self._transport) as client:
                response = await client.get(self.url, headers=NO_CACHE_HEADERS)
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPError as e:
            logger.error(f"Catalog fetch failed for {sanitize_string_for_logging(self.url)}: {e}")
            raise CatalogFetchError() from e
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            logger.error(f"Catalog is not valid JSON: {e}")
            raise CatalogFetchError() from e

        return parse_products(data)


class FileProductSource:
    """Product list read from a local JSON file."""

    def __init__(self, path: str | Path):
        self.path = Path(path)

    async def fetch(self) -> list[Product]:
        try:
            raw = await asyncio.to_thread(self.path.read_text, encoding="utf-8")
            data = json.loads(raw)
        except (OSError, json.JSONDecodeError, UnicodeDecodeError) as e:
            logger.error(f"Catalog file {self.path.name} unreadable: {e}")
            raise CatalogFetchError() from e

        return parse_products(data)


def get_product_source(url: str = config.PRODUCTS_URL) -> CatalogSource:
    """HTTP source for http(s) URLs, file source otherwise."""
    if url.startswith(("http://", "https://")):
        return ProductSource(url)
    return FileProductSource(url)


class CatalogLoader:
    """
    Tracks which catalog fetch is current.

    Each load gets a generation number; a load that finishes after a newer
    one has started returns None so the caller keeps what it already shows.
    Failures of the current load propagate as CatalogFetchError.
    """

    def __init__(self, source: Optional[CatalogSource] = None):
        self.source = source or get_product_source()
        self._generation = 0
        self.products: list[Product] = []

    async def load(self) -> Optional[list[Product]]:
        self._generation += 1
        generation = self._generation

        try:
            products = await self.source.fetch()
        except CatalogFetchError:
            if generation != self._generation:
                logger.info("Ignoring failure of a superseded catalog fetch")
                return None
            raise

        if generation != self._generation:
            logger.info("Discarding superseded catalog fetch result")
            return None

        self.products = products
        return products
