# storefront/sources.py
import asyncio
import logging
from typing import Dict, Iterable, List, Optional, Protocol

import httpx

from .errors import DataSourceError
from .models import Category, Product

logger = logging.getLogger(__name__)

# Collaborators that own product/category storage. The core only ever sees
# full replacement collections or a DataSourceError.


class DataSource(Protocol):
    async def fetch_products(self) -> List[Product]: ...

    async def fetch_categories(self) -> List[Category]: ...

    async def create_product(self, product: Product) -> Product: ...

    async def update_product(self, product_id: str, product: Product) -> Product: ...

    async def delete_product(self, product_id: str) -> None: ...


class InMemoryDataSource:
    """Seeded in-process source used by the demo server and the tests."""

    def __init__(self, products: Iterable[Product] = (), categories: Iterable[Category] = ()):
        self._products: Dict[str, Product] = {p.id: p.model_copy(deep=True) for p in products}
        self._categories: List[Category] = list(categories)
        self.fail_next: Optional[str] = None

    def _maybe_fail(self, op: str):
        # lets tests simulate a collaborator outage for a single call
        if self.fail_next == op:
            self.fail_next = None
            raise DataSourceError(f"{op} failed")

    async def fetch_products(self) -> List[Product]:
        await asyncio.sleep(0)
        self._maybe_fail("fetch_products")
        return [p.model_copy(deep=True) for p in self._products.values()]

    async def fetch_categories(self) -> List[Category]:
        await asyncio.sleep(0)
        self._maybe_fail("fetch_categories")
        return list(self._categories)

    async def create_product(self, product: Product) -> Product:
        self._maybe_fail("create_product")
        if product.id in self._products:
            raise DataSourceError(f"product already exists: {product.id}")
        self._products[product.id] = product.model_copy(deep=True)
        return product

    async def update_product(self, product_id: str, product: Product) -> Product:
        self._maybe_fail("update_product")
        if product_id not in self._products:
            raise DataSourceError(f"product not found: {product_id}")
        self._products[product_id] = product.model_copy(update={"id": product_id}, deep=True)
        return self._products[product_id]

    async def delete_product(self, product_id: str) -> None:
        self._maybe_fail("delete_product")
        if self._products.pop(product_id, None) is None:
            raise DataSourceError(f"product not found: {product_id}")


class HttpDataSource:
    """REST collaborator (json-server style `/products` and `/categories`)."""

    def __init__(self, base_url: str, timeout: float = 10, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(base_url=self.base_url, timeout=self.timeout, transport=self._transport)

    async def _request(self, method: str, path: str, **kwargs) -> httpx.Response:
        try:
            async with self._client() as client:
                r = await client.request(method, path, **kwargs)
                r.raise_for_status()
                return r
        except httpx.HTTPError as e:
            logger.warning("%s %s failed: %s", method, path, e)
            raise DataSourceError(f"{method} {path} failed: {e}") from e

    async def fetch_products(self) -> List[Product]:
        r = await self._request("GET", "/products")
        try:
            return [Product.model_validate(p) for p in r.json()]
        except ValueError as e:
            raise DataSourceError(f"invalid product payload: {e}") from e

    async def fetch_categories(self) -> List[Category]:
        r = await self._request("GET", "/categories")
        try:
            return [Category.model_validate(c) for c in r.json()]
        except ValueError as e:
            raise DataSourceError(f"invalid category payload: {e}") from e

    async def create_product(self, product: Product) -> Product:
        r = await self._request("POST", "/products", json=product.model_dump())
        return _parse_product(r)

    async def update_product(self, product_id: str, product: Product) -> Product:
        r = await self._request("PUT", f"/products/{product_id}", json=product.model_dump())
        return _parse_product(r)

    async def delete_product(self, product_id: str) -> None:
        await self._request("DELETE", f"/products/{product_id}")


def _parse_product(r: httpx.Response) -> Product:
    try:
        return Product.model_validate(r.json())
    except ValueError as e:
        raise DataSourceError(f"invalid product payload: {e}") from e
