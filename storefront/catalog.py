# storefront/catalog.py
import asyncio
import logging
from typing import Callable, Dict, List, Mapping, Optional

from .errors import DataSourceError, InvalidStateError, NotFoundError, StorefrontError
from .models import Category, Product
from .sources import DataSource

logger = logging.getLogger(__name__)


class ProductCatalog:
    """Authoritative product/category store for one session.

    `adjust_stock` is the only way stock changes; `_baseline` remembers the
    stock each product was loaded with so the cart can be checked against it.
    """

    def __init__(self, products: Optional[List[Product]] = None, categories: Optional[List[Category]] = None):
        self._products: Dict[str, Product] = {}
        self._baseline: Dict[str, int] = {}
        self._categories: List[Category] = list(categories or [])
        self._locks: Dict[str, asyncio.Lock] = {}
        if products:
            self.replace(products)

    # ---------------------------
    # Loading
    # ---------------------------
    async def load(
        self, source: DataSource, reserved: Optional[Callable[[], Mapping[str, int]]] = None
    ) -> List[Product]:
        """Fetch and swap in the product list.

        `reserved` is called only once the fetch has returned, so cart
        operations that ran while it was pending are accounted for.
        """
        products = await _fetch(source.fetch_products)
        self.replace(products, reserved() if reserved else None)
        logger.info("Catalog loaded: %d products", len(self._products))
        return self.snapshot()

    async def load_categories(self, source: DataSource) -> List[Category]:
        self._categories = list(await _fetch(source.fetch_categories))
        logger.info("Categories loaded: %d", len(self._categories))
        return list(self._categories)

    def replace(self, products: List[Product], reserved: Optional[Mapping[str, int]] = None):
        """Swap in a fresh product list.

        Units already held by a cart (`reserved`) are taken out of the fetched
        stock, so a reload never hands the same unit out twice.
        """
        reserved = reserved or {}
        fresh: Dict[str, Product] = {}
        baseline: Dict[str, int] = {}
        for p in products:
            p = p.model_copy(deep=True)
            held = reserved.get(p.id, 0)
            base = p.stock
            if held > base:
                logger.warning(
                    "Reloaded stock for %s (%d) is below the %d units in the cart; clamping to 0",
                    p.id, base, held,
                )
                base = held
            p.stock = base - held
            fresh[p.id] = p
            baseline[p.id] = base
        self._products = fresh
        self._baseline = baseline

    # ---------------------------
    # Queries
    # ---------------------------
    @property
    def categories(self) -> List[Category]:
        return list(self._categories)

    def find(self, product_id: str) -> Optional[Product]:
        return self._products.get(product_id)

    def get(self, product_id: str) -> Product:
        p = self._products.get(product_id)
        if p is None:
            raise NotFoundError(product_id)
        return p

    def baseline(self, product_id: str) -> int:
        if product_id not in self._baseline:
            raise NotFoundError(product_id)
        return self._baseline[product_id]

    def snapshot(self) -> List[Product]:
        return [p.model_copy(deep=True) for p in self._products.values()]

    def __contains__(self, product_id: str) -> bool:
        return product_id in self._products

    def __len__(self) -> int:
        return len(self._products)

    # ---------------------------
    # Mutation
    # ---------------------------
    def adjust_stock(self, product_id: str, delta: int) -> int:
        p = self.get(product_id)
        new_stock = p.stock + delta
        if new_stock < 0:
            raise InvalidStateError(
                f"stock for {product_id} would become {new_stock} (current {p.stock}, delta {delta})"
            )
        p.stock = new_stock
        return new_stock

    def discard(self, product_id: str) -> Optional[Product]:
        self._baseline.pop(product_id, None)
        return self._products.pop(product_id, None)

    def lock(self, product_id: str) -> asyncio.Lock:
        if product_id not in self._locks:
            self._locks[product_id] = asyncio.Lock()
        return self._locks[product_id]


async def _fetch(call):
    try:
        return await call()
    except StorefrontError:
        raise
    except Exception as e:
        raise DataSourceError(f"catalog source failed: {e}") from e
