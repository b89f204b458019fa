# storefront/cart.py
import logging
from typing import Dict, List, Optional, Tuple

from . import reconciliation
from .catalog import ProductCatalog
from .errors import CartClearError, OutOfStockError, StorefrontError
from .models import CartLine, CartView

logger = logging.getLogger(__name__)


class Cart:
    """Per-session cart. Each line holds units reserved from `catalog`."""

    def __init__(self, catalog: ProductCatalog):
        self.catalog = catalog
        self._lines: Dict[str, CartLine] = {}

    async def add(self, product_id: str) -> CartLine:
        async with reconciliation.guard(self.catalog, product_id):
            product = self.catalog.get(product_id)
            if product.stock <= 0:
                raise OutOfStockError(product_id, product.name)
            return reconciliation.reserve(self.catalog, self._lines, product_id, 1)

    async def remove(self, product_id: str) -> int:
        if product_id not in self._lines:
            return 0
        async with reconciliation.guard(self.catalog, product_id):
            return reconciliation.release(self.catalog, self._lines, product_id)

    async def clear(self) -> int:
        """Release every line; failures are collected and raised together at the end."""
        restored = 0
        failures: List[Tuple[str, StorefrontError]] = []
        async with reconciliation.guard(self.catalog, *self._lines.keys()):
            for pid in list(self._lines):
                try:
                    restored += reconciliation.release(self.catalog, self._lines, pid)
                except StorefrontError as e:
                    logger.warning("Could not release %s while clearing cart: %s", pid, e)
                    failures.append((pid, e))
            self._lines.clear()
        if failures:
            raise CartClearError(failures)
        return restored

    def orphaned(self) -> List[str]:
        """Ids of lines whose product is no longer in the catalog."""
        return [pid for pid in self._lines if pid not in self.catalog]

    # ---------------------------
    # Read side
    # ---------------------------
    def get(self, product_id: str) -> Optional[CartLine]:
        return self._lines.get(product_id)

    def lines(self) -> List[CartLine]:
        return list(self._lines.values())

    def reserved(self) -> Dict[str, int]:
        return {pid: line.quantity for pid, line in self._lines.items()}

    def total(self) -> float:
        return sum(line.line_total for line in self._lines.values())

    def count(self) -> int:
        return sum(line.quantity for line in self._lines.values())

    def view(self) -> CartView:
        return CartView(lines=self.lines(), total=self.total(), count=self.count())

    def check_conservation(self) -> List[str]:
        return reconciliation.check_conservation(self.catalog, self._lines)

    def __contains__(self, product_id: str) -> bool:
        return product_id in self._lines

    def __len__(self) -> int:
        return len(self._lines)
