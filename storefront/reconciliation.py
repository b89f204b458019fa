# storefront/reconciliation.py
import logging
from contextlib import asynccontextmanager
from typing import Dict, List

from .catalog import ProductCatalog
from .errors import NotFoundError
from .models import CartLine

logger = logging.getLogger(__name__)

# Moves units between the catalog's available stock and the cart's reserved
# quantities. Cart.add/remove/clear go through here; nothing else touches
# both sides at once.
#
# For every product P:  P.stock + lines[P].quantity == catalog.baseline(P)


@asynccontextmanager
async def guard(catalog: ProductCatalog, *product_ids: str):
    # sorted acquisition, same as a multi-sku checkout: no lock-order deadlocks
    locks = [catalog.lock(pid) for pid in sorted(set(product_ids))]
    for l in locks:
        await l.acquire()
    try:
        yield
    finally:
        for l in reversed(locks):
            l.release()


def reserve(catalog: ProductCatalog, lines: Dict[str, CartLine], product_id: str, quantity: int = 1) -> CartLine:
    """Take `quantity` units out of stock and into the cart line for `product_id`.

    The stock decrement and the line update apply together: if the line cannot
    be written the stock is put back before the error propagates.
    """
    product = catalog.get(product_id)
    catalog.adjust_stock(product_id, -quantity)
    try:
        line = lines.get(product_id)
        if line is None:
            line = CartLine.from_product(product, quantity)
        else:
            line = line.model_copy(update={"quantity": line.quantity + quantity})
        lines[product_id] = line
    except Exception:
        catalog.adjust_stock(product_id, quantity)
        raise
    logger.debug("Reserved %d x %s (stock now %d)", quantity, product_id, product.stock)
    return line


def release(catalog: ProductCatalog, lines: Dict[str, CartLine], product_id: str) -> int:
    """Drop the whole line for `product_id` and return all its units to stock.

    Returns the number of units restored (0 when there was no line). If the
    product is gone from the catalog the line is still dropped and
    NotFoundError is raised so the caller can report it.
    """
    line = lines.get(product_id)
    if line is None:
        return 0
    try:
        catalog.adjust_stock(product_id, line.quantity)
    except NotFoundError:
        del lines[product_id]
        raise
    del lines[product_id]
    logger.debug("Released %d x %s", line.quantity, product_id)
    return line.quantity


def check_conservation(catalog: ProductCatalog, lines: Dict[str, CartLine]) -> List[str]:
    """Return ids of catalog products whose stock + reserved != baseline."""
    broken = []
    for p in catalog.snapshot():
        held = lines[p.id].quantity if p.id in lines else 0
        if p.stock + held != catalog.baseline(p.id):
            broken.append(p.id)
    return broken
