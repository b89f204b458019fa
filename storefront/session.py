# storefront/session.py
import logging
from typing import List, Optional

from .cart import Cart
from .catalog import ProductCatalog
from .config import settings
from .errors import CartClearError, DataSourceError, InvalidStateError, NotFoundError, OutOfStockError
from .filters import FilterView
from .models import FilterState, NotificationKind, StorefrontView
from .notify import LogNotifier, Notifier
from .sources import DataSource

logger = logging.getLogger(__name__)


class StorefrontSession:
    """One shopper's catalog, cart and filter state.

    Every mutating call returns a freshly derived StorefrontView so the stock
    numbers on screen always include the current reservations.
    """

    def __init__(
        self,
        source: DataSource,
        notifier: Optional[Notifier] = None,
        page_size: Optional[int] = None,
    ):
        self.source = source
        self.notifier = notifier or LogNotifier(settings.AUTO_CONFIRM)
        self.catalog = ProductCatalog()
        self.cart = Cart(self.catalog)
        self.filter_view = FilterView(page_size or settings.PAGE_SIZE)
        self.state = FilterState()

    def notify(self, kind: NotificationKind, message: str) -> Optional[bool]:
        return self.notifier.notify(kind, message)

    # ---------------------------
    # Catalog loading
    # ---------------------------
    async def reload(self) -> StorefrontView:
        """Replace catalog data from the source, keeping cart reservations."""
        try:
            await self.catalog.load(self.source, reserved=self.cart.reserved)
            await self.catalog.load_categories(self.source)
        except DataSourceError as e:
            self.notify(NotificationKind.ERROR, f"Could not load the catalog: {e}")
            raise
        warnings = []
        for pid in self.cart.orphaned():
            line = self.cart.get(pid)
            logger.info("Cart line %s kept after its product left the catalog", pid)
            warnings.append(f"{line.name} is no longer available")
        return self.view(warnings)

    # ---------------------------
    # Filtering / pagination
    # ---------------------------
    def view(self, warnings: Optional[List[str]] = None) -> StorefrontView:
        items, total = self.filter_view.apply(self.catalog.snapshot(), self.state)
        fv = self.filter_view
        return StorefrontView(
            items=items,
            total_count=total,
            page=self.state.page,
            page_size=fv.page_size,
            total_pages=fv.total_pages(total),
            has_prev=fv.has_prev(self.state),
            has_next=fv.has_next(self.state, total),
            filters=self.state,
            cart=self.cart.view(),
            warnings=warnings or [],
        )

    def search(self, term: str) -> StorefrontView:
        self.state = self.state.with_search(term)
        return self.view()

    def select_category(self, category: Optional[str]) -> StorefrontView:
        self.state = self.state.with_category(category)
        return self.view()

    def set_in_stock_only(self, flag: bool) -> StorefrontView:
        self.state = self.state.with_in_stock_only(flag)
        return self.view()

    def go_to_page(self, page: int) -> StorefrontView:
        self.state = self.state.with_page(page)
        return self.view()

    def next_page(self) -> StorefrontView:
        _, total = self.filter_view.apply(self.catalog.snapshot(), self.state)
        self.state = self.filter_view.next_page(self.state, total)
        return self.view()

    def prev_page(self) -> StorefrontView:
        self.state = self.filter_view.prev_page(self.state)
        return self.view()

    # ---------------------------
    # Cart
    # ---------------------------
    async def add_to_cart(self, product_id: str) -> StorefrontView:
        try:
            await self.cart.add(product_id)
        except OutOfStockError as e:
            self.notify(NotificationKind.WARNING, f"Insufficient stock: {e}")
            raise
        return self.view()

    async def remove_from_cart(self, product_id: str) -> StorefrontView:
        warnings = []
        try:
            await self.cart.remove(product_id)
        except NotFoundError as e:
            # line is gone already; nothing left to restore
            warnings.append(str(e))
            self.notify(NotificationKind.WARNING, f"Removed a line for a product no longer in the catalog ({product_id})")
        return self.view(warnings)

    async def clear_cart(self) -> StorefrontView:
        warnings = []
        try:
            await self.cart.clear()
        except CartClearError as e:
            if any(isinstance(err, InvalidStateError) for _, err in e.failures):
                raise
            warnings = [str(err) for _, err in e.failures]
            self.notify(NotificationKind.WARNING, str(e))
        return self.view(warnings)

    def check_conservation(self) -> List[str]:
        return self.cart.check_conservation()
