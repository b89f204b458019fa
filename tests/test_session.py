import asyncio

import pytest

from storefront.errors import DataSourceError, NotFoundError, OutOfStockError
from storefront.models import Category, NotificationKind, Product
from storefront.session import StorefrontSession
from storefront.sources import InMemoryDataSource


@pytest.mark.asyncio
async def test_filter_paginate_and_reserve_scenario(notifier):
    source = InMemoryDataSource([
        Product(id="p1", name="Sedan X", category="car", stock=3, price=100),
        Product(id="p2", name="Truck Y", category="truck", stock=0, price=50),
    ], [Category(id="car", name="Cars")])
    session = StorefrontSession(source, notifier, page_size=1)
    await session.reload()

    view = session.select_category("car")
    assert [p.id for p in view.items] == ["p1"]
    assert view.total_count == 1

    await session.add_to_cart("p1")
    view = await session.add_to_cart("p1")
    assert view.items[0].stock == 1
    assert view.cart.count == 2

    with pytest.raises(OutOfStockError):
        await session.add_to_cart("p2")
    assert session.catalog.find("p2").stock == 0
    assert notifier.kinds() == [NotificationKind.WARNING]


@pytest.mark.asyncio
async def test_views_reflect_reservations(session):
    view = await session.add_to_cart("p1")
    assert view.items[0].id == "p1"
    assert view.items[0].stock == 2
    view = await session.remove_from_cart("p1")
    assert view.items[0].stock == 3
    assert view.cart.count == 0


@pytest.mark.asyncio
async def test_paging_keeps_filters(session):
    view = session.search("e")
    assert view.page == 1
    assert view.total_pages == 2
    view = session.next_page()
    assert view.page == 2
    assert view.filters.search == "e"
    assert not view.has_next
    assert session.next_page().page == 2
    view = session.select_category("car")
    assert view.page == 1
    assert session.prev_page().page == 1


@pytest.mark.asyncio
async def test_go_to_page_past_end(session):
    view = session.go_to_page(9)
    assert view.items == []
    assert view.total_count == 4


@pytest.mark.asyncio
async def test_reload_keeps_reservations(session, source):
    await session.add_to_cart("p1")
    await session.add_to_cart("p1")
    view = await session.reload()
    assert session.catalog.find("p1").stock == 1
    assert view.cart.count == 2
    assert session.check_conservation() == []


@pytest.mark.asyncio
async def test_reload_with_vanished_product_keeps_line(session, source):
    await session.add_to_cart("p3")
    await source.delete_product("p3")
    view = await session.reload()
    assert view.cart.count == 1
    assert view.warnings == ["Coupé Électrique is no longer available"]
    with pytest.raises(NotFoundError):
        await session.add_to_cart("p3")


@pytest.mark.asyncio
async def test_reload_failure_notifies_and_raises(session, source, notifier):
    source.fail_next = "fetch_categories"
    with pytest.raises(DataSourceError):
        await session.reload()
    assert notifier.kinds() == [NotificationKind.ERROR]


@pytest.mark.asyncio
async def test_remove_of_vanished_product_warns(session, notifier):
    await session.add_to_cart("p1")
    session.catalog.discard("p1")
    view = await session.remove_from_cart("p1")
    assert view.cart.count == 0
    assert view.warnings == ["product not found: p1"]
    assert notifier.kinds() == [NotificationKind.WARNING]


@pytest.mark.asyncio
async def test_clear_cart_reports_failures_as_warnings(session, notifier):
    await session.add_to_cart("p1")
    await session.add_to_cart("p4")
    session.catalog.discard("p4")
    view = await session.clear_cart()
    assert view.cart.count == 0
    assert view.warnings == ["product not found: p4"]
    assert session.catalog.find("p1").stock == 3
    assert notifier.kinds() == [NotificationKind.WARNING]


class GatedSource(InMemoryDataSource):
    """Holds fetch_products until the gate is opened."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.gate = asyncio.Event()

    async def fetch_products(self):
        await self.gate.wait()
        return await super().fetch_products()


@pytest.mark.asyncio
async def test_add_during_pending_reload_keeps_conservation(notifier):
    source = GatedSource([Product(id="p1", name="Sedan X", category="car", stock=3, price=100)])
    session = StorefrontSession(source, notifier)
    source.gate.set()
    await session.reload()
    source.gate.clear()

    pending = asyncio.create_task(session.reload())
    await asyncio.sleep(0)
    await session.add_to_cart("p1")
    source.gate.set()
    await pending

    assert session.catalog.find("p1").stock == 2
    assert session.catalog.baseline("p1") == 3
    assert session.check_conservation() == []
