"""Shared fixtures: a small car catalog, a recording notifier and sessions."""

from typing import List, Optional, Tuple

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

from storefront.catalog import ProductCatalog
from storefront.main import create_app
from storefront.models import Category, NotificationKind, Product
from storefront.session import StorefrontSession
from storefront.sources import InMemoryDataSource


class RecordingNotifier:
    """Keeps every notification; confirmations answer `confirm_answer`."""

    def __init__(self, confirm_answer: bool = True):
        self.confirm_answer = confirm_answer
        self.messages: List[Tuple[NotificationKind, str]] = []

    def notify(self, kind: NotificationKind, message: str) -> Optional[bool]:
        self.messages.append((kind, message))
        if kind == NotificationKind.CONFIRM:
            return self.confirm_answer
        return None

    def kinds(self) -> List[NotificationKind]:
        return [k for k, _ in self.messages]


def make_products() -> List[Product]:
    return [
        Product(id="p1", name="Sedan X", description="Family sedan", price=100, category="car", stock=3),
        Product(id="p2", name="Truck Y", description="Pickup", price=50, category="truck", stock=0),
        Product(id="p3", name="Coupé Électrique", description="Electric coupé", price=250, category="car", stock=2),
        Product(id="p4", name="Roof Box", description="Storage for a sedan roof", price=40, category="accessory",
                stock=5),
    ]


def make_categories() -> List[Category]:
    return [Category(id="car", name="Cars"), Category(id="truck", name="Trucks"),
            Category(id="accessory", name="Accessories")]


@pytest.fixture
def products():
    return make_products()


@pytest.fixture
def catalog(products):
    return ProductCatalog(products, make_categories())


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def source(products):
    return InMemoryDataSource(products, make_categories())


@pytest_asyncio.fixture
async def session(source, notifier):
    s = StorefrontSession(source, notifier, page_size=2)
    await s.reload()
    return s


@pytest.fixture
def client(source, notifier):
    app = create_app(source=source, notifier=notifier)
    with TestClient(app) as c:
        yield c
