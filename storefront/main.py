# storefront/main.py
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import Depends, FastAPI, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from . import seed
from .admin import ProductAdmin
from .config import settings
from .errors import DataSourceError, InvalidStateError, NotFoundError, OutOfStockError, ValidationError
from .models import ProductForm
from .notify import Notifier
from .session import StorefrontSession
from .sources import DataSource, HttpDataSource, InMemoryDataSource

logger = logging.getLogger(__name__)


# ---------------------------
# Request schemas
# ---------------------------
class CartItemIn(BaseModel):
    product_id: str


def default_source() -> DataSource:
    if settings.uses_remote_catalog:
        return HttpDataSource(settings.CATALOG_URL, timeout=settings.HTTP_TIMEOUT)
    return InMemoryDataSource(seed.PRODUCTS, seed.CATEGORIES)


def create_app(source: Optional[DataSource] = None, notifier: Optional[Notifier] = None) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        session = StorefrontSession(source or default_source(), notifier)
        app.state.session = session
        app.state.admin = ProductAdmin(session)
        try:
            await session.reload()
        except DataSourceError as e:
            # serve an empty catalog; POST /reload retries
            logger.error("Initial catalog load failed: %s", e)
        yield

    app = FastAPI(title="storefront", lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    _register_error_handlers(app)
    _register_routes(app)
    return app


def get_session(request: Request) -> StorefrontSession:
    return request.app.state.session


def get_admin(request: Request) -> ProductAdmin:
    return request.app.state.admin


# ---------------------------
# Error mapping
# ---------------------------
def _register_error_handlers(app: FastAPI):
    @app.exception_handler(NotFoundError)
    async def not_found(request: Request, exc: NotFoundError):
        return JSONResponse(status_code=404, content={"detail": "product not found", "product_id": exc.product_id})

    @app.exception_handler(OutOfStockError)
    async def out_of_stock(request: Request, exc: OutOfStockError):
        return JSONResponse(status_code=409, content={"detail": "insufficient_stock", "product_id": exc.product_id})

    @app.exception_handler(ValidationError)
    async def invalid_form(request: Request, exc: ValidationError):
        return JSONResponse(status_code=422, content={"detail": exc.errors})

    @app.exception_handler(DataSourceError)
    async def source_failed(request: Request, exc: DataSourceError):
        return JSONResponse(status_code=502, content={"detail": str(exc)})

    @app.exception_handler(InvalidStateError)
    async def invalid_state(request: Request, exc: InvalidStateError):
        logger.error("Stock invariant violated: %s", exc)
        return JSONResponse(status_code=500, content={"detail": "internal stock error"})


def _register_routes(app: FastAPI):
    # ---------------------------
    # Catalog / filtering
    # ---------------------------
    @app.get("/products")
    async def list_products(
        search: Optional[str] = None,
        category: Optional[str] = None,
        in_stock_only: Optional[bool] = None,
        page: Optional[int] = Query(None, ge=1),
        session: StorefrontSession = Depends(get_session),
    ):
        # updates the session filter state; only changed params are applied
        # so repeating a request is stable. A new term or category goes back
        # to page 1.
        if search is not None and search != session.state.search:
            session.search(search)
        if category is not None and category != session.state.category:
            session.select_category(category)
        if in_stock_only is not None and in_stock_only != session.state.in_stock_only:
            session.set_in_stock_only(in_stock_only)
        if page is not None:
            session.go_to_page(page)
        return session.view()

    @app.post("/products/next")
    async def next_page(session: StorefrontSession = Depends(get_session)):
        return session.next_page()

    @app.post("/products/prev")
    async def prev_page(session: StorefrontSession = Depends(get_session)):
        return session.prev_page()

    @app.get("/products/{product_id}")
    async def get_product(product_id: str, session: StorefrontSession = Depends(get_session)):
        return session.catalog.get(product_id)

    @app.get("/categories")
    async def list_categories(session: StorefrontSession = Depends(get_session)):
        return session.catalog.categories

    @app.post("/reload")
    async def reload(session: StorefrontSession = Depends(get_session)):
        return await session.reload()

    # ---------------------------
    # Cart
    # ---------------------------
    @app.get("/cart")
    async def view_cart(session: StorefrontSession = Depends(get_session)):
        return session.cart.view()

    @app.post("/cart/add")
    async def cart_add(payload: CartItemIn, session: StorefrontSession = Depends(get_session)):
        return await session.add_to_cart(payload.product_id)

    @app.post("/cart/remove")
    async def cart_remove(payload: CartItemIn, session: StorefrontSession = Depends(get_session)):
        return await session.remove_from_cart(payload.product_id)

    @app.post("/cart/clear")
    async def cart_clear(session: StorefrontSession = Depends(get_session)):
        return await session.clear_cart()

    # ---------------------------
    # Admin CRUD
    # ---------------------------
    @app.post("/admin/products", status_code=201)
    async def create_product(form: ProductForm, admin: ProductAdmin = Depends(get_admin)):
        return await admin.create_product(form)

    @app.put("/admin/products/{product_id}")
    async def update_product(product_id: str, form: ProductForm, admin: ProductAdmin = Depends(get_admin)):
        return await admin.update_product(product_id, form)

    @app.delete("/admin/products/{product_id}")
    async def delete_product(product_id: str, admin: ProductAdmin = Depends(get_admin)):
        deleted = await admin.delete_product(product_id)
        return {"product_id": product_id, "deleted": deleted, "view": admin.session.view()}

    # ---------------------------
    # Debug
    # ---------------------------
    @app.get("/debug/conservation")
    async def debug_conservation(session: StorefrontSession = Depends(get_session)):
        broken = session.check_conservation()
        return {"ok": not broken, "broken": broken}


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("storefront.main:app", host="0.0.0.0", port=8085, log_level=settings.log_level.lower())
