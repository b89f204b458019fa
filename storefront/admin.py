# storefront/admin.py
import logging
import uuid
from typing import List

from .config import settings
from .errors import DataSourceError, ValidationError
from .models import NotificationKind, Product, ProductForm
from .session import StorefrontSession

logger = logging.getLogger(__name__)


def normalize_image_path(path: str) -> str:
    path = (path or "").strip()
    if not path:
        return settings.DEFAULT_IMAGE
    if not path.startswith("http") and not path.startswith("assets/"):
        path = f"{settings.IMAGE_DIR.rstrip('/')}/{path}"
    return path


def validate_form(form: ProductForm) -> List[str]:
    errors = []
    if len(form.name.strip()) < 2:
        errors.append("name must be at least 2 characters")
    if not form.description.strip():
        errors.append("description is required")
    if form.price is None or form.price < 0:
        errors.append("price must be >= 0")
    if form.stock is None or form.stock < 0:
        errors.append("stock must be >= 0")
    if not form.category.strip():
        errors.append("category is required")
    if not form.currency.strip():
        errors.append("currency is required")
    return errors


def _new_product_id() -> str:
    return f"produit{uuid.uuid4().hex}"


class ProductAdmin:
    """Create/update/delete products through the session's data source.

    Results are reported through the session notifier; a successful write
    reloads the catalog so the views pick it up. Reservations already in the
    cart survive edits and deletes (lines keep their price/name snapshot).
    """

    def __init__(self, session: StorefrontSession):
        self.session = session

    def _check(self, form: ProductForm):
        errors = validate_form(form)
        if errors:
            self.session.notify(NotificationKind.ERROR, "Invalid form: " + "; ".join(errors))
            raise ValidationError(errors)

    async def create_product(self, form: ProductForm) -> Product:
        self._check(form)
        product = Product(
            id=_new_product_id(),
            name=form.name.strip(),
            description=form.description.strip(),
            price=form.price,
            currency=form.currency or settings.DEFAULT_CURRENCY,
            stock=form.stock,
            category=form.category,
            images=[normalize_image_path(form.image)],
        )
        try:
            created = await self.session.source.create_product(product)
        except DataSourceError as e:
            self.session.notify(NotificationKind.ERROR, f"Could not create {product.name}: {e}")
            raise
        logger.info("Created product %s", created.id)
        self.session.notify(NotificationKind.SUCCESS, f"Product {created.name} created")
        await self.session.reload()
        return created

    async def update_product(self, product_id: str, form: ProductForm) -> Product:
        self._check(form)
        current = self.session.catalog.get(product_id)
        data = current.model_copy(update={
            "name": form.name.strip(),
            "description": form.description.strip(),
            "price": form.price,
            "currency": form.currency or current.currency,
            # the form edits the total stock, reservations included
            "stock": form.stock,
            "category": form.category,
            "images": [normalize_image_path(form.image)],
        })
        try:
            updated = await self.session.source.update_product(product_id, data)
        except DataSourceError as e:
            self.session.notify(NotificationKind.ERROR, f"Could not update {current.name}: {e}")
            raise
        logger.info("Updated product %s", product_id)
        self.session.notify(NotificationKind.SUCCESS, f"Product {updated.name} updated")
        await self.session.reload()
        return updated

    async def delete_product(self, product_id: str) -> bool:
        """Ask for confirmation, then delete. Returns False when declined."""
        product = self.session.catalog.get(product_id)
        if not self.session.notify(NotificationKind.CONFIRM, f"Delete {product.name}?"):
            return False
        try:
            await self.session.source.delete_product(product_id)
        except DataSourceError as e:
            self.session.notify(NotificationKind.ERROR, f"Could not delete {product.name}: {e}")
            raise
        self.session.catalog.discard(product_id)
        if product_id in self.session.cart:
            logger.info("Deleted product %s still has a cart line; keeping it", product_id)
        logger.info("Deleted product %s", product_id)
        self.session.notify(NotificationKind.SUCCESS, f"Product {product.name} deleted")
        return True
