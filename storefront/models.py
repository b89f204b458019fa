# storefront/models.py
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field

from .config import settings


class Product(BaseModel):
    id: str
    name: str
    description: str = ""
    price: float = Field(0, ge=0)
    currency: str = "€"
    category: str = ""
    stock: int = Field(0, ge=0)
    images: List[str] = Field(default_factory=list)

    def image(self) -> str:
        return self.images[0] if self.images else settings.DEFAULT_IMAGE

class Category(BaseModel):
    id: str
    name: str

class CartLine(BaseModel):
    product_id: str
    name: str
    price: float
    currency: str = "€"
    quantity: int = Field(1, ge=1)

    @property
    def line_total(self) -> float:
        return self.price * self.quantity

    @classmethod
    def from_product(cls, product: Product, quantity: int = 1) -> "CartLine":
        # name/price are a snapshot; later catalog edits don't touch the line
        return cls(
            product_id=product.id,
            name=product.name,
            price=product.price,
            currency=product.currency,
            quantity=quantity,
        )

class FilterState(BaseModel):
    search: str = ""
    category: str = ""
    page: int = Field(1, ge=1)
    in_stock_only: bool = False

    def with_search(self, term: str) -> "FilterState":
        return self.model_copy(update={"search": term, "page": 1})

    def with_category(self, category: Optional[str]) -> "FilterState":
        return self.model_copy(update={"category": category or "", "page": 1})

    def with_in_stock_only(self, flag: bool) -> "FilterState":
        return self.model_copy(update={"in_stock_only": flag, "page": 1})

    def with_page(self, page: int) -> "FilterState":
        return self.model_copy(update={"page": max(1, page)})

class ProductForm(BaseModel):
    """Raw admin form input; validated by storefront.admin.validate_form."""
    name: str = ""
    description: str = ""
    price: Optional[float] = None
    currency: str = "€"
    stock: Optional[int] = None
    category: str = ""
    image: str = ""

class NotificationKind(str, Enum):
    SUCCESS = "success"
    ERROR = "error"
    WARNING = "warning"
    CONFIRM = "confirm"

class CartView(BaseModel):
    lines: List[CartLine]
    total: float
    count: int

class StorefrontView(BaseModel):
    items: List[Product]
    total_count: int
    page: int
    page_size: int
    total_pages: int
    has_prev: bool
    has_next: bool
    filters: FilterState
    cart: CartView
    warnings: List[str] = Field(default_factory=list)
