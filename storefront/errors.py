# storefront/errors.py
from typing import List, Tuple

# Error taxonomy shared by the catalog, the cart and the HTTP layer.


class StorefrontError(Exception):
    """Base class for every error raised by the storefront core."""


class DataSourceError(StorefrontError):
    """The catalog collaborator failed to fetch or persist data."""


class NotFoundError(StorefrontError):
    def __init__(self, product_id: str):
        super().__init__(f"product not found: {product_id}")
        self.product_id = product_id


class OutOfStockError(StorefrontError):
    def __init__(self, product_id: str, name: str = ""):
        label = name or product_id
        super().__init__(f"product {label} is out of stock")
        self.product_id = product_id
        self.name = name


class InvalidStateError(StorefrontError):
    """A stock adjustment would break the conservation law.

    Never raised by correct code; treat it as a programming error.
    """


class ValidationError(StorefrontError):
    def __init__(self, errors: List[str]):
        super().__init__("; ".join(errors))
        self.errors = errors


class CartClearError(StorefrontError):
    """Raised after clear() emptied the cart but some lines failed to release."""

    def __init__(self, failures: List[Tuple[str, StorefrontError]]):
        ids = ", ".join(pid for pid, _ in failures)
        super().__init__(f"{len(failures)} cart line(s) failed to release: {ids}")
        self.failures = failures
