# storefront/filters.py
import math
import unicodedata
from typing import Iterable, List, Tuple

from .models import FilterState, Product


def normalize(text: str) -> str:
    """Lowercase and strip accents so "Électrique" matches "electrique"."""
    decomposed = unicodedata.normalize("NFKD", text or "")
    return "".join(c for c in decomposed if not unicodedata.combining(c)).casefold()


def matches(product: Product, state: FilterState) -> bool:
    term = normalize(state.search.strip())
    if term and term not in normalize(product.name) and term not in normalize(product.description):
        return False
    # category is a tag: exact equality only
    if state.category and product.category != state.category:
        return False
    if state.in_stock_only and product.stock <= 0:
        return False
    return True


class FilterView:
    def __init__(self, page_size: int):
        if page_size < 1:
            raise ValueError("page_size must be >= 1")
        self.page_size = page_size

    def apply(self, products: Iterable[Product], state: FilterState) -> Tuple[List[Product], int]:
        filtered = [p for p in products if matches(p, state)]
        start = (state.page - 1) * self.page_size
        return filtered[start:start + self.page_size], len(filtered)

    def total_pages(self, total_count: int) -> int:
        return math.ceil(total_count / self.page_size)

    def has_next(self, state: FilterState, total_count: int) -> bool:
        return state.page * self.page_size < total_count

    def has_prev(self, state: FilterState) -> bool:
        return state.page > 1

    def next_page(self, state: FilterState, total_count: int) -> FilterState:
        if self.has_next(state, total_count):
            return state.with_page(state.page + 1)
        return state

    def prev_page(self, state: FilterState) -> FilterState:
        if self.has_prev(state):
            return state.with_page(state.page - 1)
        return state
