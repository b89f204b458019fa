# sdk/storefront_client.py
from typing import Any, Dict, Optional

import httpx
import requests


class StorefrontError(Exception):
    def __init__(self, status_code: int, detail: Any):
        super().__init__(f"HTTP {status_code}: {detail}")
        self.status_code = status_code
        self.detail = detail


class StorefrontClient:
    def __init__(self, base_url: str = "http://localhost:8085", timeout: int = 10, session: Optional[requests.Session] = None):
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout

    def _call(self, method: str, path: str, **kwargs) -> Any:
        r = self.session.request(method, f"{self.base_url}{path}", timeout=self.timeout, **kwargs)
        if r.status_code >= 400:
            try:
                detail = r.json().get("detail")
            except ValueError:
                detail = r.text
            raise StorefrontError(r.status_code, detail)
        return r.json()

    # Catalog
    def list_products(self, search: Optional[str] = None, category: Optional[str] = None,
                      page: Optional[int] = None, in_stock_only: Optional[bool] = None) -> Dict[str, Any]:
        params: Dict[str, Any] = {}
        if search is not None:
            params["search"] = search
        if category is not None:
            params["category"] = category
        if page is not None:
            params["page"] = page
        if in_stock_only is not None:
            params["in_stock_only"] = "true" if in_stock_only else "false"
        return self._call("GET", "/products", params=params)

    def next_page(self) -> Dict[str, Any]:
        return self._call("POST", "/products/next")

    def prev_page(self) -> Dict[str, Any]:
        return self._call("POST", "/products/prev")

    def get_product(self, product_id: str) -> Dict[str, Any]:
        return self._call("GET", f"/products/{product_id}")

    def list_categories(self):
        return self._call("GET", "/categories")

    def reload(self) -> Dict[str, Any]:
        return self._call("POST", "/reload")

    # Cart
    def view_cart(self) -> Dict[str, Any]:
        return self._call("GET", "/cart")

    def add_to_cart(self, product_id: str) -> Dict[str, Any]:
        return self._call("POST", "/cart/add", json={"product_id": product_id})

    def remove_from_cart(self, product_id: str) -> Dict[str, Any]:
        return self._call("POST", "/cart/remove", json={"product_id": product_id})

    def clear_cart(self) -> Dict[str, Any]:
        return self._call("POST", "/cart/clear")

    async def add_to_cart_async(self, product_id: str) -> httpx.Response:
        # raw response: callers racing on the last unit want to inspect 409s
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            return await client.post(f"{self.base_url}/cart/add", json={"product_id": product_id})

    # Admin
    def create_product(self, name: str, description: str, price: float, stock: int, category: str,
                       currency: str = "€", image: str = "") -> Dict[str, Any]:
        form = {"name": name, "description": description, "price": price, "stock": stock,
                "category": category, "currency": currency, "image": image}
        return self._call("POST", "/admin/products", json=form)

    def update_product(self, product_id: str, name: str, description: str, price: float, stock: int,
                       category: str, currency: str = "€", image: str = "") -> Dict[str, Any]:
        form = {"name": name, "description": description, "price": price, "stock": stock,
                "category": category, "currency": currency, "image": image}
        return self._call("PUT", f"/admin/products/{product_id}", json=form)

    def delete_product(self, product_id: str) -> Dict[str, Any]:
        return self._call("DELETE", f"/admin/products/{product_id}")

    def check_conservation(self) -> Dict[str, Any]:
        return self._call("GET", "/debug/conservation")
