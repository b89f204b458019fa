#!/usr/bin/env python
from sdk.storefront_client import StorefrontClient, StorefrontError
from storefront.config import settings


def main():
    c = StorefrontClient(base_url=settings.API_URL)

    # -----------------------------
    # Fresh catalog, empty cart
    # -----------------------------
    print("Reloading catalog and clearing cart...")
    c.reload()
    c.clear_cart()

    # -----------------------------
    # Filter + paginate
    # -----------------------------
    print("\nCars only, page 1...")
    view = c.list_products(search="", category="car", page=1)
    print([p["name"] for p in view["items"]], "total:", view["total_count"])

    print("\nSearching 'electrique' (accents ignored)...")
    view = c.list_products(search="electrique", category="")
    print([p["name"] for p in view["items"]])

    # -----------------------------
    # Cart reservations
    # -----------------------------
    print("\nAdding Sedan X twice...")
    c.add_to_cart("p1")
    view = c.add_to_cart("p1")
    print("stock left:", c.get_product("p1")["stock"], "cart count:", view["cart"]["count"])

    print("\nAdding Truck Y (out of stock)...")
    try:
        c.add_to_cart("p2")
    except StorefrontError as e:
        print("refused:", e)

    print("\nCart:", c.view_cart())
    print("Conservation:", c.check_conservation())

    # -----------------------------
    # Give everything back
    # -----------------------------
    print("\nClearing cart...")
    c.clear_cart()
    print("stock restored:", c.get_product("p1")["stock"])


if __name__ == "__main__":
    main()
