import asyncio

from sdk.storefront_client import StorefrontClient
from storefront.config import settings


async def main():
    c = StorefrontClient(base_url=settings.API_URL)
    c.reload()
    c.clear_cart()

    # Van Cargo (p8) ships with a single unit: only one add may win
    print("\n⚡ Racing five adds for the last unit...")
    responses = await asyncio.gather(*(c.add_to_cart_async("p8") for _ in range(5)))
    for i, r in enumerate(responses, 1):
        if r.status_code == 200:
            print(f"✅ add #{i} reserved the unit")
        elif r.status_code == 409:
            print(f"❌ add #{i} refused: out of stock")
        else:
            print(f"⚠️  add #{i} unexpected response: {r.status_code} {r.text}")

    print("\n📦 Final product state:", c.get_product("p8"))
    print("🛒 Cart:", c.view_cart())
    print("⚖️  Conservation:", c.check_conservation())


if __name__ == "__main__":
    asyncio.run(main())
