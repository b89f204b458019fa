# storefront/seed.py
from .models import Category, Product

# Demo catalog served by the in-memory source when no remote catalog is set.

CATEGORIES = [
    Category(id="car", name="Cars"),
    Category(id="truck", name="Trucks"),
    Category(id="accessory", name="Accessories"),
]

PRODUCTS = [
    Product(id="p1", name="Sedan X", description="Four-door family sedan", price=21500, category="car", stock=3,
            images=["assets/images/sedan-x.jpg"]),
    Product(id="p2", name="Truck Y", description="Heavy duty pickup", price=38900, category="truck", stock=0),
    Product(id="p3", name="Coupé Électrique", description="Compact electric coupé", price=32990, category="car",
            stock=2, images=["assets/images/coupe-e.jpg"]),
    Product(id="p4", name="Roof Box", description="420 L roof storage for sedans", price=449, category="accessory",
            stock=12),
    Product(id="p5", name="Winter Tyres", description="Set of four 17 inch tyres", price=620, category="accessory",
            stock=8),
    Product(id="p6", name="Tow Bar", description="Detachable tow bar for trucks", price=310, category="accessory",
            stock=4),
    Product(id="p7", name="Hatchback Z", description="City car, low consumption", price=15900, category="car",
            stock=5),
    Product(id="p8", name="Van Cargo", description="Long wheelbase cargo truck", price=29900, category="truck",
            stock=1),
]
