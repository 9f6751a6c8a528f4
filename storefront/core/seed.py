"""
Sample catalog and admin bootstrap
Used by `run_app.py --seed`; safe to run repeatedly
"""

from decimal import Decimal
from typing import Dict
import logging

from storefront.core.config import settings
from storefront.core.security import SecurityUtils
from storefront.models import UserRole
from storefront.storage import Storage, StorageProvider

logger = logging.getLogger(__name__)

IMAGE_BASE = "https://images.unsplash.com"

# (name, slug, parent slug)
SAMPLE_CATEGORIES = [
    ("Ladies", "ladies", None),
    ("Men", "men", None),
    ("Kids", "kids", None),
    ("Home", "home", None),
    ("Shirts & Blouses", "shirts-blouses", "ladies"),
    ("Dresses", "dresses", "ladies"),
    ("Jeans", "jeans", "ladies"),
    ("Shoes", "shoes", "ladies"),
    ("T-shirts", "t-shirts", "men"),
    ("Shirts", "shirts", "men"),
    ("Jackets", "mens-jackets", "men"),
    ("Accessories", "mens-accessories", "men"),
    ("Girls", "girls", "kids"),
    ("Boys", "boys", "kids"),
    ("Bedding", "bedding", "home"),
    ("Kitchen", "kitchen", "home"),
]

SAMPLE_PRODUCTS = [
    {
        "name": "Printed Linen-Blend Shirt",
        "description": "A printed linen-blend shirt. Lightweight and breathable.",
        "price": Decimal("29.99"),
        "category": "ladies",
        "subcategory": "shirts-blouses",
        "image_url": f"{IMAGE_BASE}/photo-1594633312681-425c7b97ccd1?w=400&h=600&fit=crop",
        "inventory": 25,
    },
    {
        "name": "Silk Button-Up Shirt",
        "description": "Silk shirt with a classic button-up design.",
        "price": Decimal("79.99"),
        "category": "ladies",
        "subcategory": "shirts-blouses",
        "image_url": f"{IMAGE_BASE}/photo-1564257577-2d5d8b3c9c1e?w=400&h=600&fit=crop",
        "inventory": 12,
    },
    {
        "name": "Floral Maxi Dress",
        "description": "Flowing maxi dress with an all-over floral print.",
        "price": Decimal("69.99"),
        "category": "ladies",
        "subcategory": "dresses",
        "image_url": f"{IMAGE_BASE}/photo-1572804013309-59a88b7e92f1?w=400&h=600&fit=crop",
        "inventory": 20,
    },
    {
        "name": "Little Black Dress",
        "description": "A timeless black dress for evenings out.",
        "price": Decimal("89.99"),
        "category": "ladies",
        "subcategory": "dresses",
        "image_url": f"{IMAGE_BASE}/photo-1595777457583-95e059d581b8?w=400&h=600&fit=crop",
        "inventory": 8,
    },
    {
        "name": "High-Waisted Mom Jeans",
        "description": "Relaxed high-waisted jeans in rigid denim.",
        "price": Decimal("59.99"),
        "category": "ladies",
        "subcategory": "jeans",
        "image_url": f"{IMAGE_BASE}/photo-1541099649105-f69ad21f3246?w=400&h=600&fit=crop",
        "inventory": 28,
    },
    {
        "name": "Leather Ankle Boots",
        "description": "Leather ankle boots with a stacked heel.",
        "price": Decimal("99.99"),
        "category": "ladies",
        "subcategory": "shoes",
        "image_url": f"{IMAGE_BASE}/photo-1543163521-1bf539c55dd2?w=400&h=600&fit=crop",
        "inventory": 20,
    },
    {
        "name": "Basic Cotton T-Shirt",
        "description": "Everyday crew-neck tee in soft cotton.",
        "price": Decimal("14.99"),
        "category": "men",
        "subcategory": "t-shirts",
        "image_url": f"{IMAGE_BASE}/photo-1521572163474-6864f9cf17ab?w=400&h=600&fit=crop",
        "inventory": 50,
    },
    {
        "name": "Oxford Button-Down Shirt",
        "description": "Oxford cotton shirt with a button-down collar.",
        "price": Decimal("49.99"),
        "category": "men",
        "subcategory": "shirts",
        "image_url": f"{IMAGE_BASE}/photo-1596755094514-f87e34085b2c?w=400&h=600&fit=crop",
        "inventory": 22,
    },
    {
        "name": "Leather Jacket",
        "description": "Biker jacket in smooth leather.",
        "price": Decimal("199.99"),
        "category": "men",
        "subcategory": "mens-jackets",
        "image_url": f"{IMAGE_BASE}/photo-1551028719-00167b16eac5?w=400&h=600&fit=crop",
        "inventory": 12,
    },
    {
        "name": "Silk Tie",
        "description": "Woven silk tie.",
        "price": Decimal("29.99"),
        "category": "men",
        "subcategory": "mens-accessories",
        "image_url": f"{IMAGE_BASE}/photo-1589756823695-278bc923f962?w=400&h=600&fit=crop",
        "inventory": 20,
    },
    {
        "name": "Girls Floral Dress",
        "description": "Cotton dress with a floral print.",
        "price": Decimal("24.99"),
        "category": "kids",
        "subcategory": "girls",
        "image_url": f"{IMAGE_BASE}/photo-1518831959646-742c3a14ebf7?w=400&h=600&fit=crop",
        "inventory": 30,
    },
    {
        "name": "Cotton Duvet Cover Set",
        "description": "Duvet cover and two pillowcases in washed cotton.",
        "price": Decimal("59.99"),
        "category": "home",
        "subcategory": "bedding",
        "image_url": f"{IMAGE_BASE}/photo-1522771739844-6a9f6d5f14af?w=400&h=600&fit=crop",
        "inventory": None,
    },
]

async def seed_storage(storage: Storage) -> Dict[str, int]:
    """Insert missing categories, the sample products (once) and the admin account"""
    created = {"categories": 0, "products": 0, "admin": 0}

    async with storage.transaction():
        slugs = {}
        for name, slug, parent_slug in SAMPLE_CATEGORIES:
            category = await storage.categories.get_by_slug(slug)
            if category is None:
                parent = slugs.get(parent_slug)
                category = await storage.categories.create({
                    "name": name,
                    "slug": slug,
                    "parent_id": parent.id if parent else None,
                })
                created["categories"] += 1
            slugs[slug] = category

        if not await storage.products.list():
            for product in SAMPLE_PRODUCTS:
                inventory = product["inventory"]
                await storage.products.create({
                    **product,
                    "in_stock": inventory is None or inventory > 0,
                })
                created["products"] += 1

        admin_values = {
            "email": settings.ADMIN_EMAIL,
            "password_hash": SecurityUtils.hash_password(settings.ADMIN_PASSWORD),
            "role": UserRole.ADMIN,
        }
        admin = await storage.users.get_by_username(settings.ADMIN_USERNAME)
        if admin is None:
            await storage.users.create({"username": settings.ADMIN_USERNAME, **admin_values})
            created["admin"] = 1
        else:
            await storage.users.update(admin.id, admin_values)

    logger.info(
        f"Seeded {created['categories']} categories, {created['products']} products; "
        f"admin account '{settings.ADMIN_USERNAME}' ready"
    )
    return created

async def run_seed(provider: StorageProvider) -> Dict[str, int]:
    async with provider.session() as storage:
        return await seed_storage(storage)
