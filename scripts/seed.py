"""
Database Seed Script

Creates the admin account and a starter catalog (categories, menu items,
banners, settings). Safe to re-run: anything already present is skipped.
Run from project root: python scripts/seed.py

Version: 1.0.0
"""

import asyncio
import argparse
import os
import sys

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from storefront import database
from storefront.core.config import get_settings
from storefront.core.security import hash_password
from storefront.schemas import BannerCreate, CategoryCreate, MenuItemCreate
from storefront.storage import CatalogStorage

CATEGORIES = ["Burgers", "Sides", "Desserts", "Drinks"]

MENU_ITEMS = [
    ("Burgers", "Classic Mini Burger", "100% beef patty with lettuce, tomato, onion and our special sauce", 899),
    ("Burgers", "Twennie Deluxe", "Double beef patties, cheese, bacon, and all the fixings", 1499),
    ("Burgers", "Chicken Supreme", "Crispy chicken breast with lettuce, mayo, and pickles", 999),
    ("Sides", "Golden Fries", "Crispy golden french fries with sea salt", 399),
    ("Sides", "Onion Rings", "Crispy beer-battered onion rings with ranch dip", 499),
    ("Desserts", "Chocolate Brownie", "Warm chocolate brownie with vanilla ice cream", 599),
    ("Drinks", "Fresh Lemonade", "Freshly squeezed lemonade with mint", 299),
    ("Drinks", "Chocolate Shake", "Thick and creamy chocolate milkshake", 499),
]

BANNERS = [
    "/static/banners/burger-special.jpg",
    "/static/banners/pasta-promotion.jpg",
    "/static/banners/sushi-special.jpg",
]


async def seed(admin_username: str, admin_password: str, whatsapp_number: str) -> None:
    print("🌱 Starting database seed...")
    await database.init_db()

    async with database.async_session_maker() as session:
        storage = CatalogStorage(session)

        if await storage.get_user_by_username(admin_username) is None:
            await storage.create_user(admin_username, hash_password(admin_password))
            print(f"✓ Admin user created (username: {admin_username})")
        else:
            print(f"• Admin user '{admin_username}' already exists")

        existing = {c.name: c for c in await storage.list_categories()}
        for name in CATEGORIES:
            if name not in existing:
                existing[name] = await storage.create_category(CategoryCreate(name=name))
        print(f"✓ Categories: {', '.join(CATEGORIES)}")

        item_names = {item.name for item in await storage.list_menu_items(include_hidden=True)}
        created = 0
        for category, name, description, price in MENU_ITEMS:
            if name in item_names:
                continue
            await storage.create_menu_item(MenuItemCreate(
                category_id=existing[category].id,
                name=name,
                description=description,
                price=price,
            ))
            created += 1
        print(f"✓ Menu items created: {created}")

        banner_urls = {b.image_url for b in await storage.list_banners()}
        for image_url in BANNERS:
            if image_url not in banner_urls:
                await storage.create_banner(BannerCreate(image_url=image_url))
        print("✓ Banners created")

        if await storage.get_settings() is None:
            await storage.update_settings(
                {},
                {
                    "whatsapp_number": whatsapp_number,
                    "restaurant_name": get_settings().default_restaurant_name,
                    "currency": get_settings().default_currency,
                },
            )
            print("✓ Settings created")

    await database.dispose_db()
    print("\n✅ Database seed completed successfully!")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Seed the storefront database")
    parser.add_argument("--admin-username", default="admin")
    parser.add_argument("--admin-password", default=os.getenv("ADMIN_PASSWORD", "admin123"))
    parser.add_argument("--whatsapp-number", default="1234567890")
    args = parser.parse_args()

    asyncio.run(seed(args.admin_username, args.admin_password, args.whatsapp_number))
