from __future__ import annotations

import random
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand

from modules.core.cache import get_catalog_cache
from modules.products.cache import CatalogCacheInvalidator
from modules.products.models import Product

CATALOG = [
    ("Monitor 27\"", "Electronics", Decimal("1299.90")),
    ("Mechanical Keyboard", "Electronics", Decimal("399.90")),
    ("Gaming Mouse", "Electronics", Decimal("249.90")),
    ("Laptop 14\"", "Electronics", Decimal("3999.00")),
    ("Headset", "Electronics", Decimal("299.90")),
    ("Office Desk", "Furniture", Decimal("899.00")),
    ("Ergonomic Chair", "Furniture", Decimal("1499.00")),
    ("Bookshelf", "Furniture", Decimal("699.00")),
    ("Wardrobe", "Furniture", Decimal("1199.00")),
    ("Two-seat Sofa", "Furniture", Decimal("2299.00")),
    ("A4 Paper", "Office", Decimal("29.90")),
    ("Blue Pen", "Office", Decimal("4.90")),
    ("Notebook", "Office", Decimal("19.90")),
    ("Stapler", "Office", Decimal("39.90")),
    ("Sticky Notes", "Office", Decimal("12.90")),
    ("Planner", "Office", Decimal("49.90")),
    ("Highlighter", "Office", Decimal("9.90")),
    ("Calculator", "Office", Decimal("89.90")),
    ("LED Lamp", "Office", Decimal("59.90")),
    ("Laptop Stand", "Office", Decimal("149.90")),
]


class Command(BaseCommand):
    help = "Seed database with development users and a product catalog."

    def handle(self, *args, **options):
        random.seed(42)
        self.stdout.write("Seeding development data...")

        users_created = self._seed_users()
        products = self._seed_products()
        CatalogCacheInvalidator(cache=get_catalog_cache(), async_mode=False).invalidate(
            "seed_data"
        )

        self.stdout.write(
            self.style.SUCCESS(
                f"Seed completed: users={users_created}, products={len(products)}"
            )
        )

    def _seed_users(self) -> int:
        User = get_user_model()
        created = 0
        if not User.objects.filter(username="admin").exists():
            User.objects.create_superuser("admin", password="admin123")
            created += 1
        if not User.objects.filter(username="user").exists():
            User.objects.create_user("user", password="user123")
            created += 1
        return created

    def _seed_products(self) -> list[Product]:
        self.stdout.write("Creating products...")
        admin = get_user_model().objects.filter(username="admin").first()
        products: list[Product] = []
        for name, category, price in CATALOG:
            product, _ = Product.objects.alive().get_or_create(
                name=name,
                category=category,
                defaults={
                    "description": f"{name} from the {category.lower()} range.",
                    "price": price,
                    "stock": random.randint(10, 200),
                    "owner": admin,
                },
            )
            products.append(product)
        self.stdout.write(self.style.SUCCESS("Creating products... Done!"))
        return products
