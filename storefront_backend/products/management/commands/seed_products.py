# products/management/commands/seed_products.py

import random
from decimal import Decimal

from django.core.management.base import BaseCommand

from products.models import Product

CATEGORIES = [
    "electronics",
    "clothing",
    "books",
    "food",
    "sports",
    "beauty",
    "home",
]


class Command(BaseCommand):
    help = "Seed catalog products (idempotent by name)"

    def add_arguments(self, parser):
        parser.add_argument("--per-category", type=int, default=3)

    def handle(self, *args, **options):
        per_category = max(1, int(options["per_category"]))
        self.stdout.write(self.style.WARNING("Seeding catalog products..."))

        created_count = 0
        for category in CATEGORIES:
            for i in range(per_category):
                name = f"{category.title()} Item {i + 1}"
                _, created = Product.objects.get_or_create(
                    name=name,
                    defaults={
                        "description": f"Sample {category} product",
                        "category": category,
                        "price": Decimal(random.randint(5, 120) * 1000),
                        "stock_quantity": random.randint(0, 50),
                        "is_active": True,
                    },
                )
                created_count += int(created)

        self.stdout.write(self.style.SUCCESS(f"Seeded {created_count} products."))
