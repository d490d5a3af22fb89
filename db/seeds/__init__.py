"""
Demo-data seeding for the e-commerce schema.

Units run in priority order (categories, products, users, orders, reviews); each later unit reads
rows the earlier ones wrote. Seeding is not idempotent: every run adds a fresh batch.
"""

from db.seeds.base import SeedError, Seeder, SeederBase
from db.seeds.categories import CategorySeeder
from db.seeds.manager import SeedManager, by_priority, default_seeders
from db.seeds.orders import OrderSeeder
from db.seeds.products import ProductSeeder
from db.seeds.reviews import ReviewSeeder
from db.seeds.users import UserSeeder

__all__ = [
    "CategorySeeder",
    "OrderSeeder",
    "ProductSeeder",
    "ReviewSeeder",
    "SeedError",
    "SeedManager",
    "Seeder",
    "SeederBase",
    "UserSeeder",
    "by_priority",
    "default_seeders",
]
