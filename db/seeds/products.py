from __future__ import annotations

import uuid
from collections.abc import Sequence

import sqlalchemy as sa
from sqlalchemy.engine import Connection, Row

from db.seeds.base import SeedError, SeederBase, now, round_money
from db.seeds.content import DEFAULT_PRODUCT_NAMES, PRODUCT_ADJECTIVES, category_spec
from db.tables import categories, products
from services.api.app.db import Database
from services.api.app.logging import logger


def _categories(conn: Connection) -> Sequence[Row]:
    return conn.execute(sa.select(categories.c.id, categories.c.name).order_by(categories.c.created_at)).all()


class ProductSeeder(SeederBase):
    name = "products"
    priority = 2

    min_per_category = 5
    max_per_category = 12
    out_of_stock_rate = 0.1

    def run(self, db: Database) -> None:
        logger.info("seed_products_start")
        rows = self.prerequisite(db, _categories, what="categories")
        if not rows:
            raise SeedError("no categories found for seeding products")
        logger.info("seed_products_categories_found", count=len(rows))

        created = 0
        for category in rows:
            added = 0
            for _ in range(self.rng.randint(self.min_per_category, self.max_per_category)):
                if self.insert_row(db, products, self._product_row(category)):
                    added += 1
            logger.info("seed_products_category", category=category.name, created=added)
            created += added

        logger.info("seed_products_done", created=created)

    def _product_row(self, category: Row) -> dict:
        spec = category_spec(category.name)
        base_names = spec.product_names if spec else DEFAULT_PRODUCT_NAMES
        price_min, price_max = (spec.price_min, spec.price_max) if spec else (4.99, 99.99)

        base = self.rng.choice(base_names)
        stock = 0 if self.rng.random() < self.out_of_stock_rate else self.rng.randint(1, 500)
        ts = now()
        return dict(
            id=uuid.uuid4(),
            category_id=category.id,
            name=f"{self.rng.choice(PRODUCT_ADJECTIVES)} {base}",
            description=f"{base} from our {category.name} range.",
            sku=f"SKU-{uuid.uuid4().hex[:10].upper()}",
            price=round_money(self.rng.uniform(price_min, price_max)),
            stock=stock,
            in_stock=stock > 0,
            created_at=ts,
            updated_at=ts,
        )
