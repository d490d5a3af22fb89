from __future__ import annotations

import uuid
from datetime import timedelta
from typing import Any

from sqlalchemy.engine import Row

from db.seeds.base import SeedError, SeederBase, named_products, now, regular_users
from db.seeds.content import review_comment
from db.tables import reviews
from services.api.app.db import Database
from services.api.app.logging import logger


class ReviewSeeder(SeederBase):
    name = "reviews"
    priority = 5

    max_reviews_per_product = 15
    max_pick_attempts = 30
    history_days = 90

    def run(self, db: Database) -> None:
        logger.info("seed_reviews_start")
        users = self.prerequisite(db, regular_users, what="regular users")
        if not users:
            raise SeedError("no regular users found for seeding reviews")
        logger.info("seed_reviews_users_found", count=len(users))

        products = self.prerequisite(db, named_products, what="products")
        if not products:
            raise SeedError("no products found for seeding reviews")
        logger.info("seed_reviews_products_found", count=len(products))

        total = 0
        for product in products:
            added = self._review_product(db, product, users)
            if added:
                logger.info("seed_reviews_product", product=product.name, created=added)
                total += added

        logger.info("seed_reviews_done", created=total)

    def _review_product(self, db: Database, product: Row, users: list[Row]) -> int:
        n = self.rng.randint(0, self.max_reviews_per_product)
        used: set[Any] = set()
        added = 0
        for _ in range(n):
            user = self._pick_user(users, used)
            if user is None:
                continue
            used.add(user.id)
            if not self.user_exists(db, user.id):
                continue

            rating = self.rng.randint(1, 5)
            created_at = now() - timedelta(days=self.rng.randrange(self.history_days))
            row = dict(
                id=uuid.uuid4(),
                user_id=user.id,
                product_id=product.id,
                rating=rating,
                comment=review_comment(self.rng, rating),
                created_at=created_at,
                updated_at=created_at,
            )
            if self.insert_row(db, reviews, row):
                added += 1
        return added

    def _pick_user(self, users: list[Row], used: set[Any]) -> Row | None:
        # One review per user per product; give up on this slot if no fresh reviewer turns up.
        for _ in range(self.max_pick_attempts):
            user = self.rng.choice(users)
            if user.id not in used:
                return user
        return None
