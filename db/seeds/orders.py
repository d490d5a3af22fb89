from __future__ import annotations

import uuid
from datetime import datetime, timedelta
from typing import Any

import sqlalchemy as sa
from sqlalchemy.engine import Row
from sqlalchemy.exc import SQLAlchemyError

from db.seeds.base import SeedError, SeederBase, in_stock_products, now, regular_users, round_money
from db.seeds.content import ORDER_STATUSES, random_address
from db.tables import order_items, orders
from services.api.app.db import Database
from services.api.app.logging import logger


class OrderSeeder(SeederBase):
    name = "orders"
    priority = 4

    min_orders = 50
    max_orders = 100
    max_items = 5
    max_quantity = 3
    max_pick_attempts = 20
    history_days = 180

    def run(self, db: Database) -> None:
        logger.info("seed_orders_start")
        users = self.prerequisite(db, regular_users, what="regular users")
        if not users:
            raise SeedError("no regular users found for seeding orders")
        logger.info("seed_orders_users_found", count=len(users))

        products = self.prerequisite(db, in_stock_products, what="products")
        if not products:
            raise SeedError("no products found for seeding orders")
        logger.info("seed_orders_products_found", count=len(products))

        n = self.rng.randint(self.min_orders, self.max_orders)
        logger.info("seed_orders_creating", count=n)
        created = sum(1 for _ in range(n) if self._create_order(db, users, products))
        logger.info("seed_orders_done", created=created, attempted=n)

    def _create_order(self, db: Database, users: list[Row], products: list[Row]) -> bool:
        user = self.rng.choice(users)
        if not self.user_exists(db, user.id, role="user"):
            logger.info("seed_order_user_missing", user_id=str(user.id))
            return False

        num_items = self.rng.randint(1, self.max_items)
        status = self.rng.choice(ORDER_STATUSES)
        created_at = now() - timedelta(days=self.rng.randrange(self.history_days))
        order_id = uuid.uuid4()

        try:
            with db.engine.begin() as conn:
                conn.execute(
                    orders.insert(),
                    dict(
                        id=order_id,
                        user_id=user.id,
                        total=0.0,
                        status=status,
                        shipping_address=random_address(self.rng),
                        billing_address=random_address(self.rng),
                        created_at=created_at,
                        updated_at=created_at,
                    ),
                )
        except SQLAlchemyError as e:
            logger.warning("seed_order_insert_failed", user_id=str(user.id), error=str(e))
            return False

        used: set[Any] = set()
        items_added = 0
        for _ in range(num_items):
            product = self._pick_product(products, used)
            used.add(product.id)
            quantity = self.rng.randint(1, self.max_quantity)
            try:
                self._insert_item(db, order_id, product, quantity, created_at)
            except SQLAlchemyError as e:
                logger.warning("seed_order_item_failed", order_id=str(order_id), error=str(e))
                continue
            items_added += 1

        if items_added == 0:
            self._discard_order(db, order_id)
            return False
        return self._finalize_total(db, order_id)

    def _pick_product(self, products: list[Row], used: set[Any]) -> Row:
        for _ in range(self.max_pick_attempts):
            product = self.rng.choice(products)
            if product.id not in used:
                return product
        # Accept a repeat rather than shrinking the order.
        return self.rng.choice(products)

    def _insert_item(self, db: Database, order_id: uuid.UUID, product: Row, quantity: int, created_at: datetime) -> None:
        with db.engine.begin() as conn:
            conn.execute(
                order_items.insert(),
                dict(
                    id=uuid.uuid4(),
                    order_id=order_id,
                    product_id=product.id,
                    quantity=quantity,
                    price=product.price,
                    created_at=created_at,
                ),
            )

    def _finalize_total(self, db: Database, order_id: uuid.UUID) -> bool:
        line_total = sa.func.coalesce(
            sa.func.sum(order_items.c.quantity * order_items.c.price, type_=sa.Numeric(asdecimal=False)), 0
        )
        try:
            with db.engine.begin() as conn:
                total = conn.execute(sa.select(line_total).where(order_items.c.order_id == order_id)).scalar_one()
                conn.execute(orders.update().where(orders.c.id == order_id).values(total=round_money(float(total))))
        except SQLAlchemyError as e:
            logger.warning("seed_order_total_failed", order_id=str(order_id), error=str(e))
            return False
        return True

    def _discard_order(self, db: Database, order_id: uuid.UUID) -> None:
        # An order without lines would persist with a zero total.
        try:
            with db.engine.begin() as conn:
                conn.execute(orders.delete().where(orders.c.id == order_id))
        except SQLAlchemyError as e:
            logger.warning("seed_order_discard_failed", order_id=str(order_id), error=str(e))
            return
        logger.info("seed_order_discarded", order_id=str(order_id))
