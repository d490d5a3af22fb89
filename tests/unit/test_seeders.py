from __future__ import annotations

import json
import random

import pytest
import sqlalchemy as sa


def _count(db, table) -> int:
    with db.engine.connect() as conn:
        return conn.execute(sa.select(sa.func.count()).select_from(table)).scalar_one()


def _seed_catalog_and_users(db, rng: random.Random, fake_sleep) -> None:
    from db.seeds import CategorySeeder, ProductSeeder, UserSeeder

    CategorySeeder(rng, sleep=fake_sleep).run(db)
    ProductSeeder(rng, sleep=fake_sleep).run(db)
    UserSeeder(rng, sleep=fake_sleep).run(db)


def test_catalog_and_users(sqlite_db, fake_sleep) -> None:
    from db.seeds.content import CATEGORY_SPECS
    from db.tables import categories, products, users

    _seed_catalog_and_users(sqlite_db, random.Random(7), fake_sleep)

    assert _count(sqlite_db, categories) == len(CATEGORY_SPECS)
    n_products = _count(sqlite_db, products)
    assert 5 * len(CATEGORY_SPECS) <= n_products <= 12 * len(CATEGORY_SPECS)

    with sqlite_db.engine.connect() as conn:
        roles = conn.execute(sa.select(users.c.role, sa.func.count()).group_by(users.c.role)).all()
        mismatched = conn.execute(
            sa.select(sa.func.count()).where(
                sa.or_(
                    sa.and_(products.c.stock > 0, products.c.in_stock == sa.false()),
                    sa.and_(products.c.stock == 0, products.c.in_stock == sa.true()),
                )
            )
        ).scalar_one()
        hashes = conn.execute(sa.select(users.c.password_hash)).scalars().all()
    by_role = dict(roles)
    assert by_role["admin"] == 1
    assert 20 <= by_role["user"] <= 40
    assert mismatched == 0
    assert all(h.startswith("pbkdf2_sha256$") for h in hashes)


def test_orders_reference_regular_users_and_totals_match_lines(sqlite_db, fake_sleep) -> None:
    from db.seeds import OrderSeeder
    from db.seeds.content import ADDRESSES, ORDER_STATUSES
    from db.tables import order_items, orders, users

    rng = random.Random(11)
    _seed_catalog_and_users(sqlite_db, rng, fake_sleep)
    OrderSeeder(rng, sleep=fake_sleep).run(sqlite_db)

    with sqlite_db.engine.connect() as conn:
        rows = conn.execute(
            sa.select(orders, users.c.role).join(users, users.c.id == orders.c.user_id)
        ).mappings().all()
        line_totals = dict(
            conn.execute(
                sa.select(order_items.c.order_id, sa.func.sum(order_items.c.quantity * order_items.c.price)).group_by(
                    order_items.c.order_id
                )
            ).all()
        )
        line_counts = dict(
            conn.execute(sa.select(order_items.c.order_id, sa.func.count()).group_by(order_items.c.order_id)).all()
        )

    assert 50 <= len(rows) <= 100
    for row in rows:
        assert row["role"] == "user"
        assert row["status"] in ORDER_STATUSES
        assert json.loads(row["shipping_address"]) in ADDRESSES
        assert 1 <= line_counts[row["id"]] <= 5
        assert row["total"] == pytest.approx(float(line_totals[row["id"]]), abs=0.01)
        assert row["total"] > 0


def test_orders_fail_without_regular_users_after_retries(sqlite_db, sleeps, fake_sleep) -> None:
    from db.seeds import CategorySeeder, OrderSeeder, ProductSeeder, SeedError
    from db.tables import orders

    rng = random.Random(3)
    CategorySeeder(rng).run(sqlite_db)
    ProductSeeder(rng).run(sqlite_db)

    with pytest.raises(SeedError, match="no regular users found for seeding orders"):
        OrderSeeder(rng, sleep=fake_sleep).run(sqlite_db)
    # Three attempts, linearly increasing waits between them.
    assert sleeps == [1.0, 1.5]
    assert _count(sqlite_db, orders) == 0


def test_order_with_no_lines_is_deleted(sqlite_db, fake_sleep, monkeypatch: pytest.MonkeyPatch) -> None:
    from sqlalchemy.exc import OperationalError

    from db.seeds import OrderSeeder
    from db.tables import order_items, orders

    rng = random.Random(5)
    _seed_catalog_and_users(sqlite_db, rng, fake_sleep)

    def broken_insert(*args, **kwargs):
        raise OperationalError("INSERT INTO order_items", {}, Exception("disk full"))

    seeder = OrderSeeder(rng, sleep=fake_sleep)
    monkeypatch.setattr(seeder, "_insert_item", broken_insert)
    seeder.run(sqlite_db)

    assert _count(sqlite_db, order_items) == 0
    assert _count(sqlite_db, orders) == 0


def test_order_product_pick_accepts_repeat_when_exhausted() -> None:
    from db.seeds import OrderSeeder

    class P:
        def __init__(self, id_: int) -> None:
            self.id = id_

    only = [P(1)]
    seeder = OrderSeeder(random.Random(0))
    assert seeder._pick_product(only, {1}) is only[0]


def test_reviews_are_unique_per_user_and_product(sqlite_db, fake_sleep) -> None:
    from db.seeds import ReviewSeeder
    from db.seeds.content import REVIEW_COMMENTS
    from db.tables import reviews, users

    rng = random.Random(13)
    _seed_catalog_and_users(sqlite_db, rng, fake_sleep)
    ReviewSeeder(rng, sleep=fake_sleep).run(sqlite_db)

    with sqlite_db.engine.connect() as conn:
        rows = conn.execute(sa.select(reviews, users.c.role).join(users, users.c.id == reviews.c.user_id)).mappings().all()

    assert rows
    pairs = [(r["user_id"], r["product_id"]) for r in rows]
    assert len(pairs) == len(set(pairs))
    for r in rows:
        assert r["role"] == "user"
        assert 1 <= r["rating"] <= 5
        assert r["comment"] in REVIEW_COMMENTS[r["rating"]]


def test_review_pick_skips_when_every_user_has_reviewed() -> None:
    from db.seeds import ReviewSeeder

    class U:
        def __init__(self, id_: int) -> None:
            self.id = id_

    seeder = ReviewSeeder(random.Random(0))
    assert seeder._pick_user([U(1), U(2)], {1, 2}) is None


def test_reviews_fail_without_products(sqlite_db, fake_sleep) -> None:
    from db.seeds import ReviewSeeder, SeedError, UserSeeder

    UserSeeder(random.Random(1)).run(sqlite_db)
    with pytest.raises(SeedError, match="no products found for seeding reviews"):
        ReviewSeeder(random.Random(1), sleep=fake_sleep).run(sqlite_db)


def test_products_fail_without_categories(sqlite_db, sleeps, fake_sleep) -> None:
    from db.seeds import ProductSeeder, SeedError

    with pytest.raises(SeedError, match="no categories found"):
        ProductSeeder(random.Random(1), sleep=fake_sleep).run(sqlite_db)
    assert len(sleeps) == 2


def test_running_a_unit_twice_adds_a_second_batch(sqlite_db) -> None:
    from db.seeds import CategorySeeder, UserSeeder
    from db.seeds.content import CATEGORY_SPECS
    from db.tables import categories, users

    CategorySeeder().run(sqlite_db)
    CategorySeeder().run(sqlite_db)
    assert _count(sqlite_db, categories) == 2 * len(CATEGORY_SPECS)

    UserSeeder(random.Random(2)).run(sqlite_db)
    first = _count(sqlite_db, users)
    UserSeeder(random.Random(2)).run(sqlite_db)
    assert _count(sqlite_db, users) == 2 * first


def test_full_pipeline_through_manager(sqlite_db, fake_sleep) -> None:
    from db.seeds import (
        CategorySeeder,
        OrderSeeder,
        ProductSeeder,
        ReviewSeeder,
        SeedManager,
        UserSeeder,
    )
    from db.tables import orders, reviews

    rng = random.Random(42)
    # Registered out of order on purpose.
    seeders = [
        ReviewSeeder(rng, sleep=fake_sleep),
        OrderSeeder(rng, sleep=fake_sleep),
        UserSeeder(rng, sleep=fake_sleep),
        ProductSeeder(rng, sleep=fake_sleep),
        CategorySeeder(rng, sleep=fake_sleep),
    ]
    SeedManager(sqlite_db, seeders, sleep=fake_sleep).run()
    assert _count(sqlite_db, orders) >= 50
    assert _count(sqlite_db, reviews) > 0


def test_fetch_with_retry_raises_when_last_attempt_errors(sleeps, fake_sleep) -> None:
    from sqlalchemy.exc import OperationalError

    from db.seeds.base import SeedError, fetch_with_retry

    calls = {"n": 0}

    def failing():
        calls["n"] += 1
        raise OperationalError("SELECT", {}, Exception("connection reset"))

    with pytest.raises(SeedError, match="failed to get users"):
        fetch_with_retry(failing, what="users", sleep=fake_sleep)
    assert calls["n"] == 3
    assert sleeps == [1.0, 1.5]


def test_fetch_with_retry_recovers_after_empty_read(sleeps, fake_sleep) -> None:
    from db.seeds.base import fetch_with_retry

    results = iter([[], ["row"]])
    assert fetch_with_retry(lambda: next(results), what="users", sleep=fake_sleep) == ["row"]
    assert sleeps == [1.0]
