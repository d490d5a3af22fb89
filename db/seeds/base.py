from __future__ import annotations

import math
import random
import time
from collections.abc import Callable, Sequence
from datetime import UTC, datetime
from typing import Any, Protocol

import sqlalchemy as sa
from sqlalchemy.engine import Connection, Row
from sqlalchemy.exc import SQLAlchemyError

from db.tables import products, users
from services.api.app.db import Database
from services.api.app.logging import logger


class SeedError(RuntimeError):
    pass


class Seeder(Protocol):
    name: str
    priority: int

    def run(self, db: Database) -> None: ...


def now() -> datetime:
    return datetime.now(tz=UTC)


def round_money(x: float) -> float:
    return math.floor(x * 100 + 0.5) / 100.0


def fetch_with_retry(
    fetch: Callable[[], Sequence[Row]],
    *,
    what: str,
    attempts: int = 3,
    delay: float = 0.5,
    sleep: Callable[[float], Any] = time.sleep,
) -> list[Row]:
    """
    Read prerequisite rows, retrying on query errors and on empty results.

    The wait before retry N (1-based) is (N + 1) * delay. Returns whatever the last successful
    query produced, possibly nothing; raises SeedError only if the final attempt itself failed.
    """
    rows: list[Row] = []
    last_error: SQLAlchemyError | None = None
    for attempt in range(attempts):
        if attempt > 0:
            logger.info("seed_prerequisite_retry", what=what, attempt=attempt + 1)
            sleep((attempt + 1) * delay)
        try:
            rows = list(fetch())
        except SQLAlchemyError as e:
            last_error = e
            logger.warning("seed_prerequisite_query_failed", what=what, attempt=attempt + 1, error=str(e))
            continue
        last_error = None
        if rows:
            break

    if last_error is not None:
        raise SeedError(f"failed to get {what}: {last_error}") from last_error
    return rows


def regular_users(conn: Connection) -> Sequence[Row]:
    q = sa.select(users.c.id, users.c.name).where(users.c.role == "user").order_by(users.c.created_at)
    return conn.execute(q).all()


def in_stock_products(conn: Connection) -> Sequence[Row]:
    q = sa.select(products.c.id, products.c.name, products.c.price).where(
        products.c.in_stock == sa.true(),
        products.c.price > 0,
    )
    return conn.execute(q).all()


def named_products(conn: Connection) -> Sequence[Row]:
    q = sa.select(products.c.id, products.c.name).where(products.c.name != "").order_by(products.c.created_at)
    return conn.execute(q).all()


def user_exists(conn: Connection, user_id: Any, *, role: str | None = None) -> bool:
    q = sa.select(users.c.id).where(users.c.id == user_id)
    if role is not None:
        q = q.where(users.c.role == role)
    return bool(conn.execute(sa.select(q.exists())).scalar_one())


class SeederBase:
    """Shared plumbing: randomness, retrying prerequisite reads and per-row writes."""

    name: str
    priority: int

    retry_attempts = 3
    retry_delay = 0.5

    def __init__(
        self,
        rng: random.Random | None = None,
        *,
        sleep: Callable[[float], Any] = time.sleep,
    ) -> None:
        self.rng = rng or random.Random()
        self._sleep = sleep

    def __repr__(self) -> str:
        return f"<{type(self).__name__} name={self.name!r} priority={self.priority}>"

    def run(self, db: Database) -> None:
        raise NotImplementedError

    def prerequisite(self, db: Database, query: Callable[[Connection], Sequence[Row]], *, what: str) -> list[Row]:
        def fetch() -> Sequence[Row]:
            with db.engine.connect() as conn:
                return query(conn)

        return fetch_with_retry(
            fetch,
            what=what,
            attempts=self.retry_attempts,
            delay=self.retry_delay,
            sleep=self._sleep,
        )

    def user_exists(self, db: Database, user_id: Any, *, role: str | None = None) -> bool:
        try:
            with db.engine.connect() as conn:
                return user_exists(conn, user_id, role=role)
        except SQLAlchemyError as e:
            logger.warning("seed_user_check_failed", seeder=self.name, user_id=str(user_id), error=str(e))
            return False

    def insert_row(self, db: Database, table: sa.Table, row: dict[str, Any]) -> bool:
        """Insert one row in its own transaction; failures are logged and reported as False."""
        try:
            with db.engine.begin() as conn:
                conn.execute(table.insert(), row)
        except SQLAlchemyError as e:
            logger.warning("seed_row_insert_failed", seeder=self.name, table=table.name, error=str(e))
            return False
        return True
