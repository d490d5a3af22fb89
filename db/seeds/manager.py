from __future__ import annotations

import time
from collections.abc import Callable, Iterable, Sequence
from typing import Any

from db.seeds.base import SeedError, Seeder
from db.seeds.categories import CategorySeeder
from db.seeds.orders import OrderSeeder
from db.seeds.products import ProductSeeder
from db.seeds.reviews import ReviewSeeder
from db.seeds.users import UserSeeder
from services.api.app.context import AppContext
from services.api.app.db import Database
from services.api.app.logging import logger
from services.api.app.observability import Metrics


def default_seeders() -> list[Seeder]:
    return [CategorySeeder(), ProductSeeder(), UserSeeder(), OrderSeeder(), ReviewSeeder()]


def by_priority(seeders: Iterable[Seeder]) -> list[Seeder]:
    # sorted() is stable: equal priorities keep registration order.
    return sorted(seeders, key=lambda s: s.priority)


class SeedManager:
    """
    Runs seed units in ascending priority against one database.

    A failing unit is logged and counted, and the run moves on to the next one. The caller only
    learns how many failed; the individual errors are in the logs.
    """

    def __init__(
        self,
        database: Database,
        seeders: Iterable[Seeder] | None = None,
        *,
        pause: float = 0.1,
        sleep: Callable[[float], Any] = time.sleep,
        metrics: Metrics | None = None,
    ) -> None:
        self._db = database
        self._seeders = list(seeders) if seeders is not None else default_seeders()
        self._pause = pause
        self._sleep = sleep
        self._metrics = metrics

    @classmethod
    def from_context(cls, ctx: AppContext, seeders: Iterable[Seeder] | None = None) -> SeedManager:
        return cls(ctx.database, seeders, metrics=ctx.metrics)

    def list_available_seeders(self) -> list[str]:
        return [s.name for s in self._seeders]

    def run(self) -> None:
        self._execute(by_priority(self._seeders))

    def run_specific(self, names: Sequence[str]) -> None:
        logger.info("seeding_specific", seeders=list(names))
        wanted = set(names)
        selected = [s for s in self._seeders if s.name in wanted]
        if not selected:
            raise SeedError(f"no seeders found for names: {list(names)}")
        self._execute(by_priority(selected))

    def _execute(self, seeders: list[Seeder]) -> None:
        logger.info("seeding_started", seeders=[s.name for s in seeders])
        started = time.perf_counter()
        success = 0
        errors = 0

        for seeder in seeders:
            logger.info("seeding", seeder=seeder.name, priority=seeder.priority)
            t0 = time.perf_counter()
            try:
                seeder.run(self._db)
            except Exception as e:
                errors += 1
                logger.error("seed_failed", seeder=seeder.name, error=str(e), exc_info=True)
                if self._metrics is not None:
                    self._metrics.seed_error_total.labels(seeder.name).inc()
                continue

            duration_ms = (time.perf_counter() - t0) * 1000
            success += 1
            logger.info("seed_succeeded", seeder=seeder.name, duration_ms=round(duration_ms, 1))
            if self._metrics is not None:
                self._metrics.seed_duration.labels(seeder.name).observe(duration_ms)
            # Give the next unit a moment before it reads what this one wrote.
            self._sleep(self._pause)

        logger.info(
            "seeding_completed",
            success=success,
            errors=errors,
            total_duration_ms=round((time.perf_counter() - started) * 1000, 1),
        )
        if errors:
            raise SeedError(f"seeding completed with {errors} errors")
