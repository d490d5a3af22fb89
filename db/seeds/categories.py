from __future__ import annotations

import uuid

from db.seeds.base import SeedError, SeederBase, now
from db.seeds.content import CATEGORY_SPECS
from db.tables import categories
from services.api.app.db import Database
from services.api.app.logging import logger


class CategorySeeder(SeederBase):
    name = "categories"
    priority = 1

    def run(self, db: Database) -> None:
        logger.info("seed_categories_start", count=len(CATEGORY_SPECS))
        ts = now()
        created = 0
        for spec in CATEGORY_SPECS:
            row = dict(
                id=uuid.uuid4(),
                name=spec.name,
                slug=spec.slug,
                description=spec.description,
                created_at=ts,
                updated_at=ts,
            )
            if self.insert_row(db, categories, row):
                created += 1

        if created == 0:
            raise SeedError("no categories could be inserted")
        logger.info("seed_categories_done", created=created)
