from __future__ import annotations

import hashlib
import os
import uuid

from db.seeds.base import SeedError, SeederBase, now
from db.seeds.content import FIRST_NAMES, LAST_NAMES
from db.tables import users
from services.api.app.db import Database
from services.api.app.logging import logger


DEFAULT_PASSWORD = "password123"
PBKDF2_ITERATIONS = 120_000


def hash_password(password: str, *, salt: bytes | None = None, iterations: int = PBKDF2_ITERATIONS) -> str:
    salt = salt or os.urandom(16)
    digest = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, iterations)
    return f"pbkdf2_sha256${iterations}${salt.hex()}${digest.hex()}"


class UserSeeder(SeederBase):
    name = "users"
    priority = 3

    min_users = 20
    max_users = 40

    def run(self, db: Database) -> None:
        n = self.rng.randint(self.min_users, self.max_users)
        logger.info("seed_users_start", regular=n)
        # One hash per run; every seeded account shares the demo password.
        password_hash = hash_password(DEFAULT_PASSWORD)

        if not self.insert_row(db, users, self._user_row("Admin", "User", "admin", password_hash)):
            logger.warning("seed_users_admin_skipped")

        created = 0
        for _ in range(n):
            first = self.rng.choice(FIRST_NAMES)
            last = self.rng.choice(LAST_NAMES)
            if self.insert_row(db, users, self._user_row(first, last, "user", password_hash)):
                created += 1

        if created == 0:
            raise SeedError("no regular users could be inserted")
        logger.info("seed_users_done", created=created)

    def _user_row(self, first: str, last: str, role: str, password_hash: str) -> dict:
        token = uuid.uuid4().hex[:8]
        ts = now()
        return dict(
            id=uuid.uuid4(),
            email=f"{first}.{last}.{token}@example.com".lower(),
            name=f"{first} {last}",
            password_hash=password_hash,
            role=role,
            created_at=ts,
            updated_at=ts,
        )
