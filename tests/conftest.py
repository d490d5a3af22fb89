from __future__ import annotations

import sys
from collections.abc import Iterator
from pathlib import Path

import pytest
import sqlalchemy as sa
from sqlalchemy.pool import StaticPool


# Ensure the monorepo root is importable (so `import services.*` / `import db.*` work in tests).
REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT))


@pytest.fixture()
def sqlite_db() -> Iterator:
    """In-memory database with the seeding tables on one shared connection."""
    from db.tables import metadata
    from services.api.app.db import Database

    engine = sa.create_engine("sqlite://", poolclass=StaticPool, connect_args={"check_same_thread": False})
    metadata.create_all(engine)
    db = Database(engine)
    yield db
    db.close()


@pytest.fixture()
def sleeps() -> list[float]:
    return []


@pytest.fixture()
def fake_sleep(sleeps: list[float]):
    return sleeps.append


@pytest.fixture(scope="session")
def postgres_container() -> Iterator:
    from testcontainers.postgres import PostgresContainer

    try:
        pg = PostgresContainer("postgres:16", driver="psycopg")
        pg.start()
    except Exception as e:
        pytest.skip(f"docker unavailable: {e}")
    try:
        yield pg
    finally:
        pg.stop()
